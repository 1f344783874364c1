# posture_capture/pose_engine/analysis/metrics.py
"""
Posture metrics derived from a single landmark frame.

A metric whose landmarks are not all present is left as ``None`` instead of
being computed from a stand-in value.
"""
from typing import Optional
from ..common.enums import LandmarkType as L
from ..common.models import LandmarkFrame, PostureMetrics, SidePostureMetrics
from . import geometry

def _joint_angle(frame: LandmarkFrame, first: L, mid: L, last: L) -> Optional[float]:
    if not frame.has_all((first, mid, last)):
        return None
    return geometry.angle_between(frame.get(first), frame.get(mid), frame.get(last))

def _spine_tilt(frame: LandmarkFrame) -> Optional[float]:
    if not frame.has_all((L.LEFT_SHOULDER, L.RIGHT_SHOULDER, L.LEFT_HIP, L.RIGHT_HIP)):
        return None
    shoulder_mid = geometry.midpoint(frame.get(L.LEFT_SHOULDER), frame.get(L.RIGHT_SHOULDER))
    hip_mid = geometry.midpoint(frame.get(L.LEFT_HIP), frame.get(L.RIGHT_HIP))
    return geometry.tilt_from_vertical(shoulder_mid, hip_mid)

def _pair_gap(frame: LandmarkFrame, left: L, right: L, gap) -> Optional[float]:
    if not frame.has_all((left, right)):
        return None
    return gap(frame.get(left), frame.get(right))

def _mean_horizontal_spread(frame: LandmarkFrame, upper: tuple, lower: tuple) -> Optional[float]:
    # upper/lower: (left, right) landmark pairs, e.g. elbows and wrists
    if not frame.has_all(upper + lower):
        return None
    upper_gap = geometry.horizontal_gap(frame.get(upper[0]), frame.get(upper[1]))
    lower_gap = geometry.horizontal_gap(frame.get(lower[0]), frame.get(lower[1]))
    return (upper_gap + lower_gap) / 2.0

def calculate_front_metrics(frame: LandmarkFrame) -> PostureMetrics:
    leg_separation = None
    if frame.has_all((L.LEFT_KNEE, L.RIGHT_KNEE, L.LEFT_HIP, L.RIGHT_HIP)):
        hip_mid = geometry.midpoint(frame.get(L.LEFT_HIP), frame.get(L.RIGHT_HIP))
        leg_separation = geometry.angle_between(frame.get(L.LEFT_KNEE), hip_mid, frame.get(L.RIGHT_KNEE))

    return PostureMetrics(
        shoulder_angle_left=_joint_angle(frame, L.LEFT_ELBOW, L.LEFT_SHOULDER, L.LEFT_HIP),
        shoulder_angle_right=_joint_angle(frame, L.RIGHT_ELBOW, L.RIGHT_SHOULDER, L.RIGHT_HIP),
        elbow_angle_left=_joint_angle(frame, L.LEFT_SHOULDER, L.LEFT_ELBOW, L.LEFT_WRIST),
        elbow_angle_right=_joint_angle(frame, L.RIGHT_SHOULDER, L.RIGHT_ELBOW, L.RIGHT_WRIST),
        spine_angle=_spine_tilt(frame),
        hip_angle_left=_joint_angle(frame, L.LEFT_SHOULDER, L.LEFT_HIP, L.LEFT_KNEE),
        hip_angle_right=_joint_angle(frame, L.RIGHT_SHOULDER, L.RIGHT_HIP, L.RIGHT_KNEE),
        shoulder_level_diff=_pair_gap(frame, L.LEFT_SHOULDER, L.RIGHT_SHOULDER, geometry.vertical_gap),
        leg_separation_angle=leg_separation,
    )

def _neck_head_angle(frame: LandmarkFrame) -> Optional[float]:
    left_ear, right_ear = frame.get(L.LEFT_EAR), frame.get(L.RIGHT_EAR)
    if left_ear and right_ear:
        ear = left_ear if left_ear.confidence > right_ear.confidence else right_ear
    else:
        ear = left_ear or right_ear

    left_shoulder, right_shoulder = frame.get(L.LEFT_SHOULDER), frame.get(L.RIGHT_SHOULDER)
    if left_shoulder and right_shoulder:
        neck = geometry.midpoint(left_shoulder, right_shoulder)
    else:
        neck = left_shoulder or right_shoulder

    if ear is None or neck is None:
        return None
    # An ear straight above the neck points at -90 deg in image space, i.e. 180 here.
    return abs(geometry.direction_deg(neck, ear) - 90.0)

def calculate_side_metrics(frame: LandmarkFrame) -> SidePostureMetrics:
    return SidePostureMetrics(
        neck_head_angle=_neck_head_angle(frame),
        arm_angle_left=_joint_angle(frame, L.LEFT_SHOULDER, L.LEFT_ELBOW, L.LEFT_WRIST),
        arm_angle_right=_joint_angle(frame, L.RIGHT_SHOULDER, L.RIGHT_ELBOW, L.RIGHT_WRIST),
        spine_angle=_spine_tilt(frame),
        leg_angle_left=_joint_angle(frame, L.LEFT_HIP, L.LEFT_KNEE, L.LEFT_ANKLE),
        leg_angle_right=_joint_angle(frame, L.RIGHT_HIP, L.RIGHT_KNEE, L.RIGHT_ANKLE),
        shoulder_depth_diff=_pair_gap(frame, L.LEFT_SHOULDER, L.RIGHT_SHOULDER, geometry.vertical_gap),
        shoulder_horizontal_alignment=_pair_gap(frame, L.LEFT_SHOULDER, L.RIGHT_SHOULDER, geometry.horizontal_gap),
        arms_overlap=_mean_horizontal_spread(frame, (L.LEFT_ELBOW, L.RIGHT_ELBOW), (L.LEFT_WRIST, L.RIGHT_WRIST)),
        legs_overlap=_mean_horizontal_spread(frame, (L.LEFT_KNEE, L.RIGHT_KNEE), (L.LEFT_ANKLE, L.RIGHT_ANKLE)),
    )
