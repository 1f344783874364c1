# posture_capture/pose_engine/analysis/accuracy.py
from typing import Optional
from ..common.config import ReferencePose, SideReferencePose, SideViewThresholds
from ..common.models import (
    FramingResult, FrontAccuracy, MetricCheck, PostureMetrics, SideAccuracy, SidePostureMetrics,
)

def check_metric(value: Optional[float], target: float, tolerance: float) -> MetricCheck:
    """Absolute deviation from ``target``; an unavailable value never passes."""
    if value is None:
        return MetricCheck()
    deviation = abs(value - target)
    return MetricCheck(value=value, deviation=deviation, passed=deviation <= tolerance)

def _within(value: Optional[float], limit: float) -> bool:
    return value is not None and value <= limit

class FrontPoseComparator:
    """Compares front metrics with the front reference pose."""

    def __init__(self, reference: Optional[ReferencePose] = None):
        self.reference = reference or ReferencePose()

    def compare(self, metrics: PostureMetrics, framing: Optional[FramingResult] = None) -> FrontAccuracy:
        ref = self.reference
        in_box = framing.in_box if framing is not None else False
        accuracy = FrontAccuracy(
            shoulder_left=check_metric(metrics.shoulder_angle_left, ref.shoulder_angle, ref.shoulder_angle_tolerance),
            shoulder_right=check_metric(metrics.shoulder_angle_right, ref.shoulder_angle, ref.shoulder_angle_tolerance),
            elbow_left=check_metric(metrics.elbow_angle_left, ref.elbow_angle_left, ref.elbow_angle_tolerance),
            elbow_right=check_metric(metrics.elbow_angle_right, ref.elbow_angle_right, ref.elbow_angle_tolerance),
            # Spine is a tilt from vertical, so its deviation is the value itself.
            spine=check_metric(metrics.spine_angle, 0.0, ref.spine_angle_tolerance),
            hip_left=check_metric(metrics.hip_angle_left, ref.hip_angle_left, ref.hip_angle_tolerance),
            hip_right=check_metric(metrics.hip_angle_right, ref.hip_angle_right, ref.hip_angle_tolerance),
            shoulder_level=check_metric(metrics.shoulder_level_diff, ref.shoulder_level_diff, ref.shoulder_level_tolerance),
            leg_separation=check_metric(metrics.leg_separation_angle, ref.leg_separation_angle, ref.leg_separation_tolerance),
            in_box=in_box,
        )
        checks = (
            accuracy.shoulder_left, accuracy.shoulder_right,
            accuracy.elbow_left, accuracy.elbow_right,
            accuracy.spine,
            accuracy.hip_left, accuracy.hip_right,
            accuracy.shoulder_level, accuracy.leg_separation,
        )
        accuracy.overall = all(c.passed for c in checks) and in_box
        return accuracy

class SidePoseComparator:
    """
    Compares side metrics with the side reference pose.

    A side-on body hides one arm and one leg behind the other, so only one limb
    of each pair has to match; the head, the spine and the side-on check must.
    """

    def __init__(self, reference: Optional[SideReferencePose] = None, thresholds: Optional[SideViewThresholds] = None):
        self.reference = reference or SideReferencePose()
        self.thresholds = thresholds or SideViewThresholds()

    def is_side_view(self, metrics: SidePostureMetrics) -> bool:
        t = self.thresholds
        return (
            _within(metrics.shoulder_depth_diff, self.reference.shoulder_depth_tolerance)
            and _within(metrics.shoulder_horizontal_alignment, t.max_shoulder_horizontal_alignment)
            and _within(metrics.arms_overlap, t.max_arms_overlap)
            and _within(metrics.legs_overlap, t.max_legs_overlap)
        )

    def compare(self, metrics: SidePostureMetrics, framing: Optional[FramingResult] = None) -> SideAccuracy:
        ref = self.reference
        in_box = framing.in_box if framing is not None else False
        accuracy = SideAccuracy(
            neck_head=check_metric(metrics.neck_head_angle, ref.neck_head_angle, ref.neck_head_tolerance),
            arm_left=check_metric(metrics.arm_angle_left, ref.arm_angle, ref.arm_tolerance),
            arm_right=check_metric(metrics.arm_angle_right, ref.arm_angle, ref.arm_tolerance),
            spine=check_metric(metrics.spine_angle, 0.0, ref.spine_tolerance),
            leg_left=check_metric(metrics.leg_angle_left, ref.leg_angle, ref.leg_tolerance),
            leg_right=check_metric(metrics.leg_angle_right, ref.leg_angle, ref.leg_tolerance),
            is_side_view=self.is_side_view(metrics),
            in_box=in_box,
        )
        accuracy.overall = (
            accuracy.is_side_view
            and accuracy.neck_head.passed
            and accuracy.spine.passed
            and (accuracy.arm_left.passed or accuracy.arm_right.passed)
            and (accuracy.leg_left.passed or accuracy.leg_right.passed)
            and in_box
        )
        return accuracy
