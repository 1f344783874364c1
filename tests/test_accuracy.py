import pytest

from posture_capture.pose_engine.analysis.accuracy import FrontPoseComparator, SidePoseComparator, check_metric
from posture_capture.pose_engine.analysis.metrics import calculate_front_metrics, calculate_side_metrics
from posture_capture.pose_engine.common.config import ReferencePose
from posture_capture.pose_engine.common.models import FramingResult, PostureMetrics, SidePostureMetrics

IN_BOX = FramingResult(in_box=True)
OUT_OF_BOX = FramingResult(in_box=False, messages=["Move to your left"])

REFERENCE_FRONT = PostureMetrics(
    shoulder_angle_left=45.0, shoulder_angle_right=45.0,
    elbow_angle_left=180.0, elbow_angle_right=180.0,
    spine_angle=0.0,
    hip_angle_left=180.0, hip_angle_right=180.0,
    shoulder_level_diff=0.0,
    leg_separation_angle=45.0,
)

REFERENCE_SIDE = SidePostureMetrics(
    neck_head_angle=180.0,
    arm_angle_left=180.0, arm_angle_right=180.0,
    spine_angle=0.0,
    leg_angle_left=180.0, leg_angle_right=180.0,
    shoulder_depth_diff=5.0,
    shoulder_horizontal_alignment=10.0,
    arms_overlap=10.0,
    legs_overlap=10.0,
)


def test_check_metric():
    check = check_metric(160.0, 180.0, 20.0)
    assert check.passed
    assert check.deviation == pytest.approx(20.0)
    assert not check_metric(159.9, 180.0, 20.0).passed


def test_unavailable_metric_never_passes():
    check = check_metric(None, 180.0, 1000.0)
    assert not check.passed
    assert check.deviation is None
    assert not check.available


def test_reference_front_pose_is_accurate():
    accuracy = FrontPoseComparator().compare(REFERENCE_FRONT, IN_BOX)
    assert accuracy.overall
    assert accuracy.in_box


def test_front_pose_needs_to_be_in_box():
    assert not FrontPoseComparator().compare(REFERENCE_FRONT, OUT_OF_BOX).overall
    assert not FrontPoseComparator().compare(REFERENCE_FRONT, None).overall


def test_missing_front_metric_fails_overall():
    metrics = REFERENCE_FRONT.model_copy(update={"hip_angle_right": None})
    accuracy = FrontPoseComparator().compare(metrics, IN_BOX)
    assert not accuracy.overall
    assert not accuracy.hip_right.passed
    assert accuracy.hip_right.deviation is None
    assert accuracy.hip_left.passed


@pytest.mark.parametrize("field, value, check", [
    ("shoulder_angle_left", 61.0, "shoulder_left"),
    ("elbow_angle_right", 159.0, "elbow_right"),
    ("spine_angle", 10.5, "spine"),
    ("shoulder_level_diff", 31.0, "shoulder_level"),
    ("leg_separation_angle", 29.0, "leg_separation"),
])
def test_each_front_tolerance_is_enforced(field, value, check):
    metrics = REFERENCE_FRONT.model_copy(update={field: value})
    accuracy = FrontPoseComparator().compare(metrics, IN_BOX)
    assert not getattr(accuracy, check).passed
    assert not accuracy.overall


def test_tolerances_come_from_reference():
    metrics = REFERENCE_FRONT.model_copy(update={"spine_angle": 12.0})
    assert not FrontPoseComparator().compare(metrics, IN_BOX).overall
    loose = ReferencePose(spine_angle_tolerance=12.0)
    assert FrontPoseComparator(loose).compare(metrics, IN_BOX).overall


def test_front_comparison_of_computed_metrics(front_frame):
    accuracy = FrontPoseComparator().compare(calculate_front_metrics(front_frame), IN_BOX)
    assert accuracy.overall


def test_reference_side_pose_is_accurate():
    comparator = SidePoseComparator()
    assert comparator.is_side_view(REFERENCE_SIDE)
    assert comparator.compare(REFERENCE_SIDE, IN_BOX).overall


def test_side_pose_needs_to_be_in_box():
    assert not SidePoseComparator().compare(REFERENCE_SIDE, OUT_OF_BOX).overall


@pytest.mark.parametrize("field, value", [
    ("shoulder_depth_diff", 31.0),
    ("shoulder_horizontal_alignment", 101.0),
    ("arms_overlap", 121.0),
    ("legs_overlap", 121.0),
    ("legs_overlap", None),
])
def test_side_view_requires_every_condition(field, value):
    metrics = REFERENCE_SIDE.model_copy(update={field: value})
    comparator = SidePoseComparator()
    assert not comparator.is_side_view(metrics)
    accuracy = comparator.compare(metrics, IN_BOX)
    assert not accuracy.is_side_view
    assert not accuracy.overall


def test_one_hidden_limb_of_each_pair_is_tolerated():
    metrics = REFERENCE_SIDE.model_copy(update={"arm_angle_right": 90.0, "leg_angle_left": None})
    assert SidePoseComparator().compare(metrics, IN_BOX).overall


def test_both_limbs_of_a_pair_failing_fails():
    metrics = REFERENCE_SIDE.model_copy(update={"arm_angle_right": 90.0, "arm_angle_left": 150.0})
    assert not SidePoseComparator().compare(metrics, IN_BOX).overall


@pytest.mark.parametrize("field, value", [
    ("neck_head_angle", 164.0),
    ("neck_head_angle", None),
    ("spine_angle", 16.0),
])
def test_head_and_spine_are_mandatory(field, value):
    metrics = REFERENCE_SIDE.model_copy(update={field: value})
    assert not SidePoseComparator().compare(metrics, IN_BOX).overall


def test_side_comparison_of_computed_metrics(side_frame, front_frame):
    comparator = SidePoseComparator()
    assert comparator.compare(calculate_side_metrics(side_frame), IN_BOX).overall
    # Shoulders 160px apart: clearly facing the camera.
    assert not comparator.compare(calculate_side_metrics(front_frame), IN_BOX).is_side_view
