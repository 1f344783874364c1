import pytest

from posture_capture.pose_engine.common.enums import LandmarkType as L
from posture_capture.pose_engine.processing.landmark_detector import MEDIAPIPE_INDICES, landmarks_from_normalized


def rows(visibility=0.9):
    return [(i / 100.0, 0.5, visibility) for i in range(33)]


def test_every_joint_has_a_unique_index():
    assert set(MEDIAPIPE_INDICES) == set(L)
    assert len(set(MEDIAPIPE_INDICES.values())) == len(MEDIAPIPE_INDICES)


def test_normalized_points_are_scaled_to_pixels():
    frame = landmarks_from_normalized(rows(), 640, 480, 0.5)
    assert frame.width == 640 and frame.height == 480
    nose = frame.get(L.NOSE)
    assert (nose.x, nose.y) == (0.0, 240.0)
    shoulder = frame.get(L.LEFT_SHOULDER)
    assert shoulder.x == pytest.approx(0.11 * 640)
    assert shoulder.confidence == pytest.approx(0.9)
    assert len(frame.landmarks) == len(MEDIAPIPE_INDICES)


def test_low_visibility_points_are_missing():
    points = rows()
    points[MEDIAPIPE_INDICES[L.LEFT_KNEE]] = (0.5, 0.8, 0.2)
    frame = landmarks_from_normalized(points, 640, 480, 0.5)
    assert not frame.has(L.LEFT_KNEE)
    assert frame.has(L.RIGHT_KNEE)


def test_visibility_is_clamped():
    frame = landmarks_from_normalized(rows(visibility=1.3), 100, 100, 0.5)
    assert frame.get(L.NOSE).confidence == 1.0


def test_short_result_gives_partial_frame():
    frame = landmarks_from_normalized(rows()[:17], 100, 100, 0.5)
    assert frame.has(L.RIGHT_WRIST)
    assert not frame.has(L.LEFT_HIP)


def test_nothing_visible_is_an_empty_frame():
    assert landmarks_from_normalized(rows(visibility=0.0), 100, 100, 0.5).is_empty
