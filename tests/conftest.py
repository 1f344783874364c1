import math
import threading
import time

import pytest

from posture_capture.pose_engine.common.config import EngineConfig
from posture_capture.pose_engine.common.enums import LandmarkType as L
from posture_capture.pose_engine.common.models import Landmark, LandmarkFrame
from posture_capture.pose_engine.feedback.speech import SpeechSink

WIDTH = 1000
HEIGHT = 1000

def _along(origin, degrees, length):
    rad = math.radians(degrees)
    return (origin[0] + length * math.cos(rad), origin[1] + length * math.sin(rad))

def front_points():
    """A person facing the camera in the reference pose: arms 45 deg out, legs 45 deg apart."""
    points = {
        L.NOSE: (500.0, 100.0),
        L.LEFT_EAR: (530.0, 95.0),
        L.RIGHT_EAR: (470.0, 95.0),
        L.LEFT_SHOULDER: (580.0, 180.0),
        L.RIGHT_SHOULDER: (420.0, 180.0),
        L.LEFT_HIP: (580.0, 450.0),
        L.RIGHT_HIP: (420.0, 450.0),
    }
    points[L.LEFT_ELBOW] = _along(points[L.LEFT_SHOULDER], 45.0, 120.0)
    points[L.LEFT_WRIST] = _along(points[L.LEFT_SHOULDER], 45.0, 240.0)
    points[L.RIGHT_ELBOW] = _along(points[L.RIGHT_SHOULDER], 135.0, 120.0)
    points[L.RIGHT_WRIST] = _along(points[L.RIGHT_SHOULDER], 135.0, 240.0)

    hip_mid = (500.0, 450.0)
    points[L.LEFT_KNEE] = _along(hip_mid, 90.0 - 22.5, 220.0)
    points[L.RIGHT_KNEE] = _along(hip_mid, 90.0 + 22.5, 220.0)
    points[L.LEFT_ANKLE] = _along(hip_mid, 90.0 - 22.5, 400.0)
    points[L.RIGHT_ANKLE] = _along(hip_mid, 90.0 + 22.5, 400.0)
    lx, ly = points[L.LEFT_ANKLE]
    rx, ry = points[L.RIGHT_ANKLE]
    points[L.LEFT_HEEL] = (lx, ly + 15.0)
    points[L.RIGHT_HEEL] = (rx, ry + 15.0)
    points[L.LEFT_FOOT_INDEX] = (lx + 20.0, ly + 25.0)
    points[L.RIGHT_FOOT_INDEX] = (rx - 20.0, ry + 25.0)
    return points

def side_points():
    """A person standing side-on, arms hanging straight, one limb behind the other."""
    return {
        L.NOSE: (540.0, 120.0),
        L.LEFT_EAR: (505.0, 110.0),
        L.LEFT_SHOULDER: (505.0, 180.0),
        L.RIGHT_SHOULDER: (495.0, 185.0),
        L.LEFT_ELBOW: (505.0, 310.0),
        L.RIGHT_ELBOW: (495.0, 310.0),
        L.LEFT_WRIST: (505.0, 430.0),
        L.RIGHT_WRIST: (495.0, 430.0),
        L.LEFT_HIP: (505.0, 450.0),
        L.RIGHT_HIP: (495.0, 450.0),
        L.LEFT_KNEE: (505.0, 650.0),
        L.RIGHT_KNEE: (495.0, 650.0),
        L.LEFT_ANKLE: (505.0, 850.0),
        L.RIGHT_ANKLE: (495.0, 850.0),
        L.LEFT_HEEL: (495.0, 865.0),
        L.RIGHT_HEEL: (485.0, 865.0),
        L.LEFT_FOOT_INDEX: (535.0, 870.0),
        L.RIGHT_FOOT_INDEX: (525.0, 870.0),
    }

def arms_down_points():
    """Front-facing, but with the arms hanging instead of raised."""
    points = front_points()
    points[L.LEFT_ELBOW] = (580.0, 300.0)
    points[L.LEFT_WRIST] = (580.0, 420.0)
    points[L.RIGHT_ELBOW] = (420.0, 300.0)
    points[L.RIGHT_WRIST] = (420.0, 420.0)
    return points

def without(points, *types):
    return {t: p for t, p in points.items() if t not in types}

def shifted(points, dx=0.0, dy=0.0):
    return {t: (x + dx, y + dy) for t, (x, y) in points.items()}

def scaled(points, fx=1.0, fy=1.0, cx=500.0, cy=500.0):
    return {t: (cx + (x - cx) * fx, cy + (y - cy) * fy) for t, (x, y) in points.items()}

def make_frame(points, width=WIDTH, height=HEIGHT, confidence=0.9):
    landmarks = {t: Landmark(type=t, x=x, y=y, confidence=confidence) for t, (x, y) in points.items()}
    return LandmarkFrame(width=width, height=height, landmarks=landmarks)

def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()

class RecordingSpeech(SpeechSink):
    def __init__(self):
        self._lock = threading.Lock()
        self.spoken = []

    def speak(self, text):
        with self._lock:
            self.spoken.append(text)

@pytest.fixture
def engine_config():
    return EngineConfig()

@pytest.fixture
def front_frame():
    return make_frame(front_points())

@pytest.fixture
def side_frame():
    return make_frame(side_points())

@pytest.fixture
def speech():
    return RecordingSpeech()
