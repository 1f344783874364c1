# posture_capture/pose_engine/analysis/geometry.py
import numpy as np
from typing import NamedTuple

class Point(NamedTuple):
    x: float
    y: float

def to_point(p) -> Point:
    """Accepts anything with ``x``/``y`` attributes (landmarks, points)."""
    return Point(float(p.x), float(p.y))

def midpoint(a, b) -> Point:
    return Point((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)

def direction_deg(origin, target) -> float:
    """Image-space direction of ``origin -> target`` in degrees, as returned by atan2."""
    return float(np.degrees(np.arctan2(target.y - origin.y, target.x - origin.x)))

def angle_between(first, mid, last) -> float:
    """
    Angle at ``mid`` formed by the rays to ``first`` and ``last``, in [0, 180].
    Computed as the difference of two atan2 directions, reflected when above 180.
    """
    result = abs(direction_deg(mid, last) - direction_deg(mid, first))
    if result > 180.0:
        result = 360.0 - result
    return result

def tilt_from_vertical(top, bottom) -> float:
    """Absolute angle between the ``top -> bottom`` vector and the image vertical."""
    return abs(float(np.degrees(np.arctan2(bottom.x - top.x, bottom.y - top.y))))

def horizontal_gap(a, b) -> float:
    return abs(float(a.x) - float(b.x))

def vertical_gap(a, b) -> float:
    return abs(float(a.y) - float(b.y))
