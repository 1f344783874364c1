# posture_capture/pose_engine/analysis/framing.py
from typing import Optional
from ..common.config import FramingConfig
from ..common.enums import FramingIssue, LandmarkType as L
from ..common.models import FramingResult, LandmarkFrame
from ..feedback import phrases

FOOT_LANDMARKS = (
    L.LEFT_ANKLE, L.RIGHT_ANKLE,
    L.LEFT_HEEL, L.RIGHT_HEEL,
    L.LEFT_FOOT_INDEX, L.RIGHT_FOOT_INDEX,
)
KNEE_LANDMARKS = (L.LEFT_KNEE, L.RIGHT_KNEE)
HEAD_LANDMARKS = (L.NOSE, L.LEFT_EAR, L.RIGHT_EAR)
BOUNDARY_LANDMARKS = FOOT_LANDMARKS + (
    L.LEFT_WRIST, L.RIGHT_WRIST,
    L.NOSE, L.LEFT_SHOULDER, L.RIGHT_SHOULDER,
)

class FramingChecker:
    """Checks that the body fits inside the normalized target box."""

    def __init__(self, config: Optional[FramingConfig] = None):
        self.config = config or FramingConfig()

    @property
    def box(self):
        """(left, top, right, bottom) in normalized image coordinates."""
        m = self.config.margin
        return m, m, 1.0 - m, 1.0 - m

    def check(self, frame: LandmarkFrame) -> FramingResult:
        feet_visible = bool(frame.present(FOOT_LANDMARKS))
        knees_visible = bool(frame.present(KNEE_LANDMARKS))
        head_visible = bool(frame.present(HEAD_LANDMARKS))

        # Visibility problems win over any box check.
        if not feet_visible and knees_visible:
            return FramingResult(in_box=False, issues=[FramingIssue.TOO_CLOSE], messages=[phrases.MOVE_BACK_FEET_VISIBLE])
        if feet_visible and not head_visible:
            return FramingResult(in_box=False, issues=[FramingIssue.TOO_FAR], messages=[phrases.MOVE_FORWARD_HEAD_VISIBLE])
        if not feet_visible and not head_visible:
            return FramingResult(in_box=False, issues=[FramingIssue.NOT_VISIBLE], messages=[phrases.STAND_IN_FRAME])

        left, top, right, bottom = self.box
        too_far_left = too_far_right = too_high = too_low = False
        for landmark in frame.present(BOUNDARY_LANDMARKS):
            x = landmark.x / frame.width
            y = landmark.y / frame.height
            too_far_left |= x < left
            too_far_right |= x > right
            too_high |= y < top
            too_low |= y > bottom

        issues = []
        if too_high:
            issues.append(FramingIssue.TOO_HIGH)
        if too_low:
            issues.append(FramingIssue.TOO_LOW)
        if too_far_left:
            issues.append(FramingIssue.TOO_FAR_LEFT)
        if too_far_right:
            issues.append(FramingIssue.TOO_FAR_RIGHT)

        if not issues:
            return FramingResult(in_box=True)
        return FramingResult(in_box=False, issues=issues, messages=[_diagnose(too_far_left, too_far_right, too_high, too_low)])

def _diagnose(too_far_left: bool, too_far_right: bool, too_high: bool, too_low: bool) -> str:
    # Vertical problems first; the preview is mirrored, so left/right are swapped for the user.
    if too_low and too_high:
        return phrases.MOVE_BACK_FIT_FRAME
    if too_low:
        return phrases.MOVE_BACK_FEET_IN_FRAME
    if too_high:
        return phrases.MOVE_FORWARD_HEAD_IN_FRAME
    if too_far_left and too_far_right:
        return phrases.STEP_BACK_FIT_FRAME
    if too_far_left:
        return phrases.MOVE_RIGHT
    return phrases.MOVE_LEFT
