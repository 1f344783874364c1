# posture_capture/pose_engine/feedback/throttler.py
from typing import Optional
from ..common.config import FeedbackConfig
from ..common.enums import CueKind
from ..common.models import Cue, FrameEvaluation, FrontAccuracy, SideAccuracy
from . import phrases

def _deviates(check, min_deviation: float) -> bool:
    # An unavailable metric counts as far off.
    return check.deviation is None or check.deviation > min_deviation

def front_correction(accuracy: FrontAccuracy, arm_raise_min_deviation: float = 20.0) -> Optional[str]:
    """First failing front check, in the order a person should fix them."""
    if not accuracy.shoulder_left.passed and _deviates(accuracy.shoulder_left, arm_raise_min_deviation):
        return phrases.RAISE_RIGHT_ARM
    if not accuracy.shoulder_right.passed and _deviates(accuracy.shoulder_right, arm_raise_min_deviation):
        return phrases.RAISE_LEFT_ARM
    if not accuracy.elbow_left.passed:
        return phrases.STRAIGHTEN_RIGHT_ARM
    if not accuracy.elbow_right.passed:
        return phrases.STRAIGHTEN_LEFT_ARM
    if not accuracy.spine.passed:
        return phrases.STAND_STRAIGHT
    if not accuracy.shoulder_level.passed:
        return phrases.LEVEL_SHOULDERS
    if not accuracy.leg_separation.passed:
        return phrases.SPREAD_LEGS
    if not accuracy.hip_left.passed or not accuracy.hip_right.passed:
        return phrases.KEEP_LEGS_STRAIGHT
    return None

def side_correction(accuracy: SideAccuracy) -> Optional[str]:
    """First failing side check; only asks about limbs when both of a pair fail."""
    if not accuracy.is_side_view:
        return phrases.TURN_SIDEWAYS_CHECK
    if not accuracy.neck_head.passed:
        return phrases.KEEP_HEAD_STRAIGHT
    if not accuracy.spine.passed:
        return phrases.KEEP_SPINE_VERTICAL
    if not accuracy.arm_left.passed and not accuracy.arm_right.passed:
        return phrases.RELAX_ARMS
    if not accuracy.leg_left.passed and not accuracy.leg_right.passed:
        return phrases.KEEP_LEGS_STRAIGHT
    return None

class FeedbackThrottler:
    """Picks at most one guidance phrase per cooldown window."""

    def __init__(self, config: Optional[FeedbackConfig] = None):
        self.config = config or FeedbackConfig()
        self.last_spoken_ms: Optional[float] = None

    def reset(self):
        self.last_spoken_ms = None

    def ready(self, now_ms: float) -> bool:
        return self.last_spoken_ms is None or now_ms - self.last_spoken_ms >= self.config.cooldown_ms

    def choose(self, evaluation: Optional[FrameEvaluation], override: Optional[str] = None) -> Optional[str]:
        if override:
            return override
        if evaluation is None:
            return None
        framing = evaluation.framing
        if framing is not None and not framing.in_box and framing.first_message:
            return framing.first_message
        if evaluation.front_accuracy is not None:
            return front_correction(evaluation.front_accuracy, self.config.arm_raise_min_deviation)
        if evaluation.side_accuracy is not None:
            return side_correction(evaluation.side_accuracy)
        return None

    def select(self, evaluation: Optional[FrameEvaluation], now_ms: float, override: Optional[str] = None) -> Optional[Cue]:
        """Returns a guidance cue if one is due and there is something to say."""
        if not self.ready(now_ms):
            return None
        message = self.choose(evaluation, override)
        if message is None:
            return None
        self.last_spoken_ms = now_ms
        return Cue(text=message, kind=CueKind.GUIDANCE)
