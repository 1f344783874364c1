# posture_capture/pose_engine/processing/capture_session.py
import logging
from typing import Any, Dict, Optional
from ..common.config import TimingConfig
from ..common.enums import CapturePhase, CaptureStatus, CueKind, PoseStage
from ..common.models import CaptureComplete, Cue, FrameEvaluation, OverlayState, StatusEvent, StepOutput
from ..feedback import phrases

logger = logging.getLogger(__name__)

class CaptureSession:
    """Mutable state of one two-stage capture attempt."""

    def __init__(self, countdown_start: int = 5):
        self.countdown_start = countdown_start
        self.reset()

    def reset(self):
        self.stage = PoseStage.FRONT_POSE
        self.phase = CapturePhase.SEARCHING
        self.good_frames = 0
        self.countdown_active = False
        self.countdown_value = self.countdown_start
        self.last_tick_ms: Optional[float] = None
        self.confirm_started_ms: Optional[float] = None
        self.artifacts: Dict[PoseStage, Any] = {}
        self.latest_image: Any = None
        self.completed = False

    @property
    def confirming(self) -> bool:
        return self.confirm_started_ms is not None

    @property
    def front_image(self):
        return self.artifacts.get(PoseStage.FRONT_POSE)

    @property
    def side_image(self):
        return self.artifacts.get(PoseStage.SIDE_POSE)

    def is_captured(self, stage: PoseStage) -> bool:
        return stage in self.artifacts

    def commit(self, stage: PoseStage, image) -> bool:
        """Stores ``image`` as the artifact of ``stage``; refuses a second commit."""
        if self.completed or self.is_captured(stage) or image is None:
            logger.debug("Commit refused for %s (completed=%s, captured=%s)", stage.value, self.completed, self.is_captured(stage))
            return False
        self.artifacts[stage] = image
        return True

class CaptureStateMachine:
    """
    Drives the front -> side capture sequence.

    Every method takes the current time in milliseconds and returns a
    ``StepOutput``; the machine never reads a clock or talks to collaborators
    itself, so callers decide where cues and events go.
    """

    def __init__(self, config: Optional[TimingConfig] = None):
        self.config = config or TimingConfig()
        self.session = CaptureSession(self.config.countdown_start)

    def reset(self):
        logger.info("Capture session reset")
        self.session.reset()

    def on_frame(self, evaluation: FrameEvaluation, image, now_ms: float) -> StepOutput:
        out = StepOutput()
        s = self.session
        if s.completed or s.is_captured(s.stage):
            return out
        if evaluation.stage != s.stage:
            logger.debug("Ignoring frame evaluated for %s while in %s", evaluation.stage.value, s.stage.value)
            return out

        s.latest_image = image
        if not evaluation.perfect:
            if s.countdown_active:
                self._cancel_countdown(out)
            s.good_frames = 0
            self._set_phase(CapturePhase.ALIGNING if evaluation.person_detected else CapturePhase.SEARCHING)
        elif not s.countdown_active:
            s.good_frames += 1
            if s.good_frames >= self.config.required_good_frames:
                self._start_countdown(now_ms, out)
            else:
                self._set_phase(CapturePhase.HOLDING)
        else:
            self._advance(now_ms, out)

        out.overlay = self._overlay(evaluation)
        return out

    def on_tick(self, now_ms: float) -> StepOutput:
        out = StepOutput()
        if self.session.countdown_active and not self.session.completed:
            self._advance(now_ms, out)
        return out

    def _set_phase(self, phase: CapturePhase):
        if self.session.phase != phase:
            logger.debug("%s: %s -> %s", self.session.stage.value, self.session.phase.value, phase.value)
            self.session.phase = phase

    def _start_countdown(self, now_ms: float, out: StepOutput):
        s = self.session
        s.countdown_active = True
        s.countdown_value = self.config.countdown_start
        s.last_tick_ms = now_ms
        s.confirm_started_ms = None
        self._set_phase(CapturePhase.COUNTING)
        if s.stage == PoseStage.FRONT_POSE:
            out.cues.append(Cue(text=phrases.FRONT_POSE_LOCKED, kind=CueKind.ANNOUNCEMENT))
            out.statuses.append(StatusEvent(status=CaptureStatus.READY_TO_CAPTURE, message=phrases.STATUS_READY_FRONT))
        else:
            out.cues.append(Cue(text=phrases.SIDE_POSE_LOCKED, kind=CueKind.ANNOUNCEMENT))
            out.statuses.append(StatusEvent(status=CaptureStatus.READY_TO_CAPTURE_SIDE, message=phrases.STATUS_READY_SIDE))
        logger.info("%s locked after %d good frames, countdown started", s.stage.value, s.good_frames)

    def _cancel_countdown(self, out: StepOutput):
        s = self.session
        s.countdown_active = False
        s.countdown_value = self.config.countdown_start
        s.last_tick_ms = None
        s.confirm_started_ms = None
        out.cues.append(Cue(text=phrases.HOLD_POSITION, kind=CueKind.ANNOUNCEMENT))
        logger.debug("%s countdown cancelled, pose lost", s.stage.value)

    def _advance(self, now_ms: float, out: StepOutput):
        s = self.session
        if s.confirming:
            if now_ms - s.confirm_started_ms >= self.config.confirmation_delay_ms:
                self._commit(out)
            return
        if now_ms - s.last_tick_ms < self.config.countdown_interval_ms:
            return
        s.countdown_value -= 1
        s.last_tick_ms = now_ms
        if s.countdown_value > 0:
            out.cues.append(Cue(text=str(s.countdown_value), kind=CueKind.ANNOUNCEMENT))
            logger.debug("%s countdown %d", s.stage.value, s.countdown_value)
        else:
            out.cues.append(Cue(text=phrases.SMILE, kind=CueKind.ANNOUNCEMENT))
            s.confirm_started_ms = now_ms
            self._set_phase(CapturePhase.CONFIRMING)

    def _commit(self, out: StepOutput):
        s = self.session
        stage = s.stage
        if not s.commit(stage, s.latest_image):
            return
        s.countdown_active = False
        s.countdown_value = self.config.countdown_start
        s.good_frames = 0
        s.last_tick_ms = None
        s.confirm_started_ms = None
        self._set_phase(CapturePhase.CAPTURED)
        logger.info("%s captured", stage.value)

        if stage == PoseStage.FRONT_POSE:
            out.statuses.append(StatusEvent(status=CaptureStatus.FRONT_POSE_CAPTURED, message=phrases.STATUS_FRONT_CAPTURED))
            # Delayed so it does not talk over the capture itself.
            out.cues.append(Cue(text=phrases.TURN_SIDEWAYS, kind=CueKind.ANNOUNCEMENT, delay_ms=self.config.turn_cue_delay_ms))
            s.stage = PoseStage.SIDE_POSE
            s.phase = CapturePhase.SEARCHING
            s.latest_image = None
        else:
            s.completed = True
            out.cues.append(Cue(text=phrases.BOTH_CAPTURED, kind=CueKind.ANNOUNCEMENT))
            out.statuses.append(StatusEvent(status=CaptureStatus.BOTH_POSES_CAPTURED, message=phrases.STATUS_BOTH_CAPTURED))
            out.capture_complete = CaptureComplete(front=s.front_image, side=s.side_image)

    def _overlay(self, evaluation: FrameEvaluation) -> OverlayState:
        s = self.session
        return OverlayState(
            stage=s.stage,
            phase=s.phase,
            frame=evaluation.frame if evaluation.person_detected else None,
            front_accuracy=evaluation.front_accuracy,
            side_accuracy=evaluation.side_accuracy,
            perfect=evaluation.perfect,
            countdown_value=s.countdown_value if s.countdown_active else 0,
            counting=s.countdown_active,
        )
