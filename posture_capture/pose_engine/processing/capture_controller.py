# posture_capture/pose_engine/processing/capture_controller.py
import logging
import threading
import time
from typing import Callable, List, Optional
from ..common.config import EngineConfig
from ..common.enums import CapturePhase, CaptureStatus, PoseStage
from ..common.models import CaptureComplete, Cue, FrameEvaluation, LandmarkFrame, OverlayState, StatusEvent, StepOutput
from ..feedback import phrases
from ..feedback.speech import LoggingSpeechSink, SpeechSink
from ..feedback.throttler import FeedbackThrottler
from .capture_session import CaptureStateMachine
from .pose_evaluator import PoseEvaluator

logger = logging.getLogger(__name__)

def monotonic_ms() -> float:
    return time.monotonic() * 1000.0

class CaptureController:
    """
    Owns one capture session and serialises everything that writes to it.

    Frame results and countdown ticks both enter through ``submit``/``tick``
    and are applied inside a single critical section. Cues and events are
    delivered to collaborators after the lock is released. ``reset`` bumps a
    generation counter so that nothing scheduled by an earlier session can
    fire afterwards.
    """

    def __init__(self, config: Optional[EngineConfig] = None, speech: Optional[SpeechSink] = None,
                 clock: Callable[[], float] = monotonic_ms):
        self.config = config or EngineConfig()
        self.speech = speech or LoggingSpeechSink()
        self._clock = clock
        self._evaluator = PoseEvaluator(self.config)
        self._machine = CaptureStateMachine(self.config.timing)
        self._throttler = FeedbackThrottler(self.config.feedback)
        self._lock = threading.Lock()
        self._generation = 0
        self._pending_cues: List[threading.Timer] = []
        self._ticker: Optional[threading.Thread] = None
        self._stop_ticker = threading.Event()

        self._status_listeners: List[Callable[[StatusEvent], None]] = []
        self._capture_listeners: List[Callable[[CaptureComplete], None]] = []
        self._overlay_listeners: List[Callable[[OverlayState], None]] = []

    # --- Collaborator wiring ---
    def add_status_listener(self, listener: Callable[[StatusEvent], None]):
        self._status_listeners.append(listener)

    def add_capture_listener(self, listener: Callable[[CaptureComplete], None]):
        self._capture_listeners.append(listener)

    def add_overlay_listener(self, listener: Callable[[OverlayState], None]):
        self._overlay_listeners.append(listener)

    # --- Read-only views ---
    @property
    def stage(self) -> PoseStage:
        return self._machine.session.stage

    @property
    def phase(self) -> CapturePhase:
        return self._machine.session.phase

    @property
    def completed(self) -> bool:
        return self._machine.session.completed

    @property
    def countdown_value(self) -> int:
        return self._machine.session.countdown_value

    @property
    def good_frames(self) -> int:
        return self._machine.session.good_frames

    # --- Lifecycle ---
    def start(self):
        """Starts the countdown ticker and announces that the camera is live."""
        if self._ticker is None:
            self._stop_ticker.clear()
            self._ticker = threading.Thread(target=self._tick_loop, name="capture-ticker", daemon=True)
            self._ticker.start()
        self._dispatch(StepOutput(statuses=[StatusEvent(status=CaptureStatus.CAMERA_STARTED, message=phrases.STATUS_CAMERA_STARTED)]),
                       self._generation)

    def stop(self):
        self._stop_ticker.set()
        if self._ticker is not None:
            self._ticker.join()
            self._ticker = None
        self._cancel_pending()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def reset(self):
        """Discards all progress; timers and delayed cues of the old session are invalidated."""
        with self._lock:
            self._generation += 1
            self._machine.reset()
            self._throttler.reset()
        self._cancel_pending()

    # --- Inputs ---
    def submit(self, frame: LandmarkFrame, image=None, now_ms: Optional[float] = None) -> Optional[FrameEvaluation]:
        """Evaluates one detection result and applies it to the session."""
        with self._lock:
            if self._machine.session.completed:
                return None
            stage = self._machine.session.stage
            generation = self._generation

        evaluation = self._evaluator.evaluate(frame, stage)

        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping frame evaluated before a reset")
                return evaluation
            now = self._clock() if now_ms is None else now_ms
            out = self._machine.on_frame(evaluation, image, now)
            session = self._machine.session
            if not evaluation.perfect and not session.completed and evaluation.stage == session.stage:
                override = None if evaluation.person_detected else phrases.STAND_IN_FRAME
                cue = self._throttler.select(evaluation, now, override)
                if cue is not None:
                    out.cues.insert(0, cue)

        self._dispatch(out, generation)
        return evaluation

    def tick(self, now_ms: Optional[float] = None):
        """Advances a running countdown or confirmation without a new frame."""
        with self._lock:
            now = self._clock() if now_ms is None else now_ms
            out = self._machine.on_tick(now)
            generation = self._generation
        if not out.is_empty:
            self._dispatch(out, generation)

    def request_results(self) -> bool:
        """Re-publishes the captured pair, if both stages are done."""
        with self._lock:
            session = self._machine.session
            if not session.completed:
                return False
            out = StepOutput(capture_complete=CaptureComplete(front=session.front_image, side=session.side_image))
            generation = self._generation
        self._dispatch(out, generation)
        return True

    # --- Internals ---
    def _tick_loop(self):
        interval = self.config.timing.tick_interval_ms / 1000.0
        while not self._stop_ticker.wait(interval):
            self.tick()

    def _dispatch(self, out: StepOutput, generation: int):
        for cue in out.cues:
            if cue.delay_ms > 0:
                self._schedule(cue, generation)
            else:
                self._speak(cue)
        for status in out.statuses:
            logger.info("Status: %s %s", status.status.value, status.message)
            self._notify(self._status_listeners, status)
        if out.capture_complete is not None:
            self._notify(self._capture_listeners, out.capture_complete)
        if out.overlay is not None:
            self._notify(self._overlay_listeners, out.overlay)

    def _schedule(self, cue: Cue, generation: int):
        timer = threading.Timer(cue.delay_ms / 1000.0, self._fire_delayed, args=(cue, generation))
        timer.daemon = True
        with self._lock:
            if generation != self._generation:
                return
            self._pending_cues.append(timer)
        timer.start()

    def _fire_delayed(self, cue: Cue, generation: int):
        with self._lock:
            if generation != self._generation:
                return
            self._pending_cues = [t for t in self._pending_cues if t is not threading.current_thread()]
        self._speak(cue)

    def _cancel_pending(self):
        with self._lock:
            pending, self._pending_cues = self._pending_cues, []
        for timer in pending:
            timer.cancel()

    def _speak(self, cue: Cue):
        try:
            self.speech.speak(cue.text)
        except Exception:
            logger.exception("Speech collaborator failed on %r", cue.text)

    @staticmethod
    def _notify(listeners, event):
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed", listener)
