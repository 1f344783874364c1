# posture_capture/pose_engine/processing/frame_worker.py
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import Optional
import numpy as np
from ..common.models import LandmarkFrame
from .capture_controller import CaptureController
from .landmark_detector import LandmarkDetector

logger = logging.getLogger(__name__)

class FrameWorker:
    """
    Runs detection for at most one frame at a time.

    A frame offered while another is in flight is dropped, not queued: the
    newest frame wins on the next free slot. A failed detection is handed to
    the controller as an empty frame.
    """

    def __init__(self, detector: LandmarkDetector, controller: CaptureController):
        self.detector = detector
        self.controller = controller
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="landmark-detector")
        self._lock = threading.Lock()
        self._busy = False
        self.dropped_frames = 0
        self.processed_frames = 0

    @property
    def busy(self) -> bool:
        return self._busy

    def offer(self, frame: np.ndarray, now_ms: Optional[float] = None) -> Optional[Future]:
        """Starts detection on ``frame`` unless a detection is already running."""
        with self._lock:
            if self._busy:
                self.dropped_frames += 1
                logger.debug("Frame dropped, detector busy (%d dropped)", self.dropped_frames)
                return None
            self._busy = True
        try:
            future = self._executor.submit(self.detector.detect, frame)
        except RuntimeError:
            with self._lock:
                self._busy = False
            raise
        future.add_done_callback(partial(self._on_detected, frame, now_ms))
        return future

    def _on_detected(self, frame: np.ndarray, now_ms: Optional[float], future: Future):
        try:
            try:
                landmarks = future.result()
            except Exception:
                logger.warning("Landmark detection failed, treating frame as empty", exc_info=True)
                landmarks = LandmarkFrame.empty(frame.shape[1], frame.shape[0])
            self.controller.submit(landmarks, frame, now_ms)
            self.processed_frames += 1
        finally:
            with self._lock:
                self._busy = False

    def close(self):
        self._executor.shutdown(wait=True)
        self.detector.close()
