# posture_capture/pose_engine/camera/camera_manager.py
import cv2
import logging
import threading
import time
import numpy as np
from typing import Tuple, Optional
from ..common.models import FrameMetadata

logger = logging.getLogger(__name__)

class CameraManager:
    """Grabs camera frames on a background thread and keeps only the newest one."""

    def __init__(self, config: dict):
        self.config = config
        self._source = config['source']
        self._resolution = tuple(config['resolution'])
        self._target_fps = config['target_fps']
        self._mirror = config.get('mirror', True)
        self._cap = cv2.VideoCapture(self._source)
        if not self._cap.isOpened():
            raise IOError(f"Cannot open camera source: {self._source}")

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._resolution[0])
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._resolution[1])
        self._cap.set(cv2.CAP_PROP_FPS, self._target_fps)

        self._latest = None
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._update, name="camera", daemon=True)
        self._running = False
        self._frame_id = 0
        self._failed_reads = 0
        self._last_served_id = 0

    def _update(self):
        while self._running:
            grabbed = self._cap.grab()
            if not grabbed:
                self._failed_reads += 1
                time.sleep(0.01) # Avoid busy-waiting on error
                continue
            ret, frame = self._cap.retrieve()
            if not ret:
                self._failed_reads += 1
                continue
            if self._mirror:
                frame = cv2.flip(frame, 1)
            timestamp_ms = time.monotonic() * 1000.0
            with self._lock:
                self._frame_id += 1
                # Last writer wins; an unread frame is simply replaced.
                self._latest = (frame, self._frame_id, timestamp_ms)

    def get_frame(self) -> Tuple[Optional[np.ndarray], Optional[FrameMetadata]]:
        """Returns the newest frame not yet handed out, or (None, None)."""
        with self._lock:
            if self._latest is None or self._latest[1] == self._last_served_id:
                return None, None
            frame, frame_id, timestamp_ms = self._latest
            self._last_served_id = frame_id

        metadata = FrameMetadata(
            frame_id=frame_id,
            timestamp_ms=timestamp_ms,
            source_resolution=(frame.shape[1], frame.shape[0])
        )
        return frame.copy(), metadata

    def get_stats(self) -> dict:
        return {
            "is_running": self.is_running(),
            "frames_grabbed": self._frame_id,
            "failed_reads": self._failed_reads,
            "target_fps": self._target_fps,
            "actual_resolution": (self._cap.get(cv2.CAP_PROP_FRAME_WIDTH), self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        }

    def is_running(self) -> bool:
        return self._running

    def __enter__(self):
        self._running = True
        self._thread.start()
        logger.info("CameraManager started on source %s", self._source)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._running = False
        self._thread.join()
        self._cap.release()
        logger.info("CameraManager stopped and resources released.")
