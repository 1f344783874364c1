# posture_capture/main.py
import cv2
import logging
import os
import sys
import time
import threading
import yaml
import numpy as np
from collections import deque
from pydantic import ValidationError

from .pose_engine.camera.camera_manager import CameraManager
from .pose_engine.common.config import load_config, load_engine_config
from .pose_engine.common.enums import LogLevel, PoseStage
from .pose_engine.common.models import CaptureComplete, OverlayState
from .pose_engine.processing.capture_controller import CaptureController
from .pose_engine.processing.frame_worker import FrameWorker
from .pose_engine.processing.landmark_detector import MediaPipeLandmarkDetector
from .pose_engine.visualization.visualizer import Visualizer

logger = logging.getLogger("posture_capture")

def default_config_path() -> str:
    script_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(os.path.dirname(script_dir), 'config.yaml')

class LatestOverlay:
    """Holds the newest overlay published by the controller for the render loop."""

    def __init__(self):
        self._lock = threading.Lock()
        self._overlay = None

    def __call__(self, overlay: OverlayState):
        with self._lock:
            self._overlay = overlay

    def get(self):
        with self._lock:
            return self._overlay

class CaptureWriter:
    """Writes both captured images as JPEG once a session completes."""

    def __init__(self, config: dict):
        self.directory = config.get('directory', 'captures')
        self.quality = int(config.get('jpeg_quality', 95))

    def __call__(self, event: CaptureComplete):
        os.makedirs(self.directory, exist_ok=True)
        for stage, image in ((PoseStage.FRONT_POSE, event.front), (PoseStage.SIDE_POSE, event.side)):
            path = os.path.join(self.directory, f"{stage.value.lower()}.jpg")
            if cv2.imwrite(path, image, [cv2.IMWRITE_JPEG_QUALITY, self.quality]):
                logger.info("Saved %s", path)
            else:
                logger.error("Could not write %s", path)

def configure_logging(config: dict):
    level = LogLevel(str(config.get('logging', {}).get('level', LogLevel.INFO.value)).upper())
    logging.basicConfig(level=getattr(logging, level.value), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

def main():
    """
    Live capture loop. Press 'r' to restart the session and 'q' to quit.
    """
    config_path = sys.argv[1] if len(sys.argv) > 1 else default_config_path()
    try:
        config = load_config(config_path)
        configure_logging(config)
        engine_config = load_engine_config(config)
    except FileNotFoundError:
        print(f"ERROR: Configuration file '{config_path}' not found.")
        return
    except (IOError, yaml.YAMLError, ValidationError, ValueError) as e:
        print(f"ERROR: Failed to load configuration '{config_path}'. {e}")
        return

    fps_history = deque(maxlen=100)
    latest_overlay = LatestOverlay()
    worker = None

    try:
        with CameraManager(config['camera']) as camera, CaptureController(engine_config) as controller:
            controller.add_overlay_listener(latest_overlay)
            controller.add_capture_listener(CaptureWriter(config.get('output', {})))
            worker = FrameWorker(MediaPipeLandmarkDetector(config['pose']), controller)
            visualizer = Visualizer(config['visualization'], engine_config.framing.margin)

            while camera.is_running():
                frame_start_time = time.perf_counter()
                frame, metadata = camera.get_frame()
                if frame is None:
                    time.sleep(0.001) # Wait briefly if no frame is available
                    continue

                worker.offer(frame, metadata.timestamp_ms)

                latency = time.perf_counter() - frame_start_time
                fps_history.append(1.0 / latency if latency > 0 else 0)
                avg_fps = np.mean(fps_history)

                output_frame = visualizer.render(frame, latest_overlay.get(), avg_fps)
                cv2.imshow('Posture Capture', output_frame)

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    logger.info("Shutdown signal received. Camera stats: %s", camera.get_stats())
                    break
                if key == ord('r'):
                    controller.reset()

    except IOError as e:
        logger.error("Failed to initialize. %s", e)
    except KeyError as e:
        logger.error("Missing configuration key: %s. Please check '%s'.", e, config_path)
    finally:
        if worker is not None:
            worker.close()
        cv2.destroyAllWindows()
        logger.info("Application terminated.")

if __name__ == "__main__":
    main()
