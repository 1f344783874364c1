# posture_capture/pose_engine/processing/landmark_detector.py
import cv2
import logging
import numpy as np
from abc import ABC, abstractmethod
from ..common.enums import LandmarkType
from ..common.models import Landmark, LandmarkFrame

logger = logging.getLogger(__name__)

class LandmarkDetector(ABC):
    """Turns a BGR image into a LandmarkFrame. May raise; callers treat errors as empty frames."""

    @abstractmethod
    def detect(self, frame: np.ndarray) -> LandmarkFrame: ...

    def close(self) -> None:
        pass

# MediaPipe Pose landmark index for every joint the engine uses.
MEDIAPIPE_INDICES = {
    LandmarkType.NOSE: 0,
    LandmarkType.LEFT_EAR: 7,
    LandmarkType.RIGHT_EAR: 8,
    LandmarkType.LEFT_SHOULDER: 11,
    LandmarkType.RIGHT_SHOULDER: 12,
    LandmarkType.LEFT_ELBOW: 13,
    LandmarkType.RIGHT_ELBOW: 14,
    LandmarkType.LEFT_WRIST: 15,
    LandmarkType.RIGHT_WRIST: 16,
    LandmarkType.LEFT_HIP: 23,
    LandmarkType.RIGHT_HIP: 24,
    LandmarkType.LEFT_KNEE: 25,
    LandmarkType.RIGHT_KNEE: 26,
    LandmarkType.LEFT_ANKLE: 27,
    LandmarkType.RIGHT_ANKLE: 28,
    LandmarkType.LEFT_HEEL: 29,
    LandmarkType.RIGHT_HEEL: 30,
    LandmarkType.LEFT_FOOT_INDEX: 31,
    LandmarkType.RIGHT_FOOT_INDEX: 32,
}

def landmarks_from_normalized(points, width: int, height: int, min_visibility: float) -> LandmarkFrame:
    """
    Builds a LandmarkFrame from normalized (x, y, visibility) rows indexed like MediaPipe Pose.
    Rows below ``min_visibility`` are treated as not detected.
    """
    landmarks = {}
    for landmark_type, index in MEDIAPIPE_INDICES.items():
        if index >= len(points):
            continue
        x, y, visibility = points[index]
        visibility = float(np.clip(visibility, 0.0, 1.0))
        if visibility < min_visibility:
            continue
        landmarks[landmark_type] = Landmark(type=landmark_type, x=float(x) * width, y=float(y) * height, confidence=visibility)
    return LandmarkFrame(width=width, height=height, landmarks=landmarks)

class MediaPipeLandmarkDetector(LandmarkDetector):
    """MediaPipe Pose, reporting landmarks in pixel space."""

    def __init__(self, config: dict):
        import mediapipe as mp

        self.config = config
        self.min_visibility = config.get('min_landmark_visibility', 0.5)
        self.mp_pose = mp.solutions.pose
        self.pose = self.mp_pose.Pose(
            static_image_mode=False,
            model_complexity=config['model_complexity'],
            smooth_landmarks=config.get('smooth_landmarks', True),
            enable_segmentation=False,
            min_detection_confidence=config['min_detection_confidence'],
            min_tracking_confidence=config['min_tracking_confidence']
        )

    def detect(self, frame: np.ndarray) -> LandmarkFrame:
        height, width = frame.shape[0], frame.shape[1]
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        frame_rgb.flags.writeable = False # Performance optimization
        results = self.pose.process(frame_rgb)

        if not results.pose_landmarks:
            return LandmarkFrame.empty(width, height)
        points = [(lm.x, lm.y, lm.visibility) for lm in results.pose_landmarks.landmark]
        return landmarks_from_normalized(points, width, height, self.min_visibility)

    def close(self):
        self.pose.close()
