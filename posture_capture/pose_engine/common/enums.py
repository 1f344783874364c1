# posture_capture/pose_engine/common/enums.py
from enum import Enum

class LandmarkType(str, Enum):
    """Body joints the capture engine reasons about."""
    NOSE = "nose"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"
    LEFT_HEEL = "left_heel"
    RIGHT_HEEL = "right_heel"
    LEFT_FOOT_INDEX = "left_foot_index"
    RIGHT_FOOT_INDEX = "right_foot_index"

class PoseStage(str, Enum):
    """The two capture phases of a session."""
    FRONT_POSE = "FRONT_POSE"
    SIDE_POSE = "SIDE_POSE"

class CapturePhase(str, Enum):
    """Operational state of the current stage."""
    SEARCHING = "SEARCHING"
    ALIGNING = "ALIGNING"
    HOLDING = "HOLDING"
    COUNTING = "COUNTING"
    CONFIRMING = "CONFIRMING"
    CAPTURED = "CAPTURED"

class CaptureStatus(str, Enum):
    """Status events published for UI and telemetry."""
    CAMERA_STARTED = "camera_started"
    READY_TO_CAPTURE = "ready_to_capture"
    FRONT_POSE_CAPTURED = "front_pose_captured"
    READY_TO_CAPTURE_SIDE = "ready_to_capture_side"
    BOTH_POSES_CAPTURED = "both_poses_captured"

class CueKind(str, Enum):
    GUIDANCE = "GUIDANCE"          # rate limited by the feedback throttler
    ANNOUNCEMENT = "ANNOUNCEMENT"  # countdown and stage announcements, spoken immediately

class FramingIssue(str, Enum):
    """Reasons a frame is not usable for capture."""
    TOO_CLOSE = "TOO_CLOSE"
    TOO_FAR = "TOO_FAR"
    NOT_VISIBLE = "NOT_VISIBLE"
    TOO_FAR_LEFT = "TOO_FAR_LEFT"
    TOO_FAR_RIGHT = "TOO_FAR_RIGHT"
    TOO_HIGH = "TOO_HIGH"
    TOO_LOW = "TOO_LOW"

class LogLevel(str, Enum):
    """Defines logging levels accepted in config.yaml."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
