# posture_capture/pose_engine/common/models.py
from pydantic import BaseModel, Field
from typing import Any, Dict, Iterable, List, Optional, Tuple
from .enums import CapturePhase, CaptureStatus, CueKind, FramingIssue, LandmarkType, PoseStage

class FrameMetadata(BaseModel):
    """Metadata associated with a single camera frame."""
    frame_id: int
    timestamp_ms: float
    source_resolution: Tuple[int, int]

class Landmark(BaseModel):
    """A single detected body point in image pixel space."""
    type: LandmarkType
    x: float
    y: float
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    class Config:
        frozen = True

class LandmarkFrame(BaseModel):
    """The landmarks present in one processed camera frame.

    Absent joints are simply missing from ``landmarks``.
    """
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    landmarks: Dict[LandmarkType, Landmark] = Field(default_factory=dict)

    class Config:
        frozen = True

    @classmethod
    def empty(cls, width: int, height: int) -> "LandmarkFrame":
        return cls(width=width, height=height)

    def get(self, landmark_type: LandmarkType) -> Optional[Landmark]:
        return self.landmarks.get(landmark_type)

    def has(self, landmark_type: LandmarkType) -> bool:
        return landmark_type in self.landmarks

    def has_all(self, landmark_types: Iterable[LandmarkType]) -> bool:
        return all(t in self.landmarks for t in landmark_types)

    def present(self, landmark_types: Iterable[LandmarkType]) -> List[Landmark]:
        return [self.landmarks[t] for t in landmark_types if t in self.landmarks]

    @property
    def is_empty(self) -> bool:
        return not self.landmarks

class _Metrics(BaseModel):
    def unavailable(self) -> List[str]:
        """Names of the metrics that could not be computed for this frame."""
        return [name for name, value in self if value is None]

class PostureMetrics(_Metrics):
    """Front-facing posture metrics. ``None`` marks an unavailable metric."""
    shoulder_angle_left: Optional[float] = None
    shoulder_angle_right: Optional[float] = None
    elbow_angle_left: Optional[float] = None
    elbow_angle_right: Optional[float] = None
    spine_angle: Optional[float] = None
    hip_angle_left: Optional[float] = None
    hip_angle_right: Optional[float] = None
    shoulder_level_diff: Optional[float] = None
    leg_separation_angle: Optional[float] = None

class SidePostureMetrics(_Metrics):
    """Side-facing posture metrics. ``None`` marks an unavailable metric."""
    neck_head_angle: Optional[float] = None
    arm_angle_left: Optional[float] = None
    arm_angle_right: Optional[float] = None
    spine_angle: Optional[float] = None
    leg_angle_left: Optional[float] = None
    leg_angle_right: Optional[float] = None
    shoulder_depth_diff: Optional[float] = None
    shoulder_horizontal_alignment: Optional[float] = None
    arms_overlap: Optional[float] = None
    legs_overlap: Optional[float] = None

class MetricCheck(BaseModel):
    """Outcome of comparing one metric with its reference target."""
    value: Optional[float] = None
    deviation: Optional[float] = None
    passed: bool = False

    @property
    def available(self) -> bool:
        return self.value is not None

class FrontAccuracy(BaseModel):
    shoulder_left: MetricCheck
    shoulder_right: MetricCheck
    elbow_left: MetricCheck
    elbow_right: MetricCheck
    spine: MetricCheck
    hip_left: MetricCheck
    hip_right: MetricCheck
    shoulder_level: MetricCheck
    leg_separation: MetricCheck
    in_box: bool = False
    overall: bool = False

class SideAccuracy(BaseModel):
    neck_head: MetricCheck
    arm_left: MetricCheck
    arm_right: MetricCheck
    spine: MetricCheck
    leg_left: MetricCheck
    leg_right: MetricCheck
    is_side_view: bool = False
    in_box: bool = False
    overall: bool = False

class FramingResult(BaseModel):
    """Whether the body fits the target box, and why not."""
    in_box: bool
    issues: List[FramingIssue] = Field(default_factory=list)
    messages: List[str] = Field(default_factory=list)

    @property
    def first_message(self) -> Optional[str]:
        return self.messages[0] if self.messages else None

class FrameEvaluation(BaseModel):
    """Everything the engine derived from one landmark frame for one stage."""
    stage: PoseStage
    frame: LandmarkFrame
    person_detected: bool = False
    framing: Optional[FramingResult] = None
    front_metrics: Optional[PostureMetrics] = None
    front_accuracy: Optional[FrontAccuracy] = None
    side_metrics: Optional[SidePostureMetrics] = None
    side_accuracy: Optional[SideAccuracy] = None
    perfect: bool = False

class Cue(BaseModel):
    """A short phrase for the speech collaborator."""
    text: str
    kind: CueKind = CueKind.GUIDANCE
    delay_ms: float = 0.0

class StatusEvent(BaseModel):
    status: CaptureStatus
    message: str = ""

class CaptureComplete(BaseModel):
    """Both stages committed; handles are opaque to the engine."""
    front: Any
    side: Any

    class Config:
        arbitrary_types_allowed = True

class OverlayState(BaseModel):
    """Per-frame data for a renderer. Purely observational."""
    stage: PoseStage
    phase: CapturePhase
    frame: Optional[LandmarkFrame] = None
    front_accuracy: Optional[FrontAccuracy] = None
    side_accuracy: Optional[SideAccuracy] = None
    perfect: bool = False
    countdown_value: int = 0
    counting: bool = False

class StepOutput(BaseModel):
    """What one state-machine step asks the outside world to do."""
    cues: List[Cue] = Field(default_factory=list)
    statuses: List[StatusEvent] = Field(default_factory=list)
    capture_complete: Optional[CaptureComplete] = None
    overlay: Optional[OverlayState] = None

    @property
    def is_empty(self) -> bool:
        return not (self.cues or self.statuses or self.capture_complete or self.overlay)
