# posture_capture/pose_engine/processing/pose_evaluator.py
from typing import Optional
from ..analysis.accuracy import FrontPoseComparator, SidePoseComparator
from ..analysis.framing import FramingChecker
from ..analysis.metrics import calculate_front_metrics, calculate_side_metrics
from ..common.config import EngineConfig
from ..common.enums import LandmarkType as L, PoseStage
from ..common.models import FrameEvaluation, LandmarkFrame

# Joints that must all be present before a frame counts as "a person".
CRITICAL_LANDMARKS = (
    L.NOSE,
    L.LEFT_SHOULDER, L.RIGHT_SHOULDER,
    L.LEFT_ELBOW, L.RIGHT_ELBOW,
    L.LEFT_WRIST, L.RIGHT_WRIST,
    L.LEFT_HIP, L.RIGHT_HIP,
    L.LEFT_KNEE, L.RIGHT_KNEE,
)

class PoseEvaluator:
    """Runs framing, metrics and accuracy for one frame. Stateless."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.framing_checker = FramingChecker(self.config.framing)
        self.front_comparator = FrontPoseComparator(self.config.reference_pose)
        self.side_comparator = SidePoseComparator(self.config.side_reference_pose, self.config.side_view)

    def evaluate(self, frame: LandmarkFrame, stage: PoseStage) -> FrameEvaluation:
        if not frame.has_all(CRITICAL_LANDMARKS):
            return FrameEvaluation(stage=stage, frame=frame, person_detected=False)

        framing = self.framing_checker.check(frame)
        if stage == PoseStage.FRONT_POSE:
            if not framing.in_box:
                return FrameEvaluation(stage=stage, frame=frame, person_detected=True, framing=framing)
            metrics = calculate_front_metrics(frame)
            accuracy = self.front_comparator.compare(metrics, framing)
            return FrameEvaluation(
                stage=stage, frame=frame, person_detected=True, framing=framing,
                front_metrics=metrics, front_accuracy=accuracy, perfect=accuracy.overall,
            )

        # Side metrics are always computed; framing only gates the overall result.
        metrics = calculate_side_metrics(frame)
        accuracy = self.side_comparator.compare(metrics, framing)
        return FrameEvaluation(
            stage=stage, frame=frame, person_detected=True, framing=framing,
            side_metrics=metrics, side_accuracy=accuracy, perfect=accuracy.overall,
        )
