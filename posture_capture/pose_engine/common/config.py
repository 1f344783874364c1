# posture_capture/pose_engine/common/config.py
import yaml
from pathlib import Path
from typing import Optional, Union
from pydantic import BaseModel, Field

class _Section(BaseModel):
    class Config:
        extra = "forbid"
        frozen = True

class ReferencePose(_Section):
    """Target angles and tolerances for the front-facing pose (degrees, pixels for level)."""
    shoulder_angle: float = 45.0
    shoulder_angle_tolerance: float = Field(default=15.0, ge=0)
    elbow_angle_left: float = 180.0
    elbow_angle_right: float = 180.0
    elbow_angle_tolerance: float = Field(default=20.0, ge=0)
    spine_angle_tolerance: float = Field(default=10.0, ge=0)
    hip_angle_left: float = 180.0
    hip_angle_right: float = 180.0
    hip_angle_tolerance: float = Field(default=15.0, ge=0)
    shoulder_level_diff: float = 0.0
    shoulder_level_tolerance: float = Field(default=30.0, ge=0)
    leg_separation_angle: float = 45.0
    leg_separation_tolerance: float = Field(default=15.0, ge=0)

class SideReferencePose(_Section):
    """Target angles and tolerances for the side-facing pose."""
    neck_head_angle: float = 180.0
    neck_head_tolerance: float = Field(default=15.0, ge=0)
    arm_angle: float = 180.0
    arm_tolerance: float = Field(default=20.0, ge=0)
    spine_tolerance: float = Field(default=15.0, ge=0)
    leg_angle: float = 180.0
    leg_tolerance: float = Field(default=15.0, ge=0)
    shoulder_depth_tolerance: float = Field(default=30.0, ge=0)

class SideViewThresholds(_Section):
    """Pixel limits used to decide that the person really stands side-on."""
    max_shoulder_horizontal_alignment: float = 100.0
    max_arms_overlap: float = 120.0
    max_legs_overlap: float = 120.0

class FramingConfig(_Section):
    margin: float = Field(default=0.05, ge=0.0, lt=0.5)

class TimingConfig(_Section):
    required_good_frames: int = Field(default=10, ge=1)
    countdown_start: int = Field(default=5, ge=1)
    countdown_interval_ms: float = Field(default=1000.0, gt=0)
    confirmation_delay_ms: float = Field(default=2000.0, ge=0)
    turn_cue_delay_ms: float = Field(default=1500.0, ge=0)
    tick_interval_ms: float = Field(default=100.0, gt=0)

class FeedbackConfig(_Section):
    cooldown_ms: float = Field(default=3000.0, ge=0)
    arm_raise_min_deviation: float = Field(default=20.0, ge=0)

class EngineConfig(_Section):
    """All tunables of the decision engine."""
    reference_pose: ReferencePose = Field(default_factory=ReferencePose)
    side_reference_pose: SideReferencePose = Field(default_factory=SideReferencePose)
    side_view: SideViewThresholds = Field(default_factory=SideViewThresholds)
    framing: FramingConfig = Field(default_factory=FramingConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    feedback: FeedbackConfig = Field(default_factory=FeedbackConfig)

def load_config(path: Union[str, Path]) -> dict:
    """Reads config.yaml into a plain dict. Raises IOError / yaml.YAMLError."""
    with open(path, 'r') as f:
        config = yaml.safe_load(f)
    return config or {}

def load_engine_config(config: Optional[dict]) -> EngineConfig:
    """Validates the ``capture`` section; a missing section gives the defaults."""
    section = (config or {}).get('capture') or {}
    return EngineConfig(**section)
