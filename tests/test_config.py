from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from posture_capture.pose_engine.common.config import EngineConfig, load_config, load_engine_config

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config.yaml"


def test_shipped_config_matches_defaults():
    config = load_config(REPO_CONFIG)
    assert load_engine_config(config) == EngineConfig()
    assert config['pose']['min_landmark_visibility'] == 0.5


def test_missing_capture_section_gives_defaults():
    assert load_engine_config({}) == EngineConfig()
    assert load_engine_config(None) == EngineConfig()
    assert load_engine_config({'capture': None}) == EngineConfig()


def test_partial_override():
    config = load_engine_config({'capture': {'timing': {'required_good_frames': 3}}})
    assert config.timing.required_good_frames == 3
    assert config.timing.countdown_start == 5
    assert config.reference_pose.shoulder_angle == 45.0


@pytest.mark.parametrize("section", [
    {'timing': {'required_good_frame': 3}},
    {'reference_pose': {'spine_angle_tolerance': -1}},
    {'framing': {'margin': 0.5}},
    {'feedback': {'cooldown_ms': 'soon'}},
])
def test_invalid_values_are_rejected(section):
    with pytest.raises(ValidationError):
        load_engine_config({'capture': section})


def test_config_is_frozen():
    config = EngineConfig()
    with pytest.raises(ValidationError):
        config.timing.countdown_start = 3


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("capture:\n  framing:\n    margin: 0.1\n")
    assert load_engine_config(load_config(path)).framing.margin == 0.1

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    assert load_config(empty) == {}


def test_load_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")
    broken = tmp_path / "broken.yaml"
    broken.write_text("capture: [unclosed\n")
    with pytest.raises(yaml.YAMLError):
        load_config(broken)
