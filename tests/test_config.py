import math

import pytest
from pydantic import ValidationError

from true_iso.config import CorrectionConfig, RatioSpec, get_config, get_correction_config


@pytest.mark.parametrize("text, horizontal, vertical", [
    ("2:1", 2.0, 1.0),
    ("1.732:1", 1.732, 1.0),
    ("3:2", 3.0, 2.0),
])
def test_parse_ratio(text, horizontal, vertical):
    ratio = RatioSpec.parse(text)
    assert ratio.horizontal == horizontal
    assert ratio.vertical == vertical
    assert str(ratio) == text


@pytest.mark.parametrize("text", ["2", "2:1:1", "abc:1", "2:x", "0:1", "2:-1", "inf:1"])
def test_parse_ratio_rejects(text):
    with pytest.raises(ValueError):
        RatioSpec.parse(text)


def test_target_angle():
    ratio = RatioSpec.parse("2:1")
    assert ratio.target_angle == pytest.approx(math.atan(0.5))
    assert ratio.target_angle_degrees == pytest.approx(26.5651, abs=1e-4)


def test_defaults_match_packaged_yaml():
    assert get_correction_config() == CorrectionConfig()


def test_config_get_dotted_keys():
    config = get_config()
    assert config.get("correction.vote_threshold") == 40
    assert config.get("correction.missing", "fallback") == "fallback"
    assert config.get_section("logging")["level"] == "WARNING"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("TRUEISO_CORRECTION_VOTE_THRESHOLD", "30")
    monkeypatch.setenv("TRUEISO_CORRECTION_EDGE_CLEANUP_ENABLED", "false")
    monkeypatch.setenv("TRUEISO_CORRECTION_LEFT_ANGLE_RANGE", "-50,-20")
    monkeypatch.setenv("TRUEISO_CORRECTION_RATIO", "3:2")

    config = get_correction_config()
    assert config.vote_threshold == 30
    assert config.edge_cleanup_enabled is False
    assert config.left_angle_range == (-50.0, -20.0)
    assert config.target_ratio == RatioSpec(horizontal=3, vertical=2)


def test_unknown_env_key_is_ignored(monkeypatch):
    monkeypatch.setenv("TRUEISO_CORRECTION_NOT_A_KEY", "1")
    assert get_correction_config() == CorrectionConfig()


def test_custom_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("correction:\n  output_size: 64\n  tolerance_degrees: 0.5\n")
    config = get_correction_config(path)
    assert config.output_size == 64
    assert config.tolerance_degrees == 0.5
    assert config.vote_threshold == 40


def test_missing_yaml(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_config(tmp_path / "missing.yaml")


def test_reload_picks_up_changes(tmp_path):
    from true_iso.config import reload_config

    path = tmp_path / "config.yaml"
    path.write_text("correction:\n  output_size: 64\n")
    assert get_correction_config(path).output_size == 64

    path.write_text("correction:\n  output_size: 32\n")
    reload_config()
    assert get_correction_config().output_size == 32


@pytest.mark.parametrize("overrides", [
    {"canny_low": 120.0, "canny_high": 100.0},
    {"left_angle_range": (-10.0, -20.0)},
    {"right_angle_range": (-5.0, 40.0)},
    {"ratio": "two:one"},
    {"output_size": 0},
    {"edge_cleanup_min_transparent_neighbors": 5},
    {"unknown_option": 1},
])
def test_invalid_config(overrides):
    with pytest.raises(ValidationError):
        CorrectionConfig(**overrides)
