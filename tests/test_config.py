import json

import pytest

from standby import defaults
from standby.config import load_config, normalise_config
from standby.errors import ConfigError


def test_defaults_are_loaded_without_a_path():
    cfg = load_config(None)
    assert cfg["target_time"] == defaults.TARGET_TIME
    assert cfg["cycle_seconds"] == defaults.CYCLE_SECONDS
    assert len(cfg["targets"]) == 5


def test_defaults_normalise():
    cfg = normalise_config(load_config(None))
    assert cfg["width"] == 1280 and cfg["height"] == 720
    assert cfg["targets"][0] == (-0.743643887037151, 0.13182590420533)
    assert cfg["orbit_frequencies"] == (0.11, 0.13)
    assert cfg["start_time"] is None
    assert cfg["min_iter"] == 80 and cfg["max_iter"] == 1024


def test_json_overrides_defaults(tmp_path):
    path = tmp_path / "standby.json"
    path.write_text(json.dumps({
        "target_time": "2030-01-01T00:00:00",
        "start_time": "2029-12-31T23:00:00",
        "targets": [[-0.8, 0.156]],
        "cycle_seconds": 90,
        "countdown_format": "hms",
    }), encoding="utf-8")
    cfg = normalise_config(load_config(str(path)))
    assert cfg["targets"] == [(-0.8, 0.156)]
    assert cfg["cycle_seconds"] == 90.0
    assert cfg["countdown_format"] == "hms"
    assert cfg["start_time"] == "2029-12-31T23:00:00"
    assert cfg["width"] == defaults.WIDTH


def test_invalid_json_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_json_must_be_an_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(str(path))


@pytest.mark.parametrize("override", [
    {"target_time": "31/12/2025 23:59"},
    {"start_time": "soon"},
    {"width": 0},
    {"height": "tall"},
    {"start_zoom": 0.001, "min_zoom": 0.01},
    {"min_zoom": -1},
    {"min_iter": 2000},
    {"interior_threshold": 2.0},
    {"targets": []},
    {"targets": [[0.0]]},
    {"targets": [["a", "b"]]},
    {"orbit_frequencies": [0.2, 0.2]},
    {"countdown_format": "seconds"},
    {"countdown_label": "no placeholder"},
    {"clock_speed": "fast"},
    {"cycle_seconds": float("inf")},
    {"colour": "red"},
])
def test_invalid_values_raise(override):
    with pytest.raises(ConfigError):
        normalise_config(override)
