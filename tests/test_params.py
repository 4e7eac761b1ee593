import dataclasses
import json
import logging

import pytest

from terrain_generator import config as DEFAULTS
from terrain_generator.params import TerrainParams


def test_defaults_from_empty_config():
    params = TerrainParams.from_config({})
    assert params == TerrainParams()
    assert params.seed == DEFAULTS.DEFAULT_SEED
    assert params.shape == (DEFAULTS.DEFAULT_DEPTH, DEFAULTS.DEFAULT_WIDTH)
    assert params.collision_mode == "surface"


def test_none_config_uses_defaults():
    assert TerrainParams.from_config(None) == TerrainParams()


@pytest.mark.parametrize("key, value, expected", [
    ("width", 0, 2),
    ("depth", -50, 2),
    ("width", 10.7, 10),
    ("water_level", 5.0, 1.0),
    ("water_level", -1.0, 0.0),
    ("water_level", float("nan"), DEFAULTS.DEFAULT_WATER_LEVEL),
    ("height", float("inf"), DEFAULTS.DEFAULT_HEIGHT),
    ("octaves", -3, 0),
    ("octaves", 1000, DEFAULTS.MAX_OCTAVES),
    ("persistence", 3.0, 1.0),
    ("scale", 0.0, 1e-6),
    ("erosion_iterations", "not a number", DEFAULTS.DEFAULT_EROSION_ITERATIONS),
    ("erosion_strength", -1.0, 0.0),
])
def test_values_are_sanitized(key, value, expected):
    params = TerrainParams.from_config({key: value})
    assert getattr(params, key) == pytest.approx(expected)


def test_integer_seed_becomes_string():
    assert TerrainParams.from_config({"seed": 42}).seed == "42"
    assert TerrainParams.from_config({"seed": ""}).seed == DEFAULTS.DEFAULT_SEED


@pytest.mark.parametrize("value, expected", [
    ("false", False),
    ("True", True),
    (0, False),
    (1, True),
    (None, DEFAULTS.DEFAULT_RIVERS_ENABLED),
])
def test_boolean_toggles(value, expected):
    assert TerrainParams.from_config({"rivers_enabled": value}).rivers_enabled is expected


def test_unknown_collision_mode_falls_back():
    assert TerrainParams.from_config({"collision_mode": "bogus"}).collision_mode == "surface"
    assert TerrainParams.from_config({"collision_mode": "Orthogonal"}).collision_mode == "orthogonal"


def test_unknown_keys_are_logged_and_ignored(caplog):
    logger = logging.getLogger("ParamsTest")
    with caplog.at_level(logging.DEBUG, logger="ParamsTest"):
        params = TerrainParams.from_config({"mystery": 1}, logger=logger)
    assert params == TerrainParams()
    assert "mystery" in caplog.text


def test_params_are_frozen():
    params = TerrainParams()
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.width = 10


def test_to_dict_is_json_serialisable():
    params = TerrainParams.from_config({"seed": "abc", "width": 12})
    restored = TerrainParams.from_config(json.loads(json.dumps(params.to_dict())))
    assert restored == params


def test_water_height():
    params = TerrainParams.from_config({"height": 8, "height_offset": -4, "water_level": 0.25})
    assert params.water_height == pytest.approx(-2.0)
