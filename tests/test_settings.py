import dataclasses

import pytest

from feedgraph.settings import DEFAULT_HEIGHT, DEFAULT_WIDTH, Settings, make_settings


def test_defaults():
    settings = make_settings()
    assert settings == Settings()
    assert settings.gravity == 1.0
    assert settings.barnes_hut_theta == 1.2
    assert settings.repulsion_strength == 5000.0
    assert settings.dissuade_hubs is True
    assert settings.prevent_overlap is True
    assert (settings.width, settings.height) == (DEFAULT_WIDTH, DEFAULT_HEIGHT)
    assert settings.max_velocity == 1.0
    assert settings.node_radius(object()) == 5.0
    assert settings.center == (400.0, 300.0)


def test_settings_are_immutable():
    settings = Settings()
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.gravity = 2.0


def test_camel_case_and_string_values_are_accepted():
    settings = make_settings({"scalingRatio": "2.5", "barnesHutTheta": 0.5, "dissuadeHubs": "false"})
    assert settings.scaling_ratio == 2.5
    assert settings.barnes_hut_theta == 0.5
    assert settings.dissuade_hubs is False


def test_merge_does_not_touch_the_base():
    base = make_settings(gravity=3.0)
    merged = base.merged(cooling_rate=0.2)
    assert merged.gravity == 3.0
    assert merged.cooling_rate == 0.2
    assert base.cooling_rate == 0.1


def test_invalid_values_keep_the_base_value():
    settings = make_settings({"gravity": "strong", "coolingRate": float("nan")})
    assert settings.gravity == 1.0
    assert settings.cooling_rate == 0.1


def test_negative_limits_keep_the_base_value():
    settings = make_settings(maxVelocity=-2, cooling_rate="-0.5", barnes_hut_theta=-1.0)
    assert settings.max_velocity == 1.0
    assert settings.cooling_rate == 0.1
    assert settings.barnes_hut_theta == 1.2

    base = Settings(max_velocity=4.0)
    assert make_settings({"max_velocity": -3}, base=base).max_velocity == 4.0
    assert make_settings({"max_velocity": 0}, base=base).max_velocity == 0.0


def test_invalid_dimensions_fall_back_to_defaults():
    settings = make_settings(width="wide", height=-10)
    assert settings.width == DEFAULT_WIDTH
    assert settings.height == DEFAULT_HEIGHT


def test_unknown_keys_are_ignored():
    assert make_settings({"zoom": 3}) == Settings()


def test_numeric_node_radius_becomes_a_function():
    settings = make_settings(nodeRadius=8)
    assert settings.node_radius(None) == 8.0
