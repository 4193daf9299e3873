from typing import Any, Dict

import pytest

from coin_grid.config import CONFIG_REGISTRY, WorldConfig


def test_defaults() -> None:
    config = WorldConfig()
    assert config.cell_degrees == 1e-4
    assert config.neighborhood_size == 22
    assert config.spawn_probability == 0.1
    assert config.player_range_meters == 30.0
    assert config.coin_values == (1, 2, 4, 8, 16, 32, 64, 128)
    assert config.victory_value == 256
    assert config.initial_coin == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"cell_degrees": 0.0},
        {"neighborhood_size": -1},
        {"spawn_probability": 1.5},
        {"player_range_meters": -1.0},
        {"coin_values": ()},
        {"coin_values": (2, 1)},
        {"coin_values": (0, 1)},
        {"victory_value": 0},
        {"initial_coin": 0},
        {"storage_key": ""},
    ],
)
def test_invalid_values_raise(overrides: Dict[str, Any]) -> None:
    with pytest.raises(ValueError):
        WorldConfig(**overrides)


def test_registry_presets_are_valid() -> None:
    assert CONFIG_REGISTRY["default"] == WorldConfig()
    assert CONFIG_REGISTRY["dense"].spawn_probability > WorldConfig().spawn_probability
