"""World configuration.

:class:`WorldConfig` bundles every tunable constant of the game. It is a frozen
value object carried on :class:`coin_grid.state.State` so that pure systems can
read it without module-level globals. Named presets live in
``CONFIG_REGISTRY``.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

DEFAULT_ORIGIN: Tuple[float, float] = (36.997936938057016, -122.05703507501151)
DEFAULT_COIN_VALUES: Tuple[int, ...] = (1, 2, 4, 8, 16, 32, 64, 128)
DEFAULT_STORAGE_KEY = "coin_grid.snapshot"


@dataclass(frozen=True)
class WorldConfig:
    """Game constants.

    Attributes:
        origin: Starting ``(lat, lng)`` of a fresh game.
        cell_degrees: Edge length of a grid cell in degrees.
        neighborhood_size: Chebyshev radius (in cells) of the visibility window.
        spawn_probability: Fraction of cells that hold a cache.
        player_range_meters: Interaction radius around the player.
        coin_values: Ascending denominations a cache may start with.
        victory_value: Held coin value that wins the game.
        initial_coin: Coin the player starts with (``None`` for an empty hand).
        seed: Optional world seed mixed into the luck keys.
        storage_key: Key the snapshot is stored under.
    """

    origin: Tuple[float, float] = DEFAULT_ORIGIN
    cell_degrees: float = 1e-4
    neighborhood_size: int = 22
    spawn_probability: float = 0.1
    player_range_meters: float = 30.0
    coin_values: Tuple[int, ...] = DEFAULT_COIN_VALUES
    victory_value: int = 256
    initial_coin: Optional[int] = 1
    seed: Optional[int] = None
    storage_key: str = DEFAULT_STORAGE_KEY

    def __post_init__(self) -> None:
        if self.cell_degrees <= 0:
            raise ValueError("cell_degrees must be > 0")
        if self.neighborhood_size < 0:
            raise ValueError("neighborhood_size must be >= 0")
        if not 0.0 <= self.spawn_probability <= 1.0:
            raise ValueError("spawn_probability must be within [0, 1]")
        if self.player_range_meters < 0:
            raise ValueError("player_range_meters must be >= 0")
        if not self.coin_values or any(v <= 0 for v in self.coin_values):
            raise ValueError("coin_values must be a non-empty sequence of positive ints")
        if list(self.coin_values) != sorted(self.coin_values):
            raise ValueError("coin_values must be ascending")
        if self.victory_value <= 0:
            raise ValueError("victory_value must be > 0")
        if self.initial_coin is not None and self.initial_coin <= 0:
            raise ValueError("initial_coin must be positive or None")
        if not self.storage_key:
            raise ValueError("storage_key must be a non-empty string")


CONFIG_REGISTRY: Dict[str, WorldConfig] = {
    "default": WorldConfig(),
    "dense": WorldConfig(spawn_probability=0.3, neighborhood_size=12),
}
"""Name → preset mapping used by the app and the Gymnasium env."""
