"""Deterministic per-cell value generation.

Every cell's default contents are a pure function of its coordinates (and the
optional world seed). Values are derived from SHA-256 rather than Python's
``hash`` so they stay identical across processes regardless of
``PYTHONHASHSEED``. This is what lets unmodified cells be forgotten when they
leave the window and regenerated later with the same value.
"""

import hashlib
import math
from functools import lru_cache
from typing import Optional, Tuple

from coin_grid.components import CellId, CellRecord
from coin_grid.config import WorldConfig

VALUE_SALT = "initialValue"
VALUE_SPREAD = 1_000_000


def luck(key: str) -> float:
    """Map ``key`` to a uniform float in ``[0, 1)``."""
    digest = hashlib.sha256(key.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False) / 2**64


def luck_key(cell: CellId, salt: str, seed: Optional[int] = None) -> str:
    """Build the luck key ``"i,j,salt"``, prefixed by ``"seed:"`` when seeded."""
    key = f"{cell.i},{cell.j},{salt}"
    return key if seed is None else f"{seed}:{key}"


def has_cache(cell: CellId, config: WorldConfig) -> bool:
    """Return True if ``cell`` holds a cache."""
    return luck(luck_key(cell, VALUE_SALT, config.seed)) < config.spawn_probability


@lru_cache(maxsize=8192)
def _default_value(cell: CellId, seed: Optional[int], coin_values: Tuple[int, ...]) -> int:
    raw = luck(luck_key(cell, VALUE_SALT, seed))
    index = math.floor(raw * VALUE_SPREAD) % len(coin_values)
    return coin_values[index]


def default_value(cell: CellId, config: WorldConfig) -> int:
    """Generated coin value of ``cell`` before any player interaction.

    The result is memoized; clearing the cache with :func:`clear_value_cache`
    never changes what is returned.
    """
    return _default_value(cell, config.seed, config.coin_values)


def clear_value_cache() -> None:
    """Drop memoized default values."""
    _default_value.cache_clear()


def default_record(cell: CellId, config: WorldConfig) -> CellRecord:
    """Flyweight record for a cell that has never been touched."""
    return CellRecord(value=default_value(cell, config), picked_up=False)
