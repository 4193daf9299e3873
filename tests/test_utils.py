from typing import Dict, Iterator, Optional

from pyrsistent import pmap

from coin_grid.components import CellId, CellRecord, PlayerState
from coin_grid.config import WorldConfig
from coin_grid.game import CoinGame
from coin_grid.luck import default_value, has_cache
from coin_grid.persistence import MemoryStorage, PersistenceCodec
from coin_grid.state import State

ORIGIN_CELL = CellId(369979, -1220571)


def spiral(center: CellId, max_radius: int = 200) -> Iterator[CellId]:
    """Yield cells ring by ring around ``center`` (center first)."""
    yield center
    for r in range(1, max_radius + 1):
        for di in range(-r, r + 1):
            for dj in range(-r, r + 1):
                if max(abs(di), abs(dj)) == r:
                    yield CellId(center.i + di, center.j + dj)


def find_cache(
    config: WorldConfig,
    value: Optional[int] = None,
    near: CellId = ORIGIN_CELL,
    exclude: tuple[CellId, ...] = (),
) -> CellId:
    """Closest cache to ``near`` (optionally with a given default value)."""
    for cell in spiral(near):
        if cell in exclude or not has_cache(cell, config):
            continue
        if value is None or default_value(cell, config) == value:
            return cell
    raise AssertionError(f"no cache with value {value} near {near}")


def find_empty_cell(config: WorldConfig, near: CellId = ORIGIN_CELL) -> CellId:
    for cell in spiral(near):
        if not has_cache(cell, config):
            return cell
    raise AssertionError("no cell without a cache")


def make_state(
    position: CellId = ORIGIN_CELL,
    held_coin: Optional[int] = 1,
    overlay: Optional[Dict[CellId, CellRecord]] = None,
    config: Optional[WorldConfig] = None,
) -> State:
    return State(
        player=PlayerState(position=position, held_coin=held_coin),
        config=config or WorldConfig(),
        overlay=pmap(overlay or {}),
    )


def make_game(
    config: Optional[WorldConfig] = None,
    storage: Optional[MemoryStorage] = None,
    **kwargs: object,
) -> CoinGame:
    config = config or WorldConfig()
    codec = PersistenceCodec(storage if storage is not None else MemoryStorage(), key=config.storage_key)
    return CoinGame(config=config, codec=codec, **kwargs)  # type: ignore[arg-type]


def teleport(game: CoinGame, cell: CellId) -> None:
    """Walk the player onto ``cell`` with discrete steps."""
    position = game.position
    game.move_by(cell.i - position.i, cell.j - position.j)
    assert game.position == cell
