"""Core immutable world ``State`` dataclass.

This module defines the frozen :class:`State` object that represents the whole
game at one instant. Systems are pure functions that take a previous ``State``
plus inputs and return a *new* ``State``; nothing is mutated in place.

Design notes:

* The world is unbounded and is never materialized. A cell's default contents
  come from :mod:`coin_grid.luck` on demand (the flyweight).
* ``overlay`` is a **persistent map** (``pyrsistent.PMap``) keyed by
  :class:`CellId` holding only the cells that diverge from their default (the
  memento). Absence of a key means "ask the generator". Entries are never
  removed except by starting a new game.
* ``win`` is set exactly once, when the held coin first reaches
  ``config.victory_value``. It is not a terminal marker: moves and interactions
  stay legal afterwards.
* ``message`` carries the last user-facing feedback (pickup, upgrade or
  rejection text). It is not persisted.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from pyrsistent import PMap, pmap

from coin_grid.addressing import to_cell
from coin_grid.components import CellId, CellRecord, PlayerState
from coin_grid.config import WorldConfig
from coin_grid.luck import default_record, default_value


@dataclass(frozen=True)
class State:
    """Immutable world state.

    Instances are *value objects*; every transition creates a new ``State``.
    Only persistent / serializable data lives here (no caches, no handles).

    Attributes:
        player (PlayerState): Player position and held coin.
        config (WorldConfig): Game constants.
        overlay (PMap[CellId, CellRecord]): Cells that diverge from their default.
        turn (int): Count of applied movement / interaction events.
        win (bool): True once the victory value has been reached.
        message (str | None): Latest informational message for the UI.
    """

    player: PlayerState
    config: WorldConfig = WorldConfig()
    overlay: PMap[CellId, CellRecord] = pmap()

    # Status
    turn: int = 0
    win: bool = False
    message: Optional[str] = None

    @property
    def description(self) -> PMap[str, Any]:
        """Compact diagnostic view (player, overlay size, flags)."""
        return pmap(
            {
                "position": self.player.position.key(),
                "held_coin": self.player.held_coin,
                "overlay_size": len(self.overlay),
                "turn": self.turn,
                "win": self.win,
                "message": self.message,
            }
        )


def initial_state(config: Optional[WorldConfig] = None) -> State:
    """Fresh game: player at the configured origin holding ``initial_coin``."""
    config = config or WorldConfig()
    position = to_cell(config.origin[0], config.origin[1], config.cell_degrees)
    return State(
        player=PlayerState(position=position, held_coin=config.initial_coin),
        config=config,
    )


def get_record(state: State, cell: CellId) -> CellRecord:
    """Return the overlay record for ``cell`` or its generated default."""
    record = state.overlay.get(cell)
    if record is not None:
        return record
    return default_record(cell, state.config)


def get_value(state: State, cell: CellId) -> int:
    """Current coin value of ``cell``; 0 forever once picked up."""
    record = state.overlay.get(cell)
    if record is not None and record.picked_up:
        return record.value
    return default_value(cell, state.config)


def with_message(state: State, message: Optional[str]) -> State:
    """Return ``state`` carrying ``message`` (same object if unchanged)."""
    if state.message == message:
        return state
    return replace(state, message=message)
