"""Movement strategies.

A movement command is either a relative step (:class:`MoveBy`, issued by the
directional controls) or an absolute fix (:class:`MoveTo`, issued by a
location sensor). A :class:`MovementStrategy` turns a command into the cell
the player should occupy next, or ``None`` when the command does not apply
to it.

Exactly two strategies exist:

* :class:`StepMovement` follows ``MoveBy`` and ignores ``MoveTo``. Late
  sensor fixes that arrive after the sensor was switched off are dropped.
* :class:`AbsoluteMovement` follows ``MoveTo`` and ignores ``MoveBy`` while
  the sensor owns the player position.

Strategies are stateless and never touch ``State`` themselves; the engine
applies the resolved cell through a single shared path (state update, window
refresh, persistence).
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union

from coin_grid.actions import ACTION_DELTAS, Action
from coin_grid.addressing import to_cell
from coin_grid.components import CellId
from coin_grid.config import WorldConfig


@dataclass(frozen=True)
class MoveBy:
    """Relative move by ``(di, dj)`` cells."""

    di: int
    dj: int


@dataclass(frozen=True)
class MoveTo:
    """Absolute move to the cell containing ``(lat, lng)``."""

    lat: float
    lng: float


MoveCommand = Union[MoveBy, MoveTo]


def action_to_command(action: Action) -> MoveBy:
    """Directional action to its ``MoveBy`` command."""
    if action not in ACTION_DELTAS:
        raise ValueError(f"Action {action!r} is not a movement action")
    di, dj = ACTION_DELTAS[action]
    return MoveBy(di, dj)


class MovementStrategy:
    """Resolves movement commands to a destination cell."""

    name: str = "movement"

    def resolve(
        self, position: CellId, command: MoveCommand, config: WorldConfig
    ) -> Optional[CellId]:
        """Destination for ``command`` from ``position``, or ``None`` to ignore it."""
        if isinstance(command, MoveBy):
            return self.move_by(position, command.di, command.dj)
        return self.move_to_absolute(position, command.lat, command.lng, config)

    def move_by(self, position: CellId, di: int, dj: int) -> Optional[CellId]:
        return None

    def move_to_absolute(
        self, position: CellId, lat: float, lng: float, config: WorldConfig
    ) -> Optional[CellId]:
        return None


class StepMovement(MovementStrategy):
    """Discrete steps from the directional controls."""

    name = "step"

    def move_by(self, position: CellId, di: int, dj: int) -> Optional[CellId]:
        return position.offset(di, dj)


class AbsoluteMovement(MovementStrategy):
    """Positions reported by an external location sensor.

    Raises:
        AddressingError: From :func:`to_cell` for non-finite coordinates.
    """

    name = "absolute"

    def move_to_absolute(
        self, position: CellId, lat: float, lng: float, config: WorldConfig
    ) -> Optional[CellId]:
        return to_cell(lat, lng, config.cell_degrees)


MOVEMENT_REGISTRY: Dict[str, MovementStrategy] = {
    StepMovement.name: StepMovement(),
    AbsoluteMovement.name: AbsoluteMovement(),
}
"""Name → strategy mapping for configuration and UI selection."""
