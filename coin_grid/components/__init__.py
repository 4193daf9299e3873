"""coin_grid.components
=================================

Aggregate import surface for the value objects the engine passes around::

    from coin_grid.components import CellId, CellRecord, PlayerState

All components are frozen ``@dataclass`` instances; state changes are
expressed by building new instances inside systems.
"""

from .cell import CellId
from .player import PlayerState
from .record import CellRecord

__all__ = [
    "CellId",
    "CellRecord",
    "PlayerState",
]
