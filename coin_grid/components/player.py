"""Player component."""

from dataclasses import dataclass
from typing import Optional

from coin_grid.components.cell import CellId


@dataclass(frozen=True)
class PlayerState:
    """Player position and the single coin in hand.

    Attributes:
        position: Cell the player currently occupies.
        held_coin: Value of the held coin, ``None`` when the hand is empty.
    """

    position: CellId
    held_coin: Optional[int] = None
