"""Cell record component.

A record is the per-cell memento kept in ``State.overlay``. A record exists in
the overlay only once the cell diverges from its generated default; absence
means the value is regenerated on demand.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CellRecord:
    """Current contents of one cache.

    Attributes:
        value: Coin value currently stored at the cell (0 once emptied).
        picked_up: True once the player has taken the coin.
    """

    value: int
    picked_up: bool = False
