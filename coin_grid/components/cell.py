"""Cell identifier component.

Integer grid address of one unit of the unbounded world. Stored as the key of
the overlay map and as the player's position.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class CellId:
    """Grid cell address.

    Attributes:
        i: Row index; grows northwards with latitude.
        j: Column index; grows eastwards with longitude.
    """

    i: int
    j: int

    def offset(self, di: int, dj: int) -> "CellId":
        """Return the cell ``(di, dj)`` steps away."""
        return CellId(self.i + di, self.j + dj)

    def key(self) -> str:
        """Textual composite ``"i,j"`` used in persisted snapshots."""
        return f"{self.i},{self.j}"
