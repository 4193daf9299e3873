"""Common type aliases and enumerations.

``LatLng`` is the continuous coordinate pair exchanged with sensors and
renderers; everything inside the engine is addressed by
:class:`coin_grid.components.CellId`.
"""

from enum import StrEnum, auto
from typing import Tuple

LatLng = Tuple[float, float]


class Interactivity(StrEnum):
    """Whether a visible cache accepts interaction from the player's position."""

    INTERACTIVE = auto()
    READ_ONLY = auto()


class OutcomeKind(StrEnum):
    """Result categories of a single cache interaction."""

    PICKED_UP = auto()
    MERGED = auto()
    REJECTED = auto()


class CoinPhase(StrEnum):
    """Phases of the held-coin state machine."""

    EMPTY = auto()
    HOLDING = auto()
    WON = auto()
