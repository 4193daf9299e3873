"""Action enumerations.

Defines the human readable :class:`Action` (string enum) used by the engine
and UI, and a stable integer :class:`GymAction` mapping for Gymnasium.

``MOVE_ACTIONS`` is the canonical ordered list of directional actions;
``ACTION_DELTAS`` gives their ``(di, dj)`` cell offsets. ``UP`` increases the
row index (north), ``RIGHT`` increases the column index (east).
"""

from enum import IntEnum, StrEnum, auto
from typing import Dict, Tuple


class Action(StrEnum):
    """String enum of player actions.

    Members:
        UP, DOWN, LEFT, RIGHT: One-cell steps.
        INTERACT: Interact with the nearest interactive cache.
    """

    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    INTERACT = auto()


MOVE_ACTIONS = [Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT]

ACTION_DELTAS: Dict[Action, Tuple[int, int]] = {
    Action.UP: (1, 0),
    Action.DOWN: (-1, 0),
    Action.LEFT: (0, -1),
    Action.RIGHT: (0, 1),
}


class GymAction(IntEnum):
    """Stable integer mapping for integration with Gymnasium ``Discrete`` spaces."""

    UP = 0  # start at 0 for explicitness
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    INTERACT = auto()
