"""Cache interaction system.

Applies the pickup / merge rule of a single cache against the overlay. The
function only touches ``State.overlay``; updating the player's hand and the win
flag is the job of :mod:`coin_grid.systems.coin`.

Transition rule (``held`` is the player's coin, ``v`` the cell's current value):

1. ``held is None``: ``PICKED_UP(v)``, even when the cache was already
   emptied and ``v`` is 0.
2. ``held == v`` and ``v > 0``: ``MERGED(2 * v)``.
3. Anything else: ``REJECTED`` and the input state is returned unchanged.

Accepted outcomes write ``CellRecord(value=0, picked_up=True)`` for the cell.
That record is permanent: later reads return 0 no matter how often the cell
leaves and re-enters the visibility window.
"""

from dataclasses import replace
from typing import Optional, Tuple

from coin_grid.components import CellId, CellRecord
from coin_grid.outcomes import Outcome, merged, picked_up, rejected
from coin_grid.state import State, get_value

MISMATCH_MESSAGE = "You can't pick this up (value doesn't match your coin)."
EMPTY_CACHE_MESSAGE = "This cache is empty."


def apply_interaction(
    state: State, cell: CellId, held_coin: Optional[int]
) -> Tuple[State, Outcome]:
    """Try to take or merge the coin stored at ``cell``.

    Args:
        state (State): Current state.
        cell (CellId): Target cache.
        held_coin (int | None): Coin currently in the player's hand.

    Returns:
        Tuple[State, Outcome]: New state with the overlay entry written, or the
        same state object together with a ``REJECTED`` outcome.
    """
    value = get_value(state, cell)
    if held_coin is None:
        outcome = picked_up(value)
    elif held_coin == value and value > 0:
        outcome = merged(2 * held_coin)
    elif value <= 0:
        return state, rejected(EMPTY_CACHE_MESSAGE)
    else:
        return state, rejected(MISMATCH_MESSAGE)

    overlay = state.overlay.set(cell, CellRecord(value=0, picked_up=True))
    return replace(state, overlay=overlay), outcome
