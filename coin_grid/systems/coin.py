"""Held-coin state machine.

The player holds at most one coin. Its phase is derived from ``State``:

* ``EMPTY``: ``player.held_coin is None``.
* ``HOLDING``: a coin is held and the victory value has not been reached yet.
* ``WON``: ``state.win`` is set.

Transitions are driven exclusively through
:func:`coin_grid.systems.interaction.apply_interaction`:

* ``PICKED_UP(v)`` moves ``EMPTY`` to ``HOLDING(v)``.
* ``MERGED(2v)`` moves ``HOLDING(v)`` to ``HOLDING(2v)``; :func:`win_system`
  flips ``win`` the first time ``2v`` equals the victory value.
* ``REJECTED`` only replaces ``message``.

``WON`` is sticky but does not block further moves or interactions.
"""

from dataclasses import replace
from typing import Tuple

from coin_grid.components import CellId
from coin_grid.outcomes import Outcome
from coin_grid.state import State, with_message
from coin_grid.systems.interaction import apply_interaction
from coin_grid.types import CoinPhase, OutcomeKind

PICKUP_MESSAGE = "You picked up the coin!"
UPGRADE_MESSAGE = "You matched your coin value and upgraded!"


def win_message(value: int) -> str:
    return f"You win! Coin of value {value} reached!"


def coin_phase(state: State) -> CoinPhase:
    """Current phase of the held-coin state machine."""
    if state.win:
        return CoinPhase.WON
    if state.player.held_coin is None:
        return CoinPhase.EMPTY
    return CoinPhase.HOLDING


def win_system(state: State) -> State:
    """Set ``win`` once the held coin reaches the victory value.

    Idempotent: an already-won state is returned unchanged, so the victory is
    reported exactly once, at the transition.
    """
    if state.win:
        return state
    if state.player.held_coin == state.config.victory_value:
        return replace(state, win=True, message=win_message(state.config.victory_value))
    return state


def interaction_system(state: State, cell: CellId) -> Tuple[State, Outcome]:
    """Interact with ``cell`` using the coin in the player's hand.

    Args:
        state (State): Current state.
        cell (CellId): Cache the player interacts with.

    Returns:
        Tuple[State, Outcome]: Updated state (overlay, hand, win flag, message)
        and the outcome reported by the overlay rule.
    """
    next_state, outcome = apply_interaction(state, cell, state.player.held_coin)
    if outcome.kind == OutcomeKind.REJECTED:
        return with_message(state, outcome.reason), outcome

    player = replace(next_state.player, held_coin=outcome.value)
    message = PICKUP_MESSAGE if outcome.kind == OutcomeKind.PICKED_UP else UPGRADE_MESSAGE
    next_state = replace(next_state, player=player, message=message)
    return win_system(next_state), outcome
