from dataclasses import replace

from coin_grid.components import CellRecord
from coin_grid.config import WorldConfig
from coin_grid.state import get_value
from coin_grid.systems.coin import (
    PICKUP_MESSAGE,
    UPGRADE_MESSAGE,
    coin_phase,
    interaction_system,
    win_message,
    win_system,
)
from coin_grid.systems.interaction import MISMATCH_MESSAGE
from coin_grid.types import CoinPhase, OutcomeKind
from tests.test_utils import find_cache, make_state

CONFIG = WorldConfig()


def test_phases() -> None:
    assert coin_phase(make_state(held_coin=None)) == CoinPhase.EMPTY
    assert coin_phase(make_state(held_coin=4)) == CoinPhase.HOLDING
    assert coin_phase(replace(make_state(held_coin=256), win=True)) == CoinPhase.WON


def test_empty_to_holding_on_pickup() -> None:
    cell = find_cache(CONFIG, value=32)
    state, outcome = interaction_system(make_state(held_coin=None), cell)
    assert outcome.kind == OutcomeKind.PICKED_UP
    assert state.player.held_coin == 32
    assert coin_phase(state) == CoinPhase.HOLDING
    assert state.message == PICKUP_MESSAGE


def test_holding_doubles_on_merge() -> None:
    cell = find_cache(CONFIG, value=1)
    state, outcome = interaction_system(make_state(held_coin=1), cell)
    assert outcome.kind == OutcomeKind.MERGED
    assert state.player.held_coin == 2
    assert state.message == UPGRADE_MESSAGE
    assert state.win is False


def test_rejection_only_sets_message() -> None:
    cell = find_cache(CONFIG, value=8)
    before = make_state(held_coin=4)
    after, outcome = interaction_system(before, cell)
    assert outcome.kind == OutcomeKind.REJECTED
    assert after.player == before.player
    assert after.overlay == before.overlay
    assert after.message == MISMATCH_MESSAGE
    assert get_value(after, cell) == 8


def test_win_on_reaching_victory_value() -> None:
    cell = find_cache(CONFIG, value=128)
    state, outcome = interaction_system(make_state(held_coin=128), cell)
    assert outcome.value == 256
    assert state.win is True
    assert coin_phase(state) == CoinPhase.WON
    assert state.message == win_message(256)


def test_win_system_is_idempotent() -> None:
    won = win_system(make_state(held_coin=256))
    assert won.win is True
    assert win_system(won) is won
    assert win_system(make_state(held_coin=128)).win is False


def test_interactions_continue_after_win() -> None:
    first = find_cache(CONFIG, value=128)
    state, _ = interaction_system(make_state(held_coin=128), first)
    second = find_cache(CONFIG, value=8, exclude=(first,))
    state, outcome = interaction_system(replace(state, message=None), second)
    assert outcome.kind == OutcomeKind.REJECTED
    assert state.win is True
    assert coin_phase(state) == CoinPhase.WON


def test_empty_hand_takes_zero_coin_from_emptied_cache() -> None:
    cell = find_cache(CONFIG, value=4)
    state = make_state(held_coin=None, overlay={cell: CellRecord(value=0, picked_up=True)})
    state, outcome = interaction_system(state, cell)
    assert outcome.kind == OutcomeKind.PICKED_UP
    assert state.player.held_coin == 0
    assert coin_phase(state) == CoinPhase.HOLDING
    assert state.message == PICKUP_MESSAGE

    # a zero coin never merges
    other = find_cache(CONFIG, value=1, exclude=(cell,))
    state, outcome = interaction_system(state, other)
    assert outcome.kind == OutcomeKind.REJECTED
    assert state.player.held_coin == 0
