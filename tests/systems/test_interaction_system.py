from coin_grid.components import CellRecord
from coin_grid.config import WorldConfig
from coin_grid.luck import default_value
from coin_grid.state import get_record, get_value
from coin_grid.systems.interaction import (
    EMPTY_CACHE_MESSAGE,
    MISMATCH_MESSAGE,
    apply_interaction,
)
from coin_grid.types import OutcomeKind
from tests.test_utils import find_cache, make_state

CONFIG = WorldConfig()


def test_pickup_with_empty_hand() -> None:
    cell = find_cache(CONFIG, value=8)
    state = make_state(held_coin=None)
    new_state, outcome = apply_interaction(state, cell, None)
    assert outcome.kind == OutcomeKind.PICKED_UP
    assert outcome.value == 8
    assert new_state.overlay[cell] == CellRecord(value=0, picked_up=True)
    assert get_value(new_state, cell) == 0
    # the input state is untouched
    assert cell not in state.overlay
    assert get_value(state, cell) == 8


def test_merge_with_matching_coin() -> None:
    cell = find_cache(CONFIG, value=4)
    state = make_state(held_coin=4)
    new_state, outcome = apply_interaction(state, cell, 4)
    assert outcome.kind == OutcomeKind.MERGED
    assert outcome.value == 8
    assert get_value(new_state, cell) == 0


def test_mismatch_is_rejected_without_change() -> None:
    cell = find_cache(CONFIG, value=8)
    state = make_state(held_coin=4)
    new_state, outcome = apply_interaction(state, cell, 4)
    assert outcome.kind == OutcomeKind.REJECTED
    assert outcome.reason == MISMATCH_MESSAGE
    assert new_state is state
    assert get_value(new_state, cell) == 8


def test_emptied_cache_rejects_held_coins() -> None:
    cell = find_cache(CONFIG, value=2)
    state, _ = apply_interaction(make_state(held_coin=None), cell, None)
    for held in (2, 0):
        again, outcome = apply_interaction(state, cell, held)
        assert outcome.kind == OutcomeKind.REJECTED
        assert outcome.reason == EMPTY_CACHE_MESSAGE
        assert again is state


def test_empty_hand_picks_up_emptied_cache() -> None:
    cell = find_cache(CONFIG, value=2)
    state = make_state(held_coin=None, overlay={cell: CellRecord(value=0, picked_up=True)})
    new_state, outcome = apply_interaction(state, cell, None)
    assert outcome.kind == OutcomeKind.PICKED_UP
    assert outcome.value == 0
    assert get_value(new_state, cell) == 0
    assert new_state.overlay[cell] == CellRecord(value=0, picked_up=True)


def test_picked_cell_reads_zero_forever() -> None:
    cell = find_cache(CONFIG, value=16)
    state, _ = apply_interaction(make_state(held_coin=None), cell, None)
    for _ in range(3):
        assert get_value(state, cell) == 0
    assert get_record(state, cell).picked_up is True
    # the generator still reports the original default
    assert default_value(cell, CONFIG) == 16


def test_only_touched_cells_enter_overlay() -> None:
    first = find_cache(CONFIG, value=1)
    second = find_cache(CONFIG, value=2)
    state = make_state(held_coin=1)
    state, _ = apply_interaction(state, first, 1)
    state, _ = apply_interaction(state, second, 2)
    assert set(state.overlay.keys()) == {first, second}
