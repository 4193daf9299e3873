# tests/unit/test_moves.py

from typing import Optional, Tuple

import pytest

from coin_grid.actions import ACTION_DELTAS, MOVE_ACTIONS, Action, GymAction
from coin_grid.components import CellId
from coin_grid.config import WorldConfig
from coin_grid.errors import AddressingError
from coin_grid.moves import (
    MOVEMENT_REGISTRY,
    AbsoluteMovement,
    MoveBy,
    MoveCommand,
    MovementStrategy,
    MoveTo,
    StepMovement,
    action_to_command,
)

CONFIG = WorldConfig()
START = CellId(10, -10)


@pytest.mark.parametrize(
    "strategy, command, expected",
    [
        # StepMovement follows relative steps
        (StepMovement(), MoveBy(1, 0), (11, -10)),
        (StepMovement(), MoveBy(-1, 0), (9, -10)),
        (StepMovement(), MoveBy(0, -1), (10, -11)),
        (StepMovement(), MoveBy(0, 1), (10, -9)),
        (StepMovement(), MoveBy(-500, 700), (-490, 690)),
        # ... and ignores absolute fixes
        (StepMovement(), MoveTo(0.00005, 0.00005), None),
        # AbsoluteMovement follows fixes, including negative coordinates
        (AbsoluteMovement(), MoveTo(0.00005, 0.00005), (0, 0)),
        (AbsoluteMovement(), MoveTo(-0.00005, 0.00015), (-1, 1)),
        # ... and ignores relative steps
        (AbsoluteMovement(), MoveBy(1, 0), None),
    ],
)
def test_strategy_resolution(
    strategy: MovementStrategy,
    command: MoveCommand,
    expected: Optional[Tuple[int, int]],
) -> None:
    destination = strategy.resolve(START, command, CONFIG)
    if expected is None:
        assert destination is None
    else:
        assert destination == CellId(*expected)


def test_absolute_movement_rejects_non_finite() -> None:
    with pytest.raises(AddressingError):
        AbsoluteMovement().resolve(START, MoveTo(float("nan"), 0.0), CONFIG)


@pytest.mark.parametrize(
    "action, expected",
    [
        (Action.UP, MoveBy(1, 0)),
        (Action.DOWN, MoveBy(-1, 0)),
        (Action.LEFT, MoveBy(0, -1)),
        (Action.RIGHT, MoveBy(0, 1)),
    ],
)
def test_action_to_command(action: Action, expected: MoveBy) -> None:
    assert action_to_command(action) == expected


def test_interact_is_not_a_move() -> None:
    with pytest.raises(ValueError):
        action_to_command(Action.INTERACT)


def test_action_tables_agree() -> None:
    assert set(ACTION_DELTAS) == set(MOVE_ACTIONS)
    assert [a.name for a in Action] == [g.name for g in GymAction]


def test_registry_holds_both_strategies() -> None:
    assert isinstance(MOVEMENT_REGISTRY["step"], StepMovement)
    assert isinstance(MOVEMENT_REGISTRY["absolute"], AbsoluteMovement)
    assert len(MOVEMENT_REGISTRY) == 2
