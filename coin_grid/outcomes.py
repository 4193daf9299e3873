"""Interaction outcome value objects."""

from dataclasses import dataclass
from typing import Optional

from coin_grid.types import OutcomeKind


@dataclass(frozen=True)
class Outcome:
    """Result of one interaction with a cache.

    Attributes:
        kind: Picked up, merged or rejected.
        value: Coin value now held (``PICKED_UP`` / ``MERGED``), ``None`` when rejected.
        reason: Human readable rejection reason.
    """

    kind: OutcomeKind
    value: Optional[int] = None
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.kind != OutcomeKind.REJECTED


def picked_up(value: int) -> Outcome:
    return Outcome(OutcomeKind.PICKED_UP, value=value)


def merged(value: int) -> Outcome:
    return Outcome(OutcomeKind.MERGED, value=value)


def rejected(reason: str) -> Outcome:
    return Outcome(OutcomeKind.REJECTED, reason=reason)
