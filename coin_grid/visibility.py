"""Visibility window.

Decides which caches around the player are shown and which of those accept
interaction, and keeps the set of live render objects in sync with it.

The window is memoryless: the visible set is recomputed from scratch on every
refresh by scanning the axis-aligned neighborhood of the player, and views
that drop out of it are released. Only :class:`coin_grid.state.State` carries
anything across refreshes.

Listeners implement the renderer side of the contract::

    class Printer(WindowListener):
        def on_spawn(self, view):
            print("new cache", view.cell, view.value)

    window = VisibilityWindow()
    window.add_listener(Printer())
    window.refresh(state)
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pyrsistent import PSet, pset

from coin_grid.addressing import distance_meters, to_center
from coin_grid.components import CellId
from coin_grid.config import WorldConfig
from coin_grid.luck import has_cache
from coin_grid.state import State, get_value
from coin_grid.types import Interactivity, LatLng


def compute_visible(center: CellId, radius: int, config: WorldConfig) -> PSet[CellId]:
    """Caches within Chebyshev ``radius`` of ``center``."""
    visible: List[CellId] = []
    for di in range(-radius, radius + 1):
        for dj in range(-radius, radius + 1):
            cell = CellId(center.i + di, center.j + dj)
            if has_cache(cell, config):
                visible.append(cell)
    return pset(visible)


def classify(cell: CellId, player_position: CellId, config: WorldConfig) -> Interactivity:
    """``INTERACTIVE`` when the cell center is within the player's reach."""
    distance = distance_meters(
        to_center(player_position, config.cell_degrees),
        to_center(cell, config.cell_degrees),
    )
    if distance <= config.player_range_meters:
        return Interactivity.INTERACTIVE
    return Interactivity.READ_ONLY


@dataclass(frozen=True)
class CellView:
    """What a renderer needs to draw one cache.

    Attributes:
        cell: Grid address.
        center: ``(lat, lng)`` of the cell midpoint.
        value: Current coin value (0 once emptied).
        interactive: Whether the renderer may offer interaction.
    """

    cell: CellId
    center: LatLng
    value: int
    interactive: bool


def cell_view(state: State, cell: CellId) -> CellView:
    """Build the render view of ``cell`` for the current player position."""
    config = state.config
    return CellView(
        cell=cell,
        center=to_center(cell, config.cell_degrees),
        value=get_value(state, cell),
        interactive=classify(cell, state.player.position, config)
        == Interactivity.INTERACTIVE,
    )


def visible_views(state: State, radius: Optional[int] = None) -> List[CellView]:
    """Views of every visible cache, sorted by cell."""
    if radius is None:
        radius = state.config.neighborhood_size
    cells = compute_visible(state.player.position, radius, state.config)
    return [cell_view(state, cell) for cell in sorted(cells)]


@dataclass(frozen=True)
class WindowDiff:
    """Changes produced by one :meth:`VisibilityWindow.refresh`."""

    spawned: Tuple[CellView, ...] = ()
    updated: Tuple[CellView, ...] = ()
    released: Tuple[CellId, ...] = ()


class WindowListener:
    """Renderer hooks; every method is optional."""

    def on_spawn(self, view: CellView) -> None:
        """A cache entered the window; create its render object."""

    def on_update(self, view: CellView) -> None:
        """Value or interactivity of a live cache changed."""

    def on_release(self, cell: CellId) -> None:
        """A cache left the window; tear its render object down."""


class VisibilityWindow:
    """Live set of render views around the player.

    Owns no persistent data; dropping the instance loses nothing.
    """

    radius: Optional[int]

    def __init__(self, radius: Optional[int] = None):
        self.radius = radius
        self._views: Dict[CellId, CellView] = {}
        self._listeners: List[WindowListener] = []

    def add_listener(self, listener: WindowListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: WindowListener) -> None:
        self._listeners.remove(listener)

    @property
    def views(self) -> List[CellView]:
        """Currently materialized views, sorted by cell."""
        return [self._views[cell] for cell in sorted(self._views)]

    def get(self, cell: CellId) -> Optional[CellView]:
        return self._views.get(cell)

    def __contains__(self, cell: object) -> bool:
        return cell in self._views

    def __len__(self) -> int:
        return len(self._views)

    def refresh(self, state: State) -> WindowDiff:
        """Recompute the window for ``state`` and notify listeners.

        Args:
            state (State): State whose player position centers the window.

        Returns:
            WindowDiff: Views created, views whose contents changed, and cells
            released since the previous refresh.
        """
        radius = self.radius if self.radius is not None else state.config.neighborhood_size
        visible = compute_visible(state.player.position, radius, state.config)

        released = tuple(sorted(cell for cell in self._views if cell not in visible))
        for cell in released:
            del self._views[cell]

        spawned: List[CellView] = []
        updated: List[CellView] = []
        for cell in sorted(visible):
            view = cell_view(state, cell)
            previous = self._views.get(cell)
            if previous is None:
                spawned.append(view)
            elif previous != view:
                updated.append(view)
            self._views[cell] = view

        diff = WindowDiff(spawned=tuple(spawned), updated=tuple(updated), released=released)
        self._notify(diff)
        return diff

    def clear(self) -> WindowDiff:
        """Release every live view."""
        released = tuple(sorted(self._views))
        self._views.clear()
        diff = WindowDiff(released=released)
        self._notify(diff)
        return diff

    def _notify(self, diff: WindowDiff) -> None:
        for listener in self._listeners:
            for cell in diff.released:
                listener.on_release(cell)
            for view in diff.spawned:
                listener.on_spawn(view)
            for view in diff.updated:
                listener.on_update(view)
