"""Game engine facade.

:class:`CoinGame` is the single logical actor that owns the current
:class:`coin_grid.state.State`. Every input (a directional step, a sensor fix,
an interaction) is handled as one discrete event: the next ``State`` is
computed in full by pure systems, then swapped in, the visibility window is
refreshed and the snapshot is persisted. No event is ever applied partially.

Typical use::

    game = CoinGame(codec=PersistenceCodec(FileStorage("save.json")))
    game.move_by(1, 0)
    for view in game.views:
        if view.interactive and view.value:
            game.interact(view.cell)

Sensor fixes may arrive on another thread. They are only queued by the
sensor callback and applied by :meth:`CoinGame.pump`, one fix per event, on
the caller's thread.
"""

import logging
import queue
from dataclasses import replace
from typing import List, Optional, Tuple, Union

from coin_grid.actions import Action
from coin_grid.components import CellId
from coin_grid.config import WorldConfig
from coin_grid.errors import AddressingError, SensorUnavailableError
from coin_grid.luck import has_cache
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
from coin_grid.outcomes import Outcome, rejected
from coin_grid.persistence import MemoryStorage, PersistenceCodec, Snapshot, snapshot_of
from coin_grid.sensor import LocationSensor
from coin_grid.state import State, initial_state, with_message
from coin_grid.systems.coin import coin_phase, interaction_system
from coin_grid.types import CoinPhase, Interactivity
from coin_grid.visibility import CellView, VisibilityWindow, WindowListener, classify

logger = logging.getLogger(__name__)

NO_CACHE_MESSAGE = "There is no cache here."
OUT_OF_RANGE_MESSAGE = "That cache is out of reach."
NOTHING_IN_RANGE_MESSAGE = "No cache within reach."
SENSOR_UNAVAILABLE_MESSAGE = "Location is unavailable; use the arrow buttons to move."
SAVE_FAILED_MESSAGE = "Progress could not be saved."


def state_from_snapshot(snapshot: Snapshot, config: WorldConfig) -> State:
    """Rebuild a ``State`` from a stored snapshot.

    ``win`` is not stored; it is restored silently from the held coin so a
    finished game does not announce its victory again.
    """
    held = snapshot.player.held_coin
    return State(
        player=snapshot.player,
        config=config,
        overlay=snapshot.overlay_map,
        win=held is not None and held >= config.victory_value,
    )


class CoinGame:
    """Owns the world state and routes every input through one update path."""

    config: WorldConfig
    codec: PersistenceCodec
    window: VisibilityWindow
    movement: MovementStrategy
    sensor: Optional[LocationSensor]
    state: State

    def __init__(
        self,
        config: Optional[WorldConfig] = None,
        codec: Optional[PersistenceCodec] = None,
        sensor: Optional[LocationSensor] = None,
        window: Optional[VisibilityWindow] = None,
    ):
        """Create the engine, restoring the stored snapshot when there is one.

        Arguments:
            config: Game constants; defaults to :class:`WorldConfig`.
            codec: Snapshot persistence; defaults to in-memory storage.
            sensor: Optional location source for absolute movement.
            window: Visibility window; a fresh one is created by default.
        """
        self.config = config or WorldConfig()
        self.codec = codec or PersistenceCodec(MemoryStorage(), key=self.config.storage_key)
        self.sensor = sensor
        self.window = window or VisibilityWindow()
        self.movement = MOVEMENT_REGISTRY[StepMovement.name]

        self._mailbox: "queue.Queue[Tuple[int, float, float]]" = queue.Queue()
        self._sensor_generation = 0
        self._sensor_active = False
        self._sensor_reported = False

        snapshot = self.codec.load()
        if snapshot is None:
            self.state = initial_state(self.config)
        else:
            self.state = state_from_snapshot(snapshot, self.config)
        self.window.refresh(self.state)

    # --- Queries ---

    @property
    def phase(self) -> CoinPhase:
        return coin_phase(self.state)

    @property
    def held_coin(self) -> Optional[int]:
        return self.state.player.held_coin

    @property
    def position(self) -> CellId:
        return self.state.player.position

    @property
    def message(self) -> Optional[str]:
        return self.state.message

    @property
    def views(self) -> List[CellView]:
        """Renderer contract: every visible cache with value and interactivity."""
        return self.window.views

    @property
    def sensor_active(self) -> bool:
        return self._sensor_active

    def add_listener(self, listener: WindowListener) -> None:
        self.window.add_listener(listener)

    def snapshot(self) -> Snapshot:
        return snapshot_of(self.state)

    # --- Commands ---

    def interact(self, cell: CellId) -> Outcome:
        """Pick up or merge the coin at ``cell``.

        Cells without a cache or outside the interaction radius are rejected
        with a message; nothing is persisted for rejections.
        """
        if not has_cache(cell, self.config):
            return self._reject(NO_CACHE_MESSAGE)
        if classify(cell, self.state.player.position, self.config) != Interactivity.INTERACTIVE:
            return self._reject(OUT_OF_RANGE_MESSAGE)

        next_state, outcome = interaction_system(self.state, cell)
        if not outcome.accepted:
            self.state = next_state
            return outcome
        self._commit(replace(next_state, turn=next_state.turn + 1))
        return outcome

    def interact_nearest(self) -> Outcome:
        """Interact with the closest interactive cache that still holds a coin."""
        position = self.state.player.position
        candidates = [view for view in self.window.views if view.interactive and view.value > 0]
        if not candidates:
            return self._reject(NOTHING_IN_RANGE_MESSAGE)
        nearest = min(
            candidates,
            key=lambda view: (
                (view.cell.i - position.i) ** 2 + (view.cell.j - position.j) ** 2,
                view.cell,
            ),
        )
        return self.interact(nearest.cell)

    def move_by(self, di: int, dj: int) -> bool:
        """Step by ``(di, dj)`` cells; returns False if the active strategy ignores it."""
        return self._move(MoveBy(di, dj))

    def move_to_absolute(self, lat: float, lng: float) -> bool:
        """Jump to the cell containing ``(lat, lng)``; returns False if ignored."""
        return self._move(MoveTo(lat, lng))

    def step(self, action: Action) -> Optional[Outcome]:
        """Apply a UI / Gym action; returns the outcome for ``INTERACT``."""
        if action == Action.INTERACT:
            return self.interact_nearest()
        command = action_to_command(action)
        self.move_by(command.di, command.dj)
        return None

    def set_movement(self, strategy: Union[MovementStrategy, str]) -> None:
        """Switch the active movement strategy; effective for the next command."""
        if isinstance(strategy, str):
            if strategy not in MOVEMENT_REGISTRY:
                raise ValueError(f"Unknown movement strategy: {strategy}")
            strategy = MOVEMENT_REGISTRY[strategy]
        self.movement = strategy

    def reset(self) -> None:
        """Start a new game: forget the stored snapshot and every touched cell."""
        self.codec.reset()
        self.state = initial_state(self.config)
        self.window.clear()
        self.window.refresh(self.state)

    # --- Sensor ---

    def enable_sensor(self) -> bool:
        """Start the location sensor and switch to absolute movement.

        Returns:
            bool: False when the sensor is unavailable; movement then stays on
            discrete steps and the failure is reported once.
        """
        if self._sensor_active:
            return True
        self._sensor_generation += 1
        generation = self._sensor_generation

        def deliver(lat: float, lng: float) -> None:
            self._mailbox.put((generation, lat, lng))

        try:
            if self.sensor is None:
                raise SensorUnavailableError("no location sensor configured")
            self.sensor.start(deliver)
        except SensorUnavailableError as exc:
            self.set_movement(StepMovement.name)
            if not self._sensor_reported:
                self._sensor_reported = True
                logger.warning("Location sensor unavailable: %s", exc)
                self.state = with_message(self.state, SENSOR_UNAVAILABLE_MESSAGE)
            return False

        self._sensor_active = True
        self.set_movement(AbsoluteMovement.name)
        return True

    def disable_sensor(self) -> None:
        """Stop the sensor; fixes already queued or still in flight are dropped."""
        if self.sensor is not None and self._sensor_active:
            self.sensor.stop()
        self._sensor_active = False
        self._sensor_generation += 1
        self._drain_mailbox()
        self.set_movement(StepMovement.name)

    def pump(self, max_events: Optional[int] = None) -> int:
        """Apply queued sensor fixes one at a time.

        Arguments:
            max_events: Upper bound on fixes processed in this call.

        Returns:
            int: Number of fixes applied (stale ones are dropped, not counted).
        """
        applied = 0
        processed = 0
        while max_events is None or processed < max_events:
            try:
                generation, lat, lng = self._mailbox.get_nowait()
            except queue.Empty:
                break
            processed += 1
            if generation != self._sensor_generation or not self._sensor_active:
                logger.debug("Dropping stale fix (%s, %s)", lat, lng)
                continue
            if self.move_to_absolute(lat, lng):
                applied += 1
        return applied

    # --- Internals ---

    def _reject(self, reason: str) -> Outcome:
        self.state = with_message(self.state, reason)
        return rejected(reason)

    def _move(self, command: MoveCommand) -> bool:
        player = self.state.player
        try:
            destination = self.movement.resolve(player.position, command, self.config)
        except AddressingError as exc:
            logger.warning("Ignoring movement %r: %s", command, exc)
            return False
        if destination is None:
            logger.debug("%s movement ignores %r", self.movement.name, command)
            return False

        next_state = replace(
            self.state,
            player=replace(player, position=destination),
            turn=self.state.turn + 1,
            message=None,
        )
        self._commit(next_state)
        return True

    def _commit(self, next_state: State) -> None:
        self.state = next_state
        self.window.refresh(next_state)
        try:
            self.codec.save(next_state.player, next_state.overlay)
        except OSError as exc:
            logger.error("Could not persist snapshot: %s", exc)
            self.state = with_message(self.state, SAVE_FAILED_MESSAGE)

    def _drain_mailbox(self) -> None:
        while True:
            try:
                self._mailbox.get_nowait()
            except queue.Empty:
                return
