"""Location sensor sources.

A sensor delivers ``(lat, lng)`` fixes at its own cadence through the callback
given to :meth:`LocationSensor.start`. Delivery may happen on another thread;
the engine only enqueues fixes from the callback and applies them later on its
own actor (see :meth:`coin_grid.game.CoinGame.pump`).
"""

import logging
import threading
from typing import Callable, List, Optional, Sequence

from coin_grid.errors import SensorUnavailableError
from coin_grid.types import LatLng

logger = logging.getLogger(__name__)

DeliverFn = Callable[[float, float], None]


class LocationSensor:
    """Base class for location sources."""

    name: str = "sensor"

    def start(self, deliver: DeliverFn) -> None:
        """Begin delivering fixes to ``deliver``.

        Raises:
            SensorUnavailableError: If no location source can be opened.
        """
        raise SensorUnavailableError(f"{self.name} is not available")

    def stop(self) -> None:
        """Stop delivering fixes; safe to call when not started."""


class UnavailableSensor(LocationSensor):
    """Stands in for a platform without any location source."""

    name = "unavailable"


class ReplaySensor(LocationSensor):
    """Replays a prerecorded track of fixes.

    With ``interval=None`` fixes are pushed manually with :meth:`emit` /
    :meth:`emit_all`. With an interval in seconds a daemon thread delivers one
    fix per tick until the track is exhausted or :meth:`stop` is called.
    """

    name = "replay"

    def __init__(self, track: Sequence[LatLng], interval: Optional[float] = None):
        self.track: List[LatLng] = list(track)
        self.interval = interval
        self._deliver: Optional[DeliverFn] = None
        self._cursor = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._deliver is not None

    def start(self, deliver: DeliverFn) -> None:
        self._deliver = deliver
        self._stop_event.clear()
        if self.interval is not None:
            self._thread = threading.Thread(
                target=self._run, args=(self.interval,), name="replay-sensor", daemon=True
            )
            self._thread.start()

    def stop(self) -> None:
        self._deliver = None
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def emit(self) -> bool:
        """Deliver the next fix; returns False when stopped or exhausted."""
        deliver = self._deliver
        if deliver is None or self._cursor >= len(self.track):
            return False
        lat, lng = self.track[self._cursor]
        self._cursor += 1
        deliver(lat, lng)
        return True

    def emit_all(self) -> int:
        """Deliver every remaining fix; returns how many were delivered."""
        count = 0
        while self.emit():
            count += 1
        return count

    def _run(self, interval: float) -> None:
        while not self._stop_event.wait(interval):
            if not self.emit():
                break
        logger.debug("Replay sensor thread finished at fix %d", self._cursor)
