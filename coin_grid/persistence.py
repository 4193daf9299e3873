"""Snapshot persistence.

The only durable entity is the :class:`Snapshot`: the player plus the overlay
of touched cells. It is written as one JSON document under a single key of a
string-keyed :class:`Storage`::

    {
        "player": {"position": {"i": 369979, "j": -1220571}, "heldCoin": 1},
        "overlay": [["369980,-1220570", {"pickedUp": true, "value": 0}]]
    }

Overlay entries are sorted by cell so the same state always encodes to the
same text. Loading never raises: malformed text is logged and reported as
``None`` so the caller can start a fresh game.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from pyrsistent import PMap, pmap

from coin_grid.components import CellId, CellRecord, PlayerState
from coin_grid.config import DEFAULT_STORAGE_KEY
from coin_grid.errors import SnapshotError
from coin_grid.state import State

logger = logging.getLogger(__name__)

OverlayEntries = Tuple[Tuple[CellId, CellRecord], ...]


class Storage(Protocol):
    """String-keyed, string-valued durable store."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage, handy for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage:
    """All keys kept in one JSON object file, replaced atomically on write.

    A missing or unreadable file behaves like an empty store.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.warning("Could not read storage file %s: %s", self.path, exc)
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Storage file %s is not valid JSON: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold an object", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path: Optional[Path] = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self.path.parent,
                delete=False,
                suffix=".tmp",
            ) as temp_file:
                json.dump(data, temp_file, sort_keys=True)
                temp_file.flush()
                os.fsync(temp_file.fileno())
                temp_path = Path(temp_file.name)
            os.replace(temp_path, self.path)
        except Exception:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


@dataclass(frozen=True)
class Snapshot:
    """Durable part of the game: player plus ordered overlay entries."""

    player: PlayerState
    overlay: OverlayEntries = ()

    @property
    def overlay_map(self) -> PMap[CellId, CellRecord]:
        return pmap(dict(self.overlay))


def make_snapshot(
    player: PlayerState, overlay: PMap[CellId, CellRecord] | Iterable[Tuple[CellId, CellRecord]]
) -> Snapshot:
    """Build a snapshot with overlay entries in sorted cell order."""
    items = overlay.items() if isinstance(overlay, PMap) else overlay
    return Snapshot(player=player, overlay=tuple(sorted(items, key=lambda item: item[0])))


def snapshot_of(state: State) -> Snapshot:
    return make_snapshot(state.player, state.overlay)


# --- Encoding ---


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    position = snapshot.player.position
    return {
        "player": {
            "position": {"i": position.i, "j": position.j},
            "heldCoin": snapshot.player.held_coin,
        },
        "overlay": [
            [cell.key(), {"pickedUp": record.picked_up, "value": record.value}]
            for cell, record in snapshot.overlay
        ],
    }


def encode_snapshot(snapshot: Snapshot) -> str:
    return json.dumps(snapshot_to_dict(snapshot), separators=(",", ":"))


# --- Decoding ---


def _require_int(value: Any, *, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"{field_name} must be an integer")
    return value


def _parse_cell_key(key: Any) -> CellId:
    if not isinstance(key, str):
        raise SnapshotError("overlay key must be a string")
    parts = key.split(",")
    if len(parts) != 2:
        raise SnapshotError(f"overlay key {key!r} must look like 'i,j'")
    try:
        return CellId(int(parts[0]), int(parts[1]))
    except ValueError as exc:
        raise SnapshotError(f"overlay key {key!r} must hold two integers") from exc


def _parse_record(value: Any) -> CellRecord:
    if not isinstance(value, dict):
        raise SnapshotError("overlay record must be an object")
    picked_up = value.get("pickedUp")
    if not isinstance(picked_up, bool):
        raise SnapshotError("overlay record pickedUp must be a boolean")
    coin_value = _require_int(value.get("value", 0), field_name="overlay record value")
    if coin_value < 0:
        raise SnapshotError("overlay record value must be >= 0")
    return CellRecord(value=coin_value, picked_up=picked_up)


def _parse_player(value: Any) -> PlayerState:
    if not isinstance(value, dict):
        raise SnapshotError("player must be an object")
    position = value.get("position")
    if not isinstance(position, dict):
        raise SnapshotError("player.position must be an object")
    cell = CellId(
        _require_int(position.get("i"), field_name="player.position.i"),
        _require_int(position.get("j"), field_name="player.position.j"),
    )
    if "heldCoin" not in value:
        raise SnapshotError("player.heldCoin is missing")
    held_coin = value["heldCoin"]
    if held_coin is not None:
        held_coin = _require_int(held_coin, field_name="player.heldCoin")
        if held_coin < 0:
            raise SnapshotError("player.heldCoin must be >= 0 or null")
    return PlayerState(position=cell, held_coin=held_coin)


def snapshot_from_dict(payload: Any) -> Snapshot:
    if not isinstance(payload, dict):
        raise SnapshotError("snapshot must be an object")
    player = _parse_player(payload.get("player"))
    raw_overlay = payload.get("overlay")
    if not isinstance(raw_overlay, list):
        raise SnapshotError("overlay must be a list")
    entries: List[Tuple[CellId, CellRecord]] = []
    seen: set[CellId] = set()
    for entry in raw_overlay:
        if not isinstance(entry, list) or len(entry) != 2:
            raise SnapshotError("overlay entries must be [key, record] pairs")
        cell = _parse_cell_key(entry[0])
        if cell in seen:
            raise SnapshotError(f"overlay key {entry[0]!r} appears twice")
        seen.add(cell)
        entries.append((cell, _parse_record(entry[1])))
    return make_snapshot(player, entries)


def decode_snapshot(text: str) -> Snapshot:
    """Parse snapshot text.

    Raises:
        SnapshotError: If ``text`` is not JSON or does not match the schema.
    """
    try:
        payload = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise SnapshotError(f"snapshot is not valid JSON: {exc}") from exc
    return snapshot_from_dict(payload)


class PersistenceCodec:
    """Reads and writes the snapshot under one key of a :class:`Storage`."""

    storage: Storage
    key: str

    def __init__(self, storage: Storage, key: str = DEFAULT_STORAGE_KEY):
        self.storage = storage
        self.key = key

    def save(
        self,
        player: PlayerState,
        overlay: PMap[CellId, CellRecord] | Iterable[Tuple[CellId, CellRecord]],
    ) -> Snapshot:
        """Overwrite the stored snapshot; returns what was written."""
        snapshot = make_snapshot(player, overlay)
        self.storage.set(self.key, encode_snapshot(snapshot))
        return snapshot

    def load(self) -> Optional[Snapshot]:
        """Stored snapshot, or ``None`` when absent or unreadable."""
        text = self.storage.get(self.key)
        if text is None:
            return None
        try:
            return decode_snapshot(text)
        except SnapshotError as exc:
            logger.warning("Discarding stored snapshot %r: %s", self.key, exc)
            return None

    def reset(self) -> None:
        """Forget the stored snapshot."""
        self.storage.delete(self.key)
