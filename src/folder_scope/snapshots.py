"""Durable record of folder settings as they were before we changed them."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger


STATE_KEY = "folder-scope.prevSettings"


@dataclass(frozen=True)
class SnapshotEntry:
    """Pre-modification include/exclude values of one folder.

    ``None`` records that the key was unset. The type checking mode is only
    restored when ``tracks_type_checking`` is set.
    """

    include: Optional[List[str]]
    exclude: Optional[List[str]]
    type_checking_mode: Optional[str] = None
    tracks_type_checking: bool = False

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"include": self.include, "exclude": self.exclude}
        if self.tracks_type_checking:
            data["typeCheckingMode"] = self.type_checking_mode
        return data

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "SnapshotEntry":
        return cls(
            include=data.get("include"),
            exclude=data.get("exclude"),
            type_checking_mode=data.get("typeCheckingMode"),
            tracks_type_checking="typeCheckingMode" in data,
        )


class SnapshotStore:
    """Folder identity to :class:`SnapshotEntry` map kept in one JSON slot.

    With ``path=None`` the store lives in memory only.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        self._lock = threading.RLock()
        self._entries: Dict[str, Dict[str, Any]] = self._read()

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            state = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable snapshot state {}: {}", self.path, exc)
            return {}
        entries = state.get(STATE_KEY) if isinstance(state, dict) else None
        if not isinstance(entries, dict):
            return {}
        return {key: value for key, value in entries.items() if isinstance(value, dict)}

    def _write(self) -> None:
        if self.path is None:
            return
        state: Dict[str, Any] = {}
        if self.path.exists():
            try:
                loaded = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError):
                loaded = None
            if isinstance(loaded, dict):
                state = loaded
        state[STATE_KEY] = self._entries
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")

    def get(self, key: str) -> Optional[SnapshotEntry]:
        with self._lock:
            data = self._entries.get(key)
            return SnapshotEntry.from_json(data) if data is not None else None

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def capture(self, key: str, entry: SnapshotEntry) -> bool:
        """Record ``entry`` for ``key`` unless one already exists.

        Returns ``True`` when the entry was recorded and persisted.
        """

        with self._lock:
            if key in self._entries:
                return False
            self._entries[key] = entry.to_json()
            try:
                self._write()
            except OSError:
                del self._entries[key]
                raise
            logger.debug("Captured settings snapshot for {}", key)
            return True

    def track_type_checking(self, key: str, mode: Optional[str]) -> bool:
        """Add ``mode`` to an existing entry that does not track it yet.

        Returns ``True`` when the entry was updated and persisted.
        """

        with self._lock:
            data = self._entries.get(key)
            if data is None or "typeCheckingMode" in data:
                return False
            data["typeCheckingMode"] = mode
            try:
                self._write()
            except OSError:
                del data["typeCheckingMode"]
                raise
            logger.debug("Tracking type checking mode for {}", key)
            return True

    def discard(self, key: str) -> None:
        with self._lock:
            data = self._entries.pop(key, None)
            if data is None:
                return
            try:
                self._write()
            except OSError:
                self._entries[key] = data
                raise


__all__ = ["STATE_KEY", "SnapshotEntry", "SnapshotStore"]
