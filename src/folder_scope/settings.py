"""Folder-scoped analyser settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import json5
from loguru import logger

from .models import Folder


INCLUDE_KEY = "python.analysis.include"
EXCLUDE_KEY = "python.analysis.exclude"
TYPE_CHECKING_KEY = "python.analysis.typeCheckingMode"


class SettingsError(Exception):
    """Raised when folder settings cannot be read or written."""


class FolderSettings(Protocol):
    """Read/write access to one folder's settings.

    ``get`` returns ``None`` for an unset key and ``update`` with ``None``
    removes the key, so unset and empty lists stay distinguishable.
    """

    def get(self, key: str) -> Any:
        ...

    def update(self, key: str, value: Any) -> None:
        ...


def parse_jsonc(text: str) -> Any:
    """Parse JSON allowing the comments and trailing commas editors accept."""

    if not text.strip():
        return {}
    return json5.loads(text)


class JsonFolderSettings:
    """Settings stored in ``<folder>/.vscode/settings.json``.

    Comments in an existing file are not preserved once it is rewritten.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def for_folder(cls, folder: Folder) -> "JsonFolderSettings":
        return cls(folder.settings_path)

    def _load(self) -> Dict[str, Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise SettingsError(f"Failed to read {self.path}: {exc}") from exc
        try:
            data = parse_jsonc(text)
        except ValueError as exc:
            raise SettingsError(f"Malformed settings file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self.path} does not contain an object")
        return data

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def update(self, key: str, value: Any) -> None:
        data = self._load()
        if value is None:
            if key not in data:
                return
            del data[key]
        else:
            data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Failed to write {self.path}: {exc}") from exc
        logger.debug("Updated {} in {}", key, self.path)


class MemoryFolderSettings:
    """Dictionary-backed settings, used for dry runs."""

    def __init__(self, values: Optional[Dict[str, Any]] = None) -> None:
        self.values: Dict[str, Any] = dict(values or {})
        self.writes: list[tuple[str, Any]] = []

    def get(self, key: str) -> Any:
        value = self.values.get(key)
        return list(value) if isinstance(value, list) else value

    def update(self, key: str, value: Any) -> None:
        self.writes.append((key, value))
        if value is None:
            self.values.pop(key, None)
        else:
            self.values[key] = list(value) if isinstance(value, list) else value


__all__ = [
    "INCLUDE_KEY",
    "EXCLUDE_KEY",
    "TYPE_CHECKING_KEY",
    "SettingsError",
    "FolderSettings",
    "JsonFolderSettings",
    "MemoryFolderSettings",
    "parse_jsonc",
]
