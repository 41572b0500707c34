"""Shared models for classification and reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class Action(str, Enum):
    """Outcome of comparing a folder's file count to the limit."""

    ENABLE = "enable"
    DISABLE = "disable"


class MessageLevel(str, Enum):
    """Severity for presented messages."""

    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Folder:
    """A workspace folder registered with the host as an analysis scope."""

    uri: str
    name: str
    root: Path

    @classmethod
    def from_path(cls, path: Path, name: Optional[str] = None) -> "Folder":
        resolved = Path(path).resolve()
        return cls(uri=resolved.as_uri(), name=name or resolved.name, root=resolved)

    @property
    def key(self) -> str:
        return self.uri

    @property
    def settings_path(self) -> Path:
        return self.root / ".vscode" / "settings.json"


@dataclass(slots=True)
class ClassificationResult:
    """Derived decision for one folder; never persisted."""

    folder: Folder
    file_count: int
    limit: int
    action: Action
    desired_include: Optional[List[str]]
    desired_exclude: List[str]

    @property
    def enabled(self) -> bool:
        return self.action == Action.ENABLE


@dataclass(slots=True)
class ReconcileOutcome:
    """Which settings a reconciliation pass wrote."""

    written: List[str] = field(default_factory=list)
    snapshot_captured: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.written)


@dataclass(slots=True)
class Diagnostic:
    """Problem-marker style entry attached to a folder's settings file."""

    message: str
    level: MessageLevel
    source: str = "Pylance Workspace Folder Scope"


__all__ = [
    "Action",
    "MessageLevel",
    "Folder",
    "ClassificationResult",
    "ReconcileOutcome",
    "Diagnostic",
]
