"""Configuration loading and validation for Folder Scope."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml
from pydantic import BaseModel, Field, ValidationError, validator


SETTINGS_SECTION = "pylanceWorkspaceFolderScope"

DEFAULT_EXCLUDE_DIRS = [
    ".venv",
    "venv",
    "__pycache__",
    ".git",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
    "site-packages",
]


class NotificationMode(str, Enum):
    """How classification outcomes are presented."""

    TOAST = "toast"
    STATUSBAR = "statusbar"
    PROBLEMS = "problems"
    NONE = "none"


def _coerce_string_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, str)]


class ScopeConfig(BaseModel):
    """Options read at the start of every classification pass."""

    enable: bool = True
    max_files: int = Field(default=200, description="Folders with more files than this are disabled.")
    include_dirs: List[str] = Field(default_factory=lambda: ["./"])
    include_patterns: List[str] = Field(default_factory=list)
    exclude_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS))
    notification_mode: NotificationMode = NotificationMode.TOAST
    show_enable_toast: bool = True
    show_disable_toast: bool = True
    toast_suppress_for_minutes: float = 5
    keep_strict: bool = True

    @validator("include_dirs", "include_patterns", "exclude_dirs", pre=True)
    def _coerce_lists(cls, value: Any) -> List[str]:
        return _coerce_string_list(value)

    @validator("max_files")
    def _positive_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_files must be greater than zero")
        return value

    @validator("toast_suppress_for_minutes")
    def _clamp_suppression(cls, value: float) -> float:
        return max(0.0, value)

    @property
    def include_entries(self) -> List[str]:
        """Directory and pattern entries in the order they were configured."""

        return list(self.include_dirs) + list(self.include_patterns)


class ConfigError(Exception):
    """Raised when a configuration file is invalid."""


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def config_from_settings(settings: Mapping[str, Any]) -> ScopeConfig:
    """Build a config from editor settings keyed ``pylanceWorkspaceFolderScope.<option>``.

    Unknown keys are ignored and malformed values fall back to their defaults,
    since the editor settings file is owned by the user rather than by us.
    """

    prefix = f"{SETTINGS_SECTION}."
    values: Dict[str, Any] = {}
    section = settings.get(SETTINGS_SECTION)
    if isinstance(section, Mapping):
        for key, value in section.items():
            values[_snake_case(str(key))] = value
    for key, value in settings.items():
        if isinstance(key, str) and key.startswith(prefix):
            values[_snake_case(key[len(prefix):])] = value

    known = {key: value for key, value in values.items() if key in ScopeConfig.__fields__}
    try:
        return ScopeConfig(**known)
    except ValidationError:
        accepted: Dict[str, Any] = {}
        for key, value in known.items():
            try:
                ScopeConfig(**{key: value})
            except ValidationError:
                continue
            accepted[key] = value
        return ScopeConfig(**accepted)


def load_config(path: Path) -> ScopeConfig:
    """Load configuration from YAML file."""

    try:
        data = yaml.safe_load(path.read_text())
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration: expected a mapping in {path}")

    try:
        return ScopeConfig.parse_obj(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def save_config(config: ScopeConfig, path: Path) -> None:
    """Persist configuration to disk as YAML."""

    rendered = config.dict()
    rendered["notification_mode"] = config.notification_mode.value
    path.write_text(yaml.safe_dump(rendered, sort_keys=False))


__all__ = [
    "DEFAULT_EXCLUDE_DIRS",
    "NotificationMode",
    "ScopeConfig",
    "ConfigError",
    "config_from_settings",
    "load_config",
    "save_config",
]
