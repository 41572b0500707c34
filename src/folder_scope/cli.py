"""Typer-based CLI for folder scope."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .classifier import classify_folder
from .config import ConfigError, NotificationMode, ScopeConfig, config_from_settings, load_config, save_config
from .controller import ScopeController, Workspace
from .models import Folder
from .notifier import Notifier, ProblemsPresenter, StatusBarPresenter, ToastPresenter
from .settings import (
    EXCLUDE_KEY,
    INCLUDE_KEY,
    TYPE_CHECKING_KEY,
    JsonFolderSettings,
    MemoryFolderSettings,
    parse_jsonc,
)
from .snapshots import SnapshotStore
from .watcher import watch_workspace

app = typer.Typer(help="Scope Pylance analysis per workspace folder based on its Python file count.")
console = Console()

DEFAULT_STATE = Path.home() / ".folder-scope" / "state.json"

ConfigOption = typer.Option(None, "--config", help="Path to configuration YAML")
SettingsOption = typer.Option(
    None, "--settings", help="Editor settings.json holding pylanceWorkspaceFolderScope.* options"
)
StateOption = typer.Option(DEFAULT_STATE, "--state", help="File holding snapshots of previous settings")
LogLevelOption = typer.Option("INFO", "--log-level", help="Logging level")


def _configure_logging(level: str, log_file: Path | None = None) -> None:
    logger.remove()
    logger.add(console.print, level=level)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level)


def _config_provider(config: Optional[Path], settings: Optional[Path]) -> Callable[[], ScopeConfig]:
    if config is not None and settings is not None:
        raise ConfigError("Use either --config or --settings, not both")

    if config is not None:
        return lambda: load_config(config)

    if settings is not None:

        def _from_settings() -> ScopeConfig:
            try:
                data = parse_jsonc(settings.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise ConfigError(f"Failed to read editor settings {settings}: {exc}") from exc
            return config_from_settings(data if isinstance(data, dict) else {})

        return _from_settings

    return ScopeConfig


def _load(config: Optional[Path], settings: Optional[Path]) -> Callable[[], ScopeConfig]:
    try:
        provider = _config_provider(config, settings)
        provider()
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=4)
    return provider


def _workspace(folders: List[Path]) -> Workspace:
    return Workspace(Folder.from_path(path) for path in folders)


@app.command()
def count(
    folder: Path = typer.Argument(..., exists=True, file_okay=False, dir_okay=True, readable=True),
    config: Optional[Path] = ConfigOption,
    settings: Optional[Path] = SettingsOption,
) -> None:
    """Count Python files in FOLDER and show the resulting decision."""

    provider = _load(config, settings)
    result = classify_folder(Folder.from_path(folder), provider())
    console.print(f"{result.file_count} Python files (limit {result.limit}): [bold]{result.action.value}[/bold]")
    console.print(f"include: {result.desired_include if result.desired_include is not None else '<unset>'}")
    console.print(f"exclude: {result.desired_exclude}")


@app.command()
def apply(
    folders: List[Path] = typer.Argument(..., exists=True, file_okay=False, dir_okay=True, readable=True),
    config: Optional[Path] = ConfigOption,
    settings: Optional[Path] = SettingsOption,
    state: Path = StateOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the changes without writing anything"),
    log_level: str = LogLevelOption,
) -> None:
    """Classify each FOLDER once and update its folder settings."""

    _configure_logging(log_level.upper())
    provider = _load(config, settings)
    workspace = _workspace(folders)

    dry_stores: Dict[str, MemoryFolderSettings] = {}

    def _dry_settings(folder: Folder) -> MemoryFolderSettings:
        if folder.key not in dry_stores:
            source = JsonFolderSettings.for_folder(folder)
            current = {key: source.get(key) for key in (INCLUDE_KEY, EXCLUDE_KEY, TYPE_CHECKING_KEY)}
            dry_stores[folder.key] = MemoryFolderSettings(
                {key: value for key, value in current.items() if value is not None}
            )
        return dry_stores[folder.key]

    statusbar = StatusBarPresenter()
    problems = ProblemsPresenter()
    controller = ScopeController(
        workspace,
        provider,
        snapshots=SnapshotStore(None if dry_run else state),
        notifier=Notifier(toast=ToastPresenter(console), statusbar=statusbar, problems=problems),
        settings_for=_dry_settings if dry_run else JsonFolderSettings.for_folder,
    )

    table = Table(title="Folder scope" + (" (dry run)" if dry_run else ""))
    table.add_column("Folder")
    table.add_column("Python files", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Action")
    table.add_column("Written")

    failures = 0
    for folder in workspace.folders:
        writes_before = len(dry_stores[folder.key].writes) if folder.key in dry_stores else 0
        result = controller.apply_folder(folder)
        if result is None:
            failures += 1
            table.add_row(folder.name, "-", "-", "[red]failed[/red]", "")
            continue
        written = ""
        if dry_run:
            store = dry_stores[folder.key]
            written = ", ".join(key for key, _ in store.writes[writes_before:])
        table.add_row(folder.name, str(result.file_count), str(result.limit), result.action.value, written)

    console.print(table)
    mode = provider().notification_mode
    if mode == NotificationMode.STATUSBAR:
        statusbar.render(console)
    elif mode == NotificationMode.PROBLEMS and problems.diagnostics:
        console.print(problems.render())
    if failures:
        raise typer.Exit(code=3)


@app.command()
def restore(
    folders: List[Path] = typer.Argument(..., exists=True, file_okay=False, dir_okay=True, readable=True),
    state: Path = StateOption,
    log_level: str = LogLevelOption,
) -> None:
    """Write back the settings each FOLDER had before it was first changed."""

    _configure_logging(log_level.upper())
    if not state.exists():
        console.print("[yellow]No snapshot state found; nothing to restore.[/yellow]")
        return

    snapshots = SnapshotStore(state)
    workspace = _workspace(folders)
    expected = [folder for folder in workspace.folders if folder.key in snapshots]
    restored = ScopeController(workspace, ScopeConfig, snapshots=snapshots).teardown()
    console.print(f"[green]Restored {len(restored)} folder(s).[/green]")
    if len(restored) < len(expected):
        console.print(f"[red]Failed to restore {len(expected) - len(restored)} folder(s); see log.[/red]")
        raise typer.Exit(code=3)


@app.command()
def watch(
    folders: List[Path] = typer.Argument(..., exists=True, file_okay=False, dir_okay=True, readable=True),
    config: Optional[Path] = ConfigOption,
    settings: Optional[Path] = SettingsOption,
    state: Path = StateOption,
    log_level: str = LogLevelOption,
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
) -> None:
    """Keep FOLDERS scoped while running; restore them on exit."""

    _configure_logging(log_level.upper(), log_file)
    provider = _load(config, settings)
    controller = ScopeController(
        _workspace(folders),
        provider,
        snapshots=SnapshotStore(state),
        notifier=Notifier(
            toast=ToastPresenter(console),
            statusbar=StatusBarPresenter(console),
            problems=ProblemsPresenter(console),
        ),
    )
    watch_workspace(controller, config or settings)
    console.print("[green]Previous settings restored.[/green]")


@app.command("init-config")
def init_config(path: Path = typer.Argument(..., writable=True, resolve_path=True)) -> None:
    """Write an example configuration file to PATH."""

    save_config(ScopeConfig(), path)
    console.print(f"[green]Wrote configuration to {path}[/green]")


if __name__ == "__main__":
    app()
