"""Feed filesystem events to a :class:`ScopeController`.

Stands in for the editor's event stream when running from the command line:
touching a ``.py`` file acts like making it the active document, and editing
the configuration file acts like a settings change.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .controller import ScopeController
from .counter import PY_EXTENSION


def _event_path(raw: object) -> Path:
    return Path(raw.decode() if isinstance(raw, bytes) else str(raw))


class WorkspaceEventHandler(FileSystemEventHandler):
    """Translate watchdog events into controller calls."""

    def __init__(self, controller: ScopeController, config_path: Optional[Path] = None) -> None:
        super().__init__()
        self._controller = controller
        self._config_path = config_path.resolve() if config_path else None

    def _handle(self, path: Path) -> None:
        if self._config_path is not None and path.resolve() == self._config_path:
            logger.info("Configuration changed: {}", path)
            self._controller.configuration_changed()
        elif path.name.endswith(PY_EXTENSION):
            self._controller.active_file_changed(path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(_event_path(event.src_path))

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(_event_path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._handle(_event_path(event.dest_path))


def watch_workspace(
    controller: ScopeController,
    config_path: Optional[Path] = None,
    poll_interval: float = 1.0,
) -> None:
    """Run until interrupted, then restore every folder the controller touched."""

    handler = WorkspaceEventHandler(controller, config_path)
    observer = Observer()
    for folder in controller.workspace.folders:
        observer.schedule(handler, str(folder.root), recursive=True)
    if config_path is not None:
        observer.schedule(handler, str(config_path.resolve().parent), recursive=False)

    controller.start()
    observer.start()
    logger.info("Watching {} folder(s)", len(controller.workspace.folders))
    try:
        while observer.is_alive():
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        logger.info("Stopping watcher")
    finally:
        observer.stop()
        observer.join(timeout=5)
        controller.teardown()


__all__ = ["WorkspaceEventHandler", "watch_workspace"]
