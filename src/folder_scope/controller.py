"""Wire workspace events to classification passes."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional

from loguru import logger

from .classifier import classify_folder
from .config import ScopeConfig
from .models import ClassificationResult, Folder
from .notifier import Notifier
from .reconciler import reconcile, restore_all
from .scheduler import DebouncedScheduler
from .settings import FolderSettings, JsonFolderSettings
from .snapshots import SnapshotStore


class Workspace:
    """Ordered set of workspace folders."""

    def __init__(self, folders: Iterable[Folder] = ()) -> None:
        self._folders: List[Folder] = []
        for folder in folders:
            self.add(folder)

    @property
    def folders(self) -> List[Folder]:
        return list(self._folders)

    def add(self, folder: Folder) -> bool:
        if any(existing.key == folder.key for existing in self._folders):
            return False
        self._folders.append(folder)
        return True

    def remove(self, folder: Folder) -> bool:
        before = len(self._folders)
        self._folders = [existing for existing in self._folders if existing.key != folder.key]
        return len(self._folders) != before

    def folder_for(self, path: Path) -> Optional[Folder]:
        """Return the innermost folder containing ``path``."""

        resolved = Path(path).resolve()
        owners = [folder for folder in self._folders if resolved.is_relative_to(folder.root)]
        if not owners:
            return None
        return max(owners, key=lambda folder: len(folder.root.parts))


class ScopeController:
    """Runs classification passes in response to workspace events.

    ``config_provider`` is called at the start of every pass so that edits to
    the configuration take effect on the next event.
    """

    def __init__(
        self,
        workspace: Workspace,
        config_provider: Callable[[], ScopeConfig],
        snapshots: Optional[SnapshotStore] = None,
        notifier: Optional[Notifier] = None,
        settings_for: Callable[[Folder], FolderSettings] = JsonFolderSettings.for_folder,
        scheduler: Optional[DebouncedScheduler] = None,
    ) -> None:
        self.workspace = workspace
        self._config_provider = config_provider
        self.snapshots = snapshots if snapshots is not None else SnapshotStore()
        self.notifier = notifier or Notifier()
        self._settings_for = settings_for
        self.scheduler = scheduler or DebouncedScheduler()

    def _schedule(self, folder: Folder) -> None:
        self.scheduler.schedule(folder.key, self.apply_folder, folder)

    def start(self) -> None:
        self.notifier.prepare(self._config_provider().notification_mode)
        for folder in self.workspace.folders:
            self._schedule(folder)

    def folder_added(self, folder: Folder) -> None:
        self.workspace.add(folder)
        self._schedule(folder)

    def folder_removed(self, folder: Folder) -> None:
        self.workspace.remove(folder)

    def active_file_changed(self, path: Path) -> None:
        folder = self.workspace.folder_for(path)
        if folder is not None:
            self._schedule(folder)

    def configuration_changed(self) -> None:
        self.notifier.prepare(self._config_provider().notification_mode)
        for folder in self.workspace.folders:
            self._schedule(folder)

    def apply_folder(self, folder: Folder) -> Optional[ClassificationResult]:
        """Run one classification pass for ``folder``.

        Failures leave the folder as it was and are only logged.
        """

        try:
            config = self._config_provider()
            if not config.enable:
                return None
            result = classify_folder(folder, config)
            reconcile(
                result,
                self._settings_for(folder),
                self.snapshots,
                manage_type_checking=not config.keep_strict,
            )
        except Exception:
            logger.exception("Folder scope pass failed for '{}'", folder.name)
            return None
        logger.debug(
            "Folder '{}' has {} Python files (limit {}): {}",
            folder.name,
            result.file_count,
            result.limit,
            result.action.value,
        )
        self.notifier.notify(folder, result.action, result.file_count, result.limit, config)
        return result

    def flush(self) -> int:
        return self.scheduler.flush()

    def teardown(self) -> List[str]:
        """Cancel pending passes and restore every snapshotted folder."""

        self.scheduler.cancel_all()
        try:
            return restore_all(self.workspace.folders, self._settings_for, self.snapshots)
        finally:
            self.notifier.clear()


__all__ = ["Workspace", "ScopeController"]
