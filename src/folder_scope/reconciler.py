"""Apply desired analysis settings and restore the originals on teardown."""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional

from loguru import logger

from .models import Action, ClassificationResult, Folder, ReconcileOutcome
from .settings import EXCLUDE_KEY, INCLUDE_KEY, TYPE_CHECKING_KEY, FolderSettings
from .snapshots import SnapshotEntry, SnapshotStore


TYPE_CHECKING_OFF = "off"

_UNMANAGED = object()


def shallow_equal(current: Any, desired: Any) -> bool:
    """Same length, same elements, same order. Unset only equals unset."""

    if current is None and desired is None:
        return True
    if not isinstance(current, list) or not isinstance(desired, list):
        return False
    return current == desired


def _desired_type_checking(
    result: ClassificationResult, snapshot: Optional[SnapshotEntry], manage: bool
) -> Any:
    if not manage:
        return _UNMANAGED
    if result.action == Action.DISABLE:
        return TYPE_CHECKING_OFF
    if snapshot is not None and snapshot.tracks_type_checking:
        return snapshot.type_checking_mode
    return _UNMANAGED


def reconcile(
    result: ClassificationResult,
    settings: FolderSettings,
    snapshots: SnapshotStore,
    *,
    manage_type_checking: bool = False,
) -> ReconcileOutcome:
    """Bring ``settings`` in line with ``result`` writing only what differs.

    The first time a folder is changed its current values are captured in
    ``snapshots`` before anything is written.
    """

    key = result.folder.key
    current_include = settings.get(INCLUDE_KEY)
    current_exclude = settings.get(EXCLUDE_KEY)
    current_mode = settings.get(TYPE_CHECKING_KEY) if manage_type_checking else None

    desired_mode = _desired_type_checking(result, snapshots.get(key), manage_type_checking)

    pending: List[tuple[str, Any]] = []
    if not shallow_equal(current_include, result.desired_include):
        pending.append((INCLUDE_KEY, result.desired_include))
    if not shallow_equal(current_exclude, result.desired_exclude):
        pending.append((EXCLUDE_KEY, result.desired_exclude))
    if desired_mode is not _UNMANAGED and current_mode != desired_mode:
        pending.append((TYPE_CHECKING_KEY, desired_mode))

    outcome = ReconcileOutcome()
    if not pending:
        return outcome

    outcome.snapshot_captured = snapshots.capture(
        key,
        SnapshotEntry(
            include=current_include,
            exclude=current_exclude,
            type_checking_mode=current_mode,
            tracks_type_checking=manage_type_checking,
        ),
    )
    if not outcome.snapshot_captured and manage_type_checking:
        # Entry was captured while strictness was left alone; record the mode before changing it.
        snapshots.track_type_checking(key, current_mode)

    for setting, value in pending:
        settings.update(setting, value)
        outcome.written.append(setting)
    logger.info("Updated {} for folder '{}'", ", ".join(outcome.written), result.folder.name)
    return outcome


def restore_folder(entry: SnapshotEntry, settings: FolderSettings) -> None:
    """Write the recorded values back, removing keys that were unset."""

    settings.update(INCLUDE_KEY, entry.include)
    settings.update(EXCLUDE_KEY, entry.exclude)
    if entry.tracks_type_checking:
        settings.update(TYPE_CHECKING_KEY, entry.type_checking_mode)


def restore_all(
    folders: Iterable[Folder],
    settings_for: Callable[[Folder], FolderSettings],
    snapshots: Optional[SnapshotStore],
) -> List[str]:
    """Restore every snapshotted folder still present in ``folders``.

    Returns the keys that were restored. Entries for folders that are no
    longer in the workspace are left in place.
    """

    restored: List[str] = []
    if snapshots is None:
        return restored

    for folder in folders:
        entry = snapshots.get(folder.key)
        if entry is None:
            continue
        try:
            restore_folder(entry, settings_for(folder))
            snapshots.discard(folder.key)
        except Exception:
            logger.exception("Failed to restore settings for folder '{}'", folder.name)
            continue
        logger.info("Restored previous settings for folder '{}'", folder.name)
        restored.append(folder.key)
    return restored


__all__ = [
    "TYPE_CHECKING_OFF",
    "shallow_equal",
    "reconcile",
    "restore_folder",
    "restore_all",
]
