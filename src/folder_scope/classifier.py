"""Threshold rule deciding whether a folder stays in analysis scope."""

from __future__ import annotations

from typing import Iterable

from .config import ScopeConfig
from .counter import count_files
from .globs import CATCH_ALL_EXCLUDE, to_exclude_globs, to_include_globs
from .models import Action, ClassificationResult, Folder


def classify(
    folder: Folder,
    count: int,
    limit: int,
    include_config: Iterable[object] | None,
    exclude_config: Iterable[object] | None,
) -> ClassificationResult:
    """Derive the desired include/exclude patterns for ``folder``.

    A folder at the limit is still enabled. Disabling removes the include
    setting instead of emptying it, because exclude wins over include in the
    analyser.
    """

    if count > limit:
        return ClassificationResult(
            folder=folder,
            file_count=count,
            limit=limit,
            action=Action.DISABLE,
            desired_include=None,
            desired_exclude=[CATCH_ALL_EXCLUDE],
        )
    return ClassificationResult(
        folder=folder,
        file_count=count,
        limit=limit,
        action=Action.ENABLE,
        desired_include=to_include_globs(include_config),
        desired_exclude=to_exclude_globs(exclude_config),
    )


def classify_folder(folder: Folder, config: ScopeConfig) -> ClassificationResult:
    """Count ``folder`` and classify it with the same exclusion set."""

    excluded = set(config.exclude_dirs)
    count = count_files(folder.root, excluded)
    return classify(folder, count, config.max_files, config.include_entries, config.exclude_dirs)


__all__ = ["classify", "classify_folder"]
