"""Count analysable files under a folder."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Collection, List

from loguru import logger


PY_EXTENSION = ".py"


def count_files(root: Path, excluded_names: Collection[str], extension: str = PY_EXTENSION) -> int:
    """Count files ending with ``extension`` below ``root``.

    Directories whose name is in ``excluded_names`` are never entered. A
    directory that cannot be listed contributes nothing.
    """

    total = 0
    stack: List[str] = [os.fspath(root)]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            if entry.name not in excluded_names:
                                stack.append(entry.path)
                        elif entry.is_file(follow_symlinks=False) and entry.name.endswith(extension):
                            total += 1
                    except OSError:
                        continue
        except OSError as exc:
            logger.debug("Skipping unreadable directory {}: {}", directory, exc)
            continue
    return total


__all__ = ["PY_EXTENSION", "count_files"]
