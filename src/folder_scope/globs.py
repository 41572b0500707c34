"""Translate configured directories into analysis include/exclude globs."""

from __future__ import annotations

import re
from typing import Iterable, List


CATCH_ALL_INCLUDE = "./**/*.py"
CATCH_ALL_EXCLUDE = "**"

_WILDCARD = re.compile(r"[*?\[]")
_PY_FILE = re.compile(r"\.py[id]?$")


def _is_file_glob(entry: str) -> bool:
    # "packages/*" still names directories; "tests/test_*.py" or "src/*.pyi" name files.
    if _PY_FILE.search(entry):
        return True
    last = entry.rsplit("/", 1)[-1]
    return bool(_WILDCARD.search(last)) and "." in last


def to_include_globs(entries: Iterable[object] | None) -> List[str]:
    """Turn directory entries into workspace-relative globs of Python files.

    Entries that already select files pass through; anything else, including
    wildcard directory entries such as ``packages/*``, is treated as a
    directory root and gets ``/**/*.py`` appended.
    """

    globs: List[str] = []
    for raw in entries or []:
        if not isinstance(raw, str) or not raw.strip():
            continue
        entry = raw.strip()
        if not entry.startswith("./") and not entry.startswith("/"):
            entry = "./" + entry

        if _is_file_glob(entry):
            globs.append(entry)
            continue

        entry = entry.rstrip("/")
        globs.append(f"{entry}/**/*.py")
    return globs or [CATCH_ALL_INCLUDE]


def to_exclude_globs(names: Iterable[object] | None) -> List[str]:
    """Build ``**/<name>/**`` for each directory name."""

    return [f"**/{raw.strip()}/**" for raw in names or [] if isinstance(raw, str) and raw.strip()]


__all__ = ["CATCH_ALL_INCLUDE", "CATCH_ALL_EXCLUDE", "to_include_globs", "to_exclude_globs"]
