import os
import stat
from pathlib import Path

import pytest

from folder_scope.counter import count_files


def test_counts_nested_python_files(tmp_path: Path, py_files) -> None:
    py_files(tmp_path, 3)
    py_files(tmp_path, 2, "pkg/sub")
    (tmp_path / "README.md").write_text("docs")
    (tmp_path / "pkg" / "data.pyc").write_text("")
    assert count_files(tmp_path, set()) == 5


def test_excluded_directory_is_never_entered(tmp_path: Path, py_files) -> None:
    py_files(tmp_path, 5)
    py_files(tmp_path, 10_000, ".venv/lib")
    assert count_files(tmp_path, {".venv"}) == 5


def test_excluded_name_matches_at_any_depth(tmp_path: Path, py_files) -> None:
    py_files(tmp_path, 1, "a/b/__pycache__")
    py_files(tmp_path, 2, "a/b")
    assert count_files(tmp_path, {"__pycache__"}) == 2


def test_missing_root_counts_zero(tmp_path: Path) -> None:
    assert count_files(tmp_path / "does-not-exist", set()) == 0


def test_custom_extension(tmp_path: Path) -> None:
    (tmp_path / "stub.pyi").write_text("")
    (tmp_path / "mod.py").write_text("")
    assert count_files(tmp_path, set(), extension=".pyi") == 1


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root can list any directory")
def test_unreadable_subdirectory_is_skipped(tmp_path: Path, py_files) -> None:
    py_files(tmp_path, 2)
    py_files(tmp_path, 3, "locked")
    py_files(tmp_path, 4, "open")
    locked = tmp_path / "locked"
    locked.chmod(0)
    try:
        assert count_files(tmp_path, set()) == 6
    finally:
        locked.chmod(stat.S_IRWXU)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinked_files_are_not_counted(tmp_path: Path) -> None:
    target = tmp_path / "outside"
    target.mkdir()
    (target / "real.py").write_text("")
    project = tmp_path / "project"
    project.mkdir()
    (project / "own.py").write_text("")
    (project / "link.py").symlink_to(target / "real.py")
    assert count_files(project, set()) == 1
