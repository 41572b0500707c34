from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Tuple

import pytest

from folder_scope.models import Folder


def create_py_files(root: Path, count: int, subdir: str = "") -> None:
    target = root / subdir if subdir else root
    target.mkdir(parents=True, exist_ok=True)
    for index in range(count):
        (target / f"module_{index}.py").write_text("x = 1\n")


class RecordingPresenter:
    """Presenter double that records every call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, str]] = []

    def show_enabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        self.calls.append(("enabled", folder.key, text))

    def show_disabled(self, folder: Folder, count: int, limit: int, text: str) -> None:
        self.calls.append(("disabled", folder.key, text))

    def clear(self) -> None:
        self.calls.append(("clear", "", ""))


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now += minutes * 60


@pytest.fixture()
def py_files() -> Callable[..., None]:
    return create_py_files


@pytest.fixture()
def folder(tmp_path: Path) -> Folder:
    root = tmp_path / "project"
    root.mkdir()
    return Folder.from_path(root)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
