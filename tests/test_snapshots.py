import json
from pathlib import Path

import pytest

from folder_scope.classifier import classify
from folder_scope.reconciler import reconcile
from folder_scope.settings import MemoryFolderSettings
from folder_scope.snapshots import STATE_KEY, SnapshotEntry, SnapshotStore


def test_capture_only_records_first_entry(tmp_path: Path) -> None:
    store = SnapshotStore(tmp_path / "state.json")
    assert store.capture("file:///a", SnapshotEntry(include=None, exclude=["x"]))
    assert not store.capture("file:///a", SnapshotEntry(include=["y"], exclude=None))
    assert store.get("file:///a") == SnapshotEntry(include=None, exclude=["x"])


def test_entries_survive_reload(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    SnapshotStore(path).capture(
        "file:///a",
        SnapshotEntry(include=None, exclude=None, type_checking_mode="strict", tracks_type_checking=True),
    )

    reloaded = SnapshotStore(path)
    entry = reloaded.get("file:///a")
    assert entry is not None
    assert entry.include is None
    assert entry.tracks_type_checking
    assert entry.type_checking_mode == "strict"
    assert json.loads(path.read_text())[STATE_KEY]["file:///a"]["include"] is None


def test_discard_removes_entry(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    store = SnapshotStore(path)
    store.capture("file:///a", SnapshotEntry(include=[], exclude=[]))
    store.discard("file:///a")
    assert "file:///a" not in store
    assert SnapshotStore(path).keys() == []


def test_corrupt_state_is_treated_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("garbage")
    assert SnapshotStore(path).keys() == []


def _failing_write() -> None:
    raise OSError("disk full")


def test_failed_capture_leaves_no_entry_and_no_setting(tmp_path: Path, monkeypatch, folder) -> None:
    store = SnapshotStore(tmp_path / "state.json")
    monkeypatch.setattr(store, "_write", _failing_write)
    settings = MemoryFolderSettings()

    with pytest.raises(OSError):
        reconcile(classify(folder, 1, 200, ["src"], []), settings, store)

    assert folder.key not in store
    assert settings.writes == []


def test_failed_discard_keeps_entry(tmp_path: Path, monkeypatch) -> None:
    store = SnapshotStore(tmp_path / "state.json")
    store.capture("file:///a", SnapshotEntry(include=["a"], exclude=None))
    monkeypatch.setattr(store, "_write", _failing_write)

    with pytest.raises(OSError):
        store.discard("file:///a")

    assert store.get("file:///a") == SnapshotEntry(include=["a"], exclude=None)


def test_track_type_checking_only_fills_missing_mode(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    store = SnapshotStore(path)
    store.capture("file:///a", SnapshotEntry(include=None, exclude=None))

    assert store.track_type_checking("file:///a", "basic")
    assert not store.track_type_checking("file:///a", "off")
    assert not store.track_type_checking("file:///missing", "off")

    entry = SnapshotStore(path).get("file:///a")
    assert entry.tracks_type_checking
    assert entry.type_checking_mode == "basic"
