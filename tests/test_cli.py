import json
from pathlib import Path

from typer.testing import CliRunner

from folder_scope.cli import app
from folder_scope.config import load_config
from folder_scope.settings import EXCLUDE_KEY

runner = CliRunner()


def test_count_reports_decision(tmp_path: Path, py_files) -> None:
    py_files(tmp_path, 4)
    result = runner.invoke(app, ["count", str(tmp_path)])
    assert result.exit_code == 0
    assert "4 Python files (limit 200)" in result.output


def test_apply_then_restore(tmp_path: Path, py_files) -> None:
    project = tmp_path / "project"
    py_files(project, 3)
    config = tmp_path / "scope.yml"
    config.write_text("max_files: 2\nnotification_mode: none\n")
    state = tmp_path / "state.json"

    applied = runner.invoke(app, ["apply", str(project), "--config", str(config), "--state", str(state)])
    assert applied.exit_code == 0, applied.output
    settings = json.loads((project / ".vscode" / "settings.json").read_text())
    assert settings == {EXCLUDE_KEY: ["**"]}

    restored = runner.invoke(app, ["restore", str(project), "--state", str(state)])
    assert restored.exit_code == 0, restored.output
    assert json.loads((project / ".vscode" / "settings.json").read_text()) == {}


def test_apply_dry_run_writes_nothing(tmp_path: Path, py_files) -> None:
    py_files(tmp_path, 1)
    state = tmp_path / "state.json"
    result = runner.invoke(app, ["apply", str(tmp_path), "--dry-run", "--state", str(state)])
    assert result.exit_code == 0, result.output
    assert "enable" in result.output
    assert not (tmp_path / ".vscode").exists()
    assert not state.exists()


def test_apply_reads_editor_settings(tmp_path: Path, py_files) -> None:
    project = tmp_path / "project"
    py_files(project, 3)
    user_settings = tmp_path / "user-settings.json"
    user_settings.write_text(
        '{\n  // scope options\n  "pylanceWorkspaceFolderScope.maxFiles": 1,\n'
        '  "pylanceWorkspaceFolderScope.notificationMode": "none",\n}'
    )
    result = runner.invoke(
        app,
        ["apply", str(project), "--settings", str(user_settings), "--state", str(tmp_path / "state.json")],
    )
    assert result.exit_code == 0, result.output
    assert "disable" in result.output


def test_bad_config_exits_with_code_4(tmp_path: Path) -> None:
    config = tmp_path / "scope.yml"
    config.write_text("max_files: -5\n")
    result = runner.invoke(app, ["apply", str(tmp_path), "--config", str(config)])
    assert result.exit_code == 4


def test_init_config_writes_defaults(tmp_path: Path) -> None:
    path = tmp_path / "scope.yml"
    result = runner.invoke(app, ["init-config", str(path)])
    assert result.exit_code == 0
    assert load_config(path).max_files == 200


def test_apply_shows_status_label(tmp_path: Path, py_files) -> None:
    project = tmp_path / "project"
    py_files(project, 3)
    config = tmp_path / "scope.yml"
    config.write_text("max_files: 2\nnotification_mode: statusbar\n")
    result = runner.invoke(
        app, ["apply", str(project), "--config", str(config), "--state", str(tmp_path / "state.json")]
    )
    assert result.exit_code == 0, result.output
    assert "Pylance disabled: 3 > 2" in result.output
