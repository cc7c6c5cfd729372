"""Integration tests for the command line interface."""

import json
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from side_launcher import __version__
from side_launcher.cli.main import app
from side_launcher.launcher import Launcher

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell syntax")

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at an isolated config dir and keep logging untouched."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("SIDE_LAUNCHER_CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(Launcher, "configure_logging", lambda self: None)
    return config_dir


@pytest.fixture
def external_tasks(cli_env: Path, write_json) -> Path:
    return write_json(
        cli_env / "vscode-side-launcher" / "tasks.json",
        [
            {"label": "greet", "command": "echo hello"},
            {"label": "fail", "command": "echo nope >&2; exit 2"},
            {"label": "multi", "command": "echo one\necho two"},
        ],
    )


class TestGlobalOptions:
    """Tests for options shared by every command."""

    def test_version(self) -> None:
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self) -> None:
        """Test --help lists the commands."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("list", "run", "exec", "serve"):
            assert command in result.output


class TestListCommand:
    """Tests for `side-launcher list`."""

    def test_help_task_when_empty(self, workspace: Path) -> None:
        """Test the help task is listed when nothing is configured."""
        result = runner.invoke(app, ["-f", str(workspace), "list"])

        assert result.exit_code == 0
        assert "show help" in result.output

    def test_lists_tasks(self, workspace: Path, external_tasks: Path) -> None:
        """Test configured tasks are listed with their type."""
        result = runner.invoke(app, ["-f", str(workspace), "list"])

        assert result.exit_code == 0
        assert "greet" in result.output
        assert "echo hello" in result.output
        assert "echo one ..." in result.output
        assert "show help" not in result.output

    def test_errors_flag(self, workspace: Path) -> None:
        """Test --errors shows sources that were not loaded."""
        result = runner.invoke(app, ["-f", str(workspace), "list", "--errors"])

        assert result.exit_code == 0
        assert "Sources not loaded" in result.output
        assert "folder-settings-file" in result.output

    def test_host_tasks_from_environment(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the host-level task list can come from the environment."""
        monkeypatch.setenv(
            "SIDE_LAUNCHER_TASKS", json.dumps([{"label": "from-env", "command": "true"}])
        )

        result = runner.invoke(app, ["-f", str(workspace), "list"])

        assert "from-env" in result.output

    def test_malformed_host_tasks_reported(
        self, workspace: Path, external_tasks: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a broken host task list is listed as a source error."""
        monkeypatch.setenv("SIDE_LAUNCHER_TASKS", "not json")

        result = runner.invoke(app, ["-f", str(workspace), "list", "--errors"])

        assert result.exit_code == 0
        assert "greet" in result.output
        assert "host-settings" in result.output


@posix_only
class TestRunCommand:
    """Tests for `side-launcher run`."""

    def test_run_by_label(self, workspace: Path, external_tasks: Path) -> None:
        """Test a task's output is printed."""
        result = runner.invoke(app, ["-f", str(workspace), "run", "greet"])

        assert result.exit_code == 0
        assert "hello" in result.output

    def test_failing_task(self, workspace: Path, external_tasks: Path) -> None:
        """Test a failing task exits non-zero."""
        result = runner.invoke(app, ["-f", str(workspace), "run", "fail"])

        assert result.exit_code == 1
        assert "nope" in result.output

    def test_unknown_label(self, workspace: Path, external_tasks: Path) -> None:
        """Test an unknown label exits with code 2."""
        result = runner.invoke(app, ["-f", str(workspace), "run", "missing"])

        assert result.exit_code == 2
        assert "No task labeled" in result.output


@posix_only
class TestExecCommand:
    """Tests for `side-launcher exec`."""

    def test_exec_sees_context(self, workspace: Path) -> None:
        """Test ad-hoc commands get the workspace variables."""
        active = workspace.resolve() / "pkg" / "mod.py"

        result = runner.invoke(
            app,
            [
                "-f",
                str(workspace),
                "-a",
                str(active),
                "exec",
                'echo "$CURRENT_FILE_RELATIVE_PATH"',
            ],
        )

        assert result.exit_code == 0
        assert "pkg/mod.py" in result.output

    def test_exec_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the current directory is the workspace without --folder."""
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["exec", "pwd"])

        assert result.exit_code == 0
        assert Path(result.output.strip()).resolve() == tmp_path.resolve()
