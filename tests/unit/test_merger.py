"""Unit tests for task merging and resolution."""

import subprocess
import sys
from pathlib import Path

import pytest

from side_launcher.core.state import SourceReport, TaskDefinition, TaskType
from side_launcher.sources.base import TaskSource
from side_launcher.sources.merger import (
    HELP_TASK_LABEL,
    TaskMerger,
    default_help_task,
    merge_reports,
    resolve,
)


def task(label: str, command: str, type: str = "shell") -> TaskDefinition:
    return TaskDefinition(label=label, type=type, command=command)


class StaticSource(TaskSource):
    """Source returning fixed records, or raising."""

    def __init__(self, name: str, records=None, error: Exception | None = None) -> None:
        super().__init__()
        self.source_name = name
        self.records = records or []
        self.error = error

    def read_records(self):
        if self.error is not None:
            raise self.error
        return self.records


@pytest.fixture
def help_task() -> TaskDefinition:
    return default_help_task(Path("/home/user/.config/vscode-side-launcher/tasks.json"))


class TestTaskMerger:
    """Tests for TaskMerger."""

    def test_first_seen_wins(self) -> None:
        """Test a later duplicate never replaces the earlier task."""
        merger = TaskMerger()
        merger.add([task("build", "make", "shellOnVSCode")])
        merger.add([task("build", "make", "shell")])

        assert merger.tasks == [task("build", "make", "shellOnVSCode")]

    def test_same_label_different_command(self) -> None:
        """Test tasks sharing only a label are both kept."""
        merger = TaskMerger()
        added = merger.add([task("build", "make"), task("build", "make all")])

        assert added == 2
        assert len(merger.tasks) == 2

    def test_no_separator_collisions(self) -> None:
        """Test labels containing ":" do not collide with other pairs."""
        merger = TaskMerger()
        merger.add([task("a:b", "c"), task("a", "b:c")])

        assert len(merger.tasks) == 2

    def test_tasks_is_a_copy(self) -> None:
        """Test callers cannot mutate the merger's list."""
        merger = TaskMerger()
        merger.add([task("a", "b")])
        merger.tasks.clear()

        assert len(merger.tasks) == 1


class TestMergeReports:
    """Tests for merge_reports."""

    def test_precedence_order(self, help_task: TaskDefinition) -> None:
        """Test output keeps source order, then in-source order."""
        reports = [
            SourceReport(source="one", tasks=[task("a", "1"), task("b", "2")]),
            SourceReport(source="two", error="missing"),
            SourceReport(source="three", tasks=[task("b", "2"), task("c", "3")]),
        ]

        tasks = merge_reports(reports, help_task)

        assert [t.label for t in tasks] == ["a", "b", "c"]

    def test_empty_yields_help(self, help_task: TaskDefinition) -> None:
        """Test the help task is the only entry when nothing is configured."""
        reports = [SourceReport(source="one"), SourceReport(source="two", error="boom")]

        assert merge_reports(reports, help_task) == [help_task]

    def test_help_not_added_when_tasks_exist(self, help_task: TaskDefinition) -> None:
        """Test the help task is only a fallback."""
        tasks = merge_reports([SourceReport(source="one", tasks=[task("a", "b")])], help_task)

        assert help_task not in tasks


class TestResolve:
    """Tests for resolve."""

    def test_failed_source_isolated(self, help_task: TaskDefinition) -> None:
        """Test one failing source does not hide the others."""
        sources = [
            StaticSource("good", [{"label": "a", "command": "x"}]),
            StaticSource("bad", error=RuntimeError("disk on fire")),
            StaticSource("later", [{"label": "b", "command": "y"}]),
        ]

        resolution = resolve(sources, help_task)

        assert [t.label for t in resolution.tasks] == ["a", "b"]
        assert list(resolution.errors) == ["bad"]
        assert "disk on fire" in resolution.errors["bad"]

    def test_reports_in_source_order(self, help_task: TaskDefinition) -> None:
        """Test one report per source."""
        sources = [StaticSource("one"), StaticSource("two")]

        resolution = resolve(sources, help_task)

        assert [r.source for r in resolution.reports] == ["one", "two"]
        assert resolution.tasks == [help_task]


class TestHelpTask:
    """Tests for default_help_task."""

    def test_shape(self, help_task: TaskDefinition) -> None:
        """Test label and type of the help task."""
        assert help_task.label == HELP_TASK_LABEL
        assert help_task.type == TaskType.SHELL
        assert help_task.command.startswith("echo ")

    def test_mentions_config_path_and_variables(self, help_task: TaskDefinition) -> None:
        """Test the text points at the external file and the variables."""
        assert "vscode-side-launcher/tasks.json" in help_task.command
        for name in ("VSCODE_WORKSPACE_ROOT", "CURRENT_FILE_RELATIVE_PATH"):
            assert name in help_task.command

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX shell quoting")
    def test_echo_prints_text_verbatim(self, help_task: TaskDefinition) -> None:
        """Test the shell does not expand the variables in the help text."""
        output = subprocess.run(
            help_task.command, shell=True, capture_output=True, text=True, check=True
        ).stdout

        assert "$WORKSPACE_ROOT" in output
        assert output.startswith("Add custom commands")
