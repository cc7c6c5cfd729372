"""Merging of per-source task lists into one resolved list."""

import shlex
from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from side_launcher.core.state import Resolution, SourceReport, TaskDefinition, TaskType

from .base import TaskSource

HELP_TASK_LABEL = "show help"

_HELP_TEXT = """\
Add custom commands with the sideLauncher.tasks setting, or in {config_path}:

[
  {{
    "label": "Command name",
    "type": "shell",
    "command": "command line"
  }}
]

"type" is optional and accepts:
- shell (default): run as a background process, output is captured
- shellOnVSCode: run inside an interactive terminal

These environment variables are available inside commands:
- $VSCODE_WORKSPACE_ROOT: root path of the open workspace
- $WORKSPACE_ROOT: short alias of the above
- $CURRENT_FILE_ABSOLUTE_PATH: absolute path of the active file
- $CURRENT_FILE_RELATIVE_PATH: path of the active file relative to the workspace root

Examples:
- cd $WORKSPACE_ROOT && npm test
- ls -la $VSCODE_WORKSPACE_ROOT/src
- echo $CURRENT_FILE_ABSOLUTE_PATH
- git add $CURRENT_FILE_RELATIVE_PATH"""


def default_help_task(config_path: Path) -> TaskDefinition:
    """Build the task shown when no source defines any."""
    text = _HELP_TEXT.format(config_path=config_path)
    return TaskDefinition(
        label=HELP_TASK_LABEL,
        type=TaskType.SHELL,
        command=f"echo {shlex.quote(text)}",
    )


class TaskMerger:
    """Order-stable, first-seen-wins de-duplication by ``(label, command)``.

    Example:
        >>> merger = TaskMerger()
        >>> merger.add([TaskDefinition(label="a", command="x")])
        1
        >>> merger.add([TaskDefinition(label="a", type="shellOnVSCode", command="x")])
        0
    """

    def __init__(self) -> None:
        self._tasks: list[TaskDefinition] = []
        self._seen: set[tuple[str, str]] = set()

    def add(self, tasks: Iterable[TaskDefinition]) -> int:
        """Append unseen tasks; return how many were added."""
        added = 0
        for task in tasks:
            if task.key in self._seen:
                continue
            self._seen.add(task.key)
            self._tasks.append(task)
            added += 1
        return added

    @property
    def tasks(self) -> list[TaskDefinition]:
        return list(self._tasks)


def merge_reports(reports: Iterable[SourceReport], help_task: TaskDefinition) -> list[TaskDefinition]:
    """Merge source reports in the order given, falling back to ``help_task``."""
    merger = TaskMerger()
    for report in reports:
        added = merger.add(report.tasks)
        if added:
            logger.debug(f"Loaded {added} task(s) from {report.source}")

    tasks = merger.tasks
    if not tasks:
        tasks.append(help_task)
    return tasks


def resolve(sources: Iterable[TaskSource], help_task: TaskDefinition) -> Resolution:
    """Read every source sequentially and merge the results."""
    reports = [source.read() for source in sources]
    tasks = merge_reports(reports, help_task)
    logger.info(f"Resolved {len(tasks)} task(s) from {len(reports)} source(s)")
    return Resolution(tasks=tasks, reports=reports)
