"""Value types shared by the resolution and dispatch pipelines."""

from enum import Enum
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# ENUMS
# =============================================================================


class TaskType(str, Enum):
    """Execution mode of a task."""

    SHELL = "shell"
    SHELL_ON_VSCODE = "shellOnVSCode"


# =============================================================================
# TASKS
# =============================================================================


class TaskDefinition(BaseModel):
    """A labeled, user-declared shell command.

    Two definitions are the same task when both ``label`` and ``command``
    match; ``type`` does not take part in identity.

    Example:
        >>> task = TaskDefinition(label="test", command="npm test")
        >>> task.type
        <TaskType.SHELL: 'shell'>
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Button label shown to the user")
    type: TaskType = Field(default=TaskType.SHELL, description="Execution mode")
    command: str = Field(description="Command line passed to the shell")

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, v: Any) -> Any:
        """Treat a missing or unknown type as ``shell``."""
        if v is None or v == "":
            return TaskType.SHELL
        if isinstance(v, TaskType):
            return v
        try:
            return TaskType(v)
        except ValueError:
            logger.warning(f"Unknown task type {v!r}, falling back to shell")
            return TaskType.SHELL

    @property
    def key(self) -> tuple[str, str]:
        """De-duplication identity.

        A tuple rather than a ``"label:command"`` string, so a label containing
        ``:`` cannot collide with a different label and command pair. For
        pairs without that ambiguity the two keys agree.
        """
        return (self.label, self.command)

    def to_dict(self) -> dict[str, str]:
        """Convert to the JSON record shape."""
        return {"label": self.label, "type": self.type.value, "command": self.command}


# =============================================================================
# EXECUTION
# =============================================================================


class ExecutionContext(BaseModel):
    """Workspace and active-file paths for a single dispatch."""

    model_config = ConfigDict(frozen=True)

    workspace_root: str
    active_file_absolute_path: str = ""
    active_file_relative_path: str = ""


class CommandResult(BaseModel):
    """Outcome of one dispatch, successful or not."""

    model_config = ConfigDict(frozen=True)

    command: str
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    stack: str | None = None

    def is_success(self) -> bool:
        """Check if the command ran and reported no error."""
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape, omitting absent fields."""
        return self.model_dump(exclude_none=True)


# =============================================================================
# RESOLUTION
# =============================================================================


class SourceReport(BaseModel):
    """What a single configuration source contributed."""

    model_config = ConfigDict(frozen=True)

    source: str
    tasks: list[TaskDefinition] = Field(default_factory=list)
    error: str | None = None


class Resolution(BaseModel):
    """Result of one resolution pass."""

    model_config = ConfigDict(frozen=True)

    tasks: list[TaskDefinition]
    reports: list[SourceReport] = Field(default_factory=list)

    @property
    def errors(self) -> dict[str, str]:
        """Errors keyed by source name."""
        return {r.source: r.error for r in self.reports if r.error is not None}
