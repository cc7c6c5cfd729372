"""Inbound and outbound messages exchanged with the UI channel.

Both directions are closed unions discriminated on ``type``, so handlers can
be checked for exhaustiveness.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from side_launcher.core.state import CommandResult, TaskDefinition

# =============================================================================
# INBOUND (UI -> engine)
# =============================================================================


class RunCommand(BaseModel):
    """Request to run a command line."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["runCommand"] = "runCommand"
    command: str
    task_type: str | None = Field(default=None, alias="taskType")

    def to_task(self) -> TaskDefinition:
        """Build the task to dispatch; the command doubles as its label."""
        return TaskDefinition(label=self.command, type=self.task_type, command=self.command)


class ReloadTasks(BaseModel):
    """Request to re-run resolution."""

    model_config = ConfigDict(frozen=True)

    type: Literal["reloadTasks"] = "reloadTasks"


InboundMessage = Annotated[RunCommand | ReloadTasks, Field(discriminator="type")]

# =============================================================================
# OUTBOUND (engine -> UI)
# =============================================================================


class CommandOutput(BaseModel):
    """Result of a dispatch."""

    model_config = ConfigDict(frozen=True)

    type: Literal["commandOutput"] = "commandOutput"
    output: CommandResult


class TasksUpdated(BaseModel):
    """Freshly resolved task list."""

    model_config = ConfigDict(frozen=True)

    type: Literal["tasksUpdated"] = "tasksUpdated"
    tasks: list[TaskDefinition]


class ShowHelp(BaseModel):
    """Ask the UI to show usage help."""

    model_config = ConfigDict(frozen=True)

    type: Literal["showHelp"] = "showHelp"


OutboundMessage = Annotated[CommandOutput | TasksUpdated | ShowHelp, Field(discriminator="type")]

_inbound_adapter: TypeAdapter[RunCommand | ReloadTasks] = TypeAdapter(InboundMessage)
_outbound_adapter: TypeAdapter[CommandOutput | TasksUpdated | ShowHelp] = TypeAdapter(
    OutboundMessage
)


def parse_inbound(data: str | bytes | dict[str, Any]) -> RunCommand | ReloadTasks:
    """Parse a raw inbound message.

    Raises:
        pydantic.ValidationError: If the payload is not valid JSON or not a
            known message.
    """
    if isinstance(data, dict):
        return _inbound_adapter.validate_python(data)
    return _inbound_adapter.validate_json(data)


def parse_outbound(data: str | bytes | dict[str, Any]) -> CommandOutput | TasksUpdated | ShowHelp:
    """Parse a raw outbound message (used by clients and tests)."""
    if isinstance(data, dict):
        return _outbound_adapter.validate_python(data)
    return _outbound_adapter.validate_json(data)


def to_wire(message: CommandOutput | TasksUpdated | ShowHelp) -> dict[str, Any]:
    """Convert an outbound message to its JSON shape, omitting absent fields."""
    return message.model_dump(mode="json", by_alias=True, exclude_none=True)
