"""Core module - configuration, host abstraction, value types and errors."""

from side_launcher.core.config import Settings, get_settings
from side_launcher.core.errors import DispatchError, LauncherError, ParseError, SourceReadError
from side_launcher.core.host import LocalWorkspaceHost, WorkspaceFolder, WorkspaceHost
from side_launcher.core.state import (
    CommandResult,
    ExecutionContext,
    Resolution,
    SourceReport,
    TaskDefinition,
    TaskType,
)

__all__ = [
    "CommandResult",
    "DispatchError",
    "ExecutionContext",
    "LauncherError",
    "LocalWorkspaceHost",
    "ParseError",
    "Resolution",
    "Settings",
    "SourceReadError",
    "SourceReport",
    "TaskDefinition",
    "TaskType",
    "WorkspaceFolder",
    "WorkspaceHost",
    "get_settings",
]
