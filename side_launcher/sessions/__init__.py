"""Execution of resolved tasks."""

from side_launcher.sessions.base import BaseExecutor, failure_result
from side_launcher.sessions.environment import (
    CONTEXT_KEYS,
    EnvironmentBuilder,
    build_context,
    build_overlay,
    relative_to_root,
)
from side_launcher.sessions.router import Dispatcher
from side_launcher.sessions.shell import ShellExecutor
from side_launcher.sessions.terminal import (
    TerminalExecutor,
    TerminalProvider,
    TmuxTerminal,
    TmuxTerminalProvider,
)

__all__ = [
    "BaseExecutor",
    "CONTEXT_KEYS",
    "Dispatcher",
    "EnvironmentBuilder",
    "ShellExecutor",
    "TerminalExecutor",
    "TerminalProvider",
    "TmuxTerminal",
    "TmuxTerminalProvider",
    "build_context",
    "build_overlay",
    "failure_result",
    "relative_to_root",
]
