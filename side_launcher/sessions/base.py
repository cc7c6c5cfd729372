"""
Base executor interface for side-launcher.

Every execution mode (background shell, interactive terminal) implements
``BaseExecutor``. Executors may raise on launch failure; the dispatcher turns
that into a ``CommandResult``.
"""

import traceback
from abc import ABC, abstractmethod

from side_launcher.core.state import CommandResult, ExecutionContext, TaskType


class BaseExecutor(ABC):
    """
    Abstract base class for execution modes.

    Implementations:
    - ShellExecutor: detached subprocess with captured output
    - TerminalExecutor: command typed into an interactive terminal
    """

    task_type: TaskType

    @abstractmethod
    async def run(
        self,
        command: str,
        context: ExecutionContext,
        env: dict[str, str],
    ) -> CommandResult:
        """
        Run ``command`` and describe the outcome.

        Args:
            command: Command line as written by the user.
            context: Workspace root and active-file paths.
            env: Full environment for the command.

        Returns:
            CommandResult for this invocation.

        Raises:
            DispatchError: If the command could not be launched at all.
        """
        pass


def failure_result(command: str, exc: BaseException) -> CommandResult:
    """Describe a launch failure."""
    return CommandResult(
        command=command,
        stdout="",
        stderr="",
        error=str(exc) or type(exc).__name__,
        stack="".join(traceback.format_exception(exc)),
    )
