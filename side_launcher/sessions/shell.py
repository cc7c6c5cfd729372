"""Background shell execution with captured output."""

import asyncio

from loguru import logger

from side_launcher.core.errors import DispatchError
from side_launcher.core.state import CommandResult, ExecutionContext, TaskType

from .base import BaseExecutor


class ShellExecutor(BaseExecutor):
    """
    Runs a command through the platform shell as its own process.

    Output is collected until the process exits; there is no timeout, so a
    command that never exits never produces a result. Concurrent runs share
    nothing.

    Example:
        >>> executor = ShellExecutor()
        >>> result = await executor.run("echo ready", context, env)
        >>> result.stdout
        'ready\\n'
    """

    task_type = TaskType.SHELL

    def __init__(self, shell: str | None = None) -> None:
        """
        Initialize the executor.

        Args:
            shell: Interpreter to use instead of the platform default.
        """
        self.shell = shell

    async def run(
        self,
        command: str,
        context: ExecutionContext,
        env: dict[str, str],
    ) -> CommandResult:
        """Run ``command`` and wait for it to exit."""
        logger.info(f"Running in {context.workspace_root}: {command}")

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                cwd=context.workspace_root,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                executable=self.shell,
            )
        except OSError as e:
            raise DispatchError(f"Failed to launch command: {e}") from e

        stdout_bytes, stderr_bytes = await process.communicate()
        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        error = self._describe_exit(command, process.returncode, stderr)
        if error:
            logger.warning(f"Command exited with {process.returncode}: {command}")
        else:
            logger.debug(f"Command finished (pid {process.pid}): {command}")

        return CommandResult(command=command, stdout=stdout, stderr=stderr, error=error)

    @staticmethod
    def _describe_exit(command: str, returncode: int | None, stderr: str) -> str | None:
        """Error message for an abnormal exit, or None on success."""
        if returncode == 0:
            return None
        if returncode is not None and returncode < 0:
            return f"Command terminated by signal {-returncode}: {command}"
        return f"Command failed: {command}\n{stderr}"
