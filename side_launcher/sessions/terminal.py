"""
Interactive terminal execution for side-launcher.

Commands are typed into a tmux window so they keep full TTY behaviour
(prompts, colour, long-running processes). Output is not captured.
"""

import asyncio
import os
import shutil
from typing import Protocol, runtime_checkable

from loguru import logger

from side_launcher.core.errors import DispatchError
from side_launcher.core.state import CommandResult, ExecutionContext, TaskType

from .base import BaseExecutor
from .environment import CONTEXT_KEYS

# =============================================================================
# PROTOCOLS
# =============================================================================


@runtime_checkable
class Terminal(Protocol):
    """An interactive terminal session."""

    async def show(self) -> None: ...

    async def send_text(self, text: str) -> None: ...


@runtime_checkable
class TerminalProvider(Protocol):
    """Hands out terminals bound to a working directory and environment."""

    async def get_or_create(self, cwd: str, env: dict[str, str]) -> Terminal: ...


# =============================================================================
# TMUX
# =============================================================================


class TmuxTerminal:
    """A single tmux window."""

    def __init__(self, provider: "TmuxTerminalProvider", target: str) -> None:
        self.provider = provider
        self.target = target

    async def show(self) -> None:
        """Select the window and, when attached to tmux, switch to it."""
        await self.provider.tmux("select-window", "-t", self.target)
        if os.environ.get("TMUX"):
            await self.provider.tmux("switch-client", "-t", self.target)

    async def send_text(self, text: str) -> None:
        """Type ``text`` into the window and press Enter."""
        await self.provider.tmux("send-keys", "-t", self.target, "-l", text)
        await self.provider.tmux("send-keys", "-t", self.target, "Enter")

    def __repr__(self) -> str:
        return f"TmuxTerminal(target={self.target!r})"


class TmuxTerminalProvider:
    """
    Terminal provider backed by a named tmux session.

    The session is created on first use. Later requests open a new window in
    it, so every command starts in the working directory and environment of
    its own dispatch.

    Example:
        >>> provider = TmuxTerminalProvider("side-launcher")
        >>> terminal = await provider.get_or_create("/project", env)
        >>> await terminal.send_text("npm run dev")
    """

    def __init__(self, session_name: str = "side-launcher", tmux_path: str | None = None):
        """
        Initialize the provider.

        Args:
            session_name: tmux session that hosts the windows.
            tmux_path: Path to tmux (looked up on PATH if None).
        """
        self.session_name = session_name
        self.tmux_path = tmux_path or shutil.which("tmux") or "tmux"

    async def _exec(self, *args: str, env: dict[str, str] | None = None) -> tuple[int, str, str]:
        try:
            process = await asyncio.create_subprocess_exec(
                self.tmux_path,
                *args,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise DispatchError(f"Cannot start tmux ({self.tmux_path}): {e}") from e

        stdout, stderr = await process.communicate()
        return (
            process.returncode or 0,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def tmux(self, *args: str, env: dict[str, str] | None = None) -> str:
        """Run a tmux subcommand, raising DispatchError on failure."""
        returncode, stdout, stderr = await self._exec(*args, env=env)
        if returncode != 0:
            raise DispatchError(f"tmux {args[0]} failed: {stderr.strip() or returncode}")
        return stdout

    async def has_session(self) -> bool:
        returncode, _, _ = await self._exec("has-session", "-t", f"={self.session_name}")
        return returncode == 0

    async def get_or_create(self, cwd: str, env: dict[str, str]) -> TmuxTerminal:
        """Open a window in ``cwd`` with the context variables of ``env``."""
        env_args: list[str] = []
        for key in CONTEXT_KEYS:
            if key in env:
                env_args.extend(["-e", f"{key}={env[key]}"])

        if await self.has_session():
            logger.debug(f"Opening window in tmux session {self.session_name}")
            output = await self.tmux(
                "new-window",
                "-t",
                f"={self.session_name}:",
                "-c",
                cwd,
                *env_args,
                "-P",
                "-F",
                "#{window_id}",
                env=env,
            )
        else:
            logger.info(f"Creating tmux session {self.session_name}")
            output = await self.tmux(
                "new-session",
                "-d",
                "-s",
                self.session_name,
                "-c",
                cwd,
                *env_args,
                "-P",
                "-F",
                "#{window_id}",
                env=env,
            )

        window_id = output.strip()
        if not window_id:
            raise DispatchError("tmux did not report the new window")
        return TmuxTerminal(self, window_id)


# =============================================================================
# EXECUTOR
# =============================================================================


class TerminalExecutor(BaseExecutor):
    """Types the command into an interactive terminal and returns at once."""

    task_type = TaskType.SHELL_ON_VSCODE

    def __init__(self, provider: TerminalProvider) -> None:
        self.provider = provider

    async def run(
        self,
        command: str,
        context: ExecutionContext,
        env: dict[str, str],
    ) -> CommandResult:
        """Send ``command`` to a terminal; the result only confirms delivery."""
        terminal = await self.provider.get_or_create(context.workspace_root, env)
        await terminal.show()
        await terminal.send_text(command)

        logger.info(f"Sent to terminal {terminal!r}: {command}")
        return CommandResult(
            command=command,
            stdout=f"Command sent to terminal: {command}",
            stderr="",
        )
