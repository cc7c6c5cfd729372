"""Main side-launcher engine - resolution, dispatch and message handling.

This module provides the primary interface for embedding side-launcher:
it resolves the task list from every configuration source, executes tasks,
and answers inbound UI messages on a caller-supplied channel.
"""

import asyncio
import sys
from pathlib import Path
from typing import assert_never

from anyio import to_thread
from loguru import logger

from side_launcher.api.channel import Channel, ChannelSink, ResultSink
from side_launcher.api.messages import ReloadTasks, RunCommand, ShowHelp, TasksUpdated
from side_launcher.core.config import Settings, get_settings
from side_launcher.core.host import LocalWorkspaceHost, WorkspaceHost
from side_launcher.core.state import CommandResult, ExecutionContext, Resolution, TaskDefinition
from side_launcher.sessions.router import Dispatcher
from side_launcher.sessions.terminal import TerminalProvider, TmuxTerminalProvider
from side_launcher.sources.merger import default_help_task, resolve
from side_launcher.sources.readers import build_sources


class Launcher:
    """
    Main side-launcher engine.

    Resolution and dispatch are independent: a dispatch works on the task it
    was handed, and re-resolving never affects dispatches already running.

    Example:
        >>> launcher = Launcher()
        >>> tasks = launcher.resolve_tasks()
        >>> result = await launcher.execute(tasks[0])
        >>> print(result.stdout)
    """

    def __init__(
        self,
        host: WorkspaceHost | None = None,
        settings: Settings | None = None,
        terminals: TerminalProvider | None = None,
    ) -> None:
        """Initialize the launcher.

        Args:
            host: Workspace host. Defaults to the current directory as the
                only folder.
            settings: Optional settings override. Uses default if not provided.
            terminals: Terminal provider for ``shellOnVSCode`` tasks. Defaults
                to tmux.
        """
        self.settings = settings or get_settings()
        self.host = host or LocalWorkspaceHost.create(folders=[Path.cwd()], settings=self.settings)
        self.dispatcher = Dispatcher(
            self.host,
            terminals or TmuxTerminalProvider(self.settings.terminal_session),
            shell=self.settings.shell,
        )
        self.help_task = default_help_task(self.settings.external_tasks_path)
        self._tasks: list[TaskDefinition] = []
        self._pending: set[asyncio.Task[CommandResult]] = set()

    def configure_logging(self) -> None:
        """Configure loguru based on settings."""
        logger.remove()  # Remove default handler

        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
        level = "DEBUG" if self.settings.debug else self.settings.log_level

        logger.add(sys.stderr, level=level, format=log_format, colorize=True)

        if self.settings.log_file:
            logger.add(
                self.settings.log_file,
                rotation="1 day",
                retention="7 days",
                level=level,
                format=log_format,
            )

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def resolve(self) -> Resolution:
        """Read every source and merge them, keeping per-source reports."""
        resolution = resolve(build_sources(self.host, self.settings), self.help_task)
        self._tasks = resolution.tasks
        return resolution

    def resolve_tasks(self) -> list[TaskDefinition]:
        """Resolve and return the merged task list."""
        return self.resolve().tasks

    @property
    def tasks(self) -> list[TaskDefinition]:
        """Task list from the most recent resolution."""
        return list(self._tasks)

    def is_help_only(self, tasks: list[TaskDefinition]) -> bool:
        """Check if ``tasks`` is just the synthesized help task."""
        return tasks == [self.help_task]

    def find_task(self, label: str) -> TaskDefinition | None:
        """Return the first resolved task with ``label``."""
        tasks = self._tasks or self.resolve_tasks()
        return next((t for t in tasks if t.label == label), None)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    async def execute(
        self,
        task: TaskDefinition,
        context: ExecutionContext | None = None,
    ) -> CommandResult:
        """Execute ``task``, building a fresh context unless one is given."""
        if context is None:
            return await self.dispatcher.dispatch(task, _NullSink())
        return await self.dispatcher.execute(task, context)

    async def dispatch(self, task: TaskDefinition, sink: ResultSink) -> CommandResult:
        """Execute ``task`` and deliver the result to ``sink``."""
        return await self.dispatcher.dispatch(task, sink)

    def start_dispatch(self, task: TaskDefinition, sink: ResultSink) -> asyncio.Task[CommandResult]:
        """Dispatch ``task`` in the background; the result goes to ``sink``."""
        pending = asyncio.create_task(self.dispatcher.dispatch(task, sink))
        self._pending.add(pending)
        pending.add_done_callback(self._pending.discard)
        return pending

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def wait_for_pending(self) -> list[CommandResult]:
        """Wait for every background dispatch started so far."""
        if not self._pending:
            return []
        return list(await asyncio.gather(*self._pending))

    # =========================================================================
    # MESSAGES
    # =========================================================================

    async def reload(self, channel: Channel) -> Resolution:
        """Re-resolve off the event loop and publish the list to ``channel``."""
        resolution = await to_thread.run_sync(self.resolve)
        await channel.send(TasksUpdated(tasks=resolution.tasks))
        if self.is_help_only(resolution.tasks):
            await channel.send(ShowHelp())
        return resolution

    async def handle_message(self, message: RunCommand | ReloadTasks, channel: Channel) -> None:
        """Act on one inbound message; replies go to ``channel``."""
        if isinstance(message, RunCommand):
            logger.info(f"Received runCommand: {message.command}")
            self.start_dispatch(message.to_task(), ChannelSink(channel))
        elif isinstance(message, ReloadTasks):
            logger.info("Received reloadTasks")
            await self.reload(channel)
        else:
            assert_never(message)


class _NullSink:
    """Sink for callers that only want the return value."""

    def deliver(self, result: CommandResult) -> None:
        pass
