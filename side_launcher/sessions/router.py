"""
Dispatcher for side-launcher.

Picks the executor for a task's type, builds the execution context and
environment, and guarantees exactly one ``CommandResult`` per invocation.
"""

from loguru import logger

from side_launcher.api.channel import ResultSink, deliver
from side_launcher.core.host import WorkspaceHost
from side_launcher.core.state import CommandResult, ExecutionContext, TaskDefinition, TaskType

from .base import BaseExecutor, failure_result
from .environment import EnvironmentBuilder, build_overlay
from .shell import ShellExecutor
from .terminal import TerminalExecutor, TerminalProvider


class Dispatcher:
    """
    Executes tasks and reports their results.

    Dispatches are independent: each builds its own context and environment,
    and nothing limits, queues or orders concurrent invocations.

    Example:
        >>> dispatcher = Dispatcher(host, TmuxTerminalProvider())
        >>> sink = RecordingSink()
        >>> result = await dispatcher.dispatch(task, sink)
        >>> sink.results == [result]
        True
    """

    def __init__(
        self,
        host: WorkspaceHost,
        terminals: TerminalProvider,
        shell: str | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            host: Source of workspace folders and the active file.
            terminals: Provider used for ``shellOnVSCode`` tasks.
            shell: Interpreter override for ``shell`` tasks.
        """
        self.environment = EnvironmentBuilder(host)
        self._executors: dict[TaskType, BaseExecutor] = {
            TaskType.SHELL: ShellExecutor(shell),
            TaskType.SHELL_ON_VSCODE: TerminalExecutor(terminals),
        }

    def route(self, task: TaskDefinition) -> BaseExecutor:
        """Return the executor for ``task.type``."""
        return self._executors[task.type]

    async def execute(self, task: TaskDefinition, context: ExecutionContext) -> CommandResult:
        """Run ``task`` in ``context``. Never raises."""
        try:
            executor = self.route(task)
            env = build_overlay(context)
            logger.debug(f"Dispatching '{task.label}' as {task.type.value}")
            return await executor.run(task.command, context, env)
        except Exception as e:
            logger.error(f"Failed to dispatch '{task.label}': {e}")
            return failure_result(task.command, e)

    async def dispatch(self, task: TaskDefinition, sink: ResultSink) -> CommandResult:
        """Run ``task`` with a fresh context and deliver the result to ``sink``."""
        try:
            context = self.environment.build()
        except Exception as e:
            logger.error(f"Failed to build context for '{task.label}': {e}")
            result = failure_result(task.command, e)
        else:
            result = await self.execute(task, context)

        await deliver(sink, result)
        return result
