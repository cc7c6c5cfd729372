"""Result sinks and outbound channels.

A channel is passed in per call rather than held globally, so several
sessions (windows, sockets, tests) never share a UI handle.
"""

import inspect
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from side_launcher.core.state import CommandResult

from .messages import CommandOutput, ShowHelp, TasksUpdated


@runtime_checkable
class ResultSink(Protocol):
    """Consumer of dispatch results. May be sync or async."""

    def deliver(self, result: CommandResult) -> Any: ...


@runtime_checkable
class Channel(Protocol):
    """Outbound message transport to one UI session."""

    async def send(self, message: CommandOutput | TasksUpdated | ShowHelp) -> None: ...


async def deliver(sink: ResultSink, result: CommandResult) -> None:
    """Hand ``result`` to ``sink``; sink failures are logged, never raised."""
    try:
        outcome = sink.deliver(result)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as e:
        logger.error(f"Result sink {type(sink).__name__} failed: {e}")


class RecordingSink:
    """Sink that keeps every result it receives."""

    def __init__(self) -> None:
        self.results: list[CommandResult] = []

    def deliver(self, result: CommandResult) -> None:
        self.results.append(result)


class ChannelSink:
    """Sink that forwards results to a channel as ``commandOutput`` messages."""

    def __init__(self, channel: Channel) -> None:
        self.channel = channel

    async def deliver(self, result: CommandResult) -> None:
        await self.channel.send(CommandOutput(output=result))


class RecordingChannel:
    """Channel that keeps every message sent through it."""

    def __init__(self) -> None:
        self.messages: list[CommandOutput | TasksUpdated | ShowHelp] = []

    async def send(self, message: CommandOutput | TasksUpdated | ShowHelp) -> None:
        self.messages.append(message)

    def of_type(self, message_type: type) -> list[Any]:
        """Messages of a given class, in send order."""
        return [m for m in self.messages if isinstance(m, message_type)]
