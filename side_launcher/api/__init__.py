"""
side-launcher UI channel.

Message types and result sinks. The FastAPI WebSocket server lives in
``side_launcher.api.main`` and is imported on demand.
"""

from side_launcher.api.channel import (
    Channel,
    ChannelSink,
    RecordingChannel,
    RecordingSink,
    ResultSink,
)
from side_launcher.api.messages import (
    CommandOutput,
    ReloadTasks,
    RunCommand,
    ShowHelp,
    TasksUpdated,
    parse_inbound,
    parse_outbound,
    to_wire,
)

__all__ = [
    "Channel",
    "ChannelSink",
    "CommandOutput",
    "RecordingChannel",
    "RecordingSink",
    "ReloadTasks",
    "ResultSink",
    "RunCommand",
    "ShowHelp",
    "TasksUpdated",
    "parse_inbound",
    "parse_outbound",
    "to_wire",
]
