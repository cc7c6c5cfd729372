"""
WebSocket Connection Manager.

Bridges WebSocket clients to the launcher's message protocol.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastapi import WebSocket
from loguru import logger
from pydantic import ValidationError

from side_launcher.api.messages import CommandOutput, ShowHelp, TasksUpdated, parse_inbound, to_wire

if TYPE_CHECKING:
    from side_launcher.launcher import Launcher


class WebSocketChannel:
    """Outbound channel writing JSON messages to one WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    async def send(self, message: CommandOutput | TasksUpdated | ShowHelp) -> None:
        await self.websocket.send_text(json.dumps(to_wire(message)))


class ConnectionManager:
    """
    Manages WebSocket connections.

    Every connection gets its own channel, so results of a command go back
    only to the client that asked for it.
    """

    def __init__(self, launcher: Launcher) -> None:
        """Initialize the connection manager."""
        self.launcher = launcher
        self.channels: dict[WebSocket, WebSocketChannel] = {}

    @property
    def connection_count(self) -> int:
        return len(self.channels)

    async def connect(self, websocket: WebSocket) -> WebSocketChannel:
        """
        Accept new WebSocket connection and send it the current task list.

        Args:
            websocket: The WebSocket connection to accept.
        """
        await websocket.accept()
        channel = WebSocketChannel(websocket)
        self.channels[websocket] = channel
        logger.info(f"Client connected. Total: {len(self.channels)}")
        await self.launcher.reload(channel)
        return channel

    def disconnect(self, websocket: WebSocket) -> None:
        """
        Handle WebSocket disconnection.

        Args:
            websocket: The WebSocket connection that disconnected.
        """
        self.channels.pop(websocket, None)
        logger.info(f"Client disconnected. Total: {len(self.channels)}")

    async def handle_message(self, websocket: WebSocket, data: str) -> None:
        """
        Handle incoming WebSocket message.

        Unknown or malformed messages are logged and ignored.

        Args:
            websocket: The WebSocket that sent the message.
            data: The raw message data (JSON string).
        """
        channel = self.channels.get(websocket)
        if channel is None:
            logger.warning("Message from unknown connection ignored")
            return

        try:
            message = parse_inbound(data)
        except ValidationError as e:
            logger.warning(f"Invalid WebSocket message: {data[:200]} ({e.error_count()} error(s))")
            return

        await self.launcher.handle_message(message, channel)
