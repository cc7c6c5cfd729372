"""
side-launcher WebSocket server.

Serves the inbound/outbound message protocol to a UI over a WebSocket.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from anyio import to_thread
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from loguru import logger

from side_launcher import __version__
from side_launcher.api.websocket import ConnectionManager
from side_launcher.launcher import Launcher


def create_app(launcher: Launcher | None = None) -> FastAPI:
    """
    Build the FastAPI application around ``launcher``.

    Args:
        launcher: Engine to serve. A default one is created if omitted.

    Returns:
        The configured FastAPI application.
    """
    engine = launcher or Launcher()
    manager = ConnectionManager(engine)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting side-launcher API...")
        yield
        if engine.pending_count:
            logger.warning(f"Shutting down with {engine.pending_count} command(s) still running")
        logger.info("Shutting down side-launcher API...")

    app = FastAPI(
        title="side-launcher API",
        description="Run labeled shell commands from layered configuration",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.launcher = engine
    app.state.connections = manager

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        """
        WebSocket endpoint for the message protocol.

        Clients send ``{"type": "runCommand", "command": "..."}`` or
        ``{"type": "reloadTasks"}`` and receive ``tasksUpdated``,
        ``commandOutput`` and ``showHelp`` messages.
        """
        await manager.connect(websocket)
        try:
            while True:
                data = await websocket.receive_text()
                await manager.handle_message(websocket, data)
        except WebSocketDisconnect:
            manager.disconnect(websocket)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.get("/tasks")
    async def list_tasks() -> dict[str, Any]:
        """Resolve and return the task list with per-source errors."""
        resolution = await to_thread.run_sync(engine.resolve)
        return {
            "tasks": [task.to_dict() for task in resolution.tasks],
            "errors": resolution.errors,
        }

    @app.get("/api/ws-status")
    async def ws_status() -> dict[str, int]:
        """Get WebSocket connection status."""
        return {"active_connections": manager.connection_count}

    return app
