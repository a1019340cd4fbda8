"""WebSocket connection manager.

Holds active connections per user and broadcasts server events.
Use via app.state.ws_manager (set in lifespan).
"""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import WebSocket

from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """Manages WebSocket connections keyed by user id.

    - A user may hold several connections (one per open client).
    - Events are broadcast to every connection.
    - Bookkeeping is lock-protected for concurrent access.
    """

    def __init__(self) -> None:
        self._connections_by_user: dict[str, set[WebSocket]] = {}
        self._websocket_to_user: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: str) -> None:
        """Accept and register a new connection for user_id (the JWT subject)."""
        await websocket.accept()
        async with self._lock:
            self._connections_by_user.setdefault(user_id, set()).add(websocket)
            self._websocket_to_user[websocket] = user_id

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a connection (call on disconnect)."""
        async with self._lock:
            self._forget(websocket)

    def _forget(self, websocket: WebSocket) -> None:
        user_id = self._websocket_to_user.pop(websocket, None)
        conns = self._connections_by_user.get(user_id) if user_id else None
        if conns is None:
            return
        conns.discard(websocket)
        if not conns:
            del self._connections_by_user[user_id]

    async def broadcast(self, message: str | dict[str, Any]) -> None:
        """Send a message to all connected clients."""
        async with self._lock:
            snapshot = [
                ws for conns in self._connections_by_user.values() for ws in conns
            ]
        await self._send_to_list(snapshot, message)

    async def _send_to_list(
        self,
        connections: list[WebSocket],
        message: str | dict[str, Any],
    ) -> None:
        """Send message to a list of connections; remove dead ones under lock."""
        dead: list[WebSocket] = []
        for ws in connections:
            try:
                if isinstance(message, dict):
                    await ws.send_json(message)
                else:
                    await ws.send_text(message)
            except Exception:
                logger.debug("Dropping dead websocket", exc_info=True)
                dead.append(ws)
        if dead:
            async with self._lock:
                for ws in dead:
                    self._forget(ws)

    async def get_connection_count(self) -> int:
        """Return the total number of active connections (lock-safe)."""
        async with self._lock:
            return sum(len(c) for c in self._connections_by_user.values())


class WebSocketEventPublisher:
    """IEventPublisher that broadcasts {"event": name, **payload} to every client."""

    def __init__(self, manager: ConnectionManager) -> None:
        self._manager = manager

    async def publish(self, event: str, payload: dict[str, Any]) -> None:
        await self._manager.broadcast({"event": event, **payload})
