"""WebSocket connection manager and event publisher.

Used by the WebSocket endpoint and the job handlers to push server events.
"""

from app.api.websocket.manager import ConnectionManager, WebSocketEventPublisher

__all__ = ["ConnectionManager", "WebSocketEventPublisher"]
