"""WebSocket endpoint: single /ws that uses the connection manager from app.state.

Requires a valid JWT via query param ?token=... before registering the
connection. The server only pushes; client frames are read and ignored so
disconnects are noticed.
"""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.infrastructure.security.jwt import verify_token

router = APIRouter()


async def _reject_websocket(websocket: WebSocket, reason: str, code: int = 1008) -> None:
    """Accept then immediately close with code/reason so client gets a proper close frame."""
    await websocket.accept()
    await websocket.close(code=code, reason=reason)


@router.websocket("")
async def websocket_endpoint(websocket: WebSocket):
    """Accept WebSocket only after validating token; register with manager and handle disconnect."""
    manager = websocket.app.state.ws_manager
    token = websocket.query_params.get("token")
    if not token:
        await _reject_websocket(websocket, "Missing token")
        return
    try:
        payload = verify_token(token)
    except ValueError:
        await _reject_websocket(websocket, "Invalid token")
        return
    await manager.connect(websocket, payload["sub"])
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(websocket)
