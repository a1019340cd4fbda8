"""Request ID middleware.

Every HTTP request and websocket connection gets a request id: the client's
X-Request-ID when it is a safe token, otherwise a fresh CUID2. The id is
bound to request_id_var for the lifetime of the request so log records carry
it (see RequestIdFilter), and HTTP responses echo it back in the same header.
"""

import re
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

from app.shared.telemetry.logging import request_id_var
from app.shared.utils.generators import generate_cuid

Scope = MutableMapping[str, Any]
Message = MutableMapping[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

# Client ids end up in log lines; anything outside this set is discarded.
SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9_.-]{1,64}")


def resolve_request_id(raw: bytes | None) -> str:
    """Return the client's id when it is a safe token, else a new CUID2."""
    if raw:
        candidate = raw.decode("latin-1").strip()
        if SAFE_REQUEST_ID.fullmatch(candidate):
            return candidate
    return generate_cuid()


class RequestIDMiddleware:
    """Raw ASGI middleware binding a request id to the request context."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name.encode("latin-1")
        self._header_key = self.header_name.lower()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        raw = next(
            (v for k, v in scope.get("headers", []) if k.lower() == self._header_key),
            None,
        )
        request_id = resolve_request_id(raw)
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (self.header_name, request_id.encode("latin-1")),
                ]
            await send(message)

        token = request_id_var.set(request_id)
        try:
            await self.app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)
