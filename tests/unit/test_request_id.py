"""Request id middleware and log record stamping."""

import logging

from app.middleware.request_id import RequestIDMiddleware, resolve_request_id
from app.shared.telemetry.logging import RequestIdFilter, request_id_var


def _record() -> logging.LogRecord:
    return logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello", None, None)


def test_resolve_keeps_safe_client_id() -> None:
    assert resolve_request_id(b"abc-123") == "abc-123"
    assert resolve_request_id(b" trace.7_x ") == "trace.7_x"


def test_resolve_replaces_unsafe_or_missing_id() -> None:
    for raw in (None, b"", b"bad id;drop", b"line\nbreak", b"x" * 65):
        replaced = resolve_request_id(raw)
        assert replaced
        assert replaced != (raw or b"").decode("latin-1")


def test_filter_stamps_current_request_id() -> None:
    token = request_id_var.set("req-1")
    try:
        record = _record()
        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "req-1"
    finally:
        request_id_var.reset(token)


def test_filter_outside_request_uses_dash() -> None:
    record = _record()
    RequestIdFilter().filter(record)
    assert record.request_id == "-"


async def test_middleware_binds_id_for_the_request_only() -> None:
    seen: dict[str, object] = {}
    sent: list[dict] = []

    async def inner(scope, receive, send) -> None:
        seen["var"] = request_id_var.get()
        seen["state"] = scope["state"]["request_id"]
        await send({"type": "http.response.start", "status": 204, "headers": []})
        await send({"type": "http.response.body", "body": b""})

    async def receive() -> dict:
        return {"type": "http.request"}

    async def send(message: dict) -> None:
        sent.append(message)

    middleware = RequestIDMiddleware(inner, header_name="X-Request-ID")
    scope = {"type": "http", "headers": [(b"x-request-id", b"abc-123")]}
    await middleware(scope, receive, send)

    assert seen == {"var": "abc-123", "state": "abc-123"}
    assert (b"X-Request-ID", b"abc-123") in sent[0]["headers"]
    assert request_id_var.get() is None


async def test_middleware_ignores_lifespan_scope() -> None:
    calls: list[str] = []

    async def inner(scope, receive, send) -> None:
        calls.append(scope["type"])

    await RequestIDMiddleware(inner)({"type": "lifespan"}, None, None)
    assert calls == ["lifespan"]
