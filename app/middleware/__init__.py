"""ASGI middleware applied in app.main (last added = outermost)."""

from app.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
