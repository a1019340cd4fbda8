"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses. Every error body has the same shape:
{"statusCode": int, "error": str, "message": str, "details": ...}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import MediaHubException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status; unknown codes are client errors (400).
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "USER_NOT_FOUND": 400,
    "USER_ALREADY_EXISTS": 400,
    "DUPLICATE_EMAIL": 400,
    "DUPLICATE_STORAGE_LABEL": 400,
    "AUTHENTICATION_ERROR": 401,
    "PERMISSION_DENIED": 403,
    "JOB_QUEUE_CLOSED": 503,
    "SERVICE_UNAVAILABLE": 503,
    "STORAGE_DELETE_ERROR": 500,
    "STORAGE_PERMISSION_DENIED": 500,
}


def _error_body(
    status_code: int, error: str, message: Any, details: Any = None
) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "error": error,
        "message": message,
        "details": details if details is not None else {},
    }


def _mediahub_exception_handler(
    request: Request, exc: MediaHubException
) -> JSONResponse:
    """Return JSON from MediaHubException.to_dict() with the mapped status code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    if status >= 500:
        logger.error("%s: %s", exc.error_code, exc.message)
    payload = exc.to_dict()
    return JSONResponse(
        status_code=status,
        content=_error_body(status, payload["error"], payload["message"], payload["details"]),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with validation error details (missing or null required fields)."""
    return JSONResponse(
        status_code=400,
        content=_error_body(
            400,
            "VALIDATION_ERROR",
            "Request validation failed",
            jsonable_encoder(exc.errors()),
        ),
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, "HTTP_ERROR", exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=_error_body(500, "INTERNAL_ERROR", detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: MediaHubException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(MediaHubException, _mediahub_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
