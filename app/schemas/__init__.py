"""Pydantic request/response schemas for the API."""

from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.health import HealthResponse
from app.schemas.job import JobQueuedResponse
from app.schemas.user import (
    UserAdminCreateRequest,
    UserAdminDeleteRequest,
    UserAdminResponse,
    UserAdminUpdateRequest,
    UserResponse,
)

__all__ = [
    "HealthResponse",
    "JobQueuedResponse",
    "LoginRequest",
    "TokenResponse",
    "UserAdminCreateRequest",
    "UserAdminDeleteRequest",
    "UserAdminResponse",
    "UserAdminUpdateRequest",
    "UserResponse",
]
