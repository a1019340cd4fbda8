"""Application DTOs (no ORM dependency)."""

from app.application.dtos.job import JobItem
from app.application.dtos.preferences import UserPreferences
from app.application.dtos.user import (
    AuthContext,
    UserAdminCreate,
    UserAdminDelete,
    UserAdminSearch,
    UserAdminUpdate,
    UserMetadataItem,
    UserResult,
    UserToPersist,
)

__all__ = [
    "AuthContext",
    "JobItem",
    "UserAdminCreate",
    "UserAdminDelete",
    "UserAdminSearch",
    "UserAdminUpdate",
    "UserMetadataItem",
    "UserPreferences",
    "UserResult",
    "UserToPersist",
]
