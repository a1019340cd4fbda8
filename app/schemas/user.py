"""User API schemas.

Request models ignore unknown fields, so a client sending is_admin on create
cannot make an admin. Responses are built from UserResult with the effective
preferences resolved.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.application.dtos.user import UserResult
from app.application.services.preferences import get_preferences
from app.domain.enums import UserAvatarColor, UserStatus

PASSWORD_MIN_LENGTH = 8


class UserAdminCreateRequest(BaseModel):
    """Request body for POST /admin/users."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    name: str = Field(..., min_length=1, max_length=255)
    storage_label: str | None = Field(default=None, max_length=128)
    quota_size_in_bytes: int | None = Field(default=None, ge=0)
    should_change_password: bool = True
    memories_enabled: bool | None = None
    notify: bool = False


class UserAdminUpdateRequest(BaseModel):
    """Request body for PUT /admin/users/{id}. Only fields present in the body are applied.

    Nulls pass schema validation on purpose: the service decides which
    fields may be cleared (quota_size_in_bytes, storage_label) and rejects the rest.
    """

    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=PASSWORD_MIN_LENGTH)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    storage_label: str | None = Field(default=None, max_length=128)
    quota_size_in_bytes: int | None = Field(default=None, ge=0)
    should_change_password: bool | None = None
    is_admin: bool | None = None
    memories_enabled: bool | None = None
    avatar_color: UserAvatarColor | None = None


class UserAdminDeleteRequest(BaseModel):
    """Optional body for DELETE /admin/users/{id}."""

    force: bool = False


class UserResponse(BaseModel):
    """Public user view (no password, no admin fields)."""

    id: str
    email: str
    name: str
    profile_image_path: str
    avatar_color: UserAvatarColor

    @classmethod
    def from_result(cls, user: UserResult) -> UserResponse:
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            profile_image_path=user.profile_image_path,
            avatar_color=get_preferences(user).avatar.color,
        )


class UserAdminResponse(UserResponse):
    """Admin user view: status, quota and lifecycle timestamps."""

    is_admin: bool
    status: UserStatus
    should_change_password: bool
    storage_label: str | None
    quota_size_in_bytes: int | None
    quota_usage_in_bytes: int
    memories_enabled: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None

    @classmethod
    def from_result(cls, user: UserResult) -> UserAdminResponse:
        preferences = get_preferences(user)
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            profile_image_path=user.profile_image_path,
            avatar_color=preferences.avatar.color,
            is_admin=user.is_admin,
            status=user.status,
            should_change_password=user.should_change_password,
            storage_label=user.storage_label,
            quota_size_in_bytes=user.quota_size_in_bytes,
            quota_usage_in_bytes=user.quota_usage_in_bytes,
            memories_enabled=preferences.memories.enabled,
            created_at=user.created_at,
            updated_at=user.updated_at,
            deleted_at=user.deleted_at,
        )
