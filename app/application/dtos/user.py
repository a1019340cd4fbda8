"""DTOs for user use cases (no dependency on ORM or presentation schemas)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.enums import UserAvatarColor, UserMetadataKey, UserStatus


@dataclass(frozen=True)
class UserMetadataItem:
    """One metadata row attached to a user (e.g. stored preference overrides)."""

    key: UserMetadataKey
    value: dict[str, Any]


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get, create, update, etc.). No password."""

    id: str
    email: str
    name: str
    is_admin: bool
    status: UserStatus
    should_change_password: bool
    quota_size_in_bytes: int | None
    quota_usage_in_bytes: int
    storage_label: str | None
    profile_image_path: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
    metadata: tuple[UserMetadataItem, ...] = ()


@dataclass(frozen=True)
class UserToPersist:
    """New user row ready for insert (password already hashed)."""

    email: str
    name: str
    password_hash: str
    is_admin: bool = False
    should_change_password: bool = True
    quota_size_in_bytes: int | None = None
    storage_label: str | None = None


@dataclass(frozen=True)
class AuthContext:
    """Authenticated principal for the current request."""

    user: UserResult


@dataclass(frozen=True)
class UserAdminCreate:
    """Command: admin creates a user account."""

    email: str
    password: str
    name: str
    quota_size_in_bytes: int | None = None
    storage_label: str | None = None
    should_change_password: bool = True
    # TODO: replace with a full preferences object on create
    memories_enabled: bool | None = None
    notify: bool = False


@dataclass(frozen=True)
class UserAdminUpdate:
    """Command: partial update of a user. Only names in fields_set are applied.

    Build with from_changes() so presence is tracked separately from value
    (e.g. quota_size_in_bytes=None means "unlimited", not "absent").
    """

    email: str | None = None
    password: str | None = None
    name: str | None = None
    storage_label: str | None = None
    quota_size_in_bytes: int | None = None
    should_change_password: bool | None = None
    is_admin: bool | None = None
    memories_enabled: bool | None = None
    avatar_color: UserAvatarColor | None = None
    fields_set: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_changes(cls, **changes: Any) -> UserAdminUpdate:
        """Build a command carrying exactly the given fields."""
        return cls(**changes, fields_set=frozenset(changes))

    def has(self, name: str) -> bool:
        """Return True if the field was supplied by the caller."""
        return name in self.fields_set

    def patch(self, exclude: set[str] | None = None) -> dict[str, Any]:
        """Return supplied fields as a dict, minus excluded names."""
        skip = exclude or set()
        return {
            name: getattr(self, name)
            for name in sorted(self.fields_set)
            if name not in skip
        }


@dataclass(frozen=True)
class UserAdminDelete:
    """Command: delete a user. force=True queues an irreversible purge."""

    force: bool = False


@dataclass(frozen=True)
class UserAdminSearch:
    """Command: list users, optionally including soft-deleted ones."""

    with_deleted: bool = False
