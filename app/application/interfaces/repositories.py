"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from app.domain.enums import UserMetadataKey

if TYPE_CHECKING:
    from app.application.dtos.job import JobItem
    from app.application.dtos.user import UserResult, UserToPersist


# User repository interface
class IUserRepository(Protocol):
    """Protocol for user persistence (DIP)."""

    async def get(self, user_id: str, *, with_deleted: bool = False) -> UserResult | None:
        """Return user by id; soft-deleted users only when with_deleted is True."""

    async def get_by_email(
        self, email: str, *, with_deleted: bool = False
    ) -> UserResult | None:
        """Return user by email (case-insensitive)."""

    async def get_admin(self) -> UserResult | None:
        """Return any admin user, or None when no admin exists yet."""

    async def get_list(self, *, with_deleted: bool = False) -> list[UserResult]:
        """Return all users, oldest first."""

    async def get_deleted(self) -> list[UserResult]:
        """Return every user with deleted_at set (DELETED and REMOVING)."""

    async def create(self, data: UserToPersist) -> UserResult:
        """Insert a user row; duplicate email or storage label raises a domain exception."""

    async def update(self, user_id: str, changes: dict[str, Any]) -> UserResult:
        """Apply column changes and return the updated user (deleted rows included)."""

    async def upsert_metadata(
        self, user_id: str, key: UserMetadataKey, value: dict[str, Any]
    ) -> None:
        """Insert or replace the metadata value stored under key."""

    async def sync_usage(self, user_id: str) -> None:
        """Recompute quota_usage_in_bytes from the user's assets."""

    async def delete(self, user_id: str) -> None:
        """Physically remove the user row (cascades to metadata, albums, assets)."""

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        """Return the active user when email and password match, else None."""


# Album repository interface
class IAlbumRepository(Protocol):
    """Protocol for album cascade operations tied to a user's lifecycle."""

    async def soft_delete_all(self, user_id: str) -> None:
        """Mark every album owned by user_id as deleted."""

    async def restore_all(self, user_id: str) -> None:
        """Clear deleted_at on every album owned by user_id."""

    async def delete_all(self, user_id: str) -> None:
        """Physically remove every album owned by user_id."""


# Job queue interface
class IJobRepository(Protocol):
    """Protocol for the fire-and-forget job queue."""

    async def queue(self, item: JobItem) -> None:
        """Enqueue a job; raise JobQueueClosedException when not accepting work."""
