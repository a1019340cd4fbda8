"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.user import UserResult


# Password hashing interface
class IPasswordHasher(Protocol):
    """Protocol for password hashing (blocking; call via asyncio.to_thread)."""

    def hash_password(self, password: str) -> str:
        """Return a salted hash of password."""


# Storage interface
class IStorageService(Protocol):
    """Protocol for removing a user's files from storage."""

    async def remove_user_folders(self, user: UserResult) -> list[str]:
        """Delete every folder owned by user; return the paths removed."""


# Notification interface
class INotificationService(Protocol):
    """Protocol for sending account notifications (e.g. welcome email)."""

    async def send_signup(self, user: UserResult, temp_password: str | None) -> None:
        """Notify a newly created user; temp_password is set when a change is required."""


# Event publisher interface
class IEventPublisher(Protocol):
    """Protocol for pushing server events to connected clients."""

    async def publish(self, event: str, payload: dict[str, Any]) -> None:
        """Broadcast event with payload to all subscribers."""
