"""Signup notification: log-only sender."""

from __future__ import annotations

from app.application.dtos.user import UserResult
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class LogOnlyNotificationService:
    """INotificationService implementation that logs instead of sending email.

    Use when no SMTP is configured. The temporary password is never logged.
    """

    async def send_signup(self, user: UserResult, temp_password: str | None) -> None:
        logger.info(
            "Signup notify: would send welcome email to user %s (temporary password: %s)",
            user.id,
            "yes" if temp_password else "no",
        )
