"""Background job handlers for the user lifecycle.

Registered with the job queue worker by JobName. Handlers return a bool or
count for logging and tests; a missing user is a skip, not a failure, because
the row may already have been purged by an earlier job.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from app.application.dtos.job import JobItem
from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import (
    IAlbumRepository,
    IJobRepository,
    IUserRepository,
)
from app.application.interfaces.services import (
    IEventPublisher,
    INotificationService,
    IStorageService,
)
from app.domain.enums import JobName, UserStatus
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import is_older_than

logger = get_logger(__name__)

USER_DELETE_EVENT = "userDelete"


class UserJobService:
    """Handlers for notify-signup, user-deletion and user-delete-check jobs."""

    def __init__(
        self,
        user_repo: IUserRepository,
        album_repo: IAlbumRepository,
        job_repo: IJobRepository,
        storage: IStorageService,
        notifications: INotificationService,
        publisher: IEventPublisher,
        *,
        delete_delay: timedelta,
    ) -> None:
        self._user_repo = user_repo
        self._album_repo = album_repo
        self._job_repo = job_repo
        self._storage = storage
        self._notifications = notifications
        self._publisher = publisher
        self._delete_delay = delete_delay

    def is_ready_for_deletion(self, user: UserResult) -> bool:
        """True once a soft-deleted user has waited out the delete delay.

        A REMOVING user was force-deleted and is always due; the first purge
        attempt did not finish.
        """
        if user.status == UserStatus.REMOVING:
            return True
        return is_older_than(user.deleted_at, self._delete_delay)

    async def notify_signup(self, data: dict[str, Any]) -> bool:
        """Send the welcome notification for a newly created user."""
        user = await self._user_repo.get(data["id"], with_deleted=True)
        if user is None:
            logger.warning("notify-signup: user %s no longer exists", data["id"])
            return False
        await self._notifications.send_signup(user, data.get("temp_password"))
        return True

    async def user_deletion(self, data: dict[str, Any]) -> bool:
        """Purge a user: storage folders, albums, then the row; publish userDelete.

        Without force the purge only runs once the delete delay has passed.
        """
        user = await self._user_repo.get(data["id"], with_deleted=True)
        if user is None:
            logger.info("user-deletion: user %s already removed", data["id"])
            return False
        if not data.get("force") and not self.is_ready_for_deletion(user):
            logger.info("user-deletion: user %s not due yet, skipping", user.id)
            return False

        removed = await self._storage.remove_user_folders(user)
        logger.debug("user-deletion: removed %d folders for %s", len(removed), user.id)
        await self._album_repo.delete_all(user.id)
        await self._user_repo.delete(user.id)
        logger.info("user-deletion: user %s purged", user.id)

        await self._publisher.publish(USER_DELETE_EVENT, {"id": user.id})
        return True

    async def user_delete_check(self, data: dict[str, Any] | None = None) -> int:
        """Queue user-deletion jobs for every soft-deleted user that is due.

        REMOVING users are re-queued with force so a purge lost to a crash or
        a failed handler is retried.
        """
        queued = 0
        for user in await self._user_repo.get_deleted():
            if not self.is_ready_for_deletion(user):
                continue
            payload: dict[str, Any] = {"id": user.id}
            if user.status == UserStatus.REMOVING:
                payload["force"] = True
            await self._job_repo.queue(JobItem(JobName.USER_DELETION, payload))
            queued += 1
        if queued:
            logger.info("user-delete-check: queued %d deletions", queued)
        return queued
