"""Admin user lifecycle: search, create, update, delete and restore accounts.

Orchestration only. Each operation awaits its collaborators in order and
lets their exceptions propagate; nothing already written is compensated
here (the request transaction decides what is committed).

Status transitions driven from here:
    ACTIVE --delete--> DELETED --restore--> ACTIVE
    ACTIVE --delete(force)--> REMOVING --user-deletion job--> row removed
"""

from __future__ import annotations

from app.application.dtos.job import JobItem
from app.application.dtos.user import (
    AuthContext,
    UserAdminCreate,
    UserAdminDelete,
    UserAdminSearch,
    UserAdminUpdate,
    UserResult,
)
from app.application.interfaces.repositories import (
    IAlbumRepository,
    IJobRepository,
    IUserRepository,
)
from app.application.services.preferences import (
    get_preferences,
    get_preferences_partial,
)
from app.application.services.user_service import UserService
from app.domain.enums import JobName, UserMetadataKey, UserStatus
from app.domain.exceptions import (
    AuthorizationException,
    UserNotFoundException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.datetime import utc_now

logger = get_logger(__name__)

PREFERENCE_SHORTCUT_FIELDS = frozenset({"memories_enabled", "avatar_color"})


class UserAdminService:
    """Admin operations on user accounts.

    Collaborators are passed explicitly; the service holds no state between calls.
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        album_repo: IAlbumRepository,
        job_repo: IJobRepository,
        user_core: UserService,
    ) -> None:
        self._user_repo = user_repo
        self._album_repo = album_repo
        self._job_repo = job_repo
        self._user_core = user_core

    async def search(self, auth: AuthContext, dto: UserAdminSearch) -> list[UserResult]:
        """Return all users, including soft-deleted ones when dto.with_deleted."""
        return await self._user_repo.get_list(with_deleted=dto.with_deleted)

    async def get(self, auth: AuthContext, user_id: str, *, with_deleted: bool = False) -> UserResult:
        """Return one user or raise UserNotFoundException."""
        return await self._find_or_fail(user_id, with_deleted=with_deleted)

    async def create(self, dto: UserAdminCreate) -> UserResult:
        """Create a user; optionally disable memories and queue a signup notification."""
        user = await self._user_core.create_user(dto)

        if dto.memories_enabled is False:
            await self._user_repo.upsert_metadata(
                user.id,
                UserMetadataKey.PREFERENCES,
                {"memories": {"enabled": False}},
            )
            user = await self._find_or_fail(user.id)

        temp_password = dto.password if user.should_change_password else None
        if dto.notify:
            await self._job_repo.queue(
                JobItem(
                    JobName.NOTIFY_SIGNUP,
                    {"id": user.id, "temp_password": temp_password},
                )
            )
        return user

    async def update(
        self, auth: AuthContext, user_id: str, dto: UserAdminUpdate
    ) -> UserResult:
        """Update a user; quota changes resync usage first, preference shortcuts go to metadata."""
        if not auth.user.is_admin and auth.user.id != user_id:
            raise AuthorizationException(message="You are not allowed to update this user")
        user = await self._find_or_fail(user_id)

        # Resync compares against the stored quota, so it must run before the patch.
        if (
            dto.has("quota_size_in_bytes")
            and dto.quota_size_in_bytes != user.quota_size_in_bytes
        ):
            await self._user_repo.sync_usage(user_id)

        if dto.has("memories_enabled") or dto.avatar_color is not None:
            new_preferences = get_preferences(user)
            if dto.has("memories_enabled") and dto.memories_enabled is not None:
                new_preferences.memories.enabled = dto.memories_enabled
            if dto.avatar_color is not None:
                new_preferences.avatar.color = dto.avatar_color
            await self._user_repo.upsert_metadata(
                user_id,
                UserMetadataKey.PREFERENCES,
                get_preferences_partial(user, new_preferences),
            )

        changes = dto.patch(exclude=set(PREFERENCE_SHORTCUT_FIELDS))
        return await self._user_core.update_user(auth.user, user_id, changes)

    async def delete(
        self, auth: AuthContext, user_id: str, dto: UserAdminDelete
    ) -> UserResult:
        """Soft-delete a user (DELETED) or, with force, mark REMOVING and queue the purge."""
        user = await self._find_or_fail(user_id)
        if user.is_admin:
            raise AuthorizationException(message="Cannot delete admin user")

        await self._album_repo.soft_delete_all(user_id)

        status = UserStatus.REMOVING if dto.force else UserStatus.DELETED
        updated = await self._user_repo.update(
            user_id, {"status": status, "deleted_at": utc_now()}
        )
        logger.info("User %s marked %s by %s", user_id, status.value, auth.user.id)

        if dto.force:
            await self._job_repo.queue(
                JobItem(JobName.USER_DELETION, {"id": updated.id, "force": True})
            )
        return updated

    async def restore(self, auth: AuthContext, user_id: str) -> UserResult:
        """Restore a soft-deleted user and their albums. Restoring an active user is a no-op success."""
        user = await self._find_or_fail(user_id, with_deleted=True)
        if user.status == UserStatus.REMOVING:
            raise ValidationException("User is being removed and cannot be restored")

        await self._album_repo.restore_all(user_id)
        restored = await self._user_repo.update(
            user_id, {"deleted_at": None, "status": UserStatus.ACTIVE}
        )
        logger.info("User %s restored by %s", user_id, auth.user.id)
        return restored

    async def _find_or_fail(self, user_id: str, *, with_deleted: bool = False) -> UserResult:
        user = await self._user_repo.get(user_id, with_deleted=with_deleted)
        if user is None:
            raise UserNotFoundException(user_id)
        return user
