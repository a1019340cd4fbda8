"""User repository. Interface methods return application DTOs, never ORM rows."""

from __future__ import annotations

import asyncio
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.application.dtos.user import UserMetadataItem, UserResult, UserToPersist
from app.domain.enums import UserMetadataKey, UserStatus
from app.domain.exceptions import (
    DuplicateEmailException,
    DuplicateStorageLabelException,
    UserAlreadyExistsException,
    UserNotFoundException,
)
from app.infrastructure.persistence.models.asset import Asset
from app.infrastructure.persistence.models.user import User, UserMetadata
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.security.password import get_password_hash, verify_password
from app.shared.utils.datetime import utc_now

# Columns update() may write; anything else is a programming error.
UPDATABLE_COLUMNS = frozenset(
    {
        "email",
        "name",
        "password_hash",
        "is_admin",
        "status",
        "should_change_password",
        "quota_size_in_bytes",
        "storage_label",
        "profile_image_path",
        "deleted_at",
    }
)

# Lazy dummy hash for constant-time comparison when user is not found (timing-attack mitigation).
# Computed on first use in a thread to avoid blocking the event loop at import.
_dummy_hash_cache: str | None = None


async def _get_dummy_hash() -> str:
    """Return a valid bcrypt hash for dummy comparison; computed once in thread pool."""
    global _dummy_hash_cache
    if _dummy_hash_cache is None:
        _dummy_hash_cache = await asyncio.to_thread(
            get_password_hash, "not-a-real-password"
        )
    return _dummy_hash_cache


def _is_storage_label_violation(exc: IntegrityError) -> bool:
    return "storage_label" in str(exc.orig)


def _user_to_result(u: User) -> UserResult:
    """Map ORM User (with metadata loaded) to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        email=u.email,
        name=u.name,
        is_admin=u.is_admin,
        status=UserStatus(u.status),
        should_change_password=u.should_change_password,
        quota_size_in_bytes=u.quota_size_in_bytes,
        quota_usage_in_bytes=u.quota_usage_in_bytes,
        storage_label=u.storage_label,
        profile_image_path=u.profile_image_path,
        created_at=u.created_at,
        updated_at=u.updated_at,
        deleted_at=u.deleted_at,
        metadata=tuple(
            UserMetadataItem(key=UserMetadataKey(item.key), value=dict(item.value))
            for item in u.metadata_items
        ),
    )


class UserRepository(BaseRepository[User]):
    """User repository: lookups with soft-delete filtering, patch updates, metadata and usage."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db)

    def _select(self, *, with_deleted: bool = False):
        # populate_existing: metadata rows written through upsert_metadata must
        # replace a collection already sitting in the identity map.
        stmt = (
            select(User)
            .options(selectinload(User.metadata_items))
            .execution_options(populate_existing=True)
        )
        if not with_deleted:
            stmt = stmt.where(User.deleted_at.is_(None))
        return stmt

    async def _get_model(self, user_id: str, *, with_deleted: bool = False) -> User | None:
        result = await self.db.execute(
            self._select(with_deleted=with_deleted).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get(self, user_id: str, *, with_deleted: bool = False) -> UserResult | None:
        user = await self._get_model(user_id, with_deleted=with_deleted)
        return _user_to_result(user) if user else None

    async def get_by_email(
        self, email: str, *, with_deleted: bool = False
    ) -> UserResult | None:
        result = await self.db.execute(
            self._select(with_deleted=with_deleted).where(
                func.lower(User.email) == email.strip().lower()
            )
        )
        user = result.scalar_one_or_none()
        return _user_to_result(user) if user else None

    async def get_admin(self) -> UserResult | None:
        result = await self.db.execute(
            self._select().where(User.is_admin.is_(True)).limit(1)
        )
        user = result.scalar_one_or_none()
        return _user_to_result(user) if user else None

    async def get_list(self, *, with_deleted: bool = False) -> list[UserResult]:
        result = await self.db.execute(
            self._select(with_deleted=with_deleted).order_by(User.created_at, User.id)
        )
        return [_user_to_result(u) for u in result.scalars().all()]

    async def get_deleted(self) -> list[UserResult]:
        result = await self.db.execute(
            self._select(with_deleted=True)
            .where(User.deleted_at.is_not(None))
            .order_by(User.deleted_at, User.id)
        )
        return [_user_to_result(u) for u in result.scalars().all()]

    async def create(self, data: UserToPersist) -> UserResult:
        """Insert user; a unique violation raises UserAlreadyExists or DuplicateStorageLabel."""
        user = User(
            email=data.email,
            name=data.name,
            password_hash=data.password_hash,
            is_admin=data.is_admin,
            status=UserStatus.ACTIVE,
            should_change_password=data.should_change_password,
            quota_size_in_bytes=data.quota_size_in_bytes,
            storage_label=data.storage_label,
        )
        try:
            created = await super().create(user)
        except IntegrityError as e:
            if _is_storage_label_violation(e):
                raise DuplicateStorageLabelException() from e
            raise UserAlreadyExistsException() from e
        loaded = await self._get_model(created.id, with_deleted=True)
        return _user_to_result(loaded)

    async def update(self, user_id: str, changes: dict[str, Any]) -> UserResult:
        """Apply changes; a unique violation raises DuplicateEmail or DuplicateStorageLabel."""
        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update user columns: {sorted(unknown)}")
        user = await self._get_model(user_id, with_deleted=True)
        if user is None:
            raise UserNotFoundException(user_id)
        for name, value in changes.items():
            setattr(user, name, value)
        user.updated_at = utc_now()
        try:
            await self.db.flush()
        except IntegrityError as e:
            if _is_storage_label_violation(e):
                raise DuplicateStorageLabelException() from e
            raise DuplicateEmailException() from e
        loaded = await self._get_model(user_id, with_deleted=True)
        return _user_to_result(loaded)

    async def upsert_metadata(
        self, user_id: str, key: UserMetadataKey, value: dict[str, Any]
    ) -> None:
        existing = await self.db.get(UserMetadata, (user_id, key.value))
        if existing is None:
            self.db.add(UserMetadata(user_id=user_id, key=key.value, value=value))
        else:
            existing.value = value
        await self.db.flush()

    async def sync_usage(self, user_id: str) -> None:
        usage = (
            select(func.coalesce(func.sum(Asset.file_size_in_bytes), 0))
            .where(Asset.owner_id == user_id, Asset.deleted_at.is_(None))
            .scalar_subquery()
        )
        await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(quota_usage_in_bytes=usage)
            .execution_options(synchronize_session=False)
        )

    async def delete(self, user_id: str) -> None:
        """Remove the user row and everything it owns; a missing row is a no-op."""
        await self.db.execute(delete(UserMetadata).where(UserMetadata.user_id == user_id))
        await self.db.execute(delete(Asset).where(Asset.owner_id == user_id))
        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.flush()

    async def authenticate(self, email: str, password: str) -> UserResult | None:
        result = await self.db.execute(
            self._select().where(func.lower(User.email) == email.strip().lower())
        )
        user = result.scalar_one_or_none()
        if not user:
            dummy_hash = await _get_dummy_hash()
            await asyncio.to_thread(verify_password, password, dummy_hash)
            return None
        if user.status != UserStatus.ACTIVE:
            return None
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            return None
        return _user_to_result(user)
