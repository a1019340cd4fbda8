"""User application service: create and update accounts.

Owns the rules shared by every path that writes a user row: unique email,
password hashing, the first account being the administrator, and which
fields a non-admin actor may touch.
"""

from __future__ import annotations

import asyncio
from typing import Any

from app.application.dtos.user import UserAdminCreate, UserResult, UserToPersist
from app.application.interfaces.repositories import IUserRepository
from app.application.interfaces.services import IPasswordHasher
from app.domain.exceptions import (
    AuthorizationException,
    DuplicateEmailException,
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)
from app.shared.telemetry.logging import get_logger
from app.shared.utils.sanitization import sanitize_name, sanitize_storage_label

logger = get_logger(__name__)

ADMIN_ONLY_FIELDS = frozenset({"is_admin", "quota_size_in_bytes", "storage_label"})
NON_NULLABLE_FIELDS = frozenset(
    {"email", "name", "password", "is_admin", "should_change_password"}
)


def normalize_email(email: str) -> str:
    """Lowercase and trim an email so lookups are case-insensitive."""
    return email.strip().lower()


def clean_name(name: str) -> str:
    """Sanitize a display name; raise ValidationException when nothing is left."""
    cleaned = sanitize_name(name)
    if not cleaned:
        raise ValidationException("name must not be empty", field="name")
    return cleaned


class UserService:
    """Create users and apply field-level update rules."""

    def __init__(self, user_repo: IUserRepository, password_hasher: IPasswordHasher) -> None:
        self._user_repo = user_repo
        self._password_hasher = password_hasher

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self._password_hasher.hash_password, password)

    async def create_user(
        self, dto: UserAdminCreate, *, is_admin: bool = False
    ) -> UserResult:
        """Create a user. Raises UserAlreadyExistsException if the email is taken.

        A non-admin cannot be created before an admin exists.
        """
        email = normalize_email(dto.email)
        name = clean_name(dto.name)
        if await self._user_repo.get_by_email(email, with_deleted=True):
            raise UserAlreadyExistsException()
        if not is_admin and await self._user_repo.get_admin() is None:
            raise ValidationException(
                "The first registered account must be the administrator."
            )
        user = await self._user_repo.create(
            UserToPersist(
                email=email,
                name=name,
                password_hash=await self._hash(dto.password),
                is_admin=is_admin,
                should_change_password=dto.should_change_password,
                quota_size_in_bytes=dto.quota_size_in_bytes,
                storage_label=sanitize_storage_label(dto.storage_label),
            )
        )
        logger.info("Created user %s (admin=%s)", user.id, user.is_admin)
        return user

    async def update_user(
        self, actor: UserResult, user_id: str, changes: dict[str, Any]
    ) -> UserResult:
        """Apply changes to user_id on behalf of actor.

        Raises:
            AuthorizationException: actor may not update this user or these fields.
            UserNotFoundException: user_id does not resolve.
            DuplicateEmailException: new email belongs to another account.
            ValidationException: a required field is null, or an admin revokes itself.
        """
        if not actor.is_admin and actor.id != user_id:
            raise AuthorizationException(message="You are not allowed to update this user")
        target = await self._user_repo.get(user_id)
        if target is None:
            raise UserNotFoundException(user_id)

        values = dict(changes)
        for name in NON_NULLABLE_FIELDS & values.keys():
            if values[name] is None:
                raise ValidationException(f"{name} must not be null", field=name)

        if not actor.is_admin:
            for name in ADMIN_ONLY_FIELDS & values.keys():
                if values[name] != getattr(target, name):
                    if name == "is_admin":
                        raise AuthorizationException(
                            message="Admin status can only be changed by an admin"
                        )
                    raise AuthorizationException(resource="user", action=f"update {name}")
                del values[name]
        elif actor.id == user_id and values.get("is_admin") is False:
            raise ValidationException(
                "Admin users cannot revoke their own admin status", field="is_admin"
            )

        if "email" in values:
            values["email"] = normalize_email(values["email"])
            duplicate = await self._user_repo.get_by_email(values["email"], with_deleted=True)
            if duplicate and duplicate.id != user_id:
                raise DuplicateEmailException()
        if "name" in values:
            values["name"] = clean_name(values["name"])
        if "storage_label" in values:
            values["storage_label"] = sanitize_storage_label(values["storage_label"])
        if "password" in values:
            values["password_hash"] = await self._hash(values.pop("password"))

        return await self._user_repo.update(user_id, values)
