"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the current user and the
application services. Services are built from infrastructure
implementations here; routes depend only on these dependencies, not on
infra directly.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import AuthContext, UserResult
from app.application.services.user_admin_service import UserAdminService
from app.application.services.user_job_service import UserJobService
from app.application.services.user_service import UserService
from app.core.config import get_settings
from app.domain.enums import UserStatus
from app.infrastructure.jobs.queue import InProcessJobQueue, TransactionalJobQueue
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import AlbumRepository, UserRepository
from app.infrastructure.security.jwt import create_user_token, verify_token
from app.infrastructure.security.password import BcryptPasswordHasher


class AuthSecurity(BcryptPasswordHasher):
    """Token creation and password hashing provided via DI (no direct infra imports in routes)."""

    def create_access_token(self, user_id: str) -> str:
        return create_user_token(user_id)


def get_auth_security() -> AuthSecurity:
    """Auth token creation and password hashing (composition root)."""
    return AuthSecurity()


def get_job_queue(request: Request) -> InProcessJobQueue:
    """Job queue started in lifespan (app.state.job_queue)."""
    return request.app.state.job_queue


# ---- Repositories ----


def get_user_repo(db: Annotated[AsyncSession, Depends(get_db)]) -> UserRepository:
    """User repository for read operations."""
    return UserRepository(db)


# ---- Auth (current user from JWT) ----

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> UserResult | None:
    """Return current user from JWT if present; else None. Use for optional auth routes."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        return None
    user = await user_repo.get(payload["sub"])
    if not user or user.status != UserStatus.ACTIVE:
        return None
    return user


async def get_current_user(
    current_user: Annotated[UserResult | None, Depends(get_current_user_optional)],
) -> UserResult:
    """Return current user from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return current_user


async def get_auth_context(
    current_user: Annotated[UserResult, Depends(get_current_user)],
) -> AuthContext:
    """Authenticated principal for service calls."""
    return AuthContext(user=current_user)


async def require_admin(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> AuthContext:
    """Like get_auth_context, but 403 unless the user is an admin."""
    if not auth.user.is_admin:
        raise HTTPException(status_code=403, detail="Forbidden")
    return auth


# ---- Services ----


def _build_user_admin_service(
    db: AsyncSession, job_repo: InProcessJobQueue | TransactionalJobQueue
) -> UserAdminService:
    user_repo = UserRepository(db)
    return UserAdminService(
        user_repo=user_repo,
        album_repo=AlbumRepository(db),
        job_repo=job_repo,
        user_core=UserService(user_repo, get_auth_security()),
    )


def get_user_admin_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    job_queue: Annotated[InProcessJobQueue, Depends(get_job_queue)],
) -> UserAdminService:
    """User admin service for read operations (no transaction)."""
    return _build_user_admin_service(db, job_queue)


def get_user_admin_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    job_queue: Annotated[InProcessJobQueue, Depends(get_job_queue)],
) -> UserAdminService:
    """User admin service bound to the request transaction; jobs are queued on commit."""
    return _build_user_admin_service(db, TransactionalJobQueue(db, job_queue))


def get_user_job_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    job_queue: Annotated[InProcessJobQueue, Depends(get_job_queue)],
) -> UserJobService:
    """User job handlers run inline from a request (e.g. the manual delete check)."""
    state = request.app.state
    return UserJobService(
        UserRepository(db),
        AlbumRepository(db),
        TransactionalJobQueue(db, job_queue),
        state.storage,
        state.notifications,
        state.event_publisher,
        delete_delay=timedelta(days=get_settings().user_delete_delay_days),
    )
