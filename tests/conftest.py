"""Pytest configuration and fixtures for mediahub.

Environment is pinned before app.* is imported: a throwaway SQLite database,
cheap bcrypt, no rate limiting and no periodic scheduler. HTTP tests run the
real lifespan (job worker included) against that database.
"""

import os
import tempfile
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

_TEST_DIR = tempfile.mkdtemp(prefix="mediahub-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STORAGE_ROOT"] = f"{_TEST_DIR}/storage"
os.environ["USER_DELETE_CHECK_INTERVAL_SECONDS"] = "0"

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.application.dtos.user import UserAdminCreate, UserResult  # noqa: E402
from app.application.services.user_service import UserService  # noqa: E402
from app.core.lifespan import create_lifespan  # noqa: E402
from app.domain.enums import UserStatus  # noqa: E402
from app.infrastructure.jobs import InProcessJobQueue  # noqa: E402
from app.infrastructure.persistence import database  # noqa: E402
from app.infrastructure.persistence.database import Base, session_scope  # noqa: E402
from app.infrastructure.persistence.repositories import UserRepository  # noqa: E402
from app.infrastructure.security.jwt import create_user_token  # noqa: E402
from app.infrastructure.security.password import BcryptPasswordHasher  # noqa: E402
from app.main import app  # noqa: E402

DEFAULT_PASSWORD = "password123"


@pytest.fixture
def make_user() -> Callable[..., UserResult]:
    """Factory for UserResult values used by unit tests (no database)."""

    def _make(**overrides: Any) -> UserResult:
        now = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)
        base = UserResult(
            id="user1",
            email="a@x.com",
            name="Alice",
            is_admin=False,
            status=UserStatus.ACTIVE,
            should_change_password=False,
            quota_size_in_bytes=None,
            quota_usage_in_bytes=0,
            storage_label=None,
            profile_image_path="",
            created_at=now,
            updated_at=now,
        )
        return replace(base, **overrides)

    return _make


@pytest.fixture
async def db_schema():
    """Fresh schema in the test SQLite database; engine disposed afterwards."""
    database._ensure_engine()
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await database.dispose_engine()


@pytest.fixture
async def running_app(db_schema) -> FastAPI:
    """The app with its lifespan entered (job worker running)."""
    async with create_lifespan(app):
        yield app


@pytest.fixture
async def client(running_app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=running_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def job_queue(running_app: FastAPI) -> InProcessJobQueue:
    return running_app.state.job_queue


async def _create_user_row(
    email: str,
    name: str = "Test User",
    *,
    password: str = DEFAULT_PASSWORD,
    is_admin: bool = False,
) -> UserResult:
    """Insert a user through UserService in its own transaction."""
    async with session_scope() as session:
        service = UserService(UserRepository(session), BcryptPasswordHasher())
        return await service.create_user(
            UserAdminCreate(
                email=email,
                password=password,
                name=name,
                should_change_password=False,
            ),
            is_admin=is_admin,
        )


def _bearer(user: UserResult) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_user_token(user.id)}"}


@pytest.fixture
async def admin_user(db_schema) -> UserResult:
    return await _create_user_row("admin@example.com", "Admin", is_admin=True)


@pytest.fixture
def admin_headers(admin_user: UserResult) -> dict[str, str]:
    return _bearer(admin_user)


@pytest.fixture
async def regular_user(admin_user: UserResult) -> UserResult:
    return await _create_user_row("user@example.com", "Regular User")


@pytest.fixture
def user_headers(regular_user: UserResult) -> dict[str, str]:
    return _bearer(regular_user)


@pytest.fixture
def create_user(db_schema) -> Callable[..., Any]:
    """Async factory inserting extra users: await create_user("b@example.com")."""
    return _create_user_row


@pytest.fixture
def headers_for() -> Callable[[UserResult], dict[str, str]]:
    """Authorization headers for any user."""
    return _bearer
