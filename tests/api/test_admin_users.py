"""Admin user endpoints end to end: HTTP, service, SQLite and the job worker."""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from app.domain.enums import UserStatus
from app.infrastructure.jobs import InProcessJobQueue
from app.infrastructure.persistence.database import session_scope
from app.infrastructure.persistence.models import Album, User
from app.infrastructure.persistence.repositories import AlbumRepository
from app.shared.utils.datetime import utc_now

pytestmark = pytest.mark.requires_db

USERS = "/api/admin/users"


def _new_user(**overrides) -> dict:
    body = {"email": "new@example.com", "password": "password123", "name": "New User"}
    body.update(overrides)
    return body


async def _add_album(owner_id: str, name: str = "Holiday") -> str:
    async with session_scope() as session:
        album = Album(owner_id=owner_id, album_name=name)
        session.add(album)
        await session.flush()
        return album.id


async def _albums(owner_id: str, *, with_deleted: bool = False) -> list[Album]:
    async with session_scope() as session:
        return await AlbumRepository(session).get_by_owner(owner_id, with_deleted=with_deleted)


async def _backdate_deletion(user_id: str, days: int) -> None:
    async with session_scope() as session:
        await session.execute(
            update(User)
            .where(User.id == user_id)
            .values(deleted_at=utc_now() - timedelta(days=days))
        )


# ---- auth and validation ----


async def test_search_requires_token(client: AsyncClient, db_schema) -> None:
    response = await client.get(USERS)
    assert response.status_code == 401
    assert response.json() == {
        "statusCode": 401,
        "error": "HTTP_ERROR",
        "message": "Not authenticated",
        "details": {},
    }


async def test_search_lists_users_oldest_first(client, admin_headers, regular_user) -> None:
    response = await client.get(USERS, headers=admin_headers)
    assert response.status_code == 200
    emails = [u["email"] for u in response.json()]
    assert emails == ["admin@example.com", "user@example.com"]


async def test_create_requires_admin(client, user_headers) -> None:
    response = await client.post(USERS, json=_new_user(), headers=user_headers)
    assert response.status_code == 403


async def test_create_ignores_is_admin(client, admin_headers) -> None:
    response = await client.post(USERS, json=_new_user(is_admin=True), headers=admin_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["is_admin"] is False
    assert data["status"] == "active"
    assert data["email"] == "new@example.com"
    assert data["memories_enabled"] is True
    assert "password" not in data and "password_hash" not in data


async def test_create_with_memories_disabled(client, admin_headers) -> None:
    response = await client.post(
        USERS, json=_new_user(memories_enabled=False), headers=admin_headers
    )
    assert response.status_code == 201
    user_id = response.json()["id"]
    assert response.json()["memories_enabled"] is False

    fetched = await client.get(f"{USERS}/{user_id}", headers=admin_headers)
    assert fetched.json()["memories_enabled"] is False


async def test_create_duplicate_email_is_400(client, admin_headers, regular_user) -> None:
    response = await client.post(
        USERS, json=_new_user(email="USER@example.com"), headers=admin_headers
    )
    assert response.status_code == 400
    body = response.json()
    assert body["statusCode"] == 400
    assert body["message"] == "User exists"


async def test_create_markup_only_name_is_400(client, admin_headers) -> None:
    response = await client.post(USERS, json=_new_user(name="<b></b>"), headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "name"}

    listed = await client.get(USERS, headers=admin_headers)
    assert "new@example.com" not in [u["email"] for u in listed.json()]


async def test_create_short_password_is_400(client, admin_headers) -> None:
    response = await client.post(USERS, json=_new_user(password="short"), headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


@pytest.mark.parametrize(
    "field", ["email", "name", "password", "is_admin", "should_change_password"]
)
async def test_update_null_field_is_400(client, admin_headers, regular_user, field: str) -> None:
    response = await client.put(
        f"{USERS}/{regular_user.id}", json={field: None}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": field}


# ---- update ----


async def test_admin_updates_user(client, admin_headers, regular_user) -> None:
    response = await client.put(
        f"{USERS}/{regular_user.id}",
        json={"name": "Renamed", "quota_size_in_bytes": 1024, "avatar_color": "red"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Renamed"
    assert data["quota_size_in_bytes"] == 1024
    assert data["quota_usage_in_bytes"] == 0
    assert data["avatar_color"] == "red"


async def test_update_duplicate_email_is_400(client, admin_headers, regular_user) -> None:
    response = await client.put(
        f"{USERS}/{regular_user.id}",
        json={"email": "admin@example.com"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "DUPLICATE_EMAIL"


async def test_update_duplicate_storage_label_is_400(
    client, admin_headers, regular_user, create_user
) -> None:
    other = await create_user("other@example.com")
    first = await client.put(
        f"{USERS}/{other.id}", json={"storage_label": "shared"}, headers=admin_headers
    )
    assert first.status_code == 200

    response = await client.put(
        f"{USERS}/{regular_user.id}", json={"storage_label": "shared"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "DUPLICATE_STORAGE_LABEL"

    created = await client.post(
        USERS, json=_new_user(storage_label="shared"), headers=admin_headers
    )
    assert created.status_code == 400
    assert created.json()["error"] == "DUPLICATE_STORAGE_LABEL"


async def test_update_empty_name_is_400(client, admin_headers, regular_user) -> None:
    response = await client.put(
        f"{USERS}/{regular_user.id}", json={"name": ""}, headers=admin_headers
    )
    assert response.status_code == 400


async def test_user_updates_own_name(client, user_headers, regular_user) -> None:
    response = await client.put(
        f"{USERS}/{regular_user.id}", json={"name": "Me"}, headers=user_headers
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Me"


async def test_user_cannot_grant_self_admin(client, user_headers, regular_user) -> None:
    response = await client.put(
        f"{USERS}/{regular_user.id}", json={"is_admin": True}, headers=user_headers
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_user_cannot_update_someone_else(client, user_headers, admin_user) -> None:
    response = await client.put(
        f"{USERS}/{admin_user.id}", json={"name": "Hacked"}, headers=user_headers
    )
    assert response.status_code == 403


async def test_user_cannot_change_someone_elses_preferences(
    client, admin_headers, user_headers, admin_user
) -> None:
    response = await client.put(
        f"{USERS}/{admin_user.id}",
        json={"memories_enabled": False, "quota_size_in_bytes": 5},
        headers=user_headers,
    )
    assert response.status_code == 403

    target = await client.get(f"{USERS}/{admin_user.id}", headers=admin_headers)
    assert target.json()["memories_enabled"] is True
    assert target.json()["quota_size_in_bytes"] is None


# ---- delete and restore ----


async def test_soft_delete_and_restore(client, admin_headers, regular_user) -> None:
    await _add_album(regular_user.id)

    deleted = await client.delete(f"{USERS}/{regular_user.id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json()["status"] == "deleted"
    assert deleted.json()["deleted_at"] is not None
    assert await _albums(regular_user.id) == []

    hidden = await client.get(f"{USERS}/{regular_user.id}", headers=admin_headers)
    assert hidden.status_code == 400
    assert hidden.json()["message"] == "User not found"

    listed = await client.get(USERS, params={"with_deleted": "true"}, headers=admin_headers)
    assert regular_user.id in [u["id"] for u in listed.json()]

    restored = await client.post(f"{USERS}/{regular_user.id}/restore", headers=admin_headers)
    assert restored.status_code == 200
    assert restored.json()["status"] == "active"
    assert restored.json()["deleted_at"] is None
    assert len(await _albums(regular_user.id)) == 1

    again = await client.post(f"{USERS}/{regular_user.id}/restore", headers=admin_headers)
    assert again.status_code == 200


async def test_deleted_user_token_is_rejected(client, admin_headers, user_headers, regular_user) -> None:
    await client.delete(f"{USERS}/{regular_user.id}", headers=admin_headers)
    response = await client.get("/api/auth/me", headers=user_headers)
    assert response.status_code == 401


async def test_cannot_delete_admin(client, admin_headers, create_user) -> None:
    other_admin = await create_user("boss@example.com", is_admin=True)
    response = await client.request(
        "DELETE", f"{USERS}/{other_admin.id}", json={"force": True}, headers=admin_headers
    )
    assert response.status_code == 403
    assert response.json()["message"] == "Cannot delete admin user"

    still_there = await client.get(f"{USERS}/{other_admin.id}", headers=admin_headers)
    assert still_there.json()["status"] == "active"


async def test_delete_missing_user_is_400(client, admin_headers) -> None:
    response = await client.delete(f"{USERS}/does-not-exist", headers=admin_headers)
    assert response.status_code == 400


async def test_force_delete_purges_user(
    client, admin_headers, regular_user, job_queue: InProcessJobQueue
) -> None:
    await _add_album(regular_user.id)

    response = await client.request(
        "DELETE", f"{USERS}/{regular_user.id}", json={"force": True}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "removing"

    await job_queue.join()

    gone = await client.get(
        f"{USERS}/{regular_user.id}", params={"with_deleted": "true"}, headers=admin_headers
    )
    assert gone.status_code == 400
    assert await _albums(regular_user.id, with_deleted=True) == []


async def test_force_delete_with_closed_queue_rolls_back(
    client, admin_headers, regular_user, job_queue: InProcessJobQueue
) -> None:
    await job_queue.stop()
    response = await client.request(
        "DELETE", f"{USERS}/{regular_user.id}", json={"force": True}, headers=admin_headers
    )
    # Queue closed: the request fails and its transaction rolls back.
    assert response.status_code == 503

    user = await client.get(f"{USERS}/{regular_user.id}", headers=admin_headers)
    assert user.json()["status"] == "active"


# ---- delete check ----


async def test_delete_check_purges_users_past_delay(
    client, admin_headers, regular_user, create_user, job_queue: InProcessJobQueue
) -> None:
    recent = await create_user("recent@example.com")
    for user in (regular_user, recent):
        await client.delete(f"{USERS}/{user.id}", headers=admin_headers)
    await _backdate_deletion(regular_user.id, days=8)

    response = await client.post("/api/admin/jobs/user-delete-check", headers=admin_headers)
    assert response.status_code == 202
    assert response.json() == {"queued": 1}

    await job_queue.join()

    listed = await client.get(USERS, params={"with_deleted": "true"}, headers=admin_headers)
    ids = [u["id"] for u in listed.json()]
    assert regular_user.id not in ids
    assert recent.id in ids


async def test_delete_check_retries_unfinished_force_delete(
    client, admin_headers, regular_user, job_queue: InProcessJobQueue
) -> None:
    # A force delete whose purge job never ran leaves the row REMOVING.
    async with session_scope() as session:
        await session.execute(
            update(User)
            .where(User.id == regular_user.id)
            .values(status=UserStatus.REMOVING, deleted_at=utc_now() - timedelta(days=30))
        )

    restore = await client.post(f"{USERS}/{regular_user.id}/restore", headers=admin_headers)
    assert restore.status_code == 400

    response = await client.post("/api/admin/jobs/user-delete-check", headers=admin_headers)
    assert response.json() == {"queued": 1}

    await job_queue.join()

    gone = await client.get(
        f"{USERS}/{regular_user.id}", params={"with_deleted": "true"}, headers=admin_headers
    )
    assert gone.status_code == 400


async def test_delete_check_requires_admin(client, user_headers) -> None:
    response = await client.post("/api/admin/jobs/user-delete-check", headers=user_headers)
    assert response.status_code == 403


# ---- end to end ----


async def test_create_delete_restore_flow(
    client, admin_headers, job_queue: InProcessJobQueue
) -> None:
    created = await client.post(
        USERS,
        json={
            "email": "a@x.com",
            "password": "p1-password",
            "name": "A",
            "notify": True,
            "should_change_password": True,
        },
        headers=admin_headers,
    )
    assert created.status_code == 201
    user = created.json()
    assert user["email"] == "a@x.com"
    assert user["is_admin"] is False
    assert user["should_change_password"] is True
    await job_queue.join()

    deleted = await client.request(
        "DELETE", f"{USERS}/{user['id']}", json={"force": False}, headers=admin_headers
    )
    assert deleted.status_code == 200

    fetched = await client.get(
        f"{USERS}/{user['id']}", params={"with_deleted": "true"}, headers=admin_headers
    )
    assert fetched.json()["status"] == "deleted"
    assert fetched.json()["deleted_at"] is not None

    restored = await client.post(f"{USERS}/{user['id']}/restore", headers=admin_headers)
    assert restored.json()["status"] == "active"
    assert restored.json()["deleted_at"] is None
