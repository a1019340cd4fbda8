"""UserJobService unit tests: signup notification, purge and the delete check."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.job import JobItem
from app.application.services.user_job_service import USER_DELETE_EVENT, UserJobService
from app.domain.enums import JobName, UserStatus
from app.shared.utils.datetime import utc_now

DELAY = timedelta(days=7)


@pytest.fixture
def deps():
    return {
        "user_repo": AsyncMock(),
        "album_repo": AsyncMock(),
        "job_repo": AsyncMock(),
        "storage": AsyncMock(),
        "notifications": AsyncMock(),
        "publisher": AsyncMock(),
    }


@pytest.fixture
def service(deps) -> UserJobService:
    deps["storage"].remove_user_folders = AsyncMock(return_value=["/lib/user1"])
    return UserJobService(**deps, delete_delay=DELAY)


async def test_notify_signup_sends_temp_password(service, deps, make_user) -> None:
    user = make_user()
    deps["user_repo"].get = AsyncMock(return_value=user)
    assert await service.notify_signup({"id": user.id, "temp_password": "tmp"}) is True
    deps["notifications"].send_signup.assert_awaited_once_with(user, "tmp")


async def test_notify_signup_missing_user_skips(service, deps) -> None:
    deps["user_repo"].get = AsyncMock(return_value=None)
    assert await service.notify_signup({"id": "gone"}) is False
    deps["notifications"].send_signup.assert_not_awaited()


async def test_forced_deletion_purges_and_publishes(service, deps, make_user) -> None:
    user = make_user(status=UserStatus.REMOVING, deleted_at=utc_now())
    deps["user_repo"].get = AsyncMock(return_value=user)

    assert await service.user_deletion({"id": user.id, "force": True}) is True

    deps["user_repo"].get.assert_awaited_once_with(user.id, with_deleted=True)
    deps["storage"].remove_user_folders.assert_awaited_once_with(user)
    deps["album_repo"].delete_all.assert_awaited_once_with(user.id)
    deps["user_repo"].delete.assert_awaited_once_with(user.id)
    deps["publisher"].publish.assert_awaited_once_with(USER_DELETE_EVENT, {"id": user.id})


async def test_deletion_not_due_is_skipped(service, deps, make_user) -> None:
    user = make_user(status=UserStatus.DELETED, deleted_at=utc_now() - timedelta(days=1))
    deps["user_repo"].get = AsyncMock(return_value=user)

    assert await service.user_deletion({"id": user.id}) is False

    deps["storage"].remove_user_folders.assert_not_awaited()
    deps["user_repo"].delete.assert_not_awaited()
    deps["publisher"].publish.assert_not_awaited()


async def test_deletion_due_without_force_purges(service, deps, make_user) -> None:
    user = make_user(status=UserStatus.DELETED, deleted_at=utc_now() - timedelta(days=8))
    deps["user_repo"].get = AsyncMock(return_value=user)
    assert await service.user_deletion({"id": user.id}) is True
    deps["user_repo"].delete.assert_awaited_once_with(user.id)


async def test_deletion_of_missing_user_is_noop(service, deps) -> None:
    deps["user_repo"].get = AsyncMock(return_value=None)
    assert await service.user_deletion({"id": "gone", "force": True}) is False
    deps["publisher"].publish.assert_not_awaited()


async def test_storage_failure_stops_purge(service, deps, make_user) -> None:
    user = make_user(status=UserStatus.REMOVING, deleted_at=utc_now())
    deps["user_repo"].get = AsyncMock(return_value=user)
    deps["storage"].remove_user_folders = AsyncMock(side_effect=OSError("busy"))
    with pytest.raises(OSError):
        await service.user_deletion({"id": user.id, "force": True})
    deps["user_repo"].delete.assert_not_awaited()
    deps["publisher"].publish.assert_not_awaited()


async def test_delete_check_queues_due_users(service, deps, make_user) -> None:
    now = utc_now()
    due = make_user(id="old", status=UserStatus.DELETED, deleted_at=now - timedelta(days=8))
    recent = make_user(id="new", status=UserStatus.DELETED, deleted_at=now - timedelta(days=1))
    deps["user_repo"].get_deleted = AsyncMock(return_value=[due, recent])

    assert await service.user_delete_check() == 1

    deps["job_repo"].queue.assert_awaited_once_with(
        JobItem(JobName.USER_DELETION, {"id": "old"})
    )


async def test_delete_check_retries_stuck_removing_user(service, deps, make_user) -> None:
    stuck = make_user(id="stuck", status=UserStatus.REMOVING, deleted_at=utc_now())
    deps["user_repo"].get_deleted = AsyncMock(return_value=[stuck])

    assert await service.user_delete_check() == 1

    deps["job_repo"].queue.assert_awaited_once_with(
        JobItem(JobName.USER_DELETION, {"id": "stuck", "force": True})
    )


async def test_removing_user_purged_without_force_flag(service, deps, make_user) -> None:
    user = make_user(status=UserStatus.REMOVING, deleted_at=utc_now())
    deps["user_repo"].get = AsyncMock(return_value=user)
    assert await service.user_deletion({"id": user.id}) is True
    deps["user_repo"].delete.assert_awaited_once_with(user.id)


async def test_delete_check_nothing_due(service, deps) -> None:
    deps["user_repo"].get_deleted = AsyncMock(return_value=[])
    assert await service.user_delete_check({}) == 0
    deps["job_repo"].queue.assert_not_awaited()


def test_is_ready_for_deletion(service, make_user) -> None:
    assert service.is_ready_for_deletion(make_user()) is False
    assert service.is_ready_for_deletion(
        make_user(deleted_at=utc_now() - timedelta(days=7, seconds=1))
    ) is True
