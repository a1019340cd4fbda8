"""Admin user API: thin routes delegating to UserAdminService.

Write routes use the transactional service, so the status change, album
cascade and queued jobs commit or roll back together.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_auth_context,
    get_user_admin_service,
    get_user_admin_service_for_write,
    require_admin,
)
from app.application.dtos.user import (
    AuthContext,
    UserAdminCreate,
    UserAdminDelete,
    UserAdminSearch,
    UserAdminUpdate,
)
from app.application.services.user_admin_service import UserAdminService
from app.core.limiter import limit_writes
from app.schemas.user import (
    UserAdminCreateRequest,
    UserAdminDeleteRequest,
    UserAdminResponse,
    UserAdminUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[UserAdminResponse])
async def search_users(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    service: Annotated[UserAdminService, Depends(get_user_admin_service)],
    with_deleted: bool = False,
):
    """List users, oldest first; soft-deleted users only with ?with_deleted=true."""
    users = await service.search(auth, UserAdminSearch(with_deleted=with_deleted))
    return [UserAdminResponse.from_result(u) for u in users]


@router.post("", response_model=UserAdminResponse, status_code=201)
@limit_writes
async def create_user(
    request: Request,
    body: UserAdminCreateRequest,
    _admin: Annotated[AuthContext, Depends(require_admin)],
    service: Annotated[UserAdminService, Depends(get_user_admin_service_for_write)],
):
    """Create a user (admin only). Unknown fields such as is_admin are ignored."""
    user = await service.create(UserAdminCreate(**body.model_dump()))
    return UserAdminResponse.from_result(user)


@router.get("/{user_id}", response_model=UserAdminResponse)
async def get_user(
    user_id: str,
    auth: Annotated[AuthContext, Depends(require_admin)],
    service: Annotated[UserAdminService, Depends(get_user_admin_service)],
    with_deleted: bool = False,
):
    """Get one user (admin only)."""
    user = await service.get(auth, user_id, with_deleted=with_deleted)
    return UserAdminResponse.from_result(user)


@router.put("/{user_id}", response_model=UserAdminResponse)
@limit_writes
async def update_user(
    request: Request,
    user_id: str,
    body: UserAdminUpdateRequest,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    service: Annotated[UserAdminService, Depends(get_user_admin_service_for_write)],
):
    """Update a user. Non-admins may only update themselves and non-admin fields."""
    dto = UserAdminUpdate.from_changes(**body.model_dump(exclude_unset=True))
    user = await service.update(auth, user_id, dto)
    return UserAdminResponse.from_result(user)


@router.delete("/{user_id}", response_model=UserAdminResponse)
@limit_writes
async def delete_user(
    request: Request,
    user_id: str,
    auth: Annotated[AuthContext, Depends(require_admin)],
    service: Annotated[UserAdminService, Depends(get_user_admin_service_for_write)],
    body: UserAdminDeleteRequest | None = None,
):
    """Soft-delete a user; with {"force": true} mark it for removal and queue the purge."""
    force = body.force if body is not None else False
    user = await service.delete(auth, user_id, UserAdminDelete(force=force))
    return UserAdminResponse.from_result(user)


@router.post("/{user_id}/restore", response_model=UserAdminResponse)
@limit_writes
async def restore_user(
    request: Request,
    user_id: str,
    auth: Annotated[AuthContext, Depends(require_admin)],
    service: Annotated[UserAdminService, Depends(get_user_admin_service_for_write)],
):
    """Restore a soft-deleted user and their albums."""
    user = await service.restore(auth, user_id)
    return UserAdminResponse.from_result(user)
