"""Admin job triggers."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_user_job_service, require_admin
from app.application.dtos.user import AuthContext
from app.application.services.user_job_service import UserJobService
from app.schemas.job import JobQueuedResponse

router = APIRouter()


@router.post("/user-delete-check", response_model=JobQueuedResponse, status_code=202)
async def run_user_delete_check(
    _admin: Annotated[AuthContext, Depends(require_admin)],
    service: Annotated[UserJobService, Depends(get_user_job_service)],
):
    """Queue deletion jobs for users soft-deleted longer than the delete delay."""
    queued = await service.user_delete_check()
    return JobQueuedResponse(queued=queued)
