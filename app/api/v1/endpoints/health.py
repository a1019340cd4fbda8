"""Health check endpoint. No database access; used for liveness probes."""

from fastapi import APIRouter, Request

from app.core.config import get_settings
from app.schemas.health import HealthResponse, JobQueueHealth

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return service status, version and the job worker state."""
    job_queue = getattr(request.app.state, "job_queue", None)
    if job_queue is None:
        return HealthResponse(status="degraded", version=get_settings().app_version)
    queue_health = JobQueueHealth(accepting=job_queue.accepting, pending=job_queue.pending)
    return HealthResponse(
        status="ok" if queue_health.accepting else "degraded",
        version=get_settings().app_version,
        job_queue=queue_health,
    )
