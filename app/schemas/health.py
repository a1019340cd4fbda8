"""Health check API schemas."""

from pydantic import BaseModel, Field


class JobQueueHealth(BaseModel):
    """State of the in-process job worker."""

    accepting: bool = Field(..., description="Worker is running and taking new jobs")
    pending: int = Field(..., ge=0, description="Jobs waiting for the worker")


class HealthResponse(BaseModel):
    """Response for GET /health (liveness).

    status is "degraded" while the job worker is down: requests are still
    served but deletes and signup notifications cannot be queued.
    """

    status: str = Field(default="ok", description="ok or degraded")
    version: str
    job_queue: JobQueueHealth | None = None
