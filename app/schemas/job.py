"""Job trigger API schemas."""

from pydantic import BaseModel, Field


class JobQueuedResponse(BaseModel):
    """Response for manual job triggers (202)."""

    queued: int = Field(..., ge=0, description="Number of jobs queued")
