"""DTOs for background jobs."""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import JobName


@dataclass(frozen=True)
class JobItem:
    """Unit of fire-and-forget work handed to the job queue."""

    name: JobName
    data: dict[str, Any] = field(default_factory=dict)
