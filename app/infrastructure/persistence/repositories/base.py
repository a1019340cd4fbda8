"""Base repository: the shared insert path for one ORM model."""

from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository holding the session; create() inserts and flushes.

    Subclasses map ORM rows to application DTOs at their public surface;
    the model-level helper here stays internal to the persistence layer.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and load server defaults."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
