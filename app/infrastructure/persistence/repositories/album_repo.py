"""Album repository: owner-wide cascades used by the user lifecycle."""

from __future__ import annotations

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.persistence.models.album import Album
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import utc_now


class AlbumRepository(BaseRepository[Album]):
    """Album repository. soft_delete_all / restore_all / delete_all act on every album of one owner."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db)

    async def get_by_owner(self, owner_id: str, *, with_deleted: bool = False) -> list[Album]:
        stmt = select(Album).where(Album.owner_id == owner_id)
        if not with_deleted:
            stmt = stmt.where(Album.deleted_at.is_(None))
        result = await self.db.execute(stmt.order_by(Album.created_at))
        return list(result.scalars().all())

    async def soft_delete_all(self, user_id: str) -> None:
        await self.db.execute(
            update(Album)
            .where(Album.owner_id == user_id, Album.deleted_at.is_(None))
            .values(deleted_at=utc_now())
            .execution_options(synchronize_session=False)
        )

    async def restore_all(self, user_id: str) -> None:
        await self.db.execute(
            update(Album)
            .where(Album.owner_id == user_id)
            .values(deleted_at=None)
            .execution_options(synchronize_session=False)
        )

    async def delete_all(self, user_id: str) -> None:
        await self.db.execute(delete(Album).where(Album.owner_id == user_id))
