"""Album ORM model. Only the owner cascade (soft delete, restore, purge) is used here."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OwnedMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class Album(CuidMixin, OwnedMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Album owned by a user. Table: album."""

    __tablename__ = "album"

    album_name: Mapped[str] = mapped_column(String, nullable=False, server_default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
