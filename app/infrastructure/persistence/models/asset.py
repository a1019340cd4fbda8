"""Asset ORM model. Read for quota usage; rows go away with their owner."""

from sqlalchemy import BigInteger, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OwnedMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class Asset(CuidMixin, OwnedMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Photo or video file owned by a user. Table: asset."""

    __tablename__ = "asset"

    original_path: Mapped[str] = mapped_column(String, nullable=False)
    file_size_in_bytes: Mapped[int] = mapped_column(
        BigInteger, nullable=False, server_default=text("0")
    )
