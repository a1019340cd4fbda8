"""User ORM model and its metadata rows."""

from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, BigInteger, Boolean, Enum, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.domain.enums import UserStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SoftDeleteMixin,
    TimestampMixin,
)


class User(CuidMixin, TimestampMixin, SoftDeleteMixin, Base):
    """User model. Table: app_user. Email and storage_label are unique."""

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String, nullable=False, server_default="")
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    status: Mapped[UserStatus] = mapped_column(
        Enum(
            UserStatus,
            name="user_status",
            native_enum=False,
            length=16,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    should_change_password: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    quota_size_in_bytes: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    quota_usage_in_bytes: Mapped[int] = mapped_column(
        BigInteger, nullable=False, server_default=text("0")
    )
    storage_label: Mapped[str | None] = mapped_column(String, nullable=True, unique=True)
    profile_image_path: Mapped[str] = mapped_column(
        String, nullable=False, server_default=""
    )

    metadata_items: Mapped[list[UserMetadata]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="UserMetadata.key",
    )


class UserMetadata(Base):
    """Keyed JSON documents attached to a user (e.g. preference overrides)."""

    __tablename__ = "user_metadata"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), primary_key=True
    )
    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    user: Mapped[User] = relationship(back_populates="metadata_items")
