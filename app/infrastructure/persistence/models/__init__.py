"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.album import Album
from app.infrastructure.persistence.models.asset import Asset
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OwnedMixin,
    SoftDeleteMixin,
    TimestampMixin,
)
from app.infrastructure.persistence.models.user import User, UserMetadata

__all__ = [
    "Album",
    "Asset",
    "CuidMixin",
    "OwnedMixin",
    "SoftDeleteMixin",
    "TimestampMixin",
    "User",
    "UserMetadata",
]
