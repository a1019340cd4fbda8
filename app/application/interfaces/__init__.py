"""Application interfaces (ports): repository and service protocols."""

from app.application.interfaces.repositories import (
    IAlbumRepository,
    IJobRepository,
    IUserRepository,
)
from app.application.interfaces.services import (
    IEventPublisher,
    INotificationService,
    IPasswordHasher,
    IStorageService,
)

__all__ = [
    "IAlbumRepository",
    "IEventPublisher",
    "IJobRepository",
    "INotificationService",
    "IPasswordHasher",
    "IStorageService",
    "IUserRepository",
]
