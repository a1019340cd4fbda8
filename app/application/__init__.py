"""Application layer: DTOs, interfaces, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repos, job queue, storage, notifications).
"""

from app.application.interfaces import (
    IAlbumRepository,
    IEventPublisher,
    IJobRepository,
    INotificationService,
    IPasswordHasher,
    IStorageService,
    IUserRepository,
)
from app.application.services import UserAdminService, UserJobService, UserService

__all__ = [
    "IAlbumRepository",
    "IEventPublisher",
    "IJobRepository",
    "INotificationService",
    "IPasswordHasher",
    "IStorageService",
    "IUserRepository",
    "UserAdminService",
    "UserJobService",
    "UserService",
]
