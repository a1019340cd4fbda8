"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import JobName, UserAvatarColor, UserMetadataKey, UserStatus
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateEmailException,
    DuplicateStorageLabelException,
    JobQueueClosedException,
    MediaHubException,
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "JobName",
    "UserAvatarColor",
    "UserMetadataKey",
    "UserStatus",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "DuplicateEmailException",
    "DuplicateStorageLabelException",
    "JobQueueClosedException",
    "MediaHubException",
    "UserAlreadyExistsException",
    "UserNotFoundException",
    "ValidationException",
]
