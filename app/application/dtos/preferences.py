"""Effective user preferences (defaults merged with stored overrides)."""

from dataclasses import dataclass, field

from app.domain.enums import UserAvatarColor

GIB = 1024**3


@dataclass
class MemoriesPreferences:
    enabled: bool = True


@dataclass
class AvatarPreferences:
    color: UserAvatarColor = UserAvatarColor.PRIMARY


@dataclass
class EmailNotificationsPreferences:
    enabled: bool = True
    album_invite: bool = True
    album_update: bool = True


@dataclass
class DownloadPreferences:
    archive_size: int = 4 * GIB


@dataclass
class UserPreferences:
    """Full preference tree. Mutable so callers can overlay single values."""

    memories: MemoriesPreferences = field(default_factory=MemoriesPreferences)
    avatar: AvatarPreferences = field(default_factory=AvatarPreferences)
    email_notifications: EmailNotificationsPreferences = field(
        default_factory=EmailNotificationsPreferences
    )
    download: DownloadPreferences = field(default_factory=DownloadPreferences)
