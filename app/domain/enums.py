"""Domain enumerations for the mediahub application.

Enums represent fixed sets of domain values (e.g. user status, avatar color).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class UserStatus(_ValuesMixin, str, Enum):
    """User account lifecycle status.

    ACTIVE accounts can sign in. DELETED accounts are soft-deleted and can be
    restored. REMOVING accounts have a hard-deletion job queued; the row is
    physically removed once that job completes.
    """

    ACTIVE = "active"
    REMOVING = "removing"
    DELETED = "deleted"

    @property
    def is_deleted(self) -> bool:
        """True for the states that carry a deleted_at timestamp."""
        return self in (UserStatus.DELETED, UserStatus.REMOVING)


class UserAvatarColor(_ValuesMixin, str, Enum):
    """Avatar background colors a user can pick (stored in preferences)."""

    PRIMARY = "primary"
    PINK = "pink"
    RED = "red"
    YELLOW = "yellow"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    ORANGE = "orange"
    GRAY = "gray"
    AMBER = "amber"


class UserMetadataKey(_ValuesMixin, str, Enum):
    """Keys of the per-user metadata rows."""

    PREFERENCES = "preferences"


class JobName(_ValuesMixin, str, Enum):
    """Background job names handled by the job queue worker."""

    NOTIFY_SIGNUP = "notify-signup"
    USER_DELETION = "user-deletion"
    USER_DELETE_CHECK = "user-delete-check"
