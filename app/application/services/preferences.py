"""User preference helpers (pure functions, no I/O).

Stored preferences are a sparse override tree under the ``preferences``
metadata key. Effective preferences are the defaults for the user merged
with those overrides; the partial written back only holds leaves that
differ from the defaults.
"""

from __future__ import annotations

from dataclasses import asdict
from enum import Enum
from typing import Any

from app.application.dtos.preferences import (
    AvatarPreferences,
    DownloadPreferences,
    EmailNotificationsPreferences,
    MemoriesPreferences,
    UserPreferences,
)
from app.application.dtos.user import UserResult
from app.domain.enums import UserAvatarColor, UserMetadataKey


def get_default_avatar_color(email: str) -> UserAvatarColor:
    """Pick a stable avatar color from the email (sum of code points)."""
    colors = list(UserAvatarColor)
    return colors[sum(ord(ch) for ch in email) % len(colors)]


def get_default_preferences(user: UserResult) -> UserPreferences:
    """Return preferences with no overrides applied."""
    return UserPreferences(
        avatar=AvatarPreferences(color=get_default_avatar_color(user.email)),
    )


def get_stored_preferences(user: UserResult) -> dict[str, Any]:
    """Return the raw override tree stored for user (empty when none)."""
    for item in user.metadata:
        if item.key == UserMetadataKey.PREFERENCES:
            return dict(item.value or {})
    return {}


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    return value


def _flatten(tree: dict[str, Any], prefix: tuple[str, ...] = ()) -> dict[tuple[str, ...], Any]:
    flat: dict[tuple[str, ...], Any] = {}
    for key, value in tree.items():
        path = (*prefix, key)
        if isinstance(value, dict):
            flat.update(_flatten(value, path))
        else:
            flat[path] = value
    return flat


def merge_preferences(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge overrides into base; keys unknown to base are ignored."""
    merged = dict(base)
    for key, value in overrides.items():
        if key not in base:
            continue
        if isinstance(base[key], dict):
            if isinstance(value, dict):
                merged[key] = merge_preferences(base[key], value)
        else:
            merged[key] = value
    return merged


def _preferences_from_dict(data: dict[str, Any], fallback: UserPreferences) -> UserPreferences:
    try:
        color = UserAvatarColor(data["avatar"]["color"])
    except ValueError:
        color = fallback.avatar.color
    return UserPreferences(
        memories=MemoriesPreferences(**data["memories"]),
        avatar=AvatarPreferences(color=color),
        email_notifications=EmailNotificationsPreferences(**data["email_notifications"]),
        download=DownloadPreferences(**data["download"]),
    )


def get_preferences(user: UserResult) -> UserPreferences:
    """Return effective preferences: defaults merged with stored overrides."""
    defaults = get_default_preferences(user)
    merged = merge_preferences(
        _to_plain(asdict(defaults)), _to_plain(get_stored_preferences(user))
    )
    return _preferences_from_dict(merged, defaults)


def get_preferences_partial(
    user: UserResult, new_preferences: UserPreferences
) -> dict[str, Any]:
    """Return the sparse override tree for new_preferences.

    Only leaves that differ from the user's defaults are included, so the
    result can replace the stored value without losing earlier overrides.
    """
    defaults = _flatten(_to_plain(asdict(get_default_preferences(user))))
    partial: dict[str, Any] = {}
    for path, value in _flatten(_to_plain(asdict(new_preferences))).items():
        if defaults.get(path) == value:
            continue
        node = partial
        for key in path[:-1]:
            node = node.setdefault(key, {})
        node[path[-1]] = value
    return partial
