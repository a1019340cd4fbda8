"""Input sanitization for user-supplied display strings and path segments."""

import re
from typing import ClassVar

import nh3


class InputSanitizer:
    """
    Sanitize user inputs before they are stored or used on disk.

    Display strings are stripped of all HTML; storage labels become a single
    safe path segment because they name a folder under the storage root.
    """

    ALLOWED_TAGS: ClassVar[list[str]] = []
    ALLOWED_ATTRIBUTES: ClassVar[dict[str, list[str]]] = {}
    UNSAFE_PATH_CHARS: ClassVar[re.Pattern[str]] = re.compile(r'[\x00-\x1f\x7f/\\?%*:|"<>]')
    RESERVED_SEGMENTS: ClassVar[frozenset[str]] = frozenset({".", ".."})

    @classmethod
    def sanitize_html(cls, value: str) -> str:
        """Remove all HTML tags and sanitize with nh3 (strict by default).

        Args:
            value: Raw string that may contain HTML.

        Returns:
            Sanitized string safe for HTML display.
        """
        if not value:
            return value
        # nh3: tags = set of allowed tag names; attributes = dict[tag, set[attr]]
        attrs = {k: set(v) for k, v in cls.ALLOWED_ATTRIBUTES.items()}
        return nh3.clean(
            value,
            tags=set(cls.ALLOWED_TAGS),
            attributes=attrs,
        )

    @classmethod
    def sanitize_path_segment(cls, value: str) -> str:
        """Strip characters that are unsafe in a single folder name.

        Args:
            value: Raw segment (e.g. a storage label).

        Returns:
            Segment with unsafe characters removed and surrounding whitespace
            and dots trimmed; empty string when nothing usable remains.
        """
        if not value:
            return value
        cleaned = cls.UNSAFE_PATH_CHARS.sub("", value).strip().strip(".")
        if cleaned in cls.RESERVED_SEGMENTS:
            return ""
        return cleaned


def sanitize_name(value: str) -> str:
    """Return a display name with HTML removed and whitespace trimmed."""
    return InputSanitizer.sanitize_html(value).strip()


def sanitize_storage_label(value: str | None) -> str | None:
    """Return a folder-safe storage label, or None when empty after cleaning."""
    if value is None:
        return None
    cleaned = InputSanitizer.sanitize_path_segment(value)
    return cleaned or None
