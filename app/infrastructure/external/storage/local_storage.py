"""Local filesystem storage: per-user folders and their removal on purge."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

import aiofiles.os

from app.application.dtos.user import UserResult
from app.infrastructure.exceptions import StorageDeleteError, StoragePermissionError
from app.shared.telemetry.logging import get_logger
from app.shared.utils.sanitization import InputSanitizer

logger = get_logger(__name__)

# Top-level folders that hold one sub-folder per user id.
USER_ID_FOLDERS = ("upload", "profile", "thumbs", "encoded-video")
LIBRARY_FOLDER = "library"


class LocalStorageService:
    """IStorageService over a local directory tree with path traversal protection.

    Layout under storage_root:
        library/<storage_label or user id>/
        upload/<user id>/, profile/<user id>/, thumbs/<user id>/, encoded-video/<user id>/
    """

    def __init__(self, storage_root: str) -> None:
        self.storage_root = Path(storage_root).resolve()

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        if full_path == self.storage_root:
            raise StoragePermissionError(storage_ref, "path_validation")
        return full_path

    def user_folders(self, user: UserResult) -> list[Path]:
        """All folders that belong to user, whether or not they exist."""
        library = (
            InputSanitizer.sanitize_path_segment(user.storage_label or "") or user.id
        )
        refs = [f"{LIBRARY_FOLDER}/{library}"]
        refs.extend(f"{folder}/{user.id}" for folder in USER_ID_FOLDERS)
        return [self._get_full_path(ref) for ref in refs]

    async def remove_user_folders(self, user: UserResult) -> list[str]:
        """Delete every existing folder of user; return the removed paths."""
        removed: list[str] = []
        for folder in self.user_folders(user):
            if not await aiofiles.os.path.isdir(folder):
                continue
            try:
                await asyncio.to_thread(shutil.rmtree, folder)
            except OSError as e:
                raise StorageDeleteError(str(folder), str(e)) from e
            logger.info("Removed %s", folder)
            removed.append(str(folder))
        return removed
