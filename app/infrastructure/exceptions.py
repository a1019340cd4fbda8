"""Infrastructure exceptions for storage operations.

Storage errors extend MediaHubException so presentation can map them
to HTTP responses consistently.
"""

from app.domain.exceptions import MediaHubException


class StorageException(MediaHubException):
    """Base exception for storage operations."""


class StorageDeleteError(StorageException):
    """Folder or file removal failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation}: {file_path}",
            "STORAGE_PERMISSION_DENIED",
            {"file_path": file_path, "operation": operation},
        )
