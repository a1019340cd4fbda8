"""Storage backends."""

from app.infrastructure.external.storage.local_storage import LocalStorageService

__all__ = ["LocalStorageService"]
