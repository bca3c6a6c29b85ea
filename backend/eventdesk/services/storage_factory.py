"""
Media storage factory.
Configures which logo storage backend to use.
"""

from typing import Optional

from eventdesk.services.interfaces.media_storage import MediaStorage
from eventdesk.infrastructure.media_storage import LocalMediaStorage
from eventdesk.core.config import settings


def build_media_storage() -> MediaStorage:
    """
    Build the configured storage backend.
    Selected via MEDIA_BACKEND; "local" is the only backend shipped.
    """
    backend = settings.MEDIA_BACKEND

    if backend == 'local':
        return LocalMediaStorage()
    raise ValueError(f"Unknown MEDIA_BACKEND: {backend}")


# Singleton instance
_storage: Optional[MediaStorage] = None


def get_media_storage() -> MediaStorage:
    """Get media storage singleton."""
    global _storage
    if _storage is None:
        _storage = build_media_storage()
    return _storage
