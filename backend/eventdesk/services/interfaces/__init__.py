"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .media_storage import MediaStorage, UploadedMedia

__all__ = ['MediaStorage', 'UploadedMedia']
