"""
Media storage interface for event logo uploads.
Allows swapping the local filesystem for an object store without touching
the event service.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedMedia:
    filename: str
    content_type: str
    content: bytes


class MediaStorage(ABC):
    """
    Interface for logo storage backends.

    Implementations:
    - LocalMediaStorage: files under MEDIA_ROOT, served from MEDIA_URL_PREFIX
    """

    @abstractmethod
    async def save(self, media: UploadedMedia, folder: str) -> str:
        """
        Persist an uploaded file.

        Args:
            media: Uploaded file name, MIME type and bytes
            folder: Logical folder to group files under

        Returns:
            Stable URL the file can be fetched from
        """
        pass

    @abstractmethod
    async def delete(self, url: str) -> None:
        """
        Remove a file previously returned by save().
        Unknown URLs are ignored.
        """
        pass
