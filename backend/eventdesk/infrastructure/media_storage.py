"""
Local filesystem media storage.
Files are written under MEDIA_ROOT and exposed by the static mount at
MEDIA_URL_PREFIX, so the returned URL stays valid across restarts.
"""

import uuid
from pathlib import Path
from typing import Optional

from starlette.concurrency import run_in_threadpool

from eventdesk.core.config import get_settings
from eventdesk.core.exceptions import ValidationError
from eventdesk.core.logging import get_logger
from eventdesk.services.interfaces.media_storage import MediaStorage, UploadedMedia

logger = get_logger(__name__)

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}


class LocalMediaStorage(MediaStorage):

    def __init__(
        self,
        root: Optional[str] = None,
        url_prefix: Optional[str] = None,
        allowed_types: Optional[list[str]] = None,
    ):
        settings = get_settings()
        self.root = Path(root or settings.MEDIA_ROOT)
        self.url_prefix = (url_prefix or settings.MEDIA_URL_PREFIX).rstrip("/")
        self.allowed_types = allowed_types or settings.MEDIA_ALLOWED_TYPES

    async def save(self, media: UploadedMedia, folder: str) -> str:
        if media.content_type not in self.allowed_types:
            raise ValidationError(
                "Unsupported logo format",
                errors={"logo": f"Allowed formats: {', '.join(self.allowed_types)}"},
            )
        if not media.content:
            raise ValidationError("Uploaded logo is empty", errors={"logo": "File is empty"})

        extension = EXTENSIONS.get(media.content_type) or Path(media.filename).suffix.lower()
        relative = Path(folder) / f"{uuid.uuid4().hex}{extension}"
        target = self.root / relative

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(media.content)

        await run_in_threadpool(_write)
        logger.info("media_saved", path=str(relative), size=len(media.content))
        return f"{self.url_prefix}/{relative.as_posix()}"

    async def delete(self, url: str) -> None:
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            return
        target = (self.root / url[len(prefix):]).resolve()
        if self.root.resolve() not in target.parents:
            return

        try:
            await run_in_threadpool(target.unlink)
        except FileNotFoundError:
            return
        logger.info("media_deleted", url=url)
