"""
Media intake.

Resolve an inbound attachment's reference id, download it, and store the
bytes as <media_id><ext> in the media directory. Failures become a generic
apology reply; they are logged and never propagated, because the webhook
must still acknowledge the delivery.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from bot.errors import ProviderCallFailure
from transport.whatsapp.sender import WhatsAppClient

logger = logging.getLogger(__name__)

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "video/mp4": ".mp4",
    "audio/mpeg": ".mp3",
    "application/pdf": ".pdf",
}

MEDIA_SAVE_FAILED_TEXT = "❌ Could not save that media right now."


def extension_for(content_type: Optional[str]) -> str:
    """
    Map a declared content type to a file extension.

    Parameters such as "; charset=..." are ignored. Unknown types map to ""
    and the file is stored without an extension.
    """
    if not content_type:
        return ""
    mime = content_type.split(";", 1)[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(mime, "")


def media_filename(media_id: str, content_type: Optional[str]) -> str:
    return f"{media_id}{extension_for(content_type)}"


def saved_text(kind: str, filename: str) -> str:
    return f"✅ Saved your {kind} as {filename}"


def _is_safe_media_id(media_id: str) -> bool:
    return bool(media_id) and media_id not in (".", "..") and Path(media_id).name == media_id \
        and "\\" not in media_id


class MediaIntake:
    """Downloads attachments through the WhatsApp client and stores them on disk."""

    def __init__(self, client: WhatsAppClient, media_dir: Union[str, Path]):
        self.client = client
        self.media_dir = Path(media_dir)

    async def save(self, media_id: str, kind: str) -> Path:
        """
        Resolve, fetch and store one attachment.

        Returns:
            Path of the stored file

        Raises:
            ResolutionError: reference id could not be resolved
            FetchError: download failed
            ValueError: media id is not a plain file name
            OSError: file could not be written
        """
        if not _is_safe_media_id(media_id):
            raise ValueError(f"Refusing to store media under id {media_id!r}")

        location = await self.client.resolve_media(media_id)
        content, content_type = await self.client.download_media(location.url)

        filename = media_filename(media_id, content_type or location.mime_type)
        path = self.media_dir / filename
        # Blocking file I/O runs in a worker thread
        await asyncio.to_thread(self._write, path, content)

        logger.info(
            f"Saved {kind} as {filename}",
            extra={"media_id": media_id, "kind": kind, "bytes": len(content)},
        )
        return path

    def _write(self, path: Path, content: bytes) -> None:
        self.media_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    async def save_and_reply(self, media_id: str, kind: str) -> str:
        """Store one attachment and return the reply text for the sender."""
        try:
            path = await self.save(media_id, kind)
        except (ProviderCallFailure, ValueError, OSError) as e:
            logger.error(
                f"Media save error: {e}",
                exc_info=True,
                extra={"media_id": media_id, "kind": kind},
            )
            return MEDIA_SAVE_FAILED_TEXT
        return saved_text(kind, path.name)
