"""Local upload transport.

Stores selected files under the upload directory, which the API serves as static
files, and reports progress followed by exactly one terminal success or failure
event. Upload failures never raise to the caller; they arrive as failure events.
"""

import asyncio
import logging
import shutil
import uuid
from collections.abc import AsyncIterator
from pathlib import Path
from urllib.parse import quote

from xchat.chat.config import ChatConfig
from xchat.chat.errors import UploadError
from xchat.models.schemas import (
    PendingFile,
    RawFile,
    UploadEvent,
    UploadEventKind,
    UploadStatus,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def _safe_name(name: str) -> str:
    """Strip directory components from a client-supplied file name."""
    cleaned = Path(name.replace("\\", "/")).name.strip()
    return cleaned if cleaned not in ("", ".", "..") else "file"


class LocalUploadTransport:
    """Writes uploads to disk and emits upload events."""

    def __init__(
        self,
        upload_dir: Path,
        *,
        url_prefix: str = "/uploads",
        max_bytes: int = 10 * 1024 * 1024,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        self._upload_dir = Path(upload_dir)
        self._url_prefix = url_prefix.rstrip("/")
        self._max_bytes = max_bytes
        self._chunk_size = chunk_size

    @classmethod
    def from_config(cls, config: ChatConfig) -> "LocalUploadTransport":
        return cls(
            config.upload_dir,
            url_prefix=config.upload_url_prefix,
            max_bytes=config.max_upload_bytes,
        )

    async def upload(
        self,
        raw: RawFile,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[UploadEvent]:
        """Store a file, yielding progress and a terminal event.

        Args:
            raw: File to store.
            cancel: Set to abort the upload between pieces.

        Yields:
            Progress events, then one success or failure event.
        """
        if raw.size > self._max_bytes:
            size_mb = raw.size / (1024 * 1024)
            limit_mb = self._max_bytes / (1024 * 1024)
            reason = f"File size ({size_mb:.1f}MB) exceeds maximum allowed ({limit_mb:g}MB)"
            logger.warning(f"Rejected upload {raw.name}: {reason}")
            yield UploadEvent(kind=UploadEventKind.FAILURE, reason=reason)
            return

        token = uuid.uuid4().hex
        name = _safe_name(raw.name)
        folder = self._upload_dir / token
        total = raw.size

        try:
            # Disk work runs in a thread so the event loop keeps serving the page
            await asyncio.to_thread(folder.mkdir, parents=True, exist_ok=True)
            with (folder / name).open("wb") as handle:
                for start in range(0, total, self._chunk_size):
                    if cancel is not None and cancel.is_set():
                        raise UploadError("Upload cancelled")
                    piece = raw.data[start : start + self._chunk_size]
                    await asyncio.to_thread(handle.write, piece)
                    written = start + len(piece)
                    yield UploadEvent(
                        kind=UploadEventKind.PROGRESS,
                        percent=written * 100.0 / total,
                    )
            if cancel is not None and cancel.is_set():
                raise UploadError("Upload cancelled")
        except (OSError, UploadError) as e:
            shutil.rmtree(folder, ignore_errors=True)
            logger.warning(f"Upload failed for {raw.name}: {e}")
            yield UploadEvent(kind=UploadEventKind.FAILURE, reason=str(e))
            return

        url = f"{self._url_prefix}/{token}/{quote(name)}"
        logger.info(f"Stored upload {raw.name} ({total} bytes) at {url}")
        yield UploadEvent(kind=UploadEventKind.SUCCESS, percent=100.0, url=url)


def apply_upload_event(record: PendingFile, event: UploadEvent) -> PendingFile:
    """Fold a transport event into an upload widget record."""
    if event.kind is UploadEventKind.PROGRESS:
        return record.model_copy(
            update={"status": UploadStatus.UPLOADING, "percent": event.percent}
        )
    if event.kind is UploadEventKind.SUCCESS:
        return record.model_copy(
            update={"status": UploadStatus.DONE, "percent": 100.0, "url": event.url}
        )
    return record.model_copy(
        update={"status": UploadStatus.ERROR, "error": event.reason or "Upload failed"}
    )
