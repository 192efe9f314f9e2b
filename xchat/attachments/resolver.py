"""Conversion of upload widget records into message attachments."""

import logging
from collections.abc import Iterable

from xchat.attachments.object_urls import LocalObjectUrls
from xchat.models.schemas import Attachment, PendingFile, UploadStatus

logger = logging.getLogger(__name__)

_SKIPPED = frozenset({UploadStatus.REMOVED, UploadStatus.ERROR})


class AttachmentResolver:
    """Resolves pending uploads into immutable attachments.

    URL resolution order: the remote URL assigned by the upload transport, then
    the widget's preview reference, then a local reference to the raw bytes.
    Missing metadata falls back to defaults instead of failing.
    """

    def __init__(self, object_urls: LocalObjectUrls | None = None) -> None:
        self._object_urls = object_urls if object_urls is not None else LocalObjectUrls()

    @property
    def object_urls(self) -> LocalObjectUrls:
        return self._object_urls

    def resolve(self, record: PendingFile) -> Attachment:
        """Build the attachment for a single record.

        Calling this again for an unchanged record returns an equal attachment.
        """
        raw = record.raw

        if record.url:
            # Remote URL supersedes any local reference issued earlier
            self._object_urls.release(record.uid)
            url = record.url
        elif record.thumb_url:
            url = record.thumb_url
        elif raw is not None:
            url = self._object_urls.acquire(record.uid, raw)
        else:
            logger.debug(f"No reference available for attachment {record.name}")
            url = ""

        if raw is not None:
            media_type = raw.type or record.type or ""
            size = raw.size
        else:
            media_type = record.type or ""
            size = record.size or 0

        return Attachment(
            id=record.uid,
            url=url,
            name=record.name,
            type=media_type,
            size=size,
        )

    def resolve_all(self, records: Iterable[PendingFile]) -> list[Attachment]:
        """Resolve every record that is still meant to be sent."""
        return [self.resolve(r) for r in records if r.status not in _SKIPPED]

    def release(self, record: PendingFile) -> bool:
        """Drop the local reference held for a record, if any."""
        return self._object_urls.release(record.uid)

    def release_all(self) -> int:
        return self._object_urls.release_all()
