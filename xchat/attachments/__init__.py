"""Attachment handling for user turns.

Responsibilities:
    - Storing selected files through the local upload transport
    - Issuing and releasing local references for files without a remote URL
    - Resolving upload widget records into message attachments
"""

from xchat.attachments.object_urls import LocalObjectUrls
from xchat.attachments.resolver import AttachmentResolver
from xchat.attachments.transport import LocalUploadTransport, apply_upload_event

__all__ = [
    "AttachmentResolver",
    "LocalObjectUrls",
    "LocalUploadTransport",
    "apply_upload_event",
]
