"""Pydantic models shared across the chat engine.

Models:
    - Message: One transcript entry (user or assistant turn)
    - Attachment: Immutable file reference carried by a user turn
    - RawFile: File bytes as selected by the user
    - PendingFile: Upload widget record before it is attached
    - UploadEvent: Progress/terminal event emitted by the upload transport
    - StreamRequest: Payload posted to the streaming endpoint
"""

from xchat.models.schemas import (
    Attachment,
    Message,
    MessageStatus,
    PendingFile,
    RawFile,
    Role,
    StreamRequest,
    UploadEvent,
    UploadEventKind,
    UploadStatus,
)

__all__ = [
    "Attachment",
    "Message",
    "MessageStatus",
    "PendingFile",
    "RawFile",
    "Role",
    "StreamRequest",
    "UploadEvent",
    "UploadEventKind",
    "UploadStatus",
]
