"""Message, attachment and upload schemas."""

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


class Role(str, Enum):
    """Speaker of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageStatus(str, Enum):
    """Lifecycle status of a message."""

    STREAMING = "streaming"
    DONE = "done"
    ERROR = "error"


class Attachment(BaseModel):
    """A file attached to a user turn.

    Attributes:
        id: Stable identifier (the upload record's uid).
        url: Reference to the file's bytes (remote, preview or local).
        name: Original file name.
        type: Declared media type, empty when unknown.
        size: Size in bytes, 0 when unknown.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    url: str = ""
    name: str
    type: str = ""
    size: int = Field(default=0, ge=0)


class Message(BaseModel):
    """A single transcript entry.

    Attributes:
        id: Identifier assigned at creation, never reused.
        role: user or assistant.
        content: Accumulated text.
        attachments: Files carried by a user turn.
        status: streaming while chunks arrive, then done or error.
    """

    id: str = Field(default_factory=new_id)
    role: Role
    content: str = ""
    attachments: list[Attachment] = Field(default_factory=list)
    status: MessageStatus = MessageStatus.DONE


class RawFile(BaseModel):
    """File bytes as selected by the user, before upload."""

    name: str
    type: str = ""
    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)


class UploadStatus(str, Enum):
    """State of an upload widget record."""

    UPLOADING = "uploading"
    DONE = "done"
    ERROR = "error"
    REMOVED = "removed"


class PendingFile(BaseModel):
    """Upload widget record, possibly still in flight.

    Attributes:
        uid: Widget-assigned identifier, becomes the attachment id.
        name: Display name.
        status: Upload state.
        percent: Upload progress, 0-100.
        url: Remote URL assigned by the upload transport.
        thumb_url: Preview reference, if the widget produced one.
        type: Media type reported by the widget.
        size: Size reported by the widget.
        raw: Underlying file, when still available.
        error: Failure reason for errored uploads.
    """

    uid: str = Field(default_factory=new_id)
    name: str
    status: UploadStatus = UploadStatus.UPLOADING
    percent: float = Field(default=0.0, ge=0.0, le=100.0)
    url: str | None = None
    thumb_url: str | None = None
    type: str | None = None
    size: int | None = Field(default=None, ge=0)
    raw: RawFile | None = None
    error: str | None = None


class UploadEventKind(str, Enum):
    """Kinds of events emitted by the upload transport."""

    PROGRESS = "progress"
    SUCCESS = "success"
    FAILURE = "failure"


class UploadEvent(BaseModel):
    """Progress or terminal event from the upload transport.

    Attributes:
        kind: progress, success or failure.
        percent: Progress at the time of the event.
        url: Accessible URL of the stored file (success only).
        reason: Failure reason (failure only).
    """

    kind: UploadEventKind
    percent: float = Field(default=0.0, ge=0.0, le=100.0)
    url: str | None = None
    reason: str | None = None

    @property
    def terminal(self) -> bool:
        return self.kind is not UploadEventKind.PROGRESS


class StreamRequest(BaseModel):
    """Payload posted to the streaming endpoint."""

    messages: list[Message]
