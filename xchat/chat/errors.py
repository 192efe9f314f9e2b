"""Error types raised by the chat engine."""


class ChatError(Exception):
    """Base class for chat engine errors."""

    pass


class StreamError(ChatError):
    """Raised when the streaming endpoint cannot deliver a reply."""

    pass


class StreamStatusError(StreamError):
    """Raised when the endpoint answers with a non-success status code."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Streaming endpoint returned HTTP {status_code}")
        self.status_code = status_code


class StreamUnavailableError(StreamError):
    """Raised when the response has no readable stream."""

    pass


class UploadError(ChatError):
    """Raised inside the upload transport when storing a file fails."""

    pass
