"""Chat session engine.

Responsibilities:
    - Transcript ownership and turn invariants (store)
    - Streaming ingestion from the remote endpoint (streaming)
    - Simulated replies when the endpoint fails (fallback)
    - Send/retry/reset orchestration (session)
"""

from xchat.chat.config import ChatConfig, get_chat_config
from xchat.chat.errors import (
    ChatError,
    StreamError,
    StreamStatusError,
    StreamUnavailableError,
    UploadError,
)
from xchat.chat.fallback import FallbackSimulator
from xchat.chat.store import MessageStore
from xchat.chat.streaming import StreamingIngestor
from xchat.chat.session import SessionController, create_session

__all__ = [
    "ChatConfig",
    "ChatError",
    "FallbackSimulator",
    "MessageStore",
    "SessionController",
    "StreamError",
    "StreamStatusError",
    "StreamUnavailableError",
    "StreamingIngestor",
    "UploadError",
    "create_session",
    "get_chat_config",
]
