"""Chat session controller.

Drives one send cycle at a time:

    idle -> sending -> (streamed | fallback) -> idle

The user turn and an empty assistant placeholder are appended first. The
streaming ingestor then fills the placeholder; if it fails for any reason the
failure is recorded as an advisory error and the fallback simulator fills the
placeholder instead. Either way the placeholder reaches a terminal status and
the streaming flag is cleared.

A session is a plain object owned by its caller. Nothing here is module-level
state, so several sessions can coexist (one per browser client, one per test).
"""

import logging
from collections.abc import Sequence

import httpx

from xchat.attachments.resolver import AttachmentResolver
from xchat.chat.config import ChatConfig
from xchat.chat.fallback import FallbackSimulator
from xchat.chat.store import MessageStore
from xchat.chat.streaming import StreamingIngestor
from xchat.models.schemas import Attachment, Message, MessageStatus

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Send failed"


class SessionController:
    """Public surface of a chat session for the presentation layer."""

    def __init__(
        self,
        store: MessageStore,
        ingestor: StreamingIngestor,
        fallback: FallbackSimulator,
        *,
        resolver: AttachmentResolver | None = None,
    ) -> None:
        self._store = store
        self._ingestor = ingestor
        self._fallback = fallback
        self._resolver = resolver
        self._is_streaming = False
        self._last_error: str | None = None
        self._generation = 0

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._store.messages

    @property
    def is_streaming(self) -> bool:
        return self._is_streaming

    @property
    def last_error(self) -> str | None:
        return self._last_error

    async def send_message(
        self,
        text: str,
        attachments: Sequence[Attachment] = (),
    ) -> str | None:
        """Run a full send cycle.

        Args:
            text: User text, stripped before it is stored.
            attachments: Files carried by the turn.

        Returns:
            Id of the assistant message, or None if nothing was sent.
        """
        text = text.strip()
        if not text and not attachments:
            return None

        if self._is_streaming:
            logger.warning("Rejected send while a reply is still streaming")
            return None

        self._generation += 1
        generation = self._generation
        self._last_error = None
        self._is_streaming = True
        assistant_id: str | None = None
        try:
            self._store.append_user(text, attachments)
            # Context ends at the user turn; the placeholder is never sent
            context = self._store.snapshot()
            assistant_id = self._store.append_placeholder_assistant()

            try:
                await self._ingestor.stream(context, assistant_id, self._store)
            except Exception as e:
                logger.warning(f"Streaming endpoint unavailable, using simulated reply: {e}")
                if generation == self._generation:
                    self._last_error = str(e) or DEFAULT_ERROR_MESSAGE
                await self._fallback.run(assistant_id, self._store)
        finally:
            # A reset during the cycle already released the gate
            if generation == self._generation:
                self._is_streaming = False
            if assistant_id is not None:
                current = self._store.get(assistant_id)
                if current is not None and current.status is MessageStatus.STREAMING:
                    self._store.set_status(assistant_id, MessageStatus.ERROR)

        return assistant_id

    async def retry_last(self) -> str | None:
        """Send the most recent user turn again as a new turn."""
        last_user = self._store.last_user_message()
        if last_user is None:
            return None
        return await self.send_message(last_user.content, list(last_user.attachments))

    def reset_chat(self) -> None:
        """Start over with only the welcome message."""
        self._generation += 1
        self._store.reset()
        self._last_error = None
        self._is_streaming = False
        if self._resolver is not None:
            self._resolver.release_all()


def create_session(
    config: ChatConfig,
    *,
    client: httpx.AsyncClient | None = None,
    resolver: AttachmentResolver | None = None,
) -> SessionController:
    """Build a session controller from configuration.

    Args:
        config: Chat configuration.
        client: Optional shared HTTP client for the streaming endpoint.
        resolver: Attachment resolver whose local references the session owns.

    Returns:
        A controller holding a fresh transcript.
    """
    return SessionController(
        MessageStore(config.welcome_message),
        StreamingIngestor(config.stream_url, client=client, timeout=config.request_timeout),
        FallbackSimulator(delay=config.fallback_delay),
        resolver=resolver,
    )
