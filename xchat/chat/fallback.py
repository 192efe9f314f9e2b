"""Simulated assistant reply used when the streaming endpoint fails.

Writes a fixed set of explanatory paragraphs through the same chunk interface as
the streaming ingestor, paced so the reply still renders incrementally.
"""

import asyncio
import logging
from collections.abc import Sequence

from xchat.chat.store import MessageStore
from xchat.models.schemas import MessageStatus

logger = logging.getLogger(__name__)

FALLBACK_PARAGRAPHS: tuple[str, ...] = (
    "This is a sample answer that demonstrates how streamed replies render "
    "in the chat bubbles.",
    "You can attach files with the upload area below and send them along "
    "with your message.",
    "To connect a real backend, point the stream URL at a server that returns "
    "a text stream or server-sent events.",
)

DEFAULT_DELAY = 0.52


class FallbackSimulator:
    """Produces a deterministic, time-paced reply for one assistant turn."""

    def __init__(
        self,
        paragraphs: Sequence[str] = FALLBACK_PARAGRAPHS,
        delay: float = DEFAULT_DELAY,
    ) -> None:
        self._paragraphs = tuple(paragraphs)
        self._delay = delay

    def expected_content(self) -> str:
        """Full content the simulator writes into a fresh placeholder."""
        return "".join(self._chunk(p) for p in self._paragraphs)

    @staticmethod
    def _chunk(paragraph: str) -> str:
        return f"{paragraph}\n\n"

    async def run(self, assistant_id: str, store: MessageStore) -> None:
        """Append each paragraph after the configured delay, then finish the turn."""
        for paragraph in self._paragraphs:
            await asyncio.sleep(self._delay)
            store.append_chunk(assistant_id, self._chunk(paragraph))

        store.set_status(assistant_id, MessageStatus.DONE)
        logger.info(f"Simulated reply {assistant_id} with {len(self._paragraphs)} paragraphs")
