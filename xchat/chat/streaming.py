"""Streaming ingestion of assistant replies over HTTP.

Posts the conversation context to the streaming endpoint and feeds every decoded
text chunk into the message store, in arrival order, before reading the next one.
"""

import logging
from collections.abc import Sequence

import httpx

from xchat.chat.errors import StreamStatusError, StreamUnavailableError
from xchat.chat.store import MessageStore
from xchat.models.schemas import Message, MessageStatus, StreamRequest

logger = logging.getLogger(__name__)

STREAM_SENTINEL = "[DONE]"

# Success codes that by definition carry no body
_NO_BODY_STATUSES = frozenset({204, 205})


class StreamingIngestor:
    """Consumes the streaming endpoint for one assistant turn.

    A single attempt is made per call. Failures raise a StreamError and leave the
    target message streaming so the caller can hand it to a fallback.
    """

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
        sentinel: str = STREAM_SENTINEL,
    ) -> None:
        """Initialize the ingestor.

        Args:
            url: Streaming endpoint URL (relative URLs resolve against the
                 client's base_url).
            client: Optional shared client. A short-lived client is created
                    per request when omitted.
            timeout: Request timeout for the short-lived client.
            sentinel: Text marking the end of the stream.
        """
        self._url = url
        self._client = client
        self._timeout = timeout
        self._sentinel = sentinel

    async def stream(
        self,
        context: Sequence[Message],
        assistant_id: str,
        store: MessageStore,
    ) -> None:
        """Stream a reply into the assistant message.

        Args:
            context: Transcript up to and including the new user turn.
            assistant_id: Placeholder message receiving the chunks.
            store: Transcript owner.

        Raises:
            StreamStatusError: The endpoint answered with a failure status.
            StreamUnavailableError: No readable stream could be consumed.
        """
        payload = StreamRequest(messages=list(context)).model_dump(mode="json")

        if self._client is not None:
            await self._consume(self._client, payload, assistant_id, store)
            return

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            await self._consume(client, payload, assistant_id, store)

    async def _consume(
        self,
        client: httpx.AsyncClient,
        payload: dict,
        assistant_id: str,
        store: MessageStore,
    ) -> None:
        received = 0
        try:
            async with client.stream(
                "POST",
                self._url,
                json=payload,
                headers={"Accept": "text/plain, text/event-stream"},
            ) as response:
                if not response.is_success:
                    raise StreamStatusError(response.status_code)
                if response.status_code in _NO_BODY_STATUSES:
                    raise StreamUnavailableError(
                        f"Response did not include a readable stream "
                        f"(HTTP {response.status_code})"
                    )

                async for chunk in response.aiter_text():
                    if chunk == self._sentinel:
                        break
                    store.append_chunk(assistant_id, chunk)
                    received += 1

        except httpx.RequestError as e:
            raise StreamUnavailableError(f"Streaming endpoint unavailable: {e}") from e
        except httpx.StreamError as e:
            raise StreamUnavailableError(f"Response stream could not be read: {e}") from e

        store.set_status(assistant_id, MessageStatus.DONE)
        logger.info(f"Streamed reply {assistant_id} in {received} chunks")
