"""Pytest fixtures and shared test configuration.

Fixtures:
    - store: Fresh message store
    - fallback: Fallback simulator without pacing delays
    - make_client: Factory for httpx clients backed by a mock streaming endpoint
    - make_controller: Factory for session controllers wired to a mock endpoint
"""

import json
from collections.abc import AsyncGenerator, Callable

import httpx
import pytest

from xchat.chat.fallback import FallbackSimulator
from xchat.chat.session import SessionController
from xchat.chat.store import MessageStore
from xchat.chat.streaming import StreamingIngestor

WELCOME = "Welcome to the test chat"
STREAM_URL = "http://test/api/chat/stream"


def streaming_handler(
    chunks: list[str],
    status_code: int = 200,
    seen: list[dict] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Build a mock endpoint streaming each chunk as its own body piece.

    Args:
        chunks: Text pieces sent one per read.
        status_code: Response status.
        seen: Receives the decoded JSON payload of every request.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(json.loads(request.content))

        async def body() -> AsyncGenerator[bytes]:
            for chunk in chunks:
                yield chunk.encode("utf-8")

        return httpx.Response(status_code, content=body())

    return handler


@pytest.fixture
def store() -> MessageStore:
    """Fresh transcript holding only the welcome message."""
    return MessageStore(WELCOME)


@pytest.fixture
def fallback() -> FallbackSimulator:
    """Fallback simulator without pacing delays."""
    return FallbackSimulator(delay=0)


@pytest.fixture
async def make_client() -> AsyncGenerator[Callable[..., httpx.AsyncClient]]:
    """Factory for clients routed to a mock endpoint, closed after the test."""
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()


@pytest.fixture
def make_controller(
    store: MessageStore,
    fallback: FallbackSimulator,
    make_client: Callable[..., httpx.AsyncClient],
) -> Callable[..., SessionController]:
    """Factory for controllers whose endpoint is served by a handler."""

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> SessionController:
        ingestor = StreamingIngestor(STREAM_URL, client=make_client(handler))
        return SessionController(store, ingestor, fallback)

    return factory
