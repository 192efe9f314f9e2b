"""FastAPI application factory and configuration.

Application entry point with lifespan management, middleware, and the static
mount that makes uploaded attachments resolvable by URL.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from xchat import __version__
from xchat.chat.config import ChatConfig, get_chat_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    config: ChatConfig = app.state.config
    logger.info(f"Starting chat app, streaming endpoint {config.stream_url}")
    yield
    logger.info("Shutting down chat app...")


def create_app(config: ChatConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Chat configuration. Loads from environment if not provided.

    Returns:
        Configured FastAPI application instance.
    """
    config = config or get_chat_config()
    config.upload_dir.mkdir(parents=True, exist_ok=True)

    application = FastAPI(
        title="xchat",
        description=(
            "Streaming chat client with file attachments and a simulated "
            "fallback reply when the streaming endpoint is unavailable."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.config = config

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.mount(
        config.upload_url_prefix,
        StaticFiles(directory=config.upload_dir),
        name="uploads",
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "xchat"}

    return application
