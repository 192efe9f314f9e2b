"""Chat session configuration with environment variable loading.

Pydantic-based configuration for the streaming endpoint, the fallback reply
pacing and the upload transport.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_WELCOME_MESSAGE = (
    "Hi, I'm your AI assistant. Replies stream in as they are written, "
    "and you can attach files to any message."
)

# Mirrors the upload widget's accept attribute
ACCEPTED_FILE_TYPES = "image/*,.pdf,.txt,.doc,.ppt,.xlsx"


class ChatConfig(BaseModel):
    """Configuration for a chat session.

    Attributes:
        stream_url: Streaming endpoint receiving the message context.
        request_timeout: Seconds before the streaming request times out.
        fallback_delay: Seconds between simulated fallback paragraphs.
        welcome_message: Greeting shown at the top of every fresh transcript.
        upload_dir: Directory the upload transport writes files to.
        upload_url_prefix: Public path the upload directory is served under.
        max_upload_bytes: Largest accepted upload.
        max_attachments: Most files attachable to a single message.
    """

    stream_url: str = Field(
        default_factory=lambda: os.getenv(
            "CHAT_STREAM_URL", "http://localhost:8000/api/chat/stream"
        ),
        description="Streaming endpoint URL",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("CHAT_REQUEST_TIMEOUT", "120")),
        gt=0.0,
        description="Streaming request timeout in seconds",
    )
    fallback_delay: float = Field(
        default_factory=lambda: float(os.getenv("CHAT_FALLBACK_DELAY", "0.52")),
        ge=0.0,
        description="Delay between simulated fallback paragraphs in seconds",
    )
    welcome_message: str = Field(
        default=DEFAULT_WELCOME_MESSAGE,
        min_length=1,
        description="Greeting that opens every transcript",
    )
    upload_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("CHAT_UPLOAD_DIR", "data/uploads")),
        description="Directory uploaded files are stored in",
    )
    upload_url_prefix: str = Field(
        default="/uploads",
        description="Path prefix under which uploaded files are served",
    )
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Maximum size of a single upload",
    )
    max_attachments: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum number of files per message",
    )

    @field_validator("stream_url")
    @classmethod
    def validate_stream_url(cls, v: str) -> str:
        """Validate that the streaming endpoint is set."""
        if not v or not v.strip():
            raise ValueError("Streaming endpoint required. Set CHAT_STREAM_URL in .env")
        return v.strip()

    @field_validator("upload_url_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Ensure the prefix starts with a slash and has none at the end."""
        return "/" + v.strip().strip("/")


def get_chat_config() -> ChatConfig:
    """Create chat configuration from environment.

    Returns:
        Configured ChatConfig instance.

    Raises:
        ValueError: If the streaming endpoint is blank.
    """
    return ChatConfig()
