"""Ephemeral local references to file bytes.

Stand-in URLs for files that have no remote location yet. Every reference is
owned by a key (the upload record uid) and stays readable until it is released,
either because the record resolved to a remote URL or because the session
discarded it.
"""

import logging
import uuid

from xchat.models.schemas import RawFile

logger = logging.getLogger(__name__)

LOCAL_URL_SCHEME = "blob:xchat/"


class LocalObjectUrls:
    """Registry of local references with explicit release."""

    def __init__(self) -> None:
        self._urls: dict[str, str] = {}
        self._data: dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._urls)

    def __contains__(self, key: str) -> bool:
        return key in self._urls

    def __enter__(self) -> "LocalObjectUrls":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release_all()

    def acquire(self, key: str, raw: RawFile) -> str:
        """Return the reference for a key, creating it on first use."""
        url = self._urls.get(key)
        if url is None:
            url = f"{LOCAL_URL_SCHEME}{uuid.uuid4().hex}"
            self._urls[key] = url
            self._data[url] = raw.data
            logger.debug(f"Acquired local reference for {raw.name} ({raw.size} bytes)")
        return url

    def read(self, url: str) -> bytes:
        """Return the bytes behind a live reference.

        Raises:
            KeyError: If the reference was released or never issued.
        """
        return self._data[url]

    def release(self, key: str) -> bool:
        """Release the reference owned by a key.

        Returns:
            True if a reference was released.
        """
        url = self._urls.pop(key, None)
        if url is None:
            return False
        self._data.pop(url, None)
        return True

    def release_all(self) -> int:
        """Release every live reference and return how many were dropped."""
        count = len(self._urls)
        self._urls.clear()
        self._data.clear()
        if count:
            logger.debug(f"Released {count} local references")
        return count
