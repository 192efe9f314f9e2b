"""Unit tests for the local upload transport."""

import asyncio
from pathlib import Path

import pytest

from xchat.attachments.transport import LocalUploadTransport, apply_upload_event
from xchat.chat.config import ChatConfig
from xchat.models.schemas import (
    PendingFile,
    RawFile,
    UploadEvent,
    UploadEventKind,
    UploadStatus,
)


async def collect(transport: LocalUploadTransport, raw: RawFile, **kwargs) -> list[UploadEvent]:
    return [event async for event in transport.upload(raw, **kwargs)]


class TestLocalUploadTransport:
    """Tests for storing files and reporting events."""

    async def test_success_reports_progress_then_url(self, tmp_path: Path) -> None:
        """Progress events precede a single success event with the file URL."""
        transport = LocalUploadTransport(tmp_path, chunk_size=4)
        raw = RawFile(name="notes.txt", type="text/plain", data=b"0123456789")

        events = await collect(transport, raw)

        kinds = [e.kind for e in events]
        assert kinds == [UploadEventKind.PROGRESS] * 3 + [UploadEventKind.SUCCESS]
        assert [round(e.percent) for e in events[:-1]] == [40, 80, 100]

        success = events[-1]
        assert success.terminal
        assert success.url.startswith("/uploads/")
        assert success.url.endswith("/notes.txt")

        token = success.url.split("/")[2]
        assert (tmp_path / token / "notes.txt").read_bytes() == raw.data

    async def test_event_loop_runs_during_writes(self, tmp_path: Path) -> None:
        """Other tasks keep running while pieces are written to disk."""
        ticks = 0

        async def ticker() -> None:
            nonlocal ticks
            while True:
                ticks += 1
                await asyncio.sleep(0)

        task = asyncio.create_task(ticker())
        await asyncio.sleep(0)
        before = ticks
        transport = LocalUploadTransport(tmp_path, chunk_size=1)

        events = await collect(transport, RawFile(name="a.bin", data=b"abcdefgh"))

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert events[-1].kind is UploadEventKind.SUCCESS
        assert ticks > before

    async def test_empty_file(self, tmp_path: Path) -> None:
        """Zero-byte files upload without progress events."""
        events = await collect(LocalUploadTransport(tmp_path), RawFile(name="empty.txt"))

        assert [e.kind for e in events] == [UploadEventKind.SUCCESS]

    async def test_oversized_file_fails(self, tmp_path: Path) -> None:
        """Files above the limit fail without touching the disk."""
        transport = LocalUploadTransport(tmp_path, max_bytes=4)

        events = await collect(transport, RawFile(name="big.bin", data=b"12345"))

        assert len(events) == 1
        assert events[0].kind is UploadEventKind.FAILURE
        assert "exceeds maximum allowed" in events[0].reason
        assert list(tmp_path.iterdir()) == []

    async def test_cancel_removes_partial_file(self, tmp_path: Path) -> None:
        """A set cancel event aborts the upload and cleans up."""
        transport = LocalUploadTransport(tmp_path, chunk_size=2)
        cancel = asyncio.Event()
        events: list[UploadEvent] = []

        async for event in transport.upload(RawFile(name="a.txt", data=b"abcdef"), cancel):
            events.append(event)
            cancel.set()

        assert events[-1].kind is UploadEventKind.FAILURE
        assert events[-1].reason == "Upload cancelled"
        assert list(tmp_path.iterdir()) == []

    async def test_unwritable_directory_fails(self, tmp_path: Path) -> None:
        """Filesystem errors become failure events."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        transport = LocalUploadTransport(blocker / "uploads")

        events = await collect(transport, RawFile(name="a.txt", data=b"abc"))

        assert [e.kind for e in events] == [UploadEventKind.FAILURE]
        assert events[0].reason

    async def test_directory_components_are_stripped(self, tmp_path: Path) -> None:
        """Client-supplied paths cannot escape the upload directory."""
        transport = LocalUploadTransport(tmp_path / "uploads")

        events = await collect(transport, RawFile(name="../../evil.txt", data=b"x"))

        assert events[-1].url.endswith("/evil.txt")
        assert not (tmp_path / "evil.txt").exists()

    async def test_file_names_are_url_quoted(self, tmp_path: Path) -> None:
        """Spaces and similar characters are escaped in the URL."""
        events = await collect(
            LocalUploadTransport(tmp_path), RawFile(name="my notes.txt", data=b"x")
        )

        assert events[-1].url.endswith("/my%20notes.txt")

    def test_from_config(self, tmp_path: Path) -> None:
        """Directory, prefix and limit come from the configuration."""
        config = ChatConfig(
            stream_url="http://example.test/stream",
            upload_dir=tmp_path,
            upload_url_prefix="files/",
            max_upload_bytes=10,
        )

        transport = LocalUploadTransport.from_config(config)

        assert transport._upload_dir == tmp_path
        assert transport._url_prefix == "/files"
        assert transport._max_bytes == 10


class TestApplyUploadEvent:
    """Tests for folding events into widget records."""

    @pytest.fixture
    def record(self) -> PendingFile:
        return PendingFile(name="a.txt")

    def test_progress(self, record: PendingFile) -> None:
        updated = apply_upload_event(
            record, UploadEvent(kind=UploadEventKind.PROGRESS, percent=55.0)
        )

        assert updated.status is UploadStatus.UPLOADING
        assert updated.percent == 55.0

    def test_success(self, record: PendingFile) -> None:
        """Success records the URL and completes the record."""
        updated = apply_upload_event(
            record, UploadEvent(kind=UploadEventKind.SUCCESS, url="/uploads/t/a.txt")
        )

        assert updated.status is UploadStatus.DONE
        assert updated.url == "/uploads/t/a.txt"
        assert updated.percent == 100.0
        assert updated.uid == record.uid

    def test_failure(self, record: PendingFile) -> None:
        """Failure keeps the reason for display."""
        updated = apply_upload_event(
            record, UploadEvent(kind=UploadEventKind.FAILURE, reason="Upload cancelled")
        )

        assert updated.status is UploadStatus.ERROR
        assert updated.error == "Upload cancelled"
