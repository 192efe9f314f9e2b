"""NiceGUI chat page driving a session controller."""

import asyncio

from nicegui import events, ui

from xchat.attachments.object_urls import LOCAL_URL_SCHEME
from xchat.attachments.resolver import AttachmentResolver
from xchat.attachments.transport import LocalUploadTransport, apply_upload_event
from xchat.chat.config import ACCEPTED_FILE_TYPES, get_chat_config
from xchat.chat.session import create_session
from xchat.models.schemas import (
    Attachment,
    Message,
    MessageStatus,
    PendingFile,
    RawFile,
    Role,
    UploadStatus,
)

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .message-user {
        background: linear-gradient(135deg, #13c2c2 0%, #1677ff 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #1677ff;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""


def format_size(size: int) -> str:
    """Human readable byte count."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def render_attachment(attachment: Attachment) -> None:
    label = f"{attachment.name} ({format_size(attachment.size)})"
    with ui.row().classes("items-center gap-1"):
        ui.icon("attach_file").classes("text-sm")
        # Local references only exist inside this process
        if attachment.url and not attachment.url.startswith(LOCAL_URL_SCHEME):
            ui.link(label, attachment.url, new_tab=True).classes("text-xs")
        else:
            ui.label(label).classes("text-xs")


def render_message(msg: Message) -> None:
    is_user = msg.role is Role.USER
    align = "justify-end" if is_user else "justify-start"
    bubble = "message-user" if is_user else "message-assistant"

    with ui.row().classes(f"w-full {align}"):
        with ui.column().classes(f"max-w-[70%] gap-1 px-4 py-3 {bubble}"):
            if msg.status is MessageStatus.STREAMING and not msg.content:
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")
            elif is_user:
                ui.label(msg.content).classes("text-sm whitespace-pre-wrap")
            else:
                ui.markdown(msg.content).classes("text-sm")
            for attachment in msg.attachments:
                render_attachment(attachment)


@ui.page("/")
def chat_page() -> None:
    """Main chat page, one session per client."""
    ui.add_head_html(CUSTOM_CSS)

    config = get_chat_config()
    resolver = AttachmentResolver()
    transport = LocalUploadTransport.from_config(config)
    session = create_session(config, resolver=resolver)
    pending: dict[str, PendingFile] = {}
    cancels: dict[str, asyncio.Event] = {}

    @ui.refreshable
    def error_banner() -> None:
        if not session.last_error:
            return
        with ui.row().classes(
            "w-full items-center gap-3 px-4 py-2 bg-red-50 border border-red-200 rounded"
        ):
            ui.icon("error").classes("text-red-500")
            with ui.column().classes("flex-grow gap-0"):
                ui.label("Send failed, showing a simulated reply").classes("text-sm font-medium")
                ui.label(session.last_error).classes("text-xs text-gray-500")
            ui.button("Retry", on_click=retry).props("flat dense color=negative")

    @ui.refreshable
    def message_list() -> None:
        for msg in session.messages:
            render_message(msg)

    @ui.refreshable
    def pending_list() -> None:
        for record in pending.values():
            with ui.row().classes("items-center gap-2 text-xs"):
                ui.icon("description")
                ui.label(record.name)
                if record.status is UploadStatus.UPLOADING:
                    ui.label(f"{record.percent:.0f}%").classes("text-gray-400")
                elif record.status is UploadStatus.ERROR:
                    ui.label(record.error or "Upload failed").classes("text-red-500")
                ui.button(icon="close", on_click=lambda r=record: remove(r)).props(
                    "flat dense round size=xs"
                )

    def refresh_all() -> None:
        message_list.refresh()
        error_banner.refresh()

    session.store.subscribe(lambda _store: message_list.refresh())

    async def handle_upload(e: events.UploadEventArguments) -> None:
        if len(pending) >= config.max_attachments:
            ui.notify(f"At most {config.max_attachments} files per message", type="warning")
            return
        raw = RawFile(name=e.file.name, type=e.file.content_type or "", data=await e.file.read())
        record = PendingFile(name=raw.name, type=raw.type, size=raw.size, raw=raw)
        pending[record.uid] = record
        pending_list.refresh()

        cancels[record.uid] = cancel = asyncio.Event()
        async for event in transport.upload(raw, cancel):
            current = pending.get(record.uid)
            if current is None:
                continue
            pending[record.uid] = apply_upload_event(current, event)
            pending_list.refresh()
        cancels.pop(record.uid, None)

    def remove(record: PendingFile) -> None:
        pending.pop(record.uid, None)
        if record.uid in cancels:
            cancels.pop(record.uid).set()
        resolver.release(record)
        pending_list.refresh()

    async def send() -> None:
        text = input_field.value or ""
        attachments = resolver.resolve_all(pending.values())
        if session.is_streaming or (not text.strip() and not attachments):
            return

        input_field.value = ""
        pending.clear()
        pending_list.refresh()
        upload.reset()

        await session.send_message(text, attachments)
        refresh_all()

    async def retry() -> None:
        await session.retry_last()
        refresh_all()

    def reset() -> None:
        session.reset_chat()
        pending.clear()
        pending_list.refresh()
        refresh_all()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container gap-0").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        with ui.row().classes("w-full px-5 py-4 items-center justify-between border-b"):
            with ui.column().classes("gap-0"):
                ui.label("xchat").classes("text-lg font-semibold")
                ui.label("Streaming replies, file attachments, offline fallback").classes(
                    "text-xs text-gray-500"
                )
            ui.button("Clear chat", icon="delete_sweep", on_click=reset).props(
                "flat color=negative"
            )

        with ui.column().classes("w-full px-5 pt-3"):
            error_banner()

        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5 gap-4"),
        ):
            message_list()

        with ui.column().classes("w-full p-4 gap-2 bg-white border-t"):
            upload = (
                ui.upload(on_upload=handle_upload, multiple=True, auto_upload=True)
                .props(f'accept="{ACCEPTED_FILE_TYPES}" flat bordered')
                .classes("w-full")
            )
            pending_list()
            with ui.row().classes("w-full gap-3 items-end"):
                input_field = (
                    ui.textarea(placeholder="Type a message, Enter to send")
                    .props("autogrow outlined dense rows=1")
                    .classes("flex-grow")
                    .on("keydown.enter.prevent", send)
                    .bind_enabled_from(session, "is_streaming", backward=lambda s: not s)
                )
                (
                    ui.button(icon="send", on_click=send)
                    .props("round unelevated color=primary")
                    .bind_enabled_from(session, "is_streaming", backward=lambda s: not s)
                )
