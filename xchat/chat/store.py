"""Ordered transcript of chat messages.

The store is the only writer of the transcript. Each operation replaces the
addressed message with an updated copy at the same position, so readers never
observe a half-applied change and the conversation order never moves.
"""

import logging
from collections.abc import Callable, Iterable

from xchat.models.schemas import Attachment, Message, MessageStatus, Role

logger = logging.getLogger(__name__)

Listener = Callable[["MessageStore"], None]

_TERMINAL = frozenset({MessageStatus.DONE, MessageStatus.ERROR})


class MessageStore:
    """Holds the transcript and enforces turn invariants.

    The transcript always contains at least the welcome message. Assistant
    content only grows while the message is streaming and is frozen once it
    reaches done or error.
    """

    def __init__(self, welcome_message: str) -> None:
        self._welcome_message = welcome_message
        self._messages: list[Message] = [self._welcome()]
        self._listeners: list[Listener] = []

    def _welcome(self) -> Message:
        return Message(
            role=Role.ASSISTANT,
            content=self._welcome_message,
            status=MessageStatus.DONE,
        )

    @property
    def messages(self) -> tuple[Message, ...]:
        """Read-only view of the transcript in conversation order."""
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def snapshot(self) -> list[Message]:
        """Copy of the transcript, safe to serialize while streaming continues."""
        return list(self._messages)

    def get(self, message_id: str) -> Message | None:
        return next((m for m in self._messages if m.id == message_id), None)

    def last_user_message(self) -> Message | None:
        """Most recent user message, scanning from newest to oldest."""
        return next(
            (m for m in reversed(self._messages) if m.role is Role.USER),
            None,
        )

    def streaming_ids(self) -> list[str]:
        return [m.id for m in self._messages if m.status is MessageStatus.STREAMING]

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked after every mutation.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _index(self, message_id: str) -> int | None:
        for i, msg in enumerate(self._messages):
            if msg.id == message_id:
                return i
        return None

    def append_user(self, text: str, attachments: Iterable[Attachment] = ()) -> str:
        """Append a completed user turn.

        Args:
            text: Message text.
            attachments: Files carried by the turn.

        Returns:
            Id of the new message.
        """
        message = Message(
            role=Role.USER,
            content=text,
            attachments=list(attachments),
            status=MessageStatus.DONE,
        )
        self._messages.append(message)
        self._notify()
        return message.id

    def append_placeholder_assistant(self) -> str:
        """Append an empty assistant turn that will receive streamed chunks."""
        message = Message(role=Role.ASSISTANT, status=MessageStatus.STREAMING)
        self._messages.append(message)
        self._notify()
        return message.id

    def append_chunk(self, message_id: str, text: str) -> None:
        """Concatenate a chunk onto a streaming message.

        Unknown ids are treated as stale or cancelled turns and ignored, as are
        messages that already reached a terminal status.
        """
        index = self._index(message_id)
        if index is None:
            logger.debug(f"Dropping chunk for unknown message {message_id}")
            return

        current = self._messages[index]
        if current.status is not MessageStatus.STREAMING:
            logger.debug(f"Dropping chunk for finished message {message_id}")
            return

        self._messages[index] = current.model_copy(
            update={"content": current.content + text}
        )
        self._notify()

    def set_status(self, message_id: str, status: MessageStatus) -> None:
        """Move a streaming message to done or error.

        Any other transition is ignored.
        """
        index = self._index(message_id)
        if index is None:
            logger.debug(f"Ignoring status {status.value} for unknown message {message_id}")
            return

        current = self._messages[index]
        if current.status is not MessageStatus.STREAMING or status not in _TERMINAL:
            logger.warning(
                f"Ignoring status transition {current.status.value} -> {status.value} "
                f"for message {message_id}"
            )
            return

        self._messages[index] = current.model_copy(update={"status": status})
        self._notify()

    def reset(self) -> None:
        """Replace the transcript with a fresh welcome message."""
        self._messages = [self._welcome()]
        self._notify()
