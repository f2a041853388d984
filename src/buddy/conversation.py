"""Conversation state held in memory for one session.

Hides how turns and the pending input are stored. Nothing here is
persisted; a reset or process exit discards it.
"""

from dataclasses import dataclass, field

from .models import Attachment, Message, Role


@dataclass
class Draft:
    """Pending input: the text being composed and the attached images."""

    text: str = ""
    attachments: list[Attachment] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.text.strip() and not self.attachments

    def clear(self) -> None:
        self.text = ""
        self.attachments = []


class Conversation:
    """Ordered list of conversation turns."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    @property
    def messages(self) -> list[Message]:
        """Snapshot of the turns, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def add_user_turn(self, text: str, attachments: list[Attachment] | None = None) -> Message:
        message = Message(role=Role.USER, text=text, attachments=list(attachments or []))
        self._messages.append(message)
        return message

    def add_placeholder(self) -> Message:
        """Append an empty model turn that is still streaming."""
        message = Message(role=Role.MODEL, text="", is_streaming=True)
        self._messages.append(message)
        return message

    def get(self, message_id: str) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None

    def last_response(self) -> Message | None:
        """Most recent model turn, if any."""
        for message in reversed(self._messages):
            if message.role == Role.MODEL:
                return message
        return None

    def clear(self) -> None:
        self._messages.clear()
