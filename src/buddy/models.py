"""Data models shared by the assistant components.

These models hide the representation of conversation turns, image
attachments and executed system actions from the components that
produce and display them.
"""

import base64
import mimetypes
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    MODEL = "model"


class ActionStatus(str, Enum):
    """Execution status of a system action."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class ListeningState(str, Enum):
    """Voice listening mode.

    OFF: recognition engine stopped
    STANDBY: engine running, waiting for the wake phrase
    ACTIVE: capturing a command after the wake phrase
    """

    OFF = "off"
    STANDBY = "standby"
    ACTIVE = "active"


class Attachment(BaseModel):
    """An image attached to a user turn."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(description="MIME type of the payload, e.g. image/png")
    data: str = Field(description="Base64-encoded payload")
    preview_url: str = Field(description="Render-ready data URI")

    @classmethod
    def from_bytes(cls, payload: bytes, mime_type: str) -> "Attachment":
        """Build an attachment from raw bytes."""
        data = base64.b64encode(payload).decode("ascii")
        return cls(
            mime_type=mime_type,
            data=data,
            preview_url=f"data:{mime_type};base64,{data}",
        )

    @classmethod
    def from_path(cls, path: str | Path) -> "Attachment":
        """Load an image file as an attachment.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not an image
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        mime_type, _ = mimetypes.guess_type(file_path.name)
        if not mime_type or not mime_type.startswith("image/"):
            raise ValueError("Please upload an image file.")

        return cls.from_bytes(file_path.read_bytes(), mime_type)


class SystemAction(BaseModel):
    """Record of a tool invocation (real or mocked)."""

    model_config = ConfigDict(frozen=True)

    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)
    status: ActionStatus = ActionStatus.SUCCESS
    timestamp: datetime = Field(default_factory=datetime.now)


class Message(BaseModel):
    """A single conversation turn.

    ``text`` is rewritten while ``is_streaming`` is set and left alone
    afterwards.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Role
    text: str = ""
    attachments: list[Attachment] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)
    is_streaming: bool = False
    tool_invocations: list[SystemAction] = Field(default_factory=list)
