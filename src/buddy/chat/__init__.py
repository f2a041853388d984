"""Remote chat client: one session with the model, tool calls resolved locally."""

from .client import RemoteChatClient, build_payload

__all__ = ["RemoteChatClient", "build_payload"]
