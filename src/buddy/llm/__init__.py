from .base import ChatBackend, ChatSession
from .factory import create_chat_backend
from .models import (
    FunctionCall,
    FunctionResponse,
    InlineDataPart,
    MessagePayload,
    StreamChunk,
    StreamingResponse,
    TextPart,
    ToolDeclaration,
)
from .providers import GeminiChatBackend

__all__ = [
    "ChatBackend",
    "ChatSession",
    "create_chat_backend",
    "FunctionCall",
    "FunctionResponse",
    "InlineDataPart",
    "MessagePayload",
    "StreamChunk",
    "StreamingResponse",
    "TextPart",
    "ToolDeclaration",
    "GeminiChatBackend",
]
