"""
Buddy: a voice-driven desktop assistant with a terminal HUD.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .chat import RemoteChatClient
from .conversation import Conversation, Draft
from .errors import (
    BuddyError,
    RecognitionEngineError,
    SpeechUnavailableError,
    ToolLoopLimitError,
)
from .models import (
    ActionStatus,
    Attachment,
    ListeningState,
    Message,
    Role,
    SystemAction,
)
from .offline import OfflineInterpreter
from .router import CommandRouter, RouterCallback

__all__ = [
    "ActionStatus",
    "Attachment",
    "BuddyError",
    "CommandRouter",
    "Conversation",
    "Draft",
    "ListeningState",
    "Message",
    "OfflineInterpreter",
    "RecognitionEngineError",
    "RemoteChatClient",
    "Role",
    "RouterCallback",
    "SpeechUnavailableError",
    "SystemAction",
    "ToolLoopLimitError",
]
