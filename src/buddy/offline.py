"""Offline command interpreter.

Handles a handful of system intents with regular expressions when the
remote model cannot be reached.
"""

import asyncio
import logging
import re
from typing import NamedTuple

from .config import OFFLINE_DELAY_SECONDS
from .models import SystemAction
from .tools import ActionCallback

logger = logging.getLogger(__name__)

SHUTDOWN_PATTERN = re.compile(r"shut\s?down|turn off")
RESTART_PATTERN = re.compile(r"restart|reboot")
OPEN_PATTERN = re.compile(r"open\s+(.+)", re.IGNORECASE | re.DOTALL)
FILLER_PATTERN = re.compile(r"\b(?:application|app|program)\b", re.IGNORECASE)

VOLUME_UP_PHRASES = ("volume up", "louder")
MUTE_PHRASES = ("mute", "silence")

FALLBACK_RESPONSE = (
    "I am currently offline, but I can help you with basic system commands like "
    "'Shutdown', 'Open Calculator', or 'Mute'. Please check your internet connection "
    "for full features."
)


class OfflineResult(NamedTuple):
    """Canned reply plus the action it implies, if any."""

    response: str
    action: SystemAction | None = None


def clean_app_name(raw: str) -> str:
    """Drop filler words ("app", "application", "program") and trim the ends.

    Interior spacing is kept as spoken or typed.
    """
    return FILLER_PATTERN.sub("", raw).strip()


class OfflineInterpreter:
    """Ordered pattern matcher; the first matching intent wins."""

    def __init__(self, delay: float = OFFLINE_DELAY_SECONDS) -> None:
        self._delay = delay

    def interpret(self, text: str) -> OfflineResult:
        """Map user text to a reply and an optional action (no side effects)."""
        lower = text.lower()

        if SHUTDOWN_PATTERN.search(lower):
            return OfflineResult(
                "I'm initiating the shutdown sequence now. Goodnight!",
                SystemAction(tool_name="system_control", args={"action": "shutdown"}),
            )

        if RESTART_PATTERN.search(lower):
            return OfflineResult(
                "Restarting the system. I'll see you in a moment.",
                SystemAction(tool_name="system_control", args={"action": "restart"}),
            )

        # Matched on the original text so the app name keeps its casing
        open_match = OPEN_PATTERN.search(text)
        if open_match:
            app_name = clean_app_name(open_match.group(1))
            return OfflineResult(
                f"Opening {app_name} for you locally.",
                SystemAction(tool_name="app_control", args={"action": "open", "appName": app_name}),
            )

        if any(phrase in lower for phrase in VOLUME_UP_PHRASES):
            return OfflineResult(
                "Turning the volume up.",
                SystemAction(tool_name="media_control", args={"command": "set_volume", "value": 80}),
            )

        if any(phrase in lower for phrase in MUTE_PHRASES):
            return OfflineResult(
                "System muted.",
                SystemAction(tool_name="media_control", args={"command": "mute"}),
            )

        return OfflineResult(FALLBACK_RESPONSE)

    async def process(self, text: str, on_action: ActionCallback | None = None) -> str:
        """Interpret after a short pause, report the action and return the reply."""
        await asyncio.sleep(self._delay)

        result = self.interpret(text)
        if result.action is not None:
            logger.info("Offline intent: %s %s", result.action.tool_name, result.action.args)
            if on_action is not None:
                on_action(result.action)
        else:
            logger.debug("No offline intent matched %r", text)
        return result.response
