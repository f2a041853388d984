"""Callback interfaces for router and logging integration.

Hides the details of how the TUI receives updates from the core.
Log records may arrive from the speech capture thread, so the log handler
uses thread-safe calls to update the UI.
"""

import logging
import threading
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..conversation import Draft
from ..models import Message, SystemAction
from ..router import RouterCallback
from ..telemetry import ActionLog

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import AttachmentStrip, ChatHistoryWidget, ChatInputBar, DebugPanel, SystemHUD


class TUIRouterCallback(RouterCallback):
    """Renders router events into the chat, HUD and input widgets.

    The router runs on the app's event loop, so widgets are updated directly.
    """

    def __init__(
        self,
        chat: "ChatHistoryWidget",
        hud: "SystemHUD",
        input_bar: "ChatInputBar",
        attachments: "AttachmentStrip",
        action_log: ActionLog,
    ) -> None:
        self.chat = chat
        self.hud = hud
        self.input_bar = input_bar
        self.attachments = attachments
        self.action_log = action_log

    def message_added(self, message: Message) -> None:
        self.chat.add_message(message)

    def message_updated(self, message: Message) -> None:
        self.chat.update_message(message)

    def action_recorded(self, action: SystemAction) -> None:
        self.hud.set_actions(self.action_log.lines())

    def loading_changed(self, loading: bool) -> None:
        self.input_bar.set_loading(loading)
        self.hud.set_loading(loading)

    def draft_changed(self, draft: Draft) -> None:
        self.input_bar.set_text(draft.text)
        self.attachments.show_attachments(draft.attachments)

    def conversation_reset(self) -> None:
        self.chat.clear_history()


class LogPanelHandler(logging.Handler):
    """Routes ``logging`` records to the log panel.

    The component label is the second segment of the logger name
    (``buddy.speech.controller`` -> ``speech``).
    """

    def __init__(self, panel: "DebugPanel", app: "App") -> None:
        super().__init__()
        self.panel = panel
        self.app = app

    def _call_thread_safe(self, func: Any, *args: Any) -> None:
        if self.app._thread_id != threading.get_ident():
            self.app.call_from_thread(func, *args)
        else:
            func(*args)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            parts = record.name.split(".")
            component = parts[1] if len(parts) > 1 else parts[0]
            message = record.getMessage()
            if record.exc_info and record.exc_info[1] is not None:
                message = f"{message}: {record.exc_info[1]!r}"
            self._call_thread_safe(
                self.panel.add_entry,
                component,
                message,
                record.levelno,
                datetime.fromtimestamp(record.created),
            )
        except Exception:
            self.handleError(record)
