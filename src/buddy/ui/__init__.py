"""Terminal UI module for buddy.

Provides a Textual-based TUI: chat, system HUD and voice control.

Module structure (Parnas principle - each module hides a design decision):
- widgets.py: Custom widgets (turn rendering, input bar, HUD, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (attach image prompt)
- callbacks.py: Core integration (how TUI receives router and log updates)
- app.py: Application orchestration (user interaction flow)
"""

from .app import BuddyApp, run_textual_tui
from .callbacks import LogPanelHandler, TUIRouterCallback
from .widgets import (
    AttachmentStrip,
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    SystemHUD,
)

__all__ = [
    "AttachmentStrip",
    "BuddyApp",
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "LogPanelHandler",
    "SystemHUD",
    "TUIRouterCallback",
    "run_textual_tui",
]
