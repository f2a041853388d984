"""Main Textual TUI application.

Orchestrates the UI components and wires the command router, the
speech controller and the telemetry simulator to them.
"""

import asyncio
import logging
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..config import CONNECTIVITY_REFRESH_SECONDS, TELEMETRY_INTERVAL_SECONDS, LogLevel
from ..errors import SpeechUnavailableError
from ..log import LOGGER_NAME
from ..models import ListeningState
from ..router import CommandRouter
from ..speech import RecognitionEngine, SpeechController
from ..telemetry import TelemetrySimulator
from .callbacks import LogPanelHandler, TUIRouterCallback
from .screens import AttachImageScreen
from .styles import APP_CSS
from .themes import BUDDY_NIGHT
from .widgets import (
    AttachmentStrip,
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    SystemHUD,
)

logger = logging.getLogger(__name__)


class BuddyApp(App):
    """Textual TUI for the Buddy assistant."""

    CSS = APP_CSS
    TITLE = "Buddy"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+t", "toggle_mic", "Mic"),
        Binding("ctrl+o", "attach_image", "Attach"),
        Binding("ctrl+x", "remove_attachment", "Detach", priority=True),
        Binding("ctrl+k", "reset_core", "Reset Core", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log", priority=True),
    ]

    def __init__(
        self,
        router: CommandRouter,
        engine: RecognitionEngine | None = None,
        log_level: str | None = None,
        telemetry: TelemetrySimulator | None = None,
        telemetry_interval: float = TELEMETRY_INTERVAL_SECONDS,
    ) -> None:
        super().__init__()
        self._router = router
        self._engine = engine
        self._log_level = log_level
        self._telemetry = telemetry or TelemetrySimulator()
        self._telemetry_interval = telemetry_interval
        self._controller: SpeechController | None = None
        self._log_handler: LogPanelHandler | None = None

    @property
    def router(self) -> CommandRouter:
        return self._router

    @property
    def controller(self) -> SpeechController | None:
        return self._controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        yield ChatHistoryWidget(id="chat-history")

        with Vertical(id="right-panel"):
            yield SystemHUD(id="hud")
            yield DebugPanel(id="debug-panel")

        with Vertical(id="bottom-bar"):
            yield AttachmentStrip(id="attachments")
            yield ChatInputBar(id="chat-input-bar")

        yield Footer()

    def on_mount(self) -> None:
        self.register_theme(BUDDY_NIGHT)
        self.theme = "buddy-night"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        self._install_log_handler(log_panel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()

        hud = self.query_one("#hud", SystemHUD)
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        self._router.callback = TUIRouterCallback(
            chat=self.query_one("#chat-history", ChatHistoryWidget),
            hud=hud,
            input_bar=input_bar,
            attachments=self.query_one("#attachments", AttachmentStrip),
            action_log=self._router.action_log,
        )
        hud.set_actions(self._router.action_log.lines())

        if self._engine is not None:
            self._controller = SpeechController(
                self._engine,
                on_submit=self._submit_voice,
                draft=self._router.draft,
                on_state_change=self._on_listening_changed,
                on_draft_change=lambda draft: input_bar.set_text(draft.text),
            )
        else:
            logger.info("Voice input disabled")
        self._sync_listening(ListeningState.OFF)

        hud.update_telemetry(self._telemetry.current)
        self.set_interval(self._telemetry_interval, self._tick_telemetry)
        self._refresh_connectivity()
        self.set_interval(CONNECTIVITY_REFRESH_SECONDS, self._refresh_connectivity)

        self.sub_title = self._router.model
        input_bar.focus_input()

    def on_unmount(self) -> None:
        if self._controller is not None:
            self._controller.close()
        if self._log_handler is not None:
            logging.getLogger(LOGGER_NAME).removeHandler(self._log_handler)
            self._log_handler = None

    def _install_log_handler(self, panel: DebugPanel) -> None:
        package_logger = logging.getLogger(LOGGER_NAME)
        self._log_handler = LogPanelHandler(panel, self)
        package_logger.addHandler(self._log_handler)
        package_logger.setLevel(logging.DEBUG)
        # Console handlers would draw over the screen
        package_logger.propagate = False

    def _tick_telemetry(self) -> None:
        self.query_one("#hud", SystemHUD).update_telemetry(self._telemetry.tick())

    @work(exclusive=True, group="connectivity")
    async def _refresh_connectivity(self) -> None:
        online = await self._router.is_online()
        self.query_one("#hud", SystemHUD).set_online(online)

    def _sync_listening(self, state: ListeningState) -> None:
        available = self._controller is not None
        error = self._controller.error if self._controller else None
        self.query_one("#hud", SystemHUD).set_listening(state, error=error, available=available)
        self.query_one("#chat-input-bar", ChatInputBar).set_listening(state, available=available)

    def _on_listening_changed(self, state: ListeningState) -> None:
        self._sync_listening(state)
        if self._controller is not None and self._controller.error:
            self.notify(self._controller.error, severity="error", timeout=5)

    def _submit_voice(self, text: str) -> None:
        if self._router.is_loading:
            logger.warning("Dropped voice command while a turn is in flight: %r", text)
            return
        self._run_turn(text)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        if self._router.is_loading:
            self.notify("Still working on the last request", severity="warning", timeout=2)
            return
        self._run_turn(event.value)

    def on_chat_input_bar_changed(self, event: ChatInputBar.Changed) -> None:
        self._router.draft.text = event.value

    def on_chat_input_bar_mic_toggled(self, event: ChatInputBar.MicToggled) -> None:
        self.action_toggle_mic()

    @work(group="turn")
    async def _run_turn(self, text: str) -> None:
        """Run one turn through the router as a background async worker."""
        response = await self._router.submit(text)
        if response is not None:
            self._refresh_connectivity()

    def action_toggle_mic(self) -> None:
        """Turn voice control on (waiting for the wake phrase) or off."""
        if self._controller is None:
            self.notify("Voice input unavailable", severity="warning", timeout=3)
            return
        try:
            self._controller.toggle()
        except SpeechUnavailableError as e:
            logger.error("Cannot start voice input: %s", e)
            self.notify(str(e), severity="error", timeout=5)
        self._sync_listening(self._controller.state)

    def action_attach_image(self) -> None:
        self.push_screen(AttachImageScreen(), callback=self._on_attach_path)

    def _on_attach_path(self, path: str | None) -> None:
        if not path:
            return
        try:
            self._router.attach_image(Path(path).expanduser())
        except (FileNotFoundError, ValueError) as e:
            self.notify(str(e), severity="error", timeout=4)
            return
        self.notify(f"Attached {Path(path).name}", timeout=2)

    def action_remove_attachment(self, index: int | None = None) -> None:
        """Remove the attachment at ``index``, or the last one."""
        count = len(self._router.draft.attachments)
        if count == 0:
            self.notify("No attachments", severity="warning", timeout=2)
            return
        if index is None:
            index = count - 1
        if not 0 <= index < count:
            self.notify(f"No attachment #{index + 1}", severity="warning", timeout=2)
            return
        self._router.remove_attachment(index)

    def action_reset_core(self) -> None:
        """Clear the conversation and start a fresh model session."""
        self._router.reset_conversation()
        self.notify("Core reset", timeout=2)

    def action_toggle_debug(self) -> None:
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_textual_tui(
    router: CommandRouter,
    engine: RecognitionEngine | None = None,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        router: Command router answering each turn
        engine: Speech engine for voice control, None to disable the mic
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = BuddyApp(router=router, engine=engine, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
