"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Chat turn rendering and in-place streaming updates
- Input history and the Send / Mic controls
- HUD meter, network and listening-state rendering
- Log panel level filtering
"""

from datetime import datetime

from rich.markdown import Markdown as RichMarkdown
from rich.markup import escape
from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, RichLog, Static, TextArea

from ..config import LOG_MAX_MESSAGE_LENGTH, LOG_TIMESTAMP_FORMAT, WAKE_PHRASE, LogLevel
from ..models import Attachment, ListeningState, Message, Role
from ..telemetry import TelemetrySample

THINKING_TEXT = "Thinking..."
GREETING_TEXT = "Hello, I'm Buddy"

LISTENING_LABELS = {
    ListeningState.OFF: "MICROPHONE OFF",
    ListeningState.STANDBY: f"LISTENING FOR '{WAKE_PHRASE.upper()}'",
    ListeningState.ACTIVE: "LISTENING...",
}


class ChatMessageView(Vertical):
    """One conversation turn. Clicking copies its text."""

    def __init__(self, message: Message, *args, **kwargs) -> None:
        role_class = "user-message" if message.role == Role.USER else "assistant-message"
        super().__init__(*args, classes=f"chat-message {role_class}", **kwargs)
        self._message = message
        self._header = Static(classes="message-header")
        self._content = Static(classes="message-content")
        self._actions = Static(classes="message-actions")

    @property
    def message(self) -> Message:
        return self._message

    def compose(self):
        yield self._header
        yield self._content
        yield self._actions

    def on_mount(self) -> None:
        self.refresh_message(self._message)

    def refresh_message(self, message: Message) -> None:
        """Re-render after the turn's text or actions changed."""
        self._message = message
        is_user = message.role == Role.USER

        timestamp = message.timestamp.strftime("%H:%M:%S")
        header = f"{'>' if is_user else '<'} {'You' if is_user else 'Buddy'} [{timestamp}]"
        if message.attachments:
            count = len(message.attachments)
            header += f"  [{count} image{'s' if count != 1 else ''}]"
        if message.is_streaming:
            header += "  ..."
        self._header.update(Text(header))

        if not message.text:
            self._content.update(Text(THINKING_TEXT, style="italic dim"))
        elif is_user:
            self._content.update(Text(message.text))
        else:
            self._content.update(RichMarkdown(message.text))

        if message.tool_invocations:
            lines = [
                f"[dim]>[/] [bold]{escape(action.tool_name)}[/] "
                f"[{'green' if action.status.value == 'success' else 'red'}]{action.status.value}[/]"
                for action in message.tool_invocations
            ]
            self._actions.update("\n".join(lines))
            self._actions.display = True
        else:
            self._actions.display = False

        self.set_class(message.is_streaming, "-streaming")

    def on_click(self, event: Click) -> None:
        event.stop()
        if self._message.text:
            self.app.copy_to_clipboard(self._message.text)
            self.app.notify("Copied to clipboard", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history; turns are keyed by message id."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: dict[str, ChatMessageView] = {}

    def compose(self):
        yield Static(GREETING_TEXT, id="greeting")

    @property
    def message_count(self) -> int:
        return len(self._views)

    def add_message(self, message: Message) -> None:
        """Append a turn to the display."""
        view = ChatMessageView(message)
        self._views[message.id] = view
        self.query("#greeting").set(display=False)
        self.mount(view)
        self.border_subtitle = f"{self.message_count} messages"
        self.scroll_end(animate=False)

    def update_message(self, message: Message) -> None:
        """Re-render a turn in place; unknown ids are ignored."""
        view = self._views.get(message.id)
        if view is None:
            return
        view.refresh_message(message)
        self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        for view in reversed(list(self._views.values())):
            if view.message.role == Role.MODEL and view.message.text:
                return view.message.text
        return None

    def clear_history(self) -> None:
        for view in self._views.values():
            view.remove()
        self._views.clear()
        self.query("#greeting").set(display=True)
        self.border_subtitle = "Conversation history"


class ChatInputBar(Horizontal):
    """Input bar with TextArea, Send button and Mic button."""

    class Submitted(TextualMessage):
        """Posted when the user submits the input (text may be empty)."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class MicToggled(TextualMessage):
        """Posted when the Mic button is pressed."""

    class Changed(TextualMessage):
        """Posted when the user edits the input text."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._syncing = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )
        yield Button("Mic", id="mic-btn").with_tooltip(
            f"Toggle voice control (Ctrl+T), then say '{WAKE_PHRASE}'"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False
        text_area.focus()

    @property
    def text(self) -> str:
        return self.query_one("#chat-input", TextArea).text

    def set_text(self, value: str) -> None:
        """Replace the input text without echoing a Changed message."""
        text_area = self.query_one("#chat-input", TextArea)
        if text_area.text == value:
            return
        self._syncing = True
        text_area.text = value
        text_area.move_cursor(text_area.document.end)

    def set_loading(self, loading: bool) -> None:
        send = self.query_one("#send-btn", Button)
        send.disabled = loading
        send.label = "..." if loading else "Send"

    def set_listening(self, state: ListeningState, available: bool = True) -> None:
        mic = self.query_one("#mic-btn", Button)
        mic.disabled = not available
        mic.variant = {
            ListeningState.OFF: "default",
            ListeningState.STANDBY: "primary",
            ListeningState.ACTIVE: "error",
        }[state]
        mic.label = "Mic" if state == ListeningState.OFF else "Mic *"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()
        elif event.button.id == "mic-btn":
            self.post_message(self.MicToggled())

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        event.stop()
        if self._syncing:
            self._syncing = False
            return
        self.post_message(self.Changed(event.text_area.text))

    def on_key(self, event) -> None:
        """Keyboard shortcuts. Terminals do not report Ctrl+Enter, so Ctrl+J submits."""
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _cursor_at_start(self) -> bool:
        return self.query_one("#chat-input", TextArea).cursor_location == (0, 0)

    def _cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == text_area.document.end

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        elif self._history_index != -1 and self._history_index < len(self._history) - 1:
            self._history_index += 1
        else:
            self._history_index = -1
            text_area.text = ""
            return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        value = self.text.strip()
        if value and (not self._history or self._history[-1] != value):
            self._history.append(value)
        self._history_index = -1
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        self.query_one("#chat-input", TextArea).focus()


class AttachmentStrip(Static):
    """Pending attachments for the next turn; hidden when there are none."""

    def on_mount(self) -> None:
        self.display = False

    def show_attachments(self, attachments: list[Attachment]) -> None:
        if not attachments:
            self.display = False
            self.update("")
            return
        items = "  ".join(
            f"[bold cyan]#{index + 1}[/] {attachment.mime_type} "
            f"[@click=app.remove_attachment({index})]x[/]"
            for index, attachment in enumerate(attachments)
        )
        self.update(f"[dim]Attached:[/] {items}  [dim](click x to remove, Ctrl+X removes last)[/]")
        self.display = True


def render_meter(percent: float, width: int = 16) -> str:
    """Text bar for a 0-100 percentage."""
    filled = round(max(0.0, min(100.0, percent)) / 100 * width)
    return "█" * filled + "░" * (width - filled)


class SystemHUD(Static):
    """Status panel: listening state, resource meters, network and recent actions."""

    BORDER_TITLE = "Buddy System"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._sample: TelemetrySample | None = None
        self._online: bool | None = None
        self._listening = ListeningState.OFF
        self._mic_error: str | None = None
        self._voice_available = True
        self._loading = False
        self._action_lines: list[str] = []

    def on_mount(self) -> None:
        self._render_hud()

    def update_telemetry(self, sample: TelemetrySample) -> None:
        self._sample = sample
        self._render_hud()

    def set_online(self, online: bool) -> None:
        self._online = online
        self._render_hud()

    def set_listening(
        self,
        state: ListeningState,
        error: str | None = None,
        available: bool = True,
    ) -> None:
        self._listening = state
        self._mic_error = error
        self._voice_available = available
        self._render_hud()

    def set_loading(self, loading: bool) -> None:
        self._loading = loading
        self._render_hud()

    def set_actions(self, lines: list[str]) -> None:
        """Show formatted action log lines, newest first."""
        self._action_lines = list(lines)
        self._render_hud()

    def _render_hud(self) -> None:
        lines: list[str] = []

        if not self._voice_available:
            lines.append("[dim]VOICE UNAVAILABLE[/]")
        elif self._mic_error:
            lines.append(f"[bold red]{self._mic_error.upper()}[/]")
        else:
            color = {
                ListeningState.OFF: "dim",
                ListeningState.STANDBY: "cyan",
                ListeningState.ACTIVE: "bold red",
            }[self._listening]
            lines.append(f"[{color}]{LISTENING_LABELS[self._listening]}[/]")
        if self._loading:
            lines.append("[yellow]PROCESSING...[/]")
        lines.append("")

        if self._sample is not None:
            cpu, ram = self._sample.cpu, self._sample.ram
            lines.append(f"CPU [cyan]{render_meter(cpu)}[/] {round(cpu):>3}%")
            lines.append(f"MEM [magenta]{render_meter(ram)}[/] {round(ram):>3}%")

        if self._online is None:
            lines.append("NET [dim]CHECKING[/]")
        elif self._online:
            lines.append("NET [green]ONLINE[/]")
        else:
            lines.append("NET [red]OFFLINE[/]")

        lines.append("")
        lines.append("[bold]Event Log[/]")
        if self._action_lines:
            lines.extend(f"[dim]>[/] [green]{escape(line)}[/]" for line in self._action_lines)
        else:
            lines.append("[dim italic]No recent commands...[/]")

        self.update("\n".join(lines))


class DebugPanel(RichLog):
    """Log panel with level filtering, fed from the ``buddy`` logger tree.

    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    COMPONENT_COLORS = {
        "chat": "magenta",
        "router": "green",
        "speech": "yellow",
        "tools": "bright_cyan",
        "offline": "bright_blue",
        "ui": "cyan",
    }

    def __init__(self, *args, log_level: int = LogLevel.INFO, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        self.display = False

    def add_entry(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG,
        created: datetime | None = None,
    ) -> None:
        """Write an entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        timestamp = (created or datetime.now()).strftime(LOG_TIMESTAMP_FORMAT)
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        level_color = self.LEVEL_COLORS.get(min(level, LogLevel.ERROR), "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.from_markup(
            f"[dim]{timestamp}[/] [{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]{escape(f'[{component}]')}[/] "
        )
        line.append(message)
        self.write(line)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
