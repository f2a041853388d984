"""Modal screens for the TUI.

This module hides the design decisions about:
- Attach dialog appearance (CSS, layout)
- Keyboard shortcuts for dialogs
- How a file path is collected from the user

To change how the attach dialog looks, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static


class AttachImageScreen(ModalScreen[str | None]):
    """Modal prompt for the path of an image to attach.

    Dismisses with the entered path, or None when cancelled.
    """

    CSS = """
    AttachImageScreen {
        align: center middle;
        background: $background 70%;
    }

    #attach-dialog {
        width: 70;
        height: auto;
        border: tall $accent;
        background: $surface;
        padding: 1 2;
    }

    #attach-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        color: $accent;
        padding: 0 0 1 0;
        border-bottom: solid $border;
        margin-bottom: 1;
    }

    #attach-path {
        width: 100%;
        margin-bottom: 1;
    }

    #attach-buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }

    #attach-buttons Button {
        margin: 0 1;
        min-width: 10;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="attach-dialog"):
            yield Static("Attach Image", id="attach-title")
            yield Input(placeholder="Path to a PNG, JPEG, GIF or WebP file", id="attach-path")
            with Horizontal(id="attach-buttons"):
                yield Button("Attach", id="btn-attach", variant="success")
                yield Button("Cancel", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        self.query_one("#attach-path", Input).focus()

    def _submit(self) -> None:
        path = self.query_one("#attach-path", Input).value.strip()
        self.dismiss(path or None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-attach":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
