"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.

Layout: chat on the left, HUD and log panel on the right, attachment strip
and input bar across the bottom.
"""

APP_CSS = """
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 3fr 1fr;
    grid-rows: 1fr auto;
    background: $background;
}

/* Chat */
#chat-history {
    height: 100%;
    background: $panel;
    border: heavy $secondary 50%;
    border-title-color: $secondary;
    border-subtitle-align: right;
    padding: 0 1;

    &:focus-within {
        border: heavy $secondary;
    }
}

#greeting {
    width: 100%;
    height: 100%;
    content-align: center middle;
    text-style: bold italic;
    color: $accent;
}

.chat-message {
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
}

.message-header, .message-content, .message-actions {
    height: auto;
}

.user-message {
    margin-left: 8;
    border-right: outer $foreground 30%;

    & .message-header {
        color: $foreground 70%;
        text-align: right;
    }
}

.assistant-message {
    margin-right: 8;
    border-left: outer $accent 60%;

    & .message-header {
        color: $accent;
        text-style: bold;
    }

    &.-streaming {
        border-left: outer $warning;
    }
}

.message-actions {
    color: $success;
}

/* HUD column */
#right-panel {
    height: 100%;
    min-width: 36;
}

#hud {
    height: auto;
    min-height: 14;
    border: heavy $primary 50%;
    border-title-color: $primary;
    border-title-style: bold;
    padding: 0 1;
    background: $surface;
}

#debug-panel {
    height: 1fr;
    min-height: 6;
    margin-top: 1;
    border: heavy $warning 40%;
    border-title-color: $warning;
    border-subtitle-align: right;
    background: $surface;
}

/* Bottom bar */
#bottom-bar {
    column-span: 2;
    height: auto;
    padding: 0 1;
    background: $panel;
}

#attachments {
    height: 1;
    padding: 0 1;
    color: $secondary;
}

ChatInputBar {
    height: 5;
    border: heavy $primary 40%;

    &:focus-within {
        border: heavy $primary;
    }
}

#chat-input {
    width: 1fr;
    border: none;
    background: transparent;
}

#send-btn, #mic-btn {
    width: 9;
    min-width: 7;
    height: 100%;
    margin-left: 1;
}

Header {
    background: $panel;
    color: $primary;
}
"""
