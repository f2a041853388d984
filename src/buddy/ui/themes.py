"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, footer)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Near-black HUD palette: cyan telemetry, purple assistant, pink voice accents
BUDDY_NIGHT = Theme(
    name="buddy-night",
    primary="#22d3ee",      # Cyan - HUD and focus
    secondary="#a78bfa",    # Violet - assistant turns
    accent="#f472b6",       # Pink - active listening
    foreground="#e4e4e7",   # Zinc 200
    background="#050505",
    success="#34d399",      # Emerald - executed actions
    warning="#fbbf24",      # Amber
    error="#f87171",        # Red - mic denied, failed actions
    surface="#18181b",      # Zinc 900
    panel="#0c0c0e",
    dark=True,
    variables={
        "block-cursor-foreground": "#050505",
        "block-cursor-background": "#22d3ee",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#27272a 30%",

        "input-cursor-background": "#e4e4e7",
        "input-cursor-foreground": "#050505",
        "input-selection-background": "#22d3ee 30%",

        "border": "#27272a",
        "border-blurred": "#18181b",

        "scrollbar": "#27272a",
        "scrollbar-hover": "#3f3f46",
        "scrollbar-active": "#22d3ee",
        "scrollbar-background": "#0c0c0e",
        "scrollbar-corner-color": "#0c0c0e",

        "footer-foreground": "#a1a1aa",
        "footer-background": "#050505",
        "footer-key-foreground": "#22d3ee",
        "footer-key-background": "#18181b",
        "footer-description-foreground": "#71717a",

        "text-muted": "#71717a",
        "text-disabled": "#3f3f46",

        "button-foreground": "#e4e4e7",
        "button-color-foreground": "#050505",
        "button-focus-text-style": "bold reverse",
    },
)
