"""Logging setup for console commands.

Library modules only create loggers; handlers are installed here (CLI) or
by the terminal UI, which routes records into its log panel.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import LogLevel

LOGGER_NAME = "buddy"


def configure_logging(level: str | int = "warning", console: Console | None = None) -> logging.Logger:
    """Attach a Rich handler to the package logger.

    Args:
        level: Level name ("debug", "info", "warning", "error") or number
        console: Console to render to; stderr when omitted

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = LogLevel.from_string(level)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
