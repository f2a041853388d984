"""Configuration constants.

Centralizes the fixed values the assistant is built with. Secrets and
provider selection come from the environment (see ``buddy.cli.providers``).
"""


class LogLevel:
    """Log levels shared by the console handler and the UI log panel.

    Values equal the stdlib ``logging`` levels, so records can be compared
    against a panel threshold without translation.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {DEBUG: "DEBUG", INFO: "INFO", WARNING: "WARN", ERROR: "ERROR"}
    _aliases = {WARNING: "WARNING"}

    @classmethod
    def name(cls, level: int) -> str:
        """Label of the highest named level not above ``level``."""
        names = [label for value, label in cls._names.items() if value <= level]
        return names[-1] if names else "DEBUG"

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Parse a level name ("warn" is accepted). Unknown names give INFO."""
        for value, label in cls._names.items():
            if level_str.strip().upper() in (label, cls._aliases.get(value)):
                return value
        return cls.INFO


# Voice activation
WAKE_PHRASE = "hey buddy"
SILENCE_TIMEOUT_SECONDS = 2.5  # Silence before an active utterance is submitted
MIC_DENIED_MESSAGE = "Mic access denied"

# Remote model
DEFAULT_PROVIDER = "gemini"
DEFAULT_MODEL = "gemini-3-pro-preview"
MAX_TOOL_ROUND_TRIPS = 8  # Tool-response exchanges allowed per user turn
TOOL_EXECUTION_DELAY_SECONDS = 0.8

# Offline interpreter
OFFLINE_DELAY_SECONDS = 0.6

# Action log / HUD
MAX_ACTION_LOG_ENTRIES = 5
ACTION_LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
TELEMETRY_INTERVAL_SECONDS = 2.0

# Connectivity probe
CONNECTIVITY_HOST = "8.8.8.8"
CONNECTIVITY_PORT = 53
CONNECTIVITY_TIMEOUT_SECONDS = 1.5

# User-facing chat text
CONNECTION_ERROR_MESSAGE = "I'm having trouble connecting. Try checking your internet connection."

# Terminal UI
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log panel lines
CONNECTIVITY_REFRESH_SECONDS = 15.0
