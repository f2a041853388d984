"""Exception types raised by buddy components."""


class BuddyError(Exception):
    """Base class for buddy errors."""


class RecognitionEngineError(BuddyError):
    """The speech engine rejected a start/stop request (e.g. already running)."""


class SpeechUnavailableError(BuddyError):
    """No usable speech engine: missing dependency or no microphone."""


class ToolLoopLimitError(BuddyError):
    """The model kept requesting tools past the allowed number of round trips."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Model requested tools for more than {limit} round trips")
        self.limit = limit
