from abc import ABC, abstractmethod
from collections.abc import Callable

from .models import RecognitionError, RecognitionResult

ResultHandler = Callable[[RecognitionResult], None]
ErrorHandler = Callable[[RecognitionError], None]
EndHandler = Callable[[], None]


class RecognitionEngine(ABC):
    """Abstract continuous speech recognizer.

    This module hides the design decision of which recognizer listens to
    the microphone. Engines run continuously (interim results optional) and
    report three kinds of events through the registered handlers:
    - result: the latest hypothesis for the current utterance
    - error: categorized failure (permission vs transient)
    - end: the stream stopped on its own (e.g. after inactivity)

    Handlers must be invoked on the thread that owns the asyncio loop
    the controller runs on.
    """

    def __init__(self) -> None:
        self._on_result: ResultHandler | None = None
        self._on_error: ErrorHandler | None = None
        self._on_end: EndHandler | None = None

    def set_handlers(
        self,
        on_result: ResultHandler,
        on_error: ErrorHandler,
        on_end: EndHandler,
    ) -> None:
        """Register the event handlers."""
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end

    def emit_result(self, result: RecognitionResult) -> None:
        if self._on_result:
            self._on_result(result)

    def emit_error(self, error: RecognitionError) -> None:
        if self._on_error:
            self._on_error(error)

    def emit_end(self) -> None:
        if self._on_end:
            self._on_end()

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether the engine is currently listening."""
        pass

    @abstractmethod
    def start(self) -> None:
        """Start listening.

        Raises:
            RecognitionEngineError: If the engine is already running
            SpeechUnavailableError: If no microphone or backend is available
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop listening. Stopping a stopped engine is a no-op."""
        pass
