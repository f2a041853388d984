"""Microphone recognizer backed by the SpeechRecognition package.

Audio is captured phrase by phrase on a daemon thread and transcribed with
the Google Web Speech endpoint. Every event is handed back to the asyncio
loop that called ``start()``, so handlers never run on the capture thread.

At most one capture thread (and one open microphone) exists at a time.
Each ``start()`` issues a new session token; events produced under an
older token are dropped on delivery, so a phrase heard before ``stop()``
never reaches the handlers after a restart.
"""

import asyncio
import logging
import threading
from typing import Any

try:
    import speech_recognition as sr
    SPEECH_RECOGNITION_AVAILABLE = True
except ImportError:
    SPEECH_RECOGNITION_AVAILABLE = False
    sr = None

from ...errors import RecognitionEngineError, SpeechUnavailableError
from ..base import RecognitionEngine
from ..models import RecognitionError, RecognitionErrorKind, RecognitionResult

logger = logging.getLogger(__name__)


class SpeechRecognitionEngine(RecognitionEngine):
    """Continuous recognizer using ``speech_recognition.Recognizer``.

    Each captured phrase produces one final result. The capture thread
    exits when the microphone fails; that is reported as an
    ``audio-capture`` error followed by an end event.

    Restarting while the previous capture thread is still finishing a
    phrase hands the open microphone over to the new session instead of
    opening a second one.
    """

    def __init__(
        self,
        language: str = "en-US",
        phrase_time_limit: float | None = 10.0,
        listen_timeout: float = 1.0,
        adjust_for_ambient_noise: bool = True,
        device_index: int | None = None,
    ):
        super().__init__()
        if not SPEECH_RECOGNITION_AVAILABLE:
            raise SpeechUnavailableError(
                "Voice input requires SpeechRecognition and PyAudio. "
                "Install with: pip install 'buddy-assistant[voice]'"
            )

        self._language = language
        self._phrase_time_limit = phrase_time_limit
        self._listen_timeout = listen_timeout
        self._adjust_for_ambient_noise = adjust_for_ambient_noise
        self._device_index = device_index

        self._recognizer = sr.Recognizer()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        # Set token means "stopped"; a fresh Event is issued per start
        self._token = threading.Event()
        self._token.set()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and not self._token.is_set()

    def start(self) -> None:
        self._loop = asyncio.get_running_loop()

        with self._lock:
            if self._thread is not None:
                if not self._token.is_set():
                    raise RecognitionEngineError("Recognition is already running")
                self._token = threading.Event()
                logger.debug("Speech capture resumed on the open microphone")
                return

            try:
                microphone = sr.Microphone(device_index=self._device_index)
            except AttributeError as e:
                # Raised by speech_recognition when PyAudio is missing
                raise SpeechUnavailableError(str(e)) from e
            except OSError as e:
                self._token = threading.Event()
                self._dispatch(
                    self._token,
                    self.emit_error,
                    RecognitionError(kind=RecognitionErrorKind.AUDIO_CAPTURE, message=str(e)),
                )
                return

            self._token = threading.Event()
            self._thread = threading.Thread(
                target=self._capture,
                args=(microphone,),
                name="buddy-speech",
                daemon=True,
            )
            self._thread.start()
        logger.debug("Speech capture started (%s)", self._language)

    def stop(self) -> None:
        with self._lock:
            if self._token.is_set():
                return
            self._token.set()
        logger.debug("Speech capture stopped")

    def _dispatch(self, token: threading.Event, handler: Any, *args: Any) -> None:
        """Queue a handler call on the owning event loop."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._deliver, token, handler, args)

    def _deliver(self, token: threading.Event, handler: Any, args: tuple) -> None:
        # Runs on the loop thread; events from a stopped session are stale
        if token is not self._token or token.is_set():
            return
        handler(*args)

    def _capture(self, microphone: Any) -> None:
        while True:
            try:
                with microphone as source:
                    if self._adjust_for_ambient_noise:
                        self._recognizer.adjust_for_ambient_noise(source, duration=0.5)
                    self._listen(source)
            except OSError as e:
                logger.error("Microphone capture failed: %s", e)
                with self._lock:
                    token = self._token
                    self._thread = None
                self._dispatch(
                    token,
                    self.emit_error,
                    RecognitionError(kind=RecognitionErrorKind.AUDIO_CAPTURE, message=str(e)),
                )
                self._dispatch(token, self.emit_end)
                return

            # The microphone is closed here; only exit if no restart came in meanwhile
            with self._lock:
                if self._token.is_set():
                    self._thread = None
                    return

    def _listen(self, source: Any) -> None:
        while True:
            token = self._token
            if token.is_set():
                return
            try:
                audio = self._recognizer.listen(
                    source,
                    timeout=self._listen_timeout,
                    phrase_time_limit=self._phrase_time_limit,
                )
            except sr.WaitTimeoutError:
                continue
            if not token.is_set():
                self._transcribe(audio, token)

    def _transcribe(self, audio: Any, token: threading.Event) -> None:
        try:
            response = self._recognizer.recognize_google(
                audio, language=self._language, show_all=True
            )
        except sr.RequestError as e:
            self._dispatch(
                token,
                self.emit_error,
                RecognitionError(kind=RecognitionErrorKind.NETWORK, message=str(e)),
            )
            return

        # show_all returns [] when nothing was recognized
        if not isinstance(response, dict) or not response.get("alternative"):
            self._dispatch(
                token,
                self.emit_error,
                RecognitionError(kind=RecognitionErrorKind.NO_SPEECH),
            )
            return

        alternatives = [
            alt["transcript"] for alt in response["alternative"] if alt.get("transcript")
        ]
        if not alternatives:
            return
        self._dispatch(
            token,
            self.emit_result,
            RecognitionResult(alternatives=alternatives, is_final=bool(response.get("final", True))),
        )
