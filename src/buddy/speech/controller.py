"""Wake-phrase listening state machine.

States:
    OFF      engine stopped
    STANDBY  engine running, transcripts ignored until the wake phrase
    ACTIVE   transcripts fill the draft; silence submits it

Every recognition result in ACTIVE cancels the pending silence timer and
arms a new one, so only the latest result's timer can fire.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from ..config import MIC_DENIED_MESSAGE, SILENCE_TIMEOUT_SECONDS, WAKE_PHRASE
from ..conversation import Draft
from ..errors import RecognitionEngineError, SpeechUnavailableError
from ..models import ListeningState
from .base import RecognitionEngine
from .models import RecognitionError, RecognitionResult

logger = logging.getLogger(__name__)

# May return an awaitable, which is scheduled as a task
SubmitHook = Callable[[str], Any]


class SpeechController:
    """Drives a recognition engine through OFF / STANDBY / ACTIVE.

    The controller is the only component that starts or stops the engine.
    All handlers run on the asyncio loop thread.
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        on_submit: SubmitHook,
        draft: Draft | None = None,
        wake_phrase: str = WAKE_PHRASE,
        silence_timeout: float = SILENCE_TIMEOUT_SECONDS,
        on_state_change: Callable[[ListeningState], None] | None = None,
        on_draft_change: Callable[[Draft], None] | None = None,
    ) -> None:
        self._engine = engine
        self._on_submit = on_submit
        self._draft = draft if draft is not None else Draft()
        self._wake_phrase = wake_phrase.lower()
        self._silence_timeout = silence_timeout
        self._on_state_change = on_state_change
        self._on_draft_change = on_draft_change

        self._state = ListeningState.OFF
        self._error: str | None = None
        self._silence_timer: asyncio.TimerHandle | None = None
        self._submissions: set[asyncio.Future] = set()

        engine.set_handlers(self.handle_result, self.handle_error, self.handle_end)

    @property
    def state(self) -> ListeningState:
        return self._state

    @property
    def error(self) -> str | None:
        """User-visible error flag, set when the microphone is unusable."""
        return self._error

    @property
    def draft(self) -> Draft:
        return self._draft

    @property
    def wake_phrase(self) -> str:
        return self._wake_phrase

    def _set_state(self, state: ListeningState) -> None:
        if state == self._state:
            return
        logger.debug("Listening state %s -> %s", self._state.value, state.value)
        self._state = state
        if self._on_state_change:
            self._on_state_change(state)

    def _set_draft_text(self, text: str) -> None:
        self._draft.text = text
        if self._on_draft_change:
            self._on_draft_change(self._draft)

    def toggle(self) -> ListeningState:
        """Turn listening on (to STANDBY) or off. Returns the new state."""
        if self._state == ListeningState.OFF:
            self.start()
        else:
            self.stop()
        return self._state

    def start(self) -> None:
        """Start the engine and wait for the wake phrase.

        Raises:
            SpeechUnavailableError: If the engine cannot listen at all
        """
        if self._state != ListeningState.OFF:
            return
        self._error = None
        try:
            self._engine.start()
        except RecognitionEngineError as e:
            logger.debug("Engine already running: %s", e)
        self._set_state(ListeningState.STANDBY)

    def stop(self) -> None:
        """Stop the engine and drop any pending silence timer."""
        if self._state == ListeningState.OFF:
            return
        self._cancel_silence_timer()
        # OFF before stopping so the engine's end event does not restart it
        self._set_state(ListeningState.OFF)
        self._engine.stop()

    def close(self) -> None:
        self.stop()
        for submission in list(self._submissions):
            submission.cancel()

    def handle_result(self, result: RecognitionResult) -> None:
        """Process the latest recognition hypothesis."""
        transcript = result.transcript.lower()

        if self._state == ListeningState.STANDBY:
            if self._wake_phrase not in transcript:
                return
            _, _, command = transcript.partition(self._wake_phrase)
            self._set_draft_text(command.strip())
            self._set_state(ListeningState.ACTIVE)
            self._arm_silence_timer()
            return

        if self._state == ListeningState.ACTIVE:
            if self._wake_phrase in transcript:
                _, _, command = transcript.rpartition(self._wake_phrase)
            else:
                command = transcript
            self._set_draft_text(command.strip())
            self._arm_silence_timer()

    def handle_error(self, error: RecognitionError) -> None:
        """Permission/hardware errors turn listening off; others are ignored."""
        if error.is_fatal:
            logger.error("Speech recognition unavailable: %s %s", error.kind.value, error.message)
            self._error = MIC_DENIED_MESSAGE
            self.stop()
            return
        logger.warning("Speech recognition error: %s %s", error.kind.value, error.message)

    def handle_end(self) -> None:
        """Restart the engine if it stopped on its own while we still listen."""
        if self._state == ListeningState.OFF:
            return
        try:
            self._engine.start()
        except (RecognitionEngineError, SpeechUnavailableError) as e:
            logger.debug("Recognition restart skipped: %s", e)

    def _arm_silence_timer(self) -> None:
        self._cancel_silence_timer()
        loop = asyncio.get_running_loop()
        self._silence_timer = loop.call_later(self._silence_timeout, self._on_silence)

    def _cancel_silence_timer(self) -> None:
        if self._silence_timer is not None:
            self._silence_timer.cancel()
            self._silence_timer = None

    def _on_silence(self) -> None:
        self._silence_timer = None
        if self._state != ListeningState.ACTIVE:
            return

        text = self._draft.text.strip()
        self._set_draft_text("")
        self._set_state(ListeningState.STANDBY)

        if text:
            logger.info("Submitting voice command: %r", text)
            self._submit(text)

    def _submit(self, text: str) -> None:
        outcome = self._on_submit(text)
        if inspect.isawaitable(outcome):
            submission = asyncio.ensure_future(outcome)
            self._submissions.add(submission)
            submission.add_done_callback(self._submission_done)

    def _submission_done(self, submission: asyncio.Future) -> None:
        self._submissions.discard(submission)
        if not submission.cancelled() and submission.exception() is not None:
            logger.error("Voice submission failed", exc_info=submission.exception())
