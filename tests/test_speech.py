"""Unit tests for the wake-phrase speech controller."""
import asyncio

import pytest

from buddy.config import MIC_DENIED_MESSAGE
from buddy.conversation import Draft
from buddy.errors import RecognitionEngineError, SpeechUnavailableError
from buddy.models import ListeningState
from buddy.speech import (
    FATAL_ERROR_KINDS,
    RecognitionError,
    RecognitionErrorKind,
    RecognitionResult,
    SpeechController,
    create_recognition_engine,
)

SILENCE = 0.1


def make_controller(engine, submissions, **kwargs):
    return SpeechController(
        engine,
        on_submit=submissions.append,
        silence_timeout=SILENCE,
        **kwargs,
    )


class TestListeningToggle:
    """Tests for turning voice control on and off."""

    def test_starts_off(self, fake_engine):
        """Test that a new controller is off and the engine idle."""
        controller = make_controller(fake_engine, [])

        assert controller.state == ListeningState.OFF
        assert fake_engine.starts == 0

    def test_toggle_on_and_off(self, fake_engine):
        """Test that toggling moves OFF -> STANDBY -> OFF."""
        controller = make_controller(fake_engine, [])

        assert controller.toggle() == ListeningState.STANDBY
        assert fake_engine.running

        assert controller.toggle() == ListeningState.OFF
        assert not fake_engine.running

    def test_state_changes_are_reported(self, fake_engine):
        """Test that each transition is reported once."""
        states = []
        controller = make_controller(fake_engine, [], on_state_change=states.append)

        controller.start()
        controller.stop()

        assert states == [ListeningState.STANDBY, ListeningState.OFF]

    def test_start_when_engine_already_running(self, fake_engine):
        """Test that an already-running engine still enters standby."""
        fake_engine.running = True
        controller = make_controller(fake_engine, [])

        controller.start()

        assert controller.state == ListeningState.STANDBY

    def test_start_propagates_unavailable_engine(self, fake_engine):
        """Test that a missing microphone surfaces to the caller."""
        fake_engine.start_error = SpeechUnavailableError("no microphone")
        controller = make_controller(fake_engine, [])

        with pytest.raises(SpeechUnavailableError):
            controller.start()
        assert controller.state == ListeningState.OFF


class TestWakePhrase:
    """Tests for wake phrase detection in standby."""

    @pytest.mark.asyncio
    async def test_ignores_speech_without_wake_phrase(self, fake_engine):
        """Test that standby ignores ordinary speech."""
        controller = make_controller(fake_engine, [])
        controller.start()

        fake_engine.say("open notepad please")

        assert controller.state == ListeningState.STANDBY
        assert controller.draft.text == ""

    @pytest.mark.asyncio
    async def test_wake_phrase_activates_with_remainder(self, fake_engine):
        """Test that the text after the wake phrase becomes the draft."""
        controller = make_controller(fake_engine, [])
        controller.start()

        fake_engine.say("Hey Buddy open notepad")

        assert controller.state == ListeningState.ACTIVE
        assert controller.draft.text == "open notepad"
        controller.close()

    @pytest.mark.asyncio
    async def test_wake_phrase_alone_gives_empty_draft(self, fake_engine):
        """Test that the bare wake phrase activates with an empty draft."""
        controller = make_controller(fake_engine, [])
        controller.start()

        fake_engine.say("hey buddy")

        assert controller.state == ListeningState.ACTIVE
        assert controller.draft.text == ""
        controller.close()

    @pytest.mark.asyncio
    async def test_remainder_follows_first_occurrence(self, fake_engine):
        """Test that standby splits on the first wake phrase."""
        controller = make_controller(fake_engine, [])
        controller.start()

        fake_engine.say("hey buddy say hey buddy")

        assert controller.draft.text == "say hey buddy"
        controller.close()

    @pytest.mark.asyncio
    async def test_active_uses_text_after_last_wake_phrase(self, fake_engine):
        """Test that active mode keeps only the text after the last wake phrase."""
        controller = make_controller(fake_engine, [])
        controller.start()
        fake_engine.say("hey buddy open")

        fake_engine.say("hey buddy open hey buddy close spotify")

        assert controller.draft.text == "close spotify"
        controller.close()

    @pytest.mark.asyncio
    async def test_active_without_wake_phrase_uses_whole_transcript(self, fake_engine):
        """Test that active mode replaces the draft with the full transcript."""
        controller = make_controller(fake_engine, [])
        controller.start()
        fake_engine.say("hey buddy")

        fake_engine.say("  mute the volume ")

        assert controller.draft.text == "mute the volume"
        controller.close()

    @pytest.mark.asyncio
    async def test_draft_changes_are_reported(self, fake_engine):
        """Test that draft updates reach the draft hook."""
        drafts = []
        draft = Draft()
        controller = make_controller(
            fake_engine, [], draft=draft, on_draft_change=lambda d: drafts.append(d.text)
        )
        controller.start()

        fake_engine.say("hey buddy open calculator")

        assert drafts == ["open calculator"]
        assert draft.text == "open calculator"
        controller.close()


class TestSilenceSubmission:
    """Tests for submitting the draft after silence."""

    @pytest.mark.asyncio
    async def test_silence_submits_draft_once(self, fake_engine):
        """Test that silence submits the last draft and returns to standby."""
        submissions = []
        controller = make_controller(fake_engine, submissions)
        controller.start()

        fake_engine.say("hey buddy open notepad")
        await asyncio.sleep(SILENCE * 3)

        assert submissions == ["open notepad"]
        assert controller.state == ListeningState.STANDBY
        assert controller.draft.text == ""

    @pytest.mark.asyncio
    async def test_silence_with_empty_draft_does_not_submit(self, fake_engine):
        """Test that an empty draft is dropped on silence."""
        submissions = []
        controller = make_controller(fake_engine, submissions)
        controller.start()

        fake_engine.say("hey buddy")
        await asyncio.sleep(SILENCE * 3)

        assert submissions == []
        assert controller.state == ListeningState.STANDBY

    @pytest.mark.asyncio
    async def test_new_result_restarts_silence_timer(self, fake_engine):
        """Test that only the latest result's timer can fire."""
        submissions = []
        controller = make_controller(fake_engine, submissions)
        controller.start()

        fake_engine.say("hey buddy open")
        await asyncio.sleep(SILENCE * 0.6)
        fake_engine.say("hey buddy open notepad")
        await asyncio.sleep(SILENCE * 0.6)

        assert submissions == []
        assert controller.state == ListeningState.ACTIVE

        await asyncio.sleep(SILENCE * 3)

        assert submissions == ["open notepad"]

    @pytest.mark.asyncio
    async def test_stop_cancels_pending_submission(self, fake_engine):
        """Test that turning listening off drops the pending draft timer."""
        submissions = []
        controller = make_controller(fake_engine, submissions)
        controller.start()
        fake_engine.say("hey buddy shut down")

        controller.stop()
        await asyncio.sleep(SILENCE * 3)

        assert submissions == []
        assert controller.state == ListeningState.OFF

    @pytest.mark.asyncio
    async def test_async_submit_hook_is_awaited(self, fake_engine):
        """Test that a coroutine submit hook is scheduled and runs."""
        submitted = []

        async def on_submit(text):
            submitted.append(text)

        controller = SpeechController(fake_engine, on_submit=on_submit, silence_timeout=SILENCE)
        controller.start()

        fake_engine.say("hey buddy mute")
        await asyncio.sleep(SILENCE * 3)

        assert submitted == ["mute"]

    @pytest.mark.asyncio
    async def test_listening_continues_after_submission(self, fake_engine):
        """Test that a second wake phrase starts a second utterance."""
        submissions = []
        controller = make_controller(fake_engine, submissions)
        controller.start()

        fake_engine.say("hey buddy mute")
        await asyncio.sleep(SILENCE * 3)
        fake_engine.say("hey buddy open spotify")
        await asyncio.sleep(SILENCE * 3)

        assert submissions == ["mute", "open spotify"]


class TestRecognitionErrors:
    """Tests for engine error and end handling."""

    @pytest.mark.parametrize("kind", sorted(FATAL_ERROR_KINDS, key=lambda k: k.value))
    def test_fatal_error_turns_listening_off(self, fake_engine, kind):
        """Test that permission and capture errors stop listening."""
        controller = make_controller(fake_engine, [])
        controller.start()

        fake_engine.fail(kind)

        assert controller.state == ListeningState.OFF
        assert controller.error == MIC_DENIED_MESSAGE
        assert not fake_engine.running

    @pytest.mark.parametrize(
        "kind",
        [RecognitionErrorKind.NO_SPEECH, RecognitionErrorKind.NETWORK, RecognitionErrorKind.ABORTED],
    )
    def test_transient_error_is_ignored(self, fake_engine, kind):
        """Test that transient errors leave the state unchanged."""
        controller = make_controller(fake_engine, [])
        controller.start()

        fake_engine.fail(kind)

        assert controller.state == ListeningState.STANDBY
        assert controller.error is None

    def test_restart_clears_error(self, fake_engine):
        """Test that turning listening back on clears the error flag."""
        controller = make_controller(fake_engine, [])
        controller.start()
        fake_engine.fail(RecognitionErrorKind.NOT_ALLOWED)

        controller.start()

        assert controller.error is None
        assert controller.state == ListeningState.STANDBY

    def test_end_event_restarts_engine(self, fake_engine):
        """Test that the engine is restarted when it stops on its own."""
        controller = make_controller(fake_engine, [])
        controller.start()

        fake_engine.end()

        assert fake_engine.running
        assert fake_engine.starts == 2
        assert controller.state == ListeningState.STANDBY

    def test_end_event_when_off_does_not_restart(self, fake_engine):
        """Test that an end event after stopping leaves the engine off."""
        controller = make_controller(fake_engine, [])
        controller.start()
        controller.stop()

        fake_engine.end()

        assert fake_engine.starts == 1
        assert not fake_engine.running

    @pytest.mark.parametrize(
        "error",
        [RecognitionEngineError("already running"), SpeechUnavailableError("gone")],
    )
    def test_failed_restart_is_swallowed(self, fake_engine, error):
        """Test that a failing restart does not raise."""
        controller = make_controller(fake_engine, [])
        controller.start()
        fake_engine.start_error = error

        fake_engine.end()

        assert controller.state == ListeningState.STANDBY


class TestRecognitionModels:
    """Tests for recognition event models."""

    def test_transcript_is_best_alternative(self):
        """Test that the first alternative is the transcript."""
        result = RecognitionResult(alternatives=["hey buddy", "hey body"])
        assert result.transcript == "hey buddy"

    def test_empty_alternatives(self):
        """Test that no alternatives gives an empty transcript."""
        assert RecognitionResult(alternatives=[]).transcript == ""

    def test_error_kind_values(self):
        """Test that error kinds use the Web Speech error codes."""
        assert RecognitionErrorKind("not-allowed") == RecognitionErrorKind.NOT_ALLOWED
        assert RecognitionErrorKind("service-not-allowed") == RecognitionErrorKind.SERVICE_NOT_ALLOWED
        assert RecognitionError(kind=RecognitionErrorKind.AUDIO_CAPTURE).is_fatal
        assert not RecognitionError(kind=RecognitionErrorKind.NO_SPEECH).is_fatal


class TestRecognitionEngineFactory:
    """Tests for create_recognition_engine."""

    def test_unsupported_engine(self):
        """Test that an unknown engine name fails."""
        with pytest.raises(ValueError, match="Unsupported speech engine"):
            create_recognition_engine("whisper")
