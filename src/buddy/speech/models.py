"""Events emitted by speech recognition engines."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecognitionErrorKind(str, Enum):
    """Error categories, named after the Web Speech API error codes."""

    NOT_ALLOWED = "not-allowed"
    SERVICE_NOT_ALLOWED = "service-not-allowed"
    AUDIO_CAPTURE = "audio-capture"
    NO_SPEECH = "no-speech"
    NETWORK = "network"
    ABORTED = "aborted"
    UNKNOWN = "unknown"


# Errors that make listening impossible for the rest of the session
FATAL_ERROR_KINDS = frozenset({
    RecognitionErrorKind.NOT_ALLOWED,
    RecognitionErrorKind.SERVICE_NOT_ALLOWED,
    RecognitionErrorKind.AUDIO_CAPTURE,
})


class RecognitionResult(BaseModel):
    """Latest recognition hypothesis for the current utterance."""

    model_config = ConfigDict(frozen=True)

    alternatives: list[str] = Field(description="Candidate transcripts, best first")
    is_final: bool = False

    @property
    def transcript(self) -> str:
        return self.alternatives[0] if self.alternatives else ""


class RecognitionError(BaseModel):
    """Error reported by the engine."""

    model_config = ConfigDict(frozen=True)

    kind: RecognitionErrorKind
    message: str = ""

    @property
    def is_fatal(self) -> bool:
        return self.kind in FATAL_ERROR_KINDS
