from .base import RecognitionEngine
from .controller import SpeechController
from .factory import create_recognition_engine
from .models import (
    FATAL_ERROR_KINDS,
    RecognitionError,
    RecognitionErrorKind,
    RecognitionResult,
)

__all__ = [
    "RecognitionEngine",
    "SpeechController",
    "create_recognition_engine",
    "FATAL_ERROR_KINDS",
    "RecognitionError",
    "RecognitionErrorKind",
    "RecognitionResult",
]
