"""Factory for creating speech recognition engines."""

from typing import Any

from .base import RecognitionEngine


def create_recognition_engine(
    engine: str = "speech_recognition",
    **kwargs: Any
) -> RecognitionEngine:
    """Create a speech recognition engine.

    Args:
        engine: Engine type ("speech_recognition" or its alias "google")
        **kwargs: Engine-specific configuration

    Returns:
        RecognitionEngine instance

    Raises:
        ValueError: If engine type is not supported
        SpeechUnavailableError: If the engine's dependencies are missing
    """
    engine_lower = engine.lower()

    if engine_lower in ("speech_recognition", "google"):
        from .providers import SpeechRecognitionEngine
        return SpeechRecognitionEngine(**kwargs)

    raise ValueError(
        f"Unsupported speech engine: {engine}. "
        f"Supported engines: speech_recognition"
    )
