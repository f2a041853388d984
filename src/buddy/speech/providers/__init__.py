from .speech_recognition_engine import SPEECH_RECOGNITION_AVAILABLE, SpeechRecognitionEngine

__all__ = ["SPEECH_RECOGNITION_AVAILABLE", "SpeechRecognitionEngine"]
