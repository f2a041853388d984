from .gemini import GeminiChatBackend, GeminiChatSession

__all__ = ["GeminiChatBackend", "GeminiChatSession"]
