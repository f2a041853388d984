from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from .models import MessagePayload, StreamChunk, ToolDeclaration


class ChatSession(ABC):
    """A remote conversation context.

    The remote side keeps the history: every payload sent through the same
    session is appended to one conversation.
    """

    @abstractmethod
    async def send_message_stream(self, payload: MessagePayload) -> AsyncIterator[StreamChunk]:
        """Send one turn and stream the model's reply.

        Args:
            payload: Text, ordered text/inline-data parts, or function responses

        Returns:
            Async iterator of chunks, each carrying text and/or function calls

        Raises:
            Exception: Provider-specific errors (network, malformed response)
        """
        pass


class ChatBackend(ABC):
    """Abstract base class for chat backends.

    This module hides the design decision of which model service to use.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Conversion of tool declarations and message parts
    - Extraction of text and function calls from streamed chunks

    Supports async context manager protocol for proper resource cleanup:
        async with backend:
            session = backend.create_session(instruction, tools)
        # Automatically cleaned up
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Get the model identifier used for new sessions."""
        pass

    @abstractmethod
    def create_session(
        self,
        system_instruction: str,
        tools: list[ToolDeclaration],
    ) -> ChatSession:
        """Create a new conversation bound to a system instruction and tools."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "ChatBackend":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            # Suppress harmless cleanup errors from httpx/anyio
            if "Event loop is closed" not in str(e):
                raise
