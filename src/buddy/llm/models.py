from collections.abc import AsyncIterator
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class StreamingResponse:
    """Wrapper for streaming chat responses that captures usage info.

    Acts as an async iterator for text fragments while storing token usage
    that becomes available at the end of the stream.

    Usage:
        stream = client.send_message("hello")
        async for fragment in stream:
            print(fragment, end="")
        # After iteration, usage is available
        print(stream.usage)  # {"prompt_tokens": 100, "completion_tokens": 50, ...}
    """

    def __init__(self, async_iter: AsyncIterator[str]):
        """Initialize with an async iterator of text fragments.

        Args:
            async_iter: Async iterator yielding text fragments
        """
        self._iter = async_iter
        self._usage: dict[str, int] | None = None

    @property
    def usage(self) -> dict[str, int] | None:
        """Get token usage info (available after iteration completes)."""
        return self._usage

    def add_usage(self, usage: dict[str, int]) -> None:
        """Accumulate usage from one more exchange into the running totals."""
        if self._usage is None:
            self._usage = dict(usage)
            return
        for key, value in usage.items():
            self._usage[key] = self._usage.get(key, 0) + value

    def __aiter__(self) -> "StreamingResponse":
        """Return self as async iterator."""
        return self

    async def __anext__(self) -> str:
        """Get next fragment from the underlying iterator."""
        return await self._iter.__anext__()


class TextPart(BaseModel):
    """Plain text part of a multi-part user turn."""

    model_config = ConfigDict(frozen=True)

    text: str


class InlineDataPart(BaseModel):
    """Inline binary part (base64 payload) of a multi-part user turn."""

    model_config = ConfigDict(frozen=True)

    mime_type: str
    data: str = Field(description="Base64-encoded payload")


class FunctionCall(BaseModel):
    """A tool invocation requested by the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    args: dict[str, Any] = Field(default_factory=dict)
    id: str | None = Field(default=None, description="Call identifier to echo in the response")


class FunctionResponse(BaseModel):
    """Result of a tool invocation, sent back to the model."""

    model_config = ConfigDict(frozen=True)

    name: str
    id: str | None = None
    response: dict[str, Any] = Field(default_factory=dict)


class StreamChunk(BaseModel):
    """One chunk of a streamed exchange."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    function_calls: list[FunctionCall] = Field(default_factory=list)
    usage: dict[str, int] | None = None


class ToolDeclaration(BaseModel):
    """Declaration of a callable tool advertised to the model.

    ``parameters`` is a JSON-schema style object description
    (lowercase type names, ``enum`` and ``required`` supported).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})


# What a single send carries: plain text, ordered parts, or tool results
MessagePayload = Union[str, list[Union[TextPart, InlineDataPart]], list[FunctionResponse]]
