"""Google Gemini chat backend implementation.

Uses the official Google GenAI SDK for async chat sessions with
function calling.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can emit chunks with no candidates (usage-only trailers or
safety-filtered output). Those produce empty StreamChunks rather than errors.
"""

import base64
from collections.abc import AsyncIterator
from typing import Any

from google import genai
from google.genai import types

from ...config import DEFAULT_MODEL
from ..base import ChatBackend, ChatSession
from ..models import (
    FunctionCall,
    FunctionResponse,
    InlineDataPart,
    MessagePayload,
    StreamChunk,
    TextPart,
    ToolDeclaration,
)


def to_gemini_schema(spec: dict[str, Any]) -> types.Schema:
    """Convert a JSON-schema style dict into a Gemini Schema.

    Type names are upper-cased to match the Gemini ``Type`` enum.
    """
    kwargs: dict[str, Any] = {}
    if "type" in spec:
        kwargs["type"] = types.Type(spec["type"].upper())
    if "description" in spec:
        kwargs["description"] = spec["description"]
    if "enum" in spec:
        kwargs["enum"] = [str(value) for value in spec["enum"]]
    if "required" in spec:
        kwargs["required"] = list(spec["required"])
    if "minimum" in spec:
        kwargs["minimum"] = spec["minimum"]
    if "maximum" in spec:
        kwargs["maximum"] = spec["maximum"]
    if spec.get("properties"):
        kwargs["properties"] = {
            name: to_gemini_schema(prop) for name, prop in spec["properties"].items()
        }
    return types.Schema(**kwargs)


def to_gemini_tool(declarations: list[ToolDeclaration]) -> types.Tool:
    """Bundle tool declarations into a single Gemini Tool."""
    functions = []
    for declaration in declarations:
        parameters = declaration.parameters
        functions.append(types.FunctionDeclaration(
            name=declaration.name,
            description=declaration.description,
            # Gemini rejects OBJECT schemas without properties
            parameters=to_gemini_schema(parameters) if parameters.get("properties") else None,
        ))
    return types.Tool(function_declarations=functions)


def to_gemini_message(payload: MessagePayload) -> str | list[types.Part]:
    """Convert a send payload into what ``AsyncChat.send_message_stream`` accepts."""
    if isinstance(payload, str):
        return payload

    parts = []
    for item in payload:
        if isinstance(item, TextPart):
            parts.append(types.Part(text=item.text))
        elif isinstance(item, InlineDataPart):
            parts.append(types.Part(inline_data=types.Blob(
                mime_type=item.mime_type,
                data=base64.b64decode(item.data),
            )))
        elif isinstance(item, FunctionResponse):
            parts.append(types.Part(function_response=types.FunctionResponse(
                id=item.id,
                name=item.name,
                response=item.response,
            )))
        else:
            raise TypeError(f"Unsupported message part: {type(item).__name__}")
    return parts


def parse_chunk(chunk: types.GenerateContentResponse) -> StreamChunk:
    """Extract text, function calls and usage from a streamed Gemini chunk."""
    texts: list[str] = []
    calls: list[FunctionCall] = []

    if chunk.candidates:
        candidate = chunk.candidates[0]
        if candidate.content and candidate.content.parts:
            for part in candidate.content.parts:
                if part.thought:
                    continue
                if part.text:
                    texts.append(part.text)
                if part.function_call:
                    calls.append(FunctionCall(
                        name=part.function_call.name or "",
                        args=dict(part.function_call.args or {}),
                        id=part.function_call.id,
                    ))

    usage = None
    if chunk.usage_metadata:
        usage = {
            "prompt_tokens": chunk.usage_metadata.prompt_token_count or 0,
            "completion_tokens": chunk.usage_metadata.candidates_token_count or 0,
            "total_tokens": chunk.usage_metadata.total_token_count or 0,
        }

    return StreamChunk(
        text="".join(texts) or None,
        function_calls=calls,
        usage=usage,
    )


class GeminiChatSession(ChatSession):
    """Wraps a ``google.genai`` async chat; history is kept by the SDK."""

    def __init__(self, chat: Any) -> None:
        self._chat = chat

    async def send_message_stream(self, payload: MessagePayload) -> AsyncIterator[StreamChunk]:
        stream = await self._chat.send_message_stream(to_gemini_message(payload))
        return self._iterate(stream)

    async def _iterate(self, stream: AsyncIterator[types.GenerateContentResponse]) -> AsyncIterator[StreamChunk]:
        async for chunk in stream:
            yield parse_chunk(chunk)


class GeminiChatBackend(ChatBackend):
    """Google Gemini chat backend.

    Hidden design decisions:
    - Google GenAI client initialization
    - Tool declaration and message part conversion
    - Automatic function calling is disabled; tool calls are surfaced
      to the caller as FunctionCall records
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        temperature: float | None = None,
        **client_kwargs: Any
    ):
        """Initialize Gemini backend.

        Args:
            api_key: Google AI API key
            model: Model used for new sessions
            temperature: Optional sampling temperature
            **client_kwargs: Additional kwargs for Client
        """
        self._model = model
        self._temperature = temperature
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    def create_session(
        self,
        system_instruction: str,
        tools: list[ToolDeclaration],
    ) -> GeminiChatSession:
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            tools=[to_gemini_tool(tools)] if tools else None,
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
            temperature=self._temperature,
        )
        chat = self._client.aio.chats.create(model=self._model, config=config)
        return GeminiChatSession(chat)

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
