"""Remote chat client with local tool resolution.

Hides the multi-exchange protocol used when the model calls tools: the
caller sees one flat stream of text fragments per user turn.
"""

import logging
from collections import deque
from collections.abc import AsyncIterator, Callable

from ..config import MAX_TOOL_ROUND_TRIPS
from ..errors import ToolLoopLimitError
from ..llm.base import ChatBackend, ChatSession
from ..llm.models import (
    FunctionResponse,
    InlineDataPart,
    MessagePayload,
    StreamingResponse,
    TextPart,
)
from ..models import Attachment
from ..prompts import get_system_instruction
from ..tools import ActionCallback, ToolRegistry, create_tool_registry

logger = logging.getLogger(__name__)


def build_payload(text: str, attachments: list[Attachment] | None = None) -> MessagePayload:
    """Package a user turn for sending.

    Plain text when there are no attachments; otherwise the text part (if
    any) followed by one inline-data part per attachment, in order.
    """
    if not attachments:
        return text

    parts: list[TextPart | InlineDataPart] = []
    if text:
        parts.append(TextPart(text=text))
    for attachment in attachments:
        parts.append(InlineDataPart(mime_type=attachment.mime_type, data=attachment.data))
    return parts


class RemoteChatClient:
    """Single-session chat client for the remote model.

    The session is created on first use and reused for every send until
    ``reset()`` drops it, so the remote side keeps the conversation history.
    """

    def __init__(
        self,
        backend: ChatBackend,
        tools: ToolRegistry | None = None,
        system_instruction: str | None = None,
        max_round_trips: int = MAX_TOOL_ROUND_TRIPS,
    ) -> None:
        self._backend = backend
        self._tools = tools or create_tool_registry()
        self._system_instruction = system_instruction
        self._max_round_trips = max_round_trips
        self._session: ChatSession | None = None

    @property
    def model(self) -> str:
        return self._backend.model

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def get_session(self) -> ChatSession:
        """Return the current session, creating it if needed."""
        if self._session is None:
            instruction = self._system_instruction or get_system_instruction()
            self._session = self._backend.create_session(instruction, self._tools.declarations())
            logger.info("Created chat session for %s", self._backend.model)
        return self._session

    def reset(self) -> None:
        """Forget the current session; the next send starts a fresh one."""
        self._session = None
        logger.info("Chat session reset")

    def send_message(
        self,
        text: str,
        attachments: list[Attachment] | None = None,
        on_action: ActionCallback | None = None,
    ) -> StreamingResponse:
        """Send a user turn and stream the reply.

        Tool calls requested by the model are executed locally and their
        results are sent back until the model answers without calling tools.

        Args:
            text: User text (may be empty when attachments are present)
            attachments: Images to send along with the text
            on_action: Called with a SystemAction for every executed tool call

        Returns:
            StreamingResponse yielding text fragments in arrival order.
            Iteration raises on any remote failure or ToolLoopLimitError.
        """
        payload = build_payload(text, attachments)
        response = StreamingResponse(
            self._stream(payload, on_action, lambda usage: response.add_usage(usage))
        )
        return response

    async def _stream(
        self,
        payload: MessagePayload,
        on_action: ActionCallback | None,
        on_usage: Callable[[dict[str, int]], None],
    ) -> AsyncIterator[str]:
        session = self.get_session()
        pending: deque[MessagePayload] = deque([payload])
        round_trips = 0

        while pending:
            current = pending.popleft()
            responses: list[FunctionResponse] = []
            usage: dict[str, int] | None = None

            stream = await session.send_message_stream(current)
            async for chunk in stream:
                if chunk.text:
                    yield chunk.text

                for call in chunk.function_calls:
                    logger.debug("Tool call requested: %s %s", call.name, call.args)
                    responses.append(await self._tools.execute(call, on_action))

                if chunk.usage:
                    usage = chunk.usage

            if usage:
                on_usage(usage)

            if responses:
                round_trips += 1
                if round_trips > self._max_round_trips:
                    raise ToolLoopLimitError(self._max_round_trips)
                # Sent only after this exchange is fully consumed so the
                # continuation's text follows everything streamed so far
                pending.append(responses)
