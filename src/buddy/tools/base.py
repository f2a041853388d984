"""Tool infrastructure for the remote chat client."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..config import TOOL_EXECUTION_DELAY_SECONDS
from ..llm.models import FunctionCall, FunctionResponse, ToolDeclaration
from ..models import ActionStatus, SystemAction

logger = logging.getLogger(__name__)

ActionCallback = Callable[[SystemAction], None]


class BaseTool(ABC):
    """Abstract base class for tools the model may call."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Get the tool description for the model."""
        pass

    @property
    @abstractmethod
    def parameters_schema(self) -> dict[str, Any]:
        """Get the JSON schema for tool parameters."""
        pass

    @abstractmethod
    def run(self, args: dict[str, Any]) -> dict[str, Any]:
        """Produce the tool result for the given arguments."""
        pass

    def to_declaration(self) -> ToolDeclaration:
        """Convert tool to a declaration advertised to the model."""
        return ToolDeclaration(
            name=self.name,
            description=self.description,
            parameters=self.parameters_schema,
        )


class ToolRegistry:
    """Looks up tools by name and executes model-issued calls.

    Execution is simulated: the action is reported first, then a fixed
    delay elapses before the canned result is returned.
    """

    def __init__(
        self,
        tools: list[BaseTool],
        delay: float = TOOL_EXECUTION_DELAY_SECONDS,
    ) -> None:
        self._tools = {tool.name: tool for tool in tools}
        self._delay = delay

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def declarations(self) -> list[ToolDeclaration]:
        return [tool.to_declaration() for tool in self._tools.values()]

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    async def execute(
        self,
        call: FunctionCall,
        on_action: ActionCallback | None = None,
    ) -> FunctionResponse:
        """Execute one function call and wrap its result for the model."""
        tool = self._tools.get(call.name)
        status = ActionStatus.SUCCESS if tool else ActionStatus.FAILED

        if on_action is not None:
            on_action(SystemAction(tool_name=call.name, args=dict(call.args), status=status))

        await asyncio.sleep(self._delay)

        if tool is None:
            logger.warning("Model requested unknown tool %r", call.name)
            result: dict[str, Any] = {"status": "error", "message": "Unknown tool"}
        else:
            logger.info("Executed %s %s", call.name, call.args)
            result = tool.run(dict(call.args))

        return FunctionResponse(name=call.name, id=call.id, response={"result": result})
