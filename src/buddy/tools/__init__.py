"""Tools the remote model can call, with mocked local execution."""

from .base import ActionCallback, BaseTool, ToolRegistry
from .system import (
    AppControlTool,
    MediaControlTool,
    SystemControlTool,
    SystemStatusTool,
    create_tool_registry,
    default_tools,
)

__all__ = [
    "ActionCallback",
    "AppControlTool",
    "BaseTool",
    "MediaControlTool",
    "SystemControlTool",
    "SystemStatusTool",
    "ToolRegistry",
    "create_tool_registry",
    "default_tools",
]
