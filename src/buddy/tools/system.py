"""Mocked desktop-control tools.

None of these touch the host; each returns a canned result.
"""

from typing import Any

from .base import BaseTool, ToolRegistry


class SystemControlTool(BaseTool):
    """Power state control (shutdown, restart, sleep, ...)."""

    @property
    def name(self) -> str:
        return "system_control"

    @property
    def description(self) -> str:
        return "Control power states of the Windows operating system."

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["shutdown", "restart", "sleep", "lock", "sign_out"],
                    "description": "The power action to execute."
                },
                "force": {
                    "type": "boolean",
                    "description": "Whether to force the action."
                }
            },
            "required": ["action"]
        }

    def run(self, args: dict[str, Any]) -> dict[str, Any]:
        return {"status": "success", "message": f"System {args.get('action')} sequence initiated."}


class AppControlTool(BaseTool):
    """Open, close or focus an application."""

    @property
    def name(self) -> str:
        return "app_control"

    @property
    def description(self) -> str:
        return "Open, close, or manage Windows applications."

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["open", "close", "focus"],
                    "description": "The action to perform on the application."
                },
                "appName": {
                    "type": "string",
                    "description": "The name of the application (e.g., Spotify, Chrome, Notepad)."
                }
            },
            "required": ["action", "appName"]
        }

    def run(self, args: dict[str, Any]) -> dict[str, Any]:
        return {
            "status": "success",
            "message": f"Application '{args.get('appName')}' {args.get('action')}ed successfully.",
        }


class MediaControlTool(BaseTool):
    """Volume and playback control."""

    @property
    def name(self) -> str:
        return "media_control"

    @property
    def description(self) -> str:
        return "Control system volume and media playback."

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "command": {
                    "type": "string",
                    "enum": ["set_volume", "mute", "unmute", "next_track", "prev_track", "play_pause"]
                },
                "value": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 100,
                    "description": "Volume level percentage (0-100) if command is set_volume."
                }
            },
            "required": ["command"]
        }

    def run(self, args: dict[str, Any]) -> dict[str, Any]:
        return {"status": "success", "message": f"Media command '{args.get('command')}' executed."}


class SystemStatusTool(BaseTool):
    """Resource usage snapshot (canned)."""

    @property
    def name(self) -> str:
        return "get_system_status"

    @property
    def description(self) -> str:
        return "Get current system resource usage (CPU, RAM, Battery)."

    @property
    def parameters_schema(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}}

    def run(self, args: dict[str, Any]) -> dict[str, Any]:
        return {
            "cpu_load": "12%",
            "ram_usage": "8.4GB / 16GB",
            "battery": "Charging (98%)",
            "uptime": "4d 2h 15m",
        }


def default_tools() -> list[BaseTool]:
    """The four tools declared to the remote model."""
    return [SystemControlTool(), AppControlTool(), MediaControlTool(), SystemStatusTool()]


def create_tool_registry(**kwargs: Any) -> ToolRegistry:
    """Registry with the default tools."""
    return ToolRegistry(default_tools(), **kwargs)
