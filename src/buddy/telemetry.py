"""Action log and simulated resource telemetry for the status display."""

import asyncio
import json
import random
from collections import deque
from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, Field

from .config import (
    ACTION_LOG_TIMESTAMP_FORMAT,
    MAX_ACTION_LOG_ENTRIES,
    TELEMETRY_INTERVAL_SECONDS,
)
from .models import SystemAction


def format_action(action: SystemAction) -> str:
    """Render an action as one log line.

    Example: ``[12:00:01] EXEC: app_control {action:open,appName:notepad}``
    """
    timestamp = action.timestamp.strftime(ACTION_LOG_TIMESTAMP_FORMAT)
    args = json.dumps(action.args, separators=(",", ":"), default=str).replace('"', "")
    return f"[{timestamp}] EXEC: {action.tool_name} {args}"


class ActionLog:
    """Bounded history of executed actions; the oldest entry is evicted first."""

    def __init__(self, max_entries: int = MAX_ACTION_LOG_ENTRIES) -> None:
        self._entries: deque[SystemAction] = deque(maxlen=max_entries)

    @property
    def max_entries(self) -> int:
        return self._entries.maxlen or 0

    @property
    def entries(self) -> list[SystemAction]:
        """Retained actions, newest first."""
        return list(reversed(self._entries))

    @property
    def last(self) -> SystemAction | None:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, action: SystemAction) -> None:
        self._entries.append(action)

    def lines(self) -> list[str]:
        """Formatted log lines, newest first."""
        return [format_action(action) for action in self.entries]

    def clear(self) -> None:
        self._entries.clear()


class TelemetrySample(BaseModel):
    """One reading of the simulated resource meters (percentages)."""

    cpu: float
    ram: float
    timestamp: datetime = Field(default_factory=datetime.now)


class TelemetrySimulator:
    """Random-walk CPU/RAM figures for the HUD. Nothing is measured."""

    CPU_START = 12.0
    CPU_STEP = 5.0
    CPU_RANGE = (5.0, 100.0)

    RAM_START = 45.0
    RAM_STEP = 2.0
    RAM_RANGE = (30.0, 80.0)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._cpu = self.CPU_START
        self._ram = self.RAM_START

    @property
    def current(self) -> TelemetrySample:
        return TelemetrySample(cpu=self._cpu, ram=self._ram)

    def _walk(self, value: float, step: float, bounds: tuple[float, float]) -> float:
        low, high = bounds
        return max(low, min(high, value + self._rng.uniform(-step, step)))

    def tick(self) -> TelemetrySample:
        """Advance both meters one step."""
        self._cpu = self._walk(self._cpu, self.CPU_STEP, self.CPU_RANGE)
        self._ram = self._walk(self._ram, self.RAM_STEP, self.RAM_RANGE)
        return self.current

    async def run(
        self,
        on_sample: Callable[[TelemetrySample], None],
        interval: float = TELEMETRY_INTERVAL_SECONDS,
    ) -> None:
        """Emit a sample every ``interval`` seconds until cancelled."""
        while True:
            await asyncio.sleep(interval)
            on_sample(self.tick())
