"""Unit tests for the action log and telemetry simulator."""
import asyncio
import random
from datetime import datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from buddy.models import SystemAction
from buddy.telemetry import ActionLog, TelemetrySimulator, format_action


def make_action(tool: str = "app_control", **args) -> SystemAction:
    return SystemAction(tool_name=tool, args=args, timestamp=datetime(2024, 1, 1, 12, 0, 1))


class TestFormatAction:
    """Tests for action log line rendering."""

    def test_format(self):
        """Test the time, tool and unquoted compact arguments."""
        action = make_action(action="open", appName="notepad")

        assert format_action(action) == "[12:00:01] EXEC: app_control {action:open,appName:notepad}"

    def test_format_without_args(self):
        """Test that an action without arguments renders empty braces."""
        assert format_action(make_action("get_system_status")) == "[12:00:01] EXEC: get_system_status {}"

    def test_format_numeric_value(self):
        """Test that numbers are rendered bare."""
        action = make_action("media_control", command="set_volume", value=80)

        assert format_action(action).endswith("{command:set_volume,value:80}")


class TestActionLog:
    """Tests for the bounded action history."""

    def test_newest_first(self):
        """Test that entries are listed newest first."""
        log = ActionLog()
        for tool in ("a", "b", "c"):
            log.record(make_action(tool))

        assert [a.tool_name for a in log.entries] == ["c", "b", "a"]
        assert log.last.tool_name == "c"

    def test_evicts_oldest(self):
        """Test that only the most recent entries are retained."""
        log = ActionLog(max_entries=5)
        for i in range(7):
            log.record(make_action(f"tool_{i}"))

        assert len(log) == 5
        assert [a.tool_name for a in log.entries] == [f"tool_{i}" for i in (6, 5, 4, 3, 2)]

    def test_lines_and_clear(self):
        """Test formatted lines and clearing."""
        log = ActionLog()
        log.record(make_action(action="open", appName="notepad"))

        assert log.lines() == ["[12:00:01] EXEC: app_control {action:open,appName:notepad}"]

        log.clear()
        assert log.entries == []
        assert log.last is None

    @given(st.integers(min_value=0, max_value=40))
    def test_never_exceeds_capacity(self, count: int):
        """Property test: the log holds at most max_entries actions."""
        log = ActionLog(max_entries=5)
        for i in range(count):
            log.record(make_action(f"tool_{i}"))

        assert len(log) == min(count, 5)


class TestTelemetrySimulator:
    """Tests for the simulated resource meters."""

    def test_starting_values(self):
        """Test the initial readings."""
        sample = TelemetrySimulator(random.Random(0)).current

        assert sample.cpu == 12.0
        assert sample.ram == 45.0

    @given(st.integers(min_value=0, max_value=2**32 - 1))
    def test_values_stay_in_bounds(self, seed: int):
        """Property test: readings never leave their ranges."""
        simulator = TelemetrySimulator(random.Random(seed))

        for _ in range(200):
            sample = simulator.tick()
            assert 5.0 <= sample.cpu <= 100.0
            assert 30.0 <= sample.ram <= 80.0

    def test_steps_are_bounded(self):
        """Test that one tick moves each meter by at most its step."""
        simulator = TelemetrySimulator(random.Random(42))
        before = simulator.current

        after = simulator.tick()

        assert abs(after.cpu - before.cpu) <= TelemetrySimulator.CPU_STEP
        assert abs(after.ram - before.ram) <= TelemetrySimulator.RAM_STEP

    @pytest.mark.asyncio
    async def test_run_emits_until_cancelled(self):
        """Test that run emits samples periodically and stops on cancel."""
        samples = []
        simulator = TelemetrySimulator(random.Random(1))

        task = asyncio.create_task(simulator.run(samples.append, interval=0.01))
        await asyncio.sleep(0.1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(samples) >= 2
        count = len(samples)
        await asyncio.sleep(0.05)
        assert len(samples) == count
