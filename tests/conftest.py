"""Pytest configuration and shared fixtures."""
from collections import deque

import pytest

from buddy.chat import RemoteChatClient
from buddy.connectivity import StaticConnectivityProbe
from buddy.errors import RecognitionEngineError
from buddy.llm import ChatBackend, ChatSession, FunctionCall, StreamChunk
from buddy.offline import OfflineInterpreter
from buddy.router import CommandRouter, RouterCallback
from buddy.speech import RecognitionEngine, RecognitionError, RecognitionResult
from buddy.tools import create_tool_registry


class FakeRecognitionEngine(RecognitionEngine):
    """Engine driven by the test: events are emitted synchronously."""

    def __init__(self) -> None:
        super().__init__()
        self.running = False
        self.starts = 0
        self.stops = 0
        self.start_error: Exception | None = None

    @property
    def is_running(self) -> bool:
        return self.running

    def start(self) -> None:
        if self.start_error is not None:
            raise self.start_error
        if self.running:
            raise RecognitionEngineError("already running")
        self.running = True
        self.starts += 1

    def stop(self) -> None:
        self.running = False
        self.stops += 1

    def say(self, transcript: str) -> None:
        self.emit_result(RecognitionResult(alternatives=[transcript]))

    def fail(self, kind) -> None:
        self.emit_error(RecognitionError(kind=kind))

    def end(self) -> None:
        self.running = False
        self.emit_end()


class ScriptedChatSession(ChatSession):
    """Replays one scripted exchange (a list of chunks) per send."""

    def __init__(self, exchanges, system_instruction="", tools=None) -> None:
        self._exchanges = deque(exchanges)
        self.system_instruction = system_instruction
        self.tools = tools or []
        self.sent = []

    async def send_message_stream(self, payload):
        self.sent.append(payload)
        exchange = self._exchanges.popleft() if self._exchanges else []
        if isinstance(exchange, Exception):
            raise exchange
        return self._iterate(exchange)

    async def _iterate(self, chunks):
        for chunk in chunks:
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk


class ScriptedChatBackend(ChatBackend):
    """Backend whose sessions replay scripts; one script per created session."""

    def __init__(self, *scripts) -> None:
        self._scripts = deque(scripts)
        self.sessions: list[ScriptedChatSession] = []
        self.closed = False

    @property
    def model(self) -> str:
        return "scripted-model"

    def create_session(self, system_instruction, tools):
        script = self._scripts.popleft() if self._scripts else []
        session = ScriptedChatSession(script, system_instruction, tools)
        self.sessions.append(session)
        return session

    async def close(self) -> None:
        self.closed = True


class RecordingCallback(RouterCallback):
    """Records router events; message updates are snapshotted."""

    def __init__(self) -> None:
        self.events = []

    def message_added(self, message):
        self.events.append(("added", message.role.value, message.text))

    def message_updated(self, message):
        self.events.append(("updated", message.text, message.is_streaming))

    def action_recorded(self, action):
        self.events.append(("action", action.tool_name, action.status.value))

    def loading_changed(self, loading):
        self.events.append(("loading", loading))

    def draft_changed(self, draft):
        self.events.append(("draft", draft.text, len(draft.attachments)))

    def conversation_reset(self):
        self.events.append(("reset",))

    def of(self, kind):
        return [event for event in self.events if event[0] == kind]


def text_chunk(text: str) -> StreamChunk:
    return StreamChunk(text=text)


def call_chunk(name: str, call_id: str = "call-1", **args) -> StreamChunk:
    return StreamChunk(function_calls=[FunctionCall(name=name, args=args, id=call_id)])


@pytest.fixture
def fake_engine():
    return FakeRecognitionEngine()


@pytest.fixture
def recording_callback():
    return RecordingCallback()


@pytest.fixture
def make_client():
    """Build a RemoteChatClient over scripted sessions with instant tools."""
    def _make(*scripts, **kwargs):
        backend = ScriptedChatBackend(*scripts)
        client = RemoteChatClient(
            backend,
            tools=create_tool_registry(delay=0),
            system_instruction="You are Buddy.",
            **kwargs,
        )
        return client, backend
    return _make


@pytest.fixture
def make_router(make_client, recording_callback):
    """Build a CommandRouter with scripted remote sessions and no delays."""
    def _make(*scripts, online: bool = True, offline_delay: float = 0):
        client, backend = make_client(*scripts)
        router = CommandRouter(
            client,
            offline=OfflineInterpreter(delay=offline_delay),
            connectivity=StaticConnectivityProbe(online),
            callback=recording_callback,
        )
        return router, backend
    return _make
