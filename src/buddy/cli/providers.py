"""Provider factory functions for CLI.

Centralizes creation of the chat backend, connectivity probe, speech engine
and command router from environment variables. Hides configuration details
from command implementations.
"""

import os

from rich.console import Console
from rich.markup import escape

from ..chat import RemoteChatClient
from ..config import DEFAULT_MODEL, DEFAULT_PROVIDER
from ..connectivity import ConnectivityProbe, SocketConnectivityProbe, StaticConnectivityProbe
from ..errors import SpeechUnavailableError
from ..llm import ChatBackend, create_chat_backend
from ..router import CommandRouter
from ..speech import RecognitionEngine, create_recognition_engine

# Default console for output
_console = Console()


def get_api_key() -> str | None:
    """API key from GEMINI_API_KEY, falling back to API_KEY."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")


def get_chat_backend(console: Console | None = None) -> ChatBackend | None:
    """Create the chat backend from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        Chat backend instance, or None if not configured

    Environment variables:
        BUDDY_LLM_PROVIDER: Provider type (default: gemini)
        GEMINI_API_KEY: Gemini API key (API_KEY is used when unset)
        BUDDY_MODEL: Model name (default: gemini-3-pro-preview)
    """
    con = console or _console
    provider = os.getenv("BUDDY_LLM_PROVIDER", DEFAULT_PROVIDER).lower()

    api_key = get_api_key()
    if not api_key:
        con.print("[yellow]Warning: GEMINI_API_KEY not set, answering offline only[/yellow]")
        return None

    model = os.getenv("BUDDY_MODEL", DEFAULT_MODEL)
    try:
        return create_chat_backend(provider, api_key=api_key, model=model)
    except ValueError as e:
        con.print(f"[red]Error: {e}[/red]")
        return None


def get_connectivity(offline: bool = False) -> ConnectivityProbe:
    """Connectivity probe; ``offline`` pins it to offline."""
    if offline:
        return StaticConnectivityProbe(online=False)
    return SocketConnectivityProbe()


def get_recognition_engine(console: Console | None = None) -> RecognitionEngine | None:
    """Create the speech engine from environment variables.

    Returns:
        Recognition engine, or None if voice input is unavailable

    Environment variables:
        BUDDY_SPEECH_ENGINE: Engine type (default: speech_recognition)
        BUDDY_SPEECH_LANGUAGE: Recognition language (default: en-US)
    """
    con = console or _console
    try:
        return create_recognition_engine(
            os.getenv("BUDDY_SPEECH_ENGINE", "speech_recognition"),
            language=os.getenv("BUDDY_SPEECH_LANGUAGE", "en-US"),
        )
    except (SpeechUnavailableError, ValueError) as e:
        con.print(f"[yellow]Warning: voice input disabled ({escape(str(e))})[/yellow]")
        return None


def build_router(backend: ChatBackend | None, offline: bool = False) -> CommandRouter:
    """Command router over the given backend; no backend means offline only."""
    chat_client = RemoteChatClient(backend) if backend is not None else None
    return CommandRouter(chat_client, connectivity=get_connectivity(offline))
