"""Main CLI application using Typer."""
import asyncio
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import CONNECTION_ERROR_MESSAGE, DEFAULT_MODEL
from ..log import configure_logging
from ..models import Message, Role, SystemAction
from ..offline import OfflineInterpreter
from ..router import RouterCallback
from ..speech.providers import SPEECH_RECOGNITION_AVAILABLE
from .providers import (
    build_router,
    get_api_key,
    get_chat_backend,
    get_connectivity,
    get_recognition_engine,
)

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="buddy",
    help="Voice-driven desktop assistant with a terminal HUD",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def actions_table(actions: list[SystemAction]) -> Table:
    """Table of executed actions for console output."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Time", style="dim", width=8)
    table.add_column("Tool", style="bold")
    table.add_column("Args")
    table.add_column("Status")

    for action in actions:
        status_style = "green" if action.status.value == "success" else "red"
        args = ", ".join(f"{key}={value}" for key, value in action.args.items())
        table.add_row(
            action.timestamp.strftime("%H:%M:%S"),
            escape(action.tool_name),
            escape(args) or "-",
            f"[{status_style}]{action.status.value}[/{status_style}]",
        )
    return table


class ConsoleStreamCallback(RouterCallback):
    """Prints the response turn's new text as it streams in."""

    def __init__(self, console: Console) -> None:
        self.console = console
        self._printed: dict[str, int] = {}

    def message_added(self, message: Message) -> None:
        if message.role == Role.MODEL:
            self._printed[message.id] = 0
            self.console.print("[bold green]Buddy:[/bold green] ", end="")

    def message_updated(self, message: Message) -> None:
        printed = self._printed.get(message.id)
        if printed is None or message.text == CONNECTION_ERROR_MESSAGE:
            return
        if len(message.text) > printed:
            self.console.print(message.text[printed:], end="", markup=False, highlight=False)
            self._printed[message.id] = len(message.text)


@app.command()
def chat(
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Answer with the offline interpreter only"
    ),
    no_voice: bool = typer.Option(
        False,
        "--no-voice",
        help="Disable the microphone"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive TUI with voice control."""
    async def _chat():
        from ..ui import run_textual_tui

        backend = None if offline else get_chat_backend(console)
        engine = None if no_voice else get_recognition_engine(console)
        router = build_router(backend, offline=offline)

        try:
            await run_textual_tui(router=router, engine=engine, log_level=log_level)
        finally:
            if backend is not None:
                await backend.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command()
def ask(
    text: str = typer.Argument("", help="What to say to Buddy"),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Answer with the offline interpreter only"
    ),
    images: list[Path] = typer.Option(
        [],
        "--image",
        "-i",
        exists=True,
        dir_okay=False,
        help="Image to attach (repeatable)"
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Console log level: debug, info, warning, or error"
    ),
):
    """Send one turn and stream the reply."""
    configure_logging(log_level)

    async def _ask():
        backend = None if offline else get_chat_backend(console)
        router = build_router(backend, offline=offline)
        router.callback = ConsoleStreamCallback(console)

        try:
            for path in images:
                router.attach_image(path)

            response = await router.submit(text)
            if response is None:
                console.print("[yellow]Nothing to send.[/yellow]")
                raise typer.Exit(code=1)

            if response.text == CONNECTION_ERROR_MESSAGE:
                console.print(f"[red]Error: {response.text}[/red]")
                raise typer.Exit(code=1)

            console.print()
            if response.tool_invocations:
                console.print(actions_table(response.tool_invocations))

        except (FileNotFoundError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            if backend is not None:
                await backend.close()

    asyncio.run(_ask())


@app.command()
def interpret(
    text: str = typer.Argument(..., help="Command to interpret offline"),
):
    """Run the offline keyword interpreter on TEXT."""
    result = OfflineInterpreter(delay=0).interpret(text)

    console.print(f"[bold green]Buddy:[/bold green] {escape(result.response)}")
    if result.action is not None:
        console.print(actions_table([result.action]))
    else:
        console.print("[dim]No action[/dim]")


@app.command()
def health():
    """Check API key, network reachability and voice input."""
    async def _health():
        all_healthy = True

        if get_api_key():
            console.print("[green]+[/green] Gemini API key: SET")
        else:
            console.print("[yellow]![/yellow] Gemini API key: NOT SET (offline only)")

        console.print(f"[dim]  Model: {os.getenv('BUDDY_MODEL', DEFAULT_MODEL)}[/dim]")

        if await get_connectivity().is_online():
            console.print("[green]+[/green] Network: ONLINE")
        else:
            console.print("[red]x[/red] Network: OFFLINE")
            all_healthy = False

        if SPEECH_RECOGNITION_AVAILABLE:
            console.print("[green]+[/green] Voice input: SpeechRecognition installed")
        else:
            console.print("[yellow]![/yellow] Voice input: NOT AVAILABLE (pip install 'buddy-assistant\\[voice]')")

        if not all_healthy:
            raise typer.Exit(code=1)

    asyncio.run(_health())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
