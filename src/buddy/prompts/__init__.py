"""Prompt files for the remote model.

Prompts live next to this module as ``<name>.txt``. A file with the same
name under ``./prompts/`` in the working directory takes precedence, so the
assistant's persona can be changed without reinstalling.
"""

from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent


def _candidates(name: str) -> list[Path]:
    filename = f"{name}.txt"
    return [Path.cwd() / "prompts" / filename, _PACKAGE_DIR / filename]


@lru_cache(maxsize=8)
def load_prompt(name: str) -> str:
    """Read prompt ``name`` (no extension), preferring the working-directory copy.

    Raises:
        FileNotFoundError: If no candidate file exists
    """
    candidates = _candidates(name)
    for path in candidates:
        if path.is_file():
            return path.read_text(encoding="utf-8").strip()

    searched = ", ".join(str(path) for path in candidates)
    raise FileNotFoundError(f"Prompt '{name}' not found (searched {searched})")


def get_system_instruction() -> str:
    """Persona and tool-usage instruction sent when a chat session is created."""
    return load_prompt("system")


def clear_cache() -> None:
    load_prompt.cache_clear()


__all__ = [
    "load_prompt",
    "get_system_instruction",
    "clear_cache",
]
