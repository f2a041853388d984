"""Command-line interface for buddy."""

from .app import app, main

__all__ = ["app", "main"]
