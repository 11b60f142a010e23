"""Command line tools for formhook."""

from .commands import main

__all__ = ["main"]
