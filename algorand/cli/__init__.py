"""Command-line interface (`algorand` console script)."""

from .main import app, main

__all__ = ["app", "main"]
