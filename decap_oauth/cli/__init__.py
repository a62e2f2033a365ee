"""Command line interface for the OAuth relay."""

from .main import app, main


__all__ = ["app", "main"]
