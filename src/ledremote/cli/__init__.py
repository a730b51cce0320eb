"""Command-line interface for ledremote."""

from .main import cli

__all__ = ["cli"]
