"""snapql command-line interface."""

from snapql.cli.main import main

__all__ = ["main"]
