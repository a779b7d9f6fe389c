"""
Command-line interface for cleansift.

- core.py: the click group, shared context and the scan, explain and
  analyzers commands

cleansift/src/cleansift/cli/__init__.py
"""

import logging
import sys

from .core import CleansiftContext, cli

__all__ = ["cli", "main"]


def main() -> None:
    """
    Main entry point for the cleansift CLI application.

    This function provides the entry point specified in pyproject.toml.
    """
    try:
        cli(obj=CleansiftContext(), prog_name="cleansift")
    except SystemExit as e:
        sys.exit(e.code)
    except (RuntimeError, ValueError, OSError) as e:
        from rich.console import Console

        console = Console(stderr=True)
        console.print(f"[bold red]An unexpected error occurred: {e}[/bold red]")

        logger = logging.getLogger(__name__)
        if logger.hasHandlers():
            logger.error("Unhandled exception in CLI execution.", exc_info=True)
        sys.exit(1)
