"""User-facing terminal output.

Diagnostics are single prefixed lines on stderr; tracebacks are left to the
logger at debug level.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

err_console = Console(stderr=True, highlight=False, soft_wrap=True)
out_console = Console(highlight=False, soft_wrap=True)


def print_error(message: str) -> None:
    """Print a one-line error diagnostic to stderr."""
    err_console.print(f"[bold red]error:[/bold red] {escape(message)}")


def print_hint(message: str) -> None:
    """Print an indented follow-up line to stderr."""
    err_console.print(f"  {escape(message)}")


def print_success(message: str) -> None:
    out_console.print(f"[green]{escape(message)}[/green]")
