"""Rich console utilities for styled terminal output.

This module provides a consistent interface for all user-facing output
using the Rich library. Nothing here affects control flow; errors are
always raised to the caller.
"""

from collections.abc import Generator, Mapping
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        "highlight": "cyan bold",
        "muted": "dim",
        "created": "green",
        "updated": "cyan",
        "unchanged": "dim",
    }
)

# Shared console instance
console = Console(theme=_THEME)


def _prefixed(style: str, symbol: str, message: str) -> None:
    console.print(f"[{style}]{symbol}[/{style}] {message}")


def info(message: str) -> None:
    """Print an informational message."""
    _prefixed("info", "ℹ", message)


def success(message: str) -> None:
    """Print a success message."""
    _prefixed("success", "✓", message)


def warning(message: str) -> None:
    """Print a warning message."""
    _prefixed("warning", "⚠", message)


def error(message: str) -> None:
    """Print an error message.

    Args:
        message: The message to display. Rich markup in it is not interpreted.

    """
    console.print(f"[error]✗[/error] {escape(message)}")


def action(message: str) -> None:
    """Print a top-level step, such as the start of a deployment."""
    _prefixed("info", "→", message)


def step(message: str) -> None:
    """Print a per-resource sub-step."""
    _prefixed("muted", "•", message)


def highlight(text: str) -> str:
    """Return text wrapped in highlight markup."""
    return f"[highlight]{text}[/highlight]"


@contextmanager
def spinner(message: str) -> Generator[None, None, None]:
    """Display a spinner while cluster calls are in flight.

    Args:
        message: The status message to display.

    Yields:
        None

    """
    with console.status(f"[info]{message}[/info]", spinner="dots"):
        yield


def summary_panel(title: str, items: Mapping[str, str]) -> None:
    """Print a summary panel of resources and their outcome.

    Outcomes named after a theme style (``created``, ``updated``,
    ``unchanged``) are colored accordingly.

    Args:
        title: Title for the panel.
        items: Mapping of resource label to outcome.

    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()

    for label, value in items.items():
        style = value if value in ("created", "updated", "unchanged") else "info"
        table.add_row(f"{label}:", f"[{style}]{value}[/{style}]")

    console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="green"))


def newline() -> None:
    """Print an empty line."""
    console.print()
