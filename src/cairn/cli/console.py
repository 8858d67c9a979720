"""Console output for CLI commands.

Meeting notes, names and summaries are user text and may contain square
brackets, so everything printed through these helpers is rendered as
plain text rather than Rich markup.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

console = Console()


def _styled(msg: str, style: str) -> None:
    console.print(Text(msg, style=style))


def error(msg: str) -> None:
    _styled(msg, "red")


def warning(msg: str) -> None:
    _styled(msg, "yellow")


def success(msg: str) -> None:
    _styled(msg, "green")


def dim(msg: str) -> None:
    _styled(msg, "dim")


def labeled(label: str, value: str) -> None:
    """Print ``label: value`` with a bold label."""
    console.print(f"[bold]{escape(label)}:[/bold] {escape(value)}")


def create_table(
    title: str,
    columns: list[tuple[str, str | dict]],
) -> Table:
    """Create a table whose title is shown verbatim.

    Args:
        title: Table title.
        columns: List of (name, style) or (name, kwargs_dict) tuples.
    """
    table = Table(title=Text(title, style="bold"))
    for name, style_or_kwargs in columns:
        if isinstance(style_or_kwargs, dict):
            table.add_column(name, **style_or_kwargs)
        else:
            table.add_column(name, style=style_or_kwargs)
    return table


def add_row(table: Table, *cells: str) -> None:
    """Add a row of plain-text cells."""
    table.add_row(*(Text(cell) for cell in cells))
