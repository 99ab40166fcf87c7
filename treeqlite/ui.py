"""Central UI handler for TreeQLite.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from treeqlite.ui import console, print_rows, print_success

    print_rows(rows)
    print_success("Created root ./db")
"""

import sys
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

TREEQLITE_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "path": "bold cyan",
    "dim": "dim white",
})

console = Console(
    theme=TREEQLITE_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]OK:[/success] {msg}")


def build_rows_table(rows: Sequence[dict[str, Any]]) -> Table:
    """Lay out result rows as a table; columns follow the first row's keys."""
    table = Table(show_header=True, header_style="bold")
    columns = list(rows[0].keys()) if rows else []
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*("NULL" if row.get(c) is None else str(row.get(c)) for c in columns))
    return table


def print_rows(rows: Sequence[dict[str, Any]]) -> None:
    """Print result rows, or a dim note when there are none."""
    if not rows:
        console.print("[dim](no rows)[/dim]")
        return
    console.print(build_rows_table(rows))
    console.print(f"[dim]{len(rows)} row(s)[/dim]")
