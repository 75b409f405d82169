"""
Rich terminal output utilities for the bundle-cxx CLI.

Provides formatted console output (status lines, tables, panels) with a plain
mode for logs and dumb terminals.
"""

from typing import Any, Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table


class RichOutputManager:
    """Manages terminal output, styled or plain."""

    def __init__(self, use_rich: bool = True, stderr: bool = False):
        """Initialize the output manager."""
        self.use_rich = use_rich
        self.console = Console(
            stderr=stderr,
            no_color=not use_rich,
            highlight=use_rich,
            emoji=False,
        )

    def _print(self, message: str) -> None:
        if self.use_rich:
            self.console.print(message)
        else:
            self.console.print(message, markup=False)

    def print_header(self, title: str, subtitle: Optional[str] = None) -> None:
        """Print a formatted header."""
        if self.use_rich:
            if subtitle:
                header_text = f"[bold blue]{escape(title)}[/bold blue]\n[dim]{escape(subtitle)}[/dim]"
            else:
                header_text = f"[bold blue]{escape(title)}[/bold blue]"
            self.console.print(Panel(header_text, border_style="blue", padding=(0, 2)))
        else:
            self._print(f"\n=== {title} ===")
            if subtitle:
                self._print(subtitle)

    def print_success(self, message: str) -> None:
        """Print a success message."""
        if self.use_rich:
            self.console.print(f"[green]✓[/green] {escape(message)}")
        else:
            self._print(f"OK: {message}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        if self.use_rich:
            self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")
        else:
            self._print(f"Warning: {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        if self.use_rich:
            self.console.print(f"[red]✗[/red] {escape(message)}")
        else:
            self._print(f"Error: {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        if self.use_rich:
            self.console.print(f"[blue]ℹ[/blue] {escape(message)}")
        else:
            self._print(message)

    def create_table(self, title: str, columns: List[str]) -> Table:
        """Create a table with the given column headers."""
        table = Table(
            title=title,
            show_header=True,
            header_style="bold blue" if self.use_rich else None,
            box=box.HEAVY_HEAD if self.use_rich else box.ASCII,
        )
        for column in columns:
            table.add_column(column)
        return table

    def add_table_row(self, table: Table, *values: Any) -> None:
        """Add a row to the table."""
        table.add_row(*[str(v) for v in values])

    def print_table(self, table: Table) -> None:
        """Print the table."""
        self.console.print(table)

    def print_rows(self, title: str, columns: List[str], rows: Iterable[Iterable[Any]]) -> None:
        """Create, fill and print a table in one go."""
        table = self.create_table(title, columns)
        for row in rows:
            self.add_table_row(table, *row)
        self.print_table(table)


# Global instance
rich_output = RichOutputManager()


def set_rich_enabled(enabled: bool) -> None:
    """Enable or disable rich output globally."""
    global rich_output
    rich_output = RichOutputManager(use_rich=enabled)


def get_rich_output() -> RichOutputManager:
    """Get the global rich output manager."""
    return rich_output
