"""Console output for the dirmirror CLI."""

import json
import sys
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .utils import format_size


class OutputFormatter:
    """Formats user-facing messages, either as rich text or as JSON."""

    def __init__(self, json_output: bool = False, quiet: bool = False):
        """Initialize output formatter.

        Args:
            json_output: Print results as JSON instead of text
            quiet: Suppress informational messages
        """
        self.json_output = json_output
        self.quiet = quiet
        # Paths must never be wrapped or parsed as markup
        self.console = Console(highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if not self.quiet and not self.json_output:
            self.console.print(escape(message))

    def success(self, message: str) -> None:
        """Print a success message."""
        if not self.quiet and not self.json_output:
            self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Print a warning to stderr."""
        if not self.quiet:
            self.err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Print an error to stderr, even in quiet mode."""
        self.err_console.print(f"[red]Error:[/red] {escape(message)}")

    def output_json(self, data: Any) -> None:
        """Print data as JSON to stdout."""
        sys.stdout.write(json.dumps(data, indent=2) + "\n")
        sys.stdout.flush()

    def print_summary(self, title: str, stats: dict) -> None:
        """Print sync statistics as a table.

        Args:
            title: Table title
            stats: Mapping of counter name to value
        """
        if self.quiet or self.json_output:
            return

        table = Table(title=title, show_header=False)
        table.add_column("Item", style="bold")
        table.add_column("Value", justify="right")
        for key, value in stats.items():
            if key == "bytes_copied":
                table.add_row("bytes copied", format_size(value))
            elif value:
                table.add_row(key.replace("_", " "), str(value))
        self.console.print(table)
