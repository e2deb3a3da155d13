"""Output formatting utilities using Rich."""

import json
from enum import Enum
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

error_console = Console(stderr=True, soft_wrap=True)


class OutputFormat(str, Enum):
    """Supported output formats."""

    JSON = "json"
    YAML = "yaml"
    TABLE = "table"
    RAW = "raw"


class OutputFormatter:
    """Handles output formatting for CLI commands.

    Payloads and confirmations go to stdout; errors and warnings go to
    stderr so scripts can capture the former without the latter.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.JSON,
        color: bool = True,
        quiet: bool = False,
    ):
        self.format = format
        self.color = color
        self.quiet = quiet
        self._console = Console(force_terminal=color, no_color=not color, soft_wrap=True)
        self._error_console = Console(
            stderr=True, force_terminal=color, no_color=not color, soft_wrap=True
        )

    def print(self, message: str, style: str | None = None) -> None:
        """Print a message to stdout."""
        if self.quiet:
            return
        self._console.print(message, style=style)

    def print_raw(self, text: str) -> None:
        """Print text to stdout exactly as given, even in quiet mode."""
        print(text)

    def print_error(self, message: str) -> None:
        """Print an error message to stderr."""
        self._error_console.print(f"[red]Error:[/red] {escape(message)}")

    def print_error_body(self, body: Any, as_json: bool = False) -> None:
        """Print an error response body to stderr.

        Parsed JSON is pretty-printed; anything else is printed verbatim.
        """
        if as_json or isinstance(body, (dict, list)):
            text = json.dumps(body, indent=2)
        else:
            text = str(body)
        if text:
            self._error_console.print(escape(text), highlight=False)

    def print_warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if self.quiet:
            return
        self._error_console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        if self.quiet:
            return
        self._console.print(escape(message), highlight=False)

    def print_data(
        self,
        data: list[dict[str, Any]] | dict[str, Any],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> None:
        """Print data in the configured format."""
        if self.format == OutputFormat.JSON:
            self._print_json(data)
        elif self.format == OutputFormat.YAML:
            self._print_yaml(data)
        elif self.format == OutputFormat.RAW:
            self._print_raw(data)
        else:
            self._print_table(data, columns, title)

    def _print_json(self, data: Any) -> None:
        """Print data as JSON."""
        json_str = json.dumps(data, indent=2, default=str)
        if self.color:
            syntax = Syntax(json_str, "json", theme="monokai")
            self._console.print(syntax)
        else:
            print(json_str)

    def _print_yaml(self, data: Any) -> None:
        """Print data as YAML."""
        yaml_str = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        if self.color:
            syntax = Syntax(yaml_str, "yaml", theme="monokai")
            self._console.print(syntax)
        else:
            print(yaml_str, end="")

    def _print_raw(self, data: Any) -> None:
        """Print raw data."""
        if isinstance(data, list):
            for item in data:
                print(item)
        elif isinstance(data, dict):
            for key, value in data.items():
                print(f"{key}: {value}")
        else:
            print(data)

    def _print_table(
        self,
        data: list[dict[str, Any]] | dict[str, Any],
        columns: list[str] | None = None,
        title: str | None = None,
    ) -> None:
        """Print data as a formatted table."""
        if isinstance(data, dict):
            # Single record - display as key-value pairs
            table = Table(title=title, show_header=True, header_style="bold cyan")
            table.add_column("Field", style="dim")
            table.add_column("Value")
            for key, value in data.items():
                table.add_row(str(key), escape(str(value)))
            self._console.print(table)
        elif isinstance(data, list) and len(data) > 0:
            if columns is None:
                columns = list(data[0].keys())

            table = Table(title=title, show_header=True, header_style="bold cyan")
            for column in columns:
                table.add_column(column)

            for row in data:
                table.add_row(*[escape(str(row.get(c, ""))) for c in columns])

            self._console.print(table)
        else:
            self._console.print("[dim]No data to display[/dim]")
