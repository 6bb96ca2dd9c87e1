"""
Rich terminal display utilities for CLI.

Provides formatted output using the Rich library for:
- Syntax-highlighted JSON schemas
- Field tables for inspected types
- Success/failure indicators
"""

import json
from typing import Any, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from schema_forge.schema.introspection import SchemaField


console = Console()


def print_header(title: str) -> None:
    """Print a formatted header."""
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")
    console.print("=" * len(title))
    console.print()


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with X mark."""
    console.print(f"[red]✗[/red] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {message}")


def print_json(data: Any, title: Optional[str] = None) -> None:
    """
    Print JSON data with syntax highlighting.

    Args:
        data: JSON-serializable data
        title: Optional title for the panel
    """
    json_str = json.dumps(data, indent=2)

    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        console.print(Panel(syntax, title=f"[bold]{title}[/bold]", border_style="cyan"))
    else:
        console.print(syntax)


def print_fields(type_name: str, ref_id: str, fields: List[SchemaField]) -> None:
    """
    Print the enumerated fields of a type as a table.

    Args:
        type_name: Fully-qualified type name
        ref_id: Stable reference id of the type
        fields: Fields to list
    """
    table = Table(title=type_name, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Field", style="cyan")
    table.add_column("Type", style="white")
    table.add_column("Description", style="dim")

    for i, schema_field in enumerate(fields, 1):
        table.add_row(
            str(i),
            schema_field.name,
            _type_label(schema_field.type),
            schema_field.description or "",
        )

    console.print()
    console.print(table)
    console.print(f"[dim]Reference id:[/dim] {ref_id}")
    console.print()


def _type_label(tp: Any) -> str:
    # Plain classes print as <class 'x'>; generics already print readably
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")
