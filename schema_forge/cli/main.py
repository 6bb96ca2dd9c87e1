"""
Main CLI entry point using Typer.

This module defines the command-line interface for schema-forge. It provides
two commands: build and inspect.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from schema_forge.schema.builder import DEFAULT_MAX_DEPTH

from .commands import build_command, inspect_command
from .display import print_error


app = typer.Typer(
    name="schema-forge",
    help="schema-forge - Compile Python types into JSON Schema",
    add_completion=False,
    rich_markup_mode="rich"
)


@app.command("build")
def build(
    target: Annotated[
        str,
        typer.Argument(help="Type to compile, as module:QualName")
    ],
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Require every property and forbid additional properties")
    ] = False,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Path to save the schema JSON")
    ] = None,
    max_depth: Annotated[
        int,
        typer.Option("--max-depth", help="Maximum type nesting depth", min=1)
    ] = DEFAULT_MAX_DEPTH,
    response_format: Annotated[
        bool,
        typer.Option("--response-format", help="Wrap the schema in a structured-output envelope")
    ] = False,
    check: Annotated[
        bool,
        typer.Option("--check", help="Meta-validate the produced schema with jsonschema")
    ] = False,
) -> None:
    """
    Compile a Python type into JSON Schema.

    Example:
        schema-forge build myapp.models:Order --strict --output order.schema.json
    """
    try:
        build_command(
            target=target,
            strict=strict,
            output_path=output,
            max_depth=max_depth,
            response_format=response_format,
            check=check
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.command("inspect")
def inspect(
    target: Annotated[
        str,
        typer.Argument(help="Type to inspect, as module:QualName")
    ],
) -> None:
    """
    Show the fields the builder enumerates for a type.

    Example:
        schema-forge inspect myapp.models:Order
    """
    try:
        inspect_command(target=target)
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """
    schema-forge - Compile Python types into JSON Schema.

    Walks dataclasses, pydantic models and annotated classes, breaking
    reference cycles with $ref/$defs.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if version:
        from schema_forge import __version__
        typer.echo(f"schema-forge version {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def cli() -> None:
    """CLI entry point for poetry script."""
    app()


if __name__ == "__main__":
    cli()
