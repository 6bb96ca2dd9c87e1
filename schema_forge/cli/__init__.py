"""
Command-line interface module.

This module provides a rich terminal interface for schema-forge using Typer and Rich.

Commands:
    - build: Compile a Python type into JSON Schema
    - inspect: Show the fields the builder enumerates for a type

Features:
    - Syntax-highlighted JSON output
    - Strict and permissive rendering
    - Optional meta-validation of the produced schema (jsonschema)
    - Structured-output envelope for model-serving APIs

Example Usage:
    ```bash
    # Permissive schema
    schema-forge build myapp.models:Order

    # Strict schema, validated, saved to disk
    schema-forge build myapp.models:Order \\
        --strict \\
        --check \\
        --output order.schema.json

    # Field overview
    schema-forge inspect myapp.models:Order
    ```
"""

from .main import app

__all__ = ["app"]
