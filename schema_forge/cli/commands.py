"""
CLI command implementations.

This module contains the business logic for each CLI command:
- build: Compile a type to JSON Schema
- inspect: Show the fields the builder sees for a type
"""

import importlib
import json
import logging
from pathlib import Path
from typing import Any, Optional

from jsonschema import Draft202012Validator

from schema_forge.api import json_schema_from, response_format_for
from schema_forge.errors import TargetImportError
from schema_forge.schema.builder import stable_reference_id
from schema_forge.schema.introspection import fields_of, qualified_name

from .display import (
    print_fields,
    print_header,
    print_info,
    print_json,
    print_success,
)

logger = logging.getLogger(__name__)


def load_target(target: str) -> Any:
    """
    Import a type from a ``module:QualName`` string.

    ``module.QualName`` is accepted too; the last dotted segment is then taken
    as the attribute name.

    Args:
        target: Import path of the type

    Returns:
        The imported object

    Raises:
        TargetImportError: If the module or attribute cannot be found
    """
    if ":" in target:
        module_name, _, attribute_path = target.partition(":")
    else:
        module_name, _, attribute_path = target.rpartition(".")

    if not module_name or not attribute_path:
        raise TargetImportError(f"Target must look like 'module:QualName', got: {target}")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetImportError(f"Cannot import module '{module_name}': {e}") from e

    for part in attribute_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise TargetImportError(f"'{attribute_path}' not found in module '{module_name}'") from e

    logger.debug(f"Loaded target {target} -> {obj!r}")
    return obj


def check_schema(schema: dict) -> None:
    """
    Meta-validate a produced schema against JSON Schema draft 2020-12.

    Raises:
        jsonschema.exceptions.SchemaError: If the schema is malformed
    """
    Draft202012Validator.check_schema(schema)


def build_command(
    target: str,
    strict: bool,
    output_path: Optional[Path],
    max_depth: int,
    response_format: bool,
    check: bool,
) -> dict:
    """
    Execute the build command.

    Args:
        target: ``module:QualName`` of the type to compile
        strict: Render in strict mode
        output_path: Optional path to save the schema JSON
        max_depth: Maximum nesting depth
        response_format: Wrap the schema in a structured-output envelope
        check: Meta-validate the schema with jsonschema

    Returns:
        The rendered document (schema or envelope)
    """
    print_header("schema-forge - Build Schema")

    tp = load_target(target)
    print_success(f"Loaded type: {qualified_name(tp)}")
    print_info(f"Mode: [bold]{'strict' if strict else 'permissive'}[/bold]")

    if response_format:
        document = response_format_for(tp, strict=strict, max_depth=max_depth)
        schema = document["json_schema"]["schema"]
    else:
        document = json_schema_from(tp, strict=strict, max_depth=max_depth)
        schema = document

    if check:
        check_schema(schema)
        print_success("Schema is valid JSON Schema (draft 2020-12)")

    print_json(document, title="Schema")

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(document, f, indent=2)
        print_success(f"Schema saved to: {output_path}")

    return document


def inspect_command(target: str) -> None:
    """
    Execute the inspect command.

    Args:
        target: ``module:QualName`` of the type to inspect
    """
    print_header("schema-forge - Inspect Type")

    tp = load_target(target)
    print_fields(qualified_name(tp), stable_reference_id(tp), fields_of(tp))
