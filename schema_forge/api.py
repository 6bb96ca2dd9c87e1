"""
High-level Python API for schema_forge.

This module provides the main user-facing helpers: compile a type straight to a
JSON Schema map, or to the structured-output envelope model-serving APIs accept.
"""

from typing import Any, Dict, Optional

from schema_forge.schema.builder import DEFAULT_MAX_DEPTH, SchemaBuilder
from schema_forge.schema.serializer import to_map


def json_schema_from(tp: Any, strict: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> Dict[str, Any]:
    """
    Compile a type to a JSON Schema map.

    Args:
        tp: Type to compile
        strict: Render in strict mode (all properties required, no extras)
        max_depth: Maximum nesting depth

    Returns:
        Dict[str, Any]: JSON Schema map

    Example:
        ```python
        json_schema_from(list[int])
        # {"type": "array", "items": {"type": "integer"}}
        ```
    """
    node = SchemaBuilder(max_depth=max_depth).build(tp)
    return to_map(node, strict=strict)


def response_format_for(
    tp: Any,
    name: Optional[str] = None,
    strict: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Dict[str, Any]:
    """
    Wrap a type's schema in a structured-output ``response_format`` envelope.

    Args:
        tp: Type to compile
        name: Schema name (defaults to the type's ``__name__``)
        strict: Strict mode flag, also echoed in the envelope
        max_depth: Maximum nesting depth

    Returns:
        Dict[str, Any]: ``{"type": "json_schema", "json_schema": {...}}``
    """
    if name is None:
        name = getattr(tp, "__name__", None) or "schema"

    return {
        "type": "json_schema",
        "json_schema": {
            "name": name,
            "strict": strict,
            "schema": json_schema_from(tp, strict=strict, max_depth=max_depth),
        },
    }


__all__ = ["json_schema_from", "response_format_for"]
