"""
schema_forge: Compile Python Types into JSON Schema for LLM Tool Calls

schema_forge walks dataclasses, pydantic models, annotated classes, enums and
collections, and produces JSON Schema maps suitable for the ``parameters`` of a
tool call or the ``schema`` of a structured-output request.

Key Features:
    - Recursive type walk with cycle detection ($ref / $defs for recursive types)
    - Stable, name-derived reference ids (identical output across runs)
    - Permissive and strict rendering (strict: every property required,
      additionalProperties false, applied through $defs)
    - Field and type descriptions via Annotated[..., Description(...)],
      pydantic Field(description=...) or the @description decorator

Quick Start:
    ```python
    from dataclasses import dataclass
    from schema_forge import json_schema_from

    @dataclass
    class User:
        name: str
        age: int

    json_schema_from(User, strict=True)
    # {"type": "object",
    #  "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
    #  "required": ["name", "age"],
    #  "additionalProperties": False}
    ```

Architecture:
    1. Introspection: classify types and enumerate their fields
    2. Builder: type -> schema node tree, with a visitation ledger for cycles
    3. Serializer: schema node tree -> JSON Schema map
"""

__version__ = "0.1.0"

from schema_forge.api import json_schema_from, response_format_for  # noqa: F401
from schema_forge.errors import (  # noqa: F401
    SchemaDepthError,
    SchemaForgeError,
    UnknownNodeKindError,
    UnresolvableTypeError,
)
from schema_forge.schema import (  # noqa: F401
    Description,
    SchemaBuilder,
    description,
    stable_reference_id,
    to_map,
)

__all__ = [
    "json_schema_from",
    "response_format_for",
    "SchemaBuilder",
    "to_map",
    "stable_reference_id",
    "Description",
    "description",
    "SchemaForgeError",
    "UnresolvableTypeError",
    "UnknownNodeKindError",
    "SchemaDepthError",
]
