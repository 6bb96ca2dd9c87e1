"""
Schema compilation module.

This module turns Python types into a tree of schema nodes and renders that
tree as a JSON Schema map.

Components:
    - types: Schema node definitions (ObjectNode, ArrayNode, ReferenceNode, ...)
    - introspection: Type classification, field enumeration and descriptions
    - ledger: Per-build visitation ledger used to break reference cycles
    - builder: Type -> schema node tree
    - serializer: Schema node tree -> JSON Schema map (permissive or strict)

Example:
    ```python
    from dataclasses import dataclass
    from schema_forge.schema import SchemaBuilder, to_map

    @dataclass
    class User:
        name: str
        age: int

    node = SchemaBuilder().build(User)
    to_map(node)
    # {"type": "object",
    #  "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
    #  "required": ["name", "age"]}
    ```
"""

from schema_forge.schema.builder import SchemaBuilder, build_schema, stable_reference_id
from schema_forge.schema.introspection import (
    Description,
    SchemaField,
    description,
    fields_of,
    register_schema_fields,
    schema_fields,
)
from schema_forge.schema.ledger import LedgerEntry, VisitationLedger
from schema_forge.schema.serializer import properties_to_map, to_map
from schema_forge.schema.types import (
    AnyOfNode,
    ArrayNode,
    BooleanNode,
    CustomNode,
    EnumNode,
    IntegerNode,
    NumberNode,
    ObjectNode,
    ReferenceNode,
    SchemaNode,
    StringNode,
)

__all__ = [
    "SchemaBuilder",
    "build_schema",
    "stable_reference_id",
    "Description",
    "SchemaField",
    "description",
    "fields_of",
    "register_schema_fields",
    "schema_fields",
    "LedgerEntry",
    "VisitationLedger",
    "properties_to_map",
    "to_map",
    "AnyOfNode",
    "ArrayNode",
    "BooleanNode",
    "CustomNode",
    "EnumNode",
    "IntegerNode",
    "NumberNode",
    "ObjectNode",
    "ReferenceNode",
    "SchemaNode",
    "StringNode",
]
