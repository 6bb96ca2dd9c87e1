"""
Schema serializer - renders a schema node tree as a JSON Schema map.

The output is built from plain dicts and lists (insertion ordered), ready for
``json.dumps`` or for embedding as the ``parameters``/``schema`` field of a
tool-calling or structured-output request.

Strict Mode:
    Some model-serving APIs require every property to be listed in
    ``required`` and unknown properties to be forbidden. With ``strict=True``:
        - ``required`` lists every property, whatever the node says
        - ``additionalProperties: false`` is added to every object
    The flag propagates into nested objects, arrays, anyOf alternatives and
    ``$defs``. Custom nodes are emitted verbatim and are not affected.

Usage:
    ```python
    from schema_forge.schema import SchemaBuilder, to_map

    node = SchemaBuilder().build(Person)
    to_map(node)               # permissive
    to_map(node, strict=True)  # strict
    ```
"""

from typing import Any, Dict, List, Mapping, Optional

from schema_forge.errors import UnknownNodeKindError
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

REFERENCE_PREFIX = "#/$defs/"

_PRIMITIVE_TYPE_NAMES = {
    StringNode: "string",
    IntegerNode: "integer",
    NumberNode: "number",
    BooleanNode: "boolean",
}


def properties_to_map(properties: Mapping[str, SchemaNode], strict: bool = False) -> Dict[str, Dict[str, Any]]:
    """
    Serialize an ordered mapping of named nodes.

    Args:
        properties: Mapping of name to node
        strict: Strict mode flag, propagated to every node

    Returns:
        Dict mapping each name to its rendered schema, in the same order
    """
    return {name: to_map(node, strict) for name, node in properties.items()}


def to_map(node: SchemaNode, strict: bool = False) -> Dict[str, Any]:
    """
    Serialize a schema node (and its subtree) to a JSON Schema map.

    Args:
        node: Node to render
        strict: Force all properties required and forbid additional properties

    Returns:
        Dict[str, Any]: Rendered schema with keys in canonical order

    Raises:
        UnknownNodeKindError: If the node is not a known schema variant

    Example:
        ```python
        to_map(ArrayNode(items=IntegerNode()))
        # {"type": "array", "items": {"type": "integer"}}
        ```
    """
    if isinstance(node, ObjectNode):
        return _object_to_map(node, strict)

    elif isinstance(node, ArrayNode):
        rendered: Dict[str, Any] = {"type": "array"}
        _put_description(rendered, node.description)
        rendered["items"] = to_map(node.items, strict)
        if node.definitions:
            rendered["$defs"] = properties_to_map(node.definitions, strict)
        return rendered

    elif isinstance(node, EnumNode):
        rendered = {"type": "string"}
        _put_description(rendered, node.description)
        rendered["enum"] = list(node.values)
        return rendered

    elif type(node) in _PRIMITIVE_TYPE_NAMES:
        rendered = {"type": _PRIMITIVE_TYPE_NAMES[type(node)]}
        _put_description(rendered, node.description)
        return rendered

    elif isinstance(node, ReferenceNode):
        rendered = {}
        if node.ref_id is not None:
            rendered["$ref"] = REFERENCE_PREFIX + node.ref_id
        return rendered

    elif isinstance(node, AnyOfNode):
        rendered = {}
        _put_description(rendered, node.description)
        rendered["anyOf"] = [to_map(alternative, strict) for alternative in node.alternatives]
        return rendered

    elif isinstance(node, CustomNode):
        return node.to_map()

    else:
        raise UnknownNodeKindError(node)


def _object_to_map(node: ObjectNode, strict: bool) -> Dict[str, Any]:
    rendered: Dict[str, Any] = {"type": "object"}
    _put_description(rendered, node.description)
    rendered["properties"] = properties_to_map(node.properties, strict)

    required: Optional[List[str]]
    if strict:
        required = list(node.properties)
    else:
        required = list(node.required) if node.required is not None else None
    if required is not None:
        rendered["required"] = required

    if strict:
        rendered["additionalProperties"] = False

    if node.definitions:
        rendered["$defs"] = properties_to_map(node.definitions, strict)

    return rendered


def _put_description(rendered: Dict[str, Any], description: Optional[str]) -> None:
    if description is not None:
        rendered["description"] = description
