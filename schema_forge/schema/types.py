"""
Schema node definitions.

This module defines the tagged union of schema nodes produced by the builder and
consumed by the serializer. Every node is an immutable value: containers are
frozen into tuples and read-only mappings when the node is created, so a tree
handed out by the builder cannot be changed behind its back.

Type Hierarchy:
    SchemaNode (abstract)
    ├── StringNode: JSON string
    ├── IntegerNode: JSON integer
    ├── NumberNode: JSON number (float/decimal)
    ├── BooleanNode: JSON boolean
    ├── EnumNode: JSON string restricted to a fixed list of values
    ├── ArrayNode: JSON array with a single item schema and optional $defs
    ├── ObjectNode: JSON object with ordered properties and optional $defs
    ├── ReferenceNode: $ref placeholder for an object defined in $defs
    ├── AnyOfNode: union of alternatives (never emitted by the builder)
    └── CustomNode: pre-rendered map, emitted verbatim

Each node knows:
    - its variant name (``kind``), used in logs and error messages
    - its direct child nodes, for generic tree walks
"""

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterator, Mapping, Optional, Sequence, Tuple


def _frozen_mapping(value: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    """Copy a mapping into a read-only, insertion-ordered view."""
    if value is None:
        return None
    return MappingProxyType(dict(value))


@dataclass(frozen=True)
class SchemaNode(ABC):
    """
    Abstract base class for all schema nodes.

    Subclasses are frozen dataclasses; use ``dataclasses.replace`` (or the
    helpers on each node) to derive modified copies.
    """

    kind: ClassVar[str] = "abstract"

    @abstractmethod
    def children(self) -> Tuple["SchemaNode", ...]:
        """
        Return the direct child nodes of this node.

        Returns:
            Tuple[SchemaNode, ...]: Child nodes in serialization order. Leaf
            nodes return an empty tuple.
        """
        pass

    def walk(self) -> Iterator["SchemaNode"]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()


@dataclass(frozen=True)
class StringNode(SchemaNode):
    """JSON string. ``{"type": "string"}``"""

    description: Optional[str] = None
    kind: ClassVar[str] = "string"

    def children(self) -> Tuple[SchemaNode, ...]:
        return ()


@dataclass(frozen=True)
class IntegerNode(SchemaNode):
    """JSON integer. ``{"type": "integer"}``"""

    description: Optional[str] = None
    kind: ClassVar[str] = "integer"

    def children(self) -> Tuple[SchemaNode, ...]:
        return ()


@dataclass(frozen=True)
class NumberNode(SchemaNode):
    """JSON number. ``{"type": "number"}``"""

    description: Optional[str] = None
    kind: ClassVar[str] = "number"

    def children(self) -> Tuple[SchemaNode, ...]:
        return ()


@dataclass(frozen=True)
class BooleanNode(SchemaNode):
    """JSON boolean. ``{"type": "boolean"}``"""

    description: Optional[str] = None
    kind: ClassVar[str] = "boolean"

    def children(self) -> Tuple[SchemaNode, ...]:
        return ()


@dataclass(frozen=True)
class EnumNode(SchemaNode):
    """
    JSON string restricted to a list of values.

    Example JSON Schema:
        {"type": "string", "enum": ["RED", "GREEN", "BLUE"]}

    Attributes:
        values: Allowed values, in declaration order
        description: Optional description
    """

    values: Tuple[str, ...] = ()
    description: Optional[str] = None
    kind: ClassVar[str] = "enum"

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def children(self) -> Tuple[SchemaNode, ...]:
        return ()


@dataclass(frozen=True)
class ArrayNode(SchemaNode):
    """
    JSON array whose items all share one schema.

    Example JSON Schema:
        {"type": "array", "items": {"type": "integer"}}

    Attributes:
        items: Schema of every array item
        description: Optional description
        definitions: Ordered mapping of reference id to schema, rendered as
            ``$defs`` when the array is the root of a build
    """

    items: SchemaNode
    description: Optional[str] = None
    definitions: Optional[Mapping[str, SchemaNode]] = None
    kind: ClassVar[str] = "array"

    def __post_init__(self) -> None:
        object.__setattr__(self, "definitions", _frozen_mapping(self.definitions))

    def children(self) -> Tuple[SchemaNode, ...]:
        nodes: Tuple[SchemaNode, ...] = (self.items,)
        if self.definitions:
            nodes += tuple(self.definitions.values())
        return nodes

    def with_definitions(self, definitions: Mapping[str, SchemaNode]) -> "ArrayNode":
        """Return a copy of this array carrying the given definitions."""
        return replace(self, definitions=definitions)


@dataclass(frozen=True)
class ObjectNode(SchemaNode):
    """
    JSON object with ordered properties.

    Example JSON Schema:
        {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "age": {"type": "integer"}
            },
            "required": ["name", "age"]
        }

    Attributes:
        properties: Ordered mapping of property name to schema
        required: Required property names (None = not stated)
        description: Optional description
        definitions: Ordered mapping of reference id to schema, rendered as
            ``$defs``. Only the root node of a build carries definitions.
    """

    properties: Mapping[str, SchemaNode] = field(default_factory=dict)
    required: Optional[Tuple[str, ...]] = None
    description: Optional[str] = None
    definitions: Optional[Mapping[str, SchemaNode]] = None
    kind: ClassVar[str] = "object"

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", _frozen_mapping(self.properties))
        object.__setattr__(self, "definitions", _frozen_mapping(self.definitions))
        if self.required is not None:
            object.__setattr__(self, "required", tuple(self.required))

    def children(self) -> Tuple[SchemaNode, ...]:
        nodes = tuple(self.properties.values())
        if self.definitions:
            nodes += tuple(self.definitions.values())
        return nodes

    def with_definitions(self, definitions: Mapping[str, SchemaNode]) -> "ObjectNode":
        """
        Return a copy of this object carrying the given definitions.

        Args:
            definitions: Mapping of reference id to schema node

        Returns:
            ObjectNode: New node; this node is left untouched
        """
        return replace(self, definitions=definitions)


@dataclass(frozen=True)
class ReferenceNode(SchemaNode):
    """
    Placeholder for an object schema defined elsewhere, resolved via ``$defs``.

    Attributes:
        ref_id: Reference identifier (the key in ``$defs``)
    """

    ref_id: Optional[str] = None
    kind: ClassVar[str] = "reference"

    def children(self) -> Tuple[SchemaNode, ...]:
        return ()


@dataclass(frozen=True)
class AnyOfNode(SchemaNode):
    """
    Union of alternative schemas (``anyOf``).

    Example JSON Schema:
        {"anyOf": [{"type": "string"}, {"type": "integer"}]}

    Attributes:
        alternatives: Candidate schemas
        description: Optional description
    """

    alternatives: Sequence[SchemaNode] = ()
    description: Optional[str] = None
    kind: ClassVar[str] = "any_of"

    def __post_init__(self) -> None:
        object.__setattr__(self, "alternatives", tuple(self.alternatives))

    def children(self) -> Tuple[SchemaNode, ...]:
        return tuple(self.alternatives)


@dataclass(frozen=True)
class CustomNode(SchemaNode):
    """
    Pre-rendered schema fragment, emitted as-is by the serializer.

    Used by extension points that already hold a JSON Schema dict (for example
    a hand-written ``{"type": "string", "format": "email"}``).

    Attributes:
        rendered: The JSON Schema map to emit
    """

    rendered: Mapping[str, Any] = field(default_factory=dict)
    kind: ClassVar[str] = "custom"

    def __post_init__(self) -> None:
        object.__setattr__(self, "rendered", _frozen_mapping(copy.deepcopy(dict(self.rendered))))

    def children(self) -> Tuple[SchemaNode, ...]:
        return ()

    def to_map(self) -> Dict[str, Any]:
        """Return a fresh, mutable copy of the rendered map."""
        return copy.deepcopy(dict(self.rendered))
