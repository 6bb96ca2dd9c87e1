"""
Schema builder - compiles Python types into a schema node tree.

The builder walks a type top-down, classifies each type expression into one of
the node kinds in schema_forge.schema.types and recurses into composite types.
Custom classes go through the object-or-reference procedure, which uses a
VisitationLedger to detect and break reference cycles.

Classification order (first match wins):
    1. string-like      -> StringNode
    2. integer-like     -> IntegerNode
    3. number-like      -> NumberNode
    4. boolean-like     -> BooleanNode
    5. enum             -> EnumNode
    6. fixed-size tuple -> ArrayNode
    7. collection       -> ArrayNode
    8. anything else    -> ObjectNode or ReferenceNode

Cycle handling:
    A custom type is registered in the ledger with a ReferenceNode placeholder
    before its fields are built. A field that reaches the same type while the
    placeholder is still in place resolves to the placeholder, and the type is
    flagged as recursive. Only recursive types end up in the root's $defs;
    everything else is inlined where it is used.

Usage:
    ```python
    from dataclasses import dataclass
    from schema_forge.schema import SchemaBuilder

    @dataclass
    class TreeNode:
        label: str
        children: list["TreeNode"]

    node = SchemaBuilder().build(TreeNode)
    # ObjectNode(properties={"label": StringNode(),
    #                        "children": ArrayNode(items=ReferenceNode(...))},
    #            definitions={"<ref id>": ObjectNode(...)})
    ```
"""

import hashlib
import logging
import uuid
from typing import Any, Dict, Optional

from schema_forge.errors import SchemaDepthError, UnresolvableTypeError
from schema_forge.schema import introspection
from schema_forge.schema.ledger import VisitationLedger
from schema_forge.schema.types import (
    ArrayNode,
    BooleanNode,
    EnumNode,
    IntegerNode,
    NumberNode,
    ObjectNode,
    ReferenceNode,
    SchemaNode,
    StringNode,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


def stable_reference_id(cls: Any) -> str:
    """
    Derive a deterministic reference id from a type's fully-qualified name.

    The id is a version 3 UUID built from the MD5 digest of the name, so the
    same type always gets the same id across builds and processes.

    Args:
        cls: Type to identify

    Returns:
        str: Reference id, e.g. "0c5c2a4e-5f1d-3b6a-9d4e-..."
    """
    digest = hashlib.md5(introspection.qualified_name(cls).encode("utf-8")).digest()
    return str(uuid.UUID(bytes=digest, version=3))


class SchemaBuilder:
    """
    Compiles Python types into schema node trees.

    The builder itself is stateless between calls; every build() gets a fresh
    VisitationLedger, so one builder can be reused freely.

    Attributes:
        max_depth: Maximum nesting depth before SchemaDepthError is raised
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self.max_depth = max_depth

    def build(self, tp: Any) -> SchemaNode:
        """
        Build the schema tree for a type.

        The returned root carries a ``definitions`` map for every type found
        to be recursive. Object roots and array roots can both hold one.

        Args:
            tp: Type expression (class, ``list[int]``, ``Annotated[...]``, ...)

        Returns:
            SchemaNode: Root of the schema tree

        Raises:
            UnresolvableTypeError: If an element or field type cannot be determined
            SchemaDepthError: If nesting exceeds max_depth
        """
        ledger = VisitationLedger()
        inner, text = introspection.unwrap(tp)
        cls = introspection.raw_class(inner)

        if self._is_object_type(cls):
            node = self.object_or_reference(cls, text, ledger, emit_definitions=True)
        else:
            node = self.element_from(tp, None, ledger)
            definitions = self._definitions(ledger)
            if definitions:
                # Recursive types only appear below arrays at a non-object root
                node = node.with_definitions(definitions)

        logger.info(
            f"Built {node.kind} schema for {introspection.qualified_name(cls)} "
            f"({len(ledger)} custom type(s) visited)"
        )
        return node

    def element_from(
        self,
        tp: Any,
        field_description: Optional[str],
        ledger: VisitationLedger,
        field_name: Optional[str] = None,
        owner: Optional[type] = None,
        depth: int = 0,
    ) -> SchemaNode:
        """
        Build the node for one type expression.

        The type expression carries its own generic arguments (``list[int]``),
        so no separate generic-type parameter is needed.

        Args:
            tp: Type expression
            field_description: Description of the field being built, if any
            ledger: Ledger of the current build
            field_name: Name of the field being built (for error messages)
            owner: Type declaring the field (for error messages)
            depth: Current nesting depth

        Returns:
            SchemaNode: Node for the type
        """
        if depth > self.max_depth:
            raise SchemaDepthError(self.max_depth, self._location(owner, field_name))

        try:
            tp, annotated_description = introspection.unwrap(tp)
        except UnresolvableTypeError as e:
            raise UnresolvableTypeError(str(e), field_name, owner) from e
        if field_description is None:
            field_description = annotated_description
        cls = introspection.raw_class(tp)

        if introspection.is_json_string(cls):
            return StringNode(description=self._with_fallback(field_description, cls))

        if introspection.is_json_integer(cls):
            return IntegerNode(description=field_description)

        if introspection.is_json_number(cls):
            return NumberNode(description=field_description)

        if introspection.is_json_boolean(cls):
            return BooleanNode(description=field_description)

        if introspection.is_enum(cls):
            return EnumNode(
                values=introspection.enum_values(cls),
                description=self._with_fallback(field_description, cls),
            )

        if introspection.is_fixed_array(cls):
            element = introspection.fixed_array_element(tp)
            if element is None:
                raise UnresolvableTypeError(
                    f"Cannot determine a single element type for {tp!r}", field_name, owner
                )
            items = self.element_from(element, None, ledger, field_name, owner, depth + 1)
            return ArrayNode(items=items, description=field_description)

        if introspection.is_collection(cls):
            element = introspection.collection_element(tp)
            if element is None:
                raise UnresolvableTypeError(
                    f"Cannot determine the element type of {tp!r}", field_name, owner
                )
            items = self.element_from(element, None, ledger, field_name, owner, depth + 1)
            return ArrayNode(items=items, description=field_description)

        if not self._is_object_type(cls):
            raise UnresolvableTypeError(f"Unsupported type expression {tp!r}", field_name, owner)

        return self.object_or_reference(cls, field_description, ledger, depth=depth)

    def object_or_reference(
        self,
        cls: type,
        description: Optional[str],
        ledger: VisitationLedger,
        emit_definitions: bool = False,
        depth: int = 0,
    ) -> SchemaNode:
        """
        Build an object node for a class, or reuse what the ledger holds for it.

        Args:
            cls: Class to build
            description: Explicit description (falls back to the type's own)
            ledger: Ledger of the current build
            emit_definitions: Attach $defs for recursive types (root call only)
            depth: Current nesting depth

        Returns:
            SchemaNode: ObjectNode, or ReferenceNode when the class is still
            under construction further up the stack
        """
        # Already visited: placeholder while under construction, object once done
        entry = ledger.get(cls)
        if entry is not None and introspection.is_custom_type(cls):
            current = ledger.node(entry)
            if isinstance(current, ReferenceNode):
                if not entry.recursion_detected:
                    logger.debug(f"Recursion detected for {introspection.qualified_name(cls)}")
                entry.recursion_detected = True
            return current

        # Register before recursing so fields pointing back here find the placeholder
        entry = ledger.register(cls, stable_reference_id(cls))

        properties: Dict[str, SchemaNode] = {}
        for schema_field in introspection.fields_of(cls):
            properties[schema_field.name] = self.element_from(
                schema_field.type,
                schema_field.description,
                ledger,
                field_name=schema_field.name,
                owner=cls,
                depth=depth + 1,
            )

        node = ObjectNode(
            properties=properties,
            required=tuple(properties),
            description=self._with_fallback(description, cls),
        )
        ledger.store(entry, node)

        # Only types seen again mid-construction need a definition
        if emit_definitions:
            definitions = self._definitions(ledger)
            if definitions:
                logger.debug(f"Emitting {len(definitions)} definition(s) for {introspection.qualified_name(cls)}")
                node = node.with_definitions(definitions)

        return node

    @staticmethod
    def _is_object_type(cls: Any) -> bool:
        return isinstance(cls, type) and not (
            introspection.is_json_string(cls)
            or introspection.is_json_integer(cls)
            or introspection.is_json_number(cls)
            or introspection.is_json_boolean(cls)
            or introspection.is_enum(cls)
            or introspection.is_fixed_array(cls)
            or introspection.is_collection(cls)
        )

    @staticmethod
    def _definitions(ledger: VisitationLedger) -> Dict[str, SchemaNode]:
        return {e.ref_id: ledger.node(e) for e in ledger.recursive_entries()}

    @staticmethod
    def _with_fallback(description: Optional[str], cls: Any) -> Optional[str]:
        return description if description is not None else introspection.type_description(cls)

    @staticmethod
    def _location(owner: Optional[type], field_name: Optional[str]) -> str:
        parts = [getattr(owner, "__qualname__", "<root>") if owner is not None else "<root>"]
        if field_name is not None:
            parts.append(field_name)
        return ".".join(parts)


def build_schema(tp: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> SchemaNode:
    """Build the schema tree for a type with a one-off SchemaBuilder."""
    return SchemaBuilder(max_depth=max_depth).build(tp)
