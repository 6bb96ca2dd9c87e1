"""
Error taxonomy for schema compilation.

All errors raised by schema_forge derive from SchemaForgeError, which itself is
a ValueError so callers that already guard schema handling with
``except ValueError`` keep working.

Hierarchy:
    SchemaForgeError (ValueError)
    ├── UnresolvableTypeError: element/generic type cannot be determined
    ├── UnknownNodeKindError: serializer met a node variant it does not know
    ├── SchemaDepthError: type nesting exceeded the configured depth limit
    └── TargetImportError: CLI target "module:QualName" could not be imported
"""

from typing import Any, Optional


class SchemaForgeError(ValueError):
    """Base class for every schema_forge failure."""


class UnresolvableTypeError(SchemaForgeError):
    """
    Raised when the builder cannot determine a type it needs to recurse into.

    Typical causes are an unparametrized collection (``list`` instead of
    ``list[int]``), a heterogeneous tuple, a non-optional ``Union``, ``Any`` or ``object``,
    or a forward reference that does not resolve.

    Attributes:
        field_name: Name of the offending field, if known
        owner: Type declaring the offending field, if known
    """

    def __init__(self, message: str, field_name: Optional[str] = None, owner: Optional[type] = None):
        self.field_name = field_name
        self.owner = owner

        location = []
        if owner is not None:
            location.append(getattr(owner, "__qualname__", repr(owner)))
        if field_name is not None:
            location.append(field_name)

        if location:
            message = f"{message} (at {'.'.join(location)})"
        super().__init__(message)


class UnknownNodeKindError(SchemaForgeError):
    """Raised by the serializer for a node that is not a known schema variant."""

    def __init__(self, node: Any):
        self.node = node
        super().__init__(f"Unknown schema node kind: {type(node).__name__}")


class SchemaDepthError(SchemaForgeError):
    """Raised when a type graph nests deeper than the builder's max_depth."""

    def __init__(self, max_depth: int, path: str):
        self.max_depth = max_depth
        self.path = path
        super().__init__(f"Schema nesting exceeds max_depth={max_depth} at {path}")


class TargetImportError(SchemaForgeError):
    """Raised when a ``module:QualName`` target cannot be imported."""
