"""
Type introspection for the schema builder.

The builder never looks at classes directly. It asks this module three kinds of
questions:

    - Classification: is this type string-like, integer-like, an enum, a
      collection, a custom class, ...?
    - Structure: which (name, type, description) fields does a custom type
      declare?
    - Descriptions: does a type or field carry a human-readable description?

Field enumeration sources (first match wins):
    1. Explicit registration via register_schema_fields() / @schema_fields
    2. pydantic BaseModel.model_fields
    3. dataclasses.fields()
    4. Resolved class annotations (NamedTuple, TypedDict, plain classes)

Usage:
    ```python
    from dataclasses import dataclass
    from typing import Annotated
    from schema_forge.schema.introspection import Description, description, fields_of

    @description("A person known to the system")
    @dataclass
    class Person:
        name: Annotated[str, Description("Full name")]
        age: int

    fields_of(Person)
    # [SchemaField(name='name', type=str, description='Full name'),
    #  SchemaField(name='age', type=int, description=None)]
    ```
"""

import collections
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import sys
import types
import typing
import uuid
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel

from schema_forge.errors import UnresolvableTypeError

DEFAULT_UUID_DESCRIPTION = "String in a UUID format"

STRING_TYPES = (str, uuid.UUID, datetime.date, datetime.datetime, datetime.time)
NUMBER_TYPES = (float, decimal.Decimal)
COLLECTION_TYPES = (
    list,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

_NONE_TYPE = type(None)
_UNION_ORIGINS = (Union, types.UnionType)

_TYPE_DESCRIPTIONS: "weakref.WeakKeyDictionary[type, str]" = weakref.WeakKeyDictionary()
_REGISTERED_FIELDS: "weakref.WeakKeyDictionary[type, Tuple[SchemaField, ...]]" = weakref.WeakKeyDictionary()


class Description:
    """
    Field description marker for ``typing.Annotated``.

    Multiple parts are joined with single spaces, so long descriptions can be
    split across lines:

        note: Annotated[str, Description("Free-form note.", "Keep it short.")]
    """

    def __init__(self, *parts: str):
        self.text = " ".join(parts)

    def __repr__(self) -> str:
        return f"Description({self.text!r})"


@dataclass(frozen=True)
class SchemaField:
    """
    One declared data member of a custom type.

    Attributes:
        name: Property name emitted in the schema
        type: Type expression of the member (may be Annotated/Optional/generic)
        description: Field-level description, if any
    """

    name: str
    type: Any
    description: Optional[str] = None


def description(*parts: str) -> Callable[[type], type]:
    """
    Class decorator attaching a type-level description.

    Args:
        *parts: Description text; parts are joined with single spaces

    Returns:
        Decorator returning the class unchanged
    """
    text = " ".join(parts)

    def decorate(cls: type) -> type:
        _TYPE_DESCRIPTIONS[cls] = text
        return cls

    return decorate


def register_schema_fields(cls: type, fields: Iterable[Union[SchemaField, Tuple[Any, ...]]]) -> None:
    """
    Register an explicit field list for a type, bypassing introspection.

    Args:
        cls: Type being described
        fields: SchemaField instances or (name, type[, description]) tuples,
            in the order they should appear in the schema
    """
    normalized = []
    for entry in fields:
        if not isinstance(entry, SchemaField):
            entry = SchemaField(*entry)
        normalized.append(entry)
    _REGISTERED_FIELDS[cls] = tuple(normalized)


def schema_fields(*fields: Union[SchemaField, Tuple[Any, ...]]) -> Callable[[type], type]:
    """Class decorator form of register_schema_fields()."""

    def decorate(cls: type) -> type:
        register_schema_fields(cls, fields)
        return cls

    return decorate


def type_description(cls: Any) -> Optional[str]:
    """Return the type-level description of a class, or None."""
    if cls is uuid.UUID:
        return DEFAULT_UUID_DESCRIPTION
    try:
        return _TYPE_DESCRIPTIONS.get(cls)
    except TypeError:
        # Not weak-referenceable (typing constructs, builtins instances)
        return None


def unwrap(tp: Any) -> Tuple[Any, Optional[str]]:
    """
    Strip ``Annotated`` and ``Optional`` wrappers from a type expression.

    Args:
        tp: Type expression

    Returns:
        Tuple of (inner type, Description text found in Annotated metadata)

    Raises:
        UnresolvableTypeError: For unions other than Optional[T], and for
            ``typing.Any`` or ``object``, which place no constraint on values
    """
    found = None
    while True:
        origin = typing.get_origin(tp)
        if origin is typing.Annotated:
            inner, *metadata = typing.get_args(tp)
            for item in metadata:
                if isinstance(item, Description) and found is None:
                    found = item.text
            tp = inner
        elif origin in _UNION_ORIGINS:
            members = [arg for arg in typing.get_args(tp) if arg is not _NONE_TYPE]
            if len(members) != 1:
                raise UnresolvableTypeError(f"Union types are not supported: {tp!r}")
            tp = members[0]
        elif tp is typing.Any or tp is object:
            raise UnresolvableTypeError(f"Unconstrained type {tp!r} has no schema")
        else:
            return tp, found


def raw_class(tp: Any) -> Any:
    """Return the runtime class behind a (possibly parametrized) type."""
    origin = typing.get_origin(tp)
    return origin if origin is not None else tp


def _is_plain_subclass(cls: Any, bases: Tuple[type, ...]) -> bool:
    return isinstance(cls, type) and issubclass(cls, bases) and not issubclass(cls, enum.Enum)


def is_json_string(cls: Any) -> bool:
    return _is_plain_subclass(cls, STRING_TYPES)


def is_json_integer(cls: Any) -> bool:
    # bool subclasses int
    return _is_plain_subclass(cls, (int,)) and not issubclass(cls, bool)


def is_json_number(cls: Any) -> bool:
    return _is_plain_subclass(cls, NUMBER_TYPES)


def is_json_boolean(cls: Any) -> bool:
    return _is_plain_subclass(cls, (bool,))


def is_enum(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, enum.Enum)


def is_fixed_array(cls: Any) -> bool:
    # NamedTuple subclasses tuple but is a record, not an array
    return cls is tuple


def is_collection(cls: Any) -> bool:
    if not isinstance(cls, type) or cls in (str, bytes, bytearray):
        return False
    return cls in COLLECTION_TYPES or issubclass(cls, (list, set, frozenset, collections.deque))


def is_custom_type(cls: Any) -> bool:
    """
    Check whether a class is eligible for recursive decomposition.

    A class is custom unless it lives in ``builtins`` or in a standard-library
    module.
    """
    if not isinstance(cls, type):
        return False
    top_level = (cls.__module__ or "").split(".")[0]
    return top_level != "builtins" and top_level not in sys.stdlib_module_names


def enum_values(cls: type) -> List[str]:
    """Member names of an enum, in declaration order (aliases excluded)."""
    return [member.name for member in cls]


def fixed_array_element(tp: Any) -> Optional[Any]:
    """
    Element type of ``tuple[T, ...]`` or homogeneous ``tuple[T, T, T]``.

    Returns:
        The element type, or None if it cannot be determined
    """
    args = typing.get_args(tp)
    if len(args) == 2 and args[1] is Ellipsis:
        return args[0]
    if args and all(arg == args[0] for arg in args):
        return args[0]
    return None


def collection_element(tp: Any) -> Optional[Any]:
    """Single generic argument of a collection type, or None."""
    args = typing.get_args(tp)
    if len(args) == 1:
        return args[0]
    return None


def qualified_name(cls: Any) -> str:
    """Fully-qualified ``module.QualName`` of a class."""
    module = getattr(cls, "__module__", None) or ""
    name = getattr(cls, "__qualname__", None) or getattr(cls, "__name__", None) or repr(cls)
    return f"{module}.{name}" if module else name


def _resolved_hints(cls: type) -> dict:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise UnresolvableTypeError(f"Cannot resolve forward reference: {e}", owner=cls) from e


def _is_storage_member(name: str, tp: Any) -> bool:
    if name.startswith("__"):
        return False
    if isinstance(tp, dataclasses.InitVar) or tp is dataclasses.InitVar:
        return False
    bare = typing.get_args(tp)[0] if typing.get_origin(tp) is typing.Annotated else tp
    return bare is not typing.ClassVar and typing.get_origin(bare) is not typing.ClassVar


def fields_of(cls: type) -> List[SchemaField]:
    """
    Enumerate the data members of a custom type in declaration order.

    Args:
        cls: Class to inspect

    Returns:
        List[SchemaField]: One entry per per-instance data member

    Raises:
        UnresolvableTypeError: If an annotation cannot be resolved
    """
    registered = _REGISTERED_FIELDS.get(cls) if isinstance(cls, type) else None
    if registered is not None:
        return list(registered)

    if isinstance(cls, type) and issubclass(cls, BaseModel):
        result = []
        for name, info in cls.model_fields.items():
            text = info.description
            if text is None:
                text = next((m.text for m in info.metadata if isinstance(m, Description)), None)
            result.append(SchemaField(info.alias or name, info.annotation, text))
        return result

    if dataclasses.is_dataclass(cls):
        hints = _resolved_hints(cls)
        return [
            SchemaField(f.name, hints.get(f.name, f.type), f.metadata.get("description"))
            for f in dataclasses.fields(cls)
        ]

    hints = _resolved_hints(cls) if isinstance(cls, type) else {}
    return [SchemaField(name, tp) for name, tp in hints.items() if _is_storage_member(name, tp)]
