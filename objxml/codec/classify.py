"""Classification of type hints and runtime values into encoding strategies."""

import collections.abc as abc
import inspect
import types
from enum import Enum
from typing import Annotated, Any, Union, get_args, get_origin

from .primitives import is_scalar_type
from .serialization import TypeConstructionFailure
from .types import Kind, TypeDescriptor

_NONE_TYPE = type(None)


def describe(hint: Any) -> TypeDescriptor:
    """Classify a declared type hint.

    Raises:
        TypeConstructionFailure: The hint cannot be decoded (``Any``, a union
            of several types, a heterogeneous tuple).
    """
    if hint is None or hint is _NONE_TYPE:
        return TypeDescriptor(Kind.NULL)

    origin = get_origin(hint)

    if origin is Annotated:
        return describe(get_args(hint)[0])

    if origin is Union or origin is types.UnionType:
        members = [a for a in get_args(hint) if a is not _NONE_TYPE]
        if len(members) != 1:
            raise TypeConstructionFailure(f"Cannot decode ambiguous union {hint!r}")
        inner = describe(members[0])
        return TypeDescriptor(inner.kind, inner.type, inner.args, nullable=True)

    cls = origin if origin is not None else hint
    if hint is Any or not isinstance(cls, type) or cls is object:
        raise TypeConstructionFailure(f"Cannot decode values of type {hint!r}")

    args = get_args(hint)

    if issubclass(cls, Enum):
        return TypeDescriptor(Kind.ENUM, cls)
    if is_scalar_type(cls):
        return TypeDescriptor(Kind.SCALAR, cls)
    if issubclass(cls, (bytes, bytearray)):
        raise TypeConstructionFailure(f"Cannot decode values of type {hint!r}")

    if issubclass(cls, tuple):
        if not args:
            return TypeDescriptor(Kind.ARRAY, tuple, (Any,))
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeDescriptor(Kind.ARRAY, tuple, (args[0],))
        raise TypeConstructionFailure(f"Only homogeneous tuples are supported, got {hint!r}")

    if issubclass(cls, abc.Mapping):
        key, value = args if len(args) == 2 else (Any, Any)
        return TypeDescriptor(Kind.MAP, dict if inspect.isabstract(cls) else cls, (key, value))

    if issubclass(cls, abc.Collection) or cls is abc.Iterable:
        element = args[0] if args else Any
        if inspect.isabstract(cls):
            cls = set if issubclass(cls, abc.Set) else list
        return TypeDescriptor(Kind.SEQUENCE, cls, (element,))

    return TypeDescriptor(Kind.COMPOSITE, cls)


def describe_value(value: Any) -> TypeDescriptor:
    """Classify a runtime value for writing."""
    if value is None:
        return TypeDescriptor(Kind.NULL)
    if isinstance(value, Enum):
        return TypeDescriptor(Kind.ENUM, type(value))
    if is_scalar_type(type(value)):
        return TypeDescriptor(Kind.SCALAR, type(value))
    if isinstance(value, tuple):
        return TypeDescriptor(Kind.ARRAY, tuple)
    if isinstance(value, abc.Mapping):
        return TypeDescriptor(Kind.MAP, type(value))
    if isinstance(value, (abc.Sequence, abc.Set)) and not isinstance(value, (bytes, bytearray)):
        return TypeDescriptor(Kind.SEQUENCE, type(value))
    return TypeDescriptor(Kind.COMPOSITE, type(value))
