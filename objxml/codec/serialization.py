"""Serialization metadata markers and errors for objxml types."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

__all__ = [
    "ConstructorArg",
    "FieldNotFound",
    "MalformedScalar",
    "MalformedStream",
    "NoSuitableConstructor",
    "RequiredFieldMissing",
    "SerializationError",
    "TypeConstructionFailure",
    "UnknownEnumConstant",
    "XmlFieldInfo",
    "constructor",
    "constructor_arg",
    "xml_field",
]

METADATA_KEY = "objxml"

_CONSTRUCTOR_ATTR = "__objxml_constructor__"
_PROVIDER_ATTR = "__objxml_constructor_arg__"


class SerializationError(RuntimeError):
    """Raised when serialization or deserialization fails.

    Every failure raised by the codec is a subclass of this error. The
    underlying cause, if any, is chained as ``__cause__``.
    """

    kind = "SerializationError"

    def __init__(
        self,
        message: str,
        *,
        type_name: str | None = None,
        field_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.field_name = field_name


class RequiredFieldMissing(SerializationError):
    """Raised when a required field holds no value."""

    kind = "RequiredFieldMissing"

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(
            f"{type_name}.{field_name} is required but has no value",
            type_name=type_name,
            field_name=field_name,
        )


class FieldNotFound(SerializationError):
    """Raised when an element names a field the target type does not declare."""

    kind = "FieldNotFound"

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(
            f"No field '{field_name}' found in class {type_name}",
            type_name=type_name,
            field_name=field_name,
        )


class NoSuitableConstructor(SerializationError):
    """Raised when no constructor matches the attributes of an element."""

    kind = "NoSuitableConstructor"

    def __init__(self, type_name: str, attributes: list[str]) -> None:
        super().__init__(
            f"Could not find suitable constructor for class {type_name} "
            f"(attributes: {', '.join(attributes) or 'none'})",
            type_name=type_name,
        )


class UnknownEnumConstant(SerializationError):
    """Raised when enum text matches no constant name."""

    kind = "UnknownEnumConstant"

    def __init__(self, type_name: str, text: str) -> None:
        super().__init__(f"{text!r} is not a constant of {type_name}", type_name=type_name)


class MalformedScalar(SerializationError):
    """Raised when scalar text cannot be converted to its declared type."""

    kind = "MalformedScalar"


class MalformedStream(SerializationError):
    """Raised when the XML is not well formed or has an unexpected shape."""

    kind = "MalformedStream"


class TypeConstructionFailure(SerializationError):
    """Raised when a target type cannot be instantiated or assigned."""

    kind = "TypeConstructionFailure"


@dataclass(frozen=True)
class XmlFieldInfo:
    """Metadata for a serialized dataclass field."""

    optional: bool = False


@dataclass(frozen=True)
class ConstructorArg:
    """A named, scalar-typed constructor argument carried as an XML attribute."""

    name: str
    type: type = str


# Sentinel for missing default
_MISSING: Any = object()


def xml_field(
    *,
    optional: bool = False,
    default: Any = _MISSING,
    default_factory: Any = _MISSING,
) -> Any:
    """Define a serialized field.

    Args:
        optional: Whether the field may hold ``None`` when written.
        default: Default value for the field.
        default_factory: Factory function for default value.

    Returns:
        A dataclass field with objxml metadata attached.
    """
    metadata = {METADATA_KEY: XmlFieldInfo(optional)}

    if default is not _MISSING:
        return field(default=default, metadata=metadata)
    if default_factory is not _MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(metadata=metadata)


F = TypeVar("F")


def constructor(*args: ConstructorArg, **kwargs: type) -> Callable[[F], F]:
    """Mark ``__init__`` or an alternative constructor as attribute-driven.

    Arguments bind, in order, to the leading positional parameters of the
    decorated callable. Keyword shorthand ``name=type`` is equivalent to
    ``ConstructorArg("name", type)``.

    Example:
        @dataclass
        class Person:
            name: str = xml_field(default="")
            age: int = xml_field(default=0)

            @constructor(name=str, age=int)
            @classmethod
            def of(cls, name: str, age: int) -> "Person":
                return cls(name, age)
    """
    params = tuple(args) + tuple(ConstructorArg(name, t) for name, t in kwargs.items())

    def decorate(target: F) -> F:
        func = target.__func__ if isinstance(target, (classmethod, staticmethod)) else target
        setattr(func, _CONSTRUCTOR_ATTR, params)
        return target

    return decorate


def constructor_arg(name: str, type: type = str) -> Callable[[F], F]:
    """Mark a zero-argument method or property as the writer of an attribute.

    The returned value is written as attribute ``name`` so that the reader can
    pass it back to a constructor declaring ``ConstructorArg(name, type)``.
    Apply it beneath ``@property``.
    """

    def decorate(target: F) -> F:
        func = target.fget if isinstance(target, property) else target
        setattr(func, _PROVIDER_ATTR, ConstructorArg(name, type))
        return target

    return decorate


def constructor_params(func: Any) -> tuple[ConstructorArg, ...] | None:
    """Return the constructor arguments attached to ``func``, if any."""
    return getattr(func, _CONSTRUCTOR_ATTR, None)


def provider_arg(func: Any) -> ConstructorArg | None:
    """Return the attribute a provider function writes, if any."""
    return getattr(func, _PROVIDER_ATTR, None)
