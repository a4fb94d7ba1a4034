"""Runtime type descriptors for objxml serialization.

These dataclasses describe the structure of serializable types at runtime,
used by the reader and writer to walk an object graph.
"""

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from .serialization import ConstructorArg, FieldNotFound

__all__ = [
    "ArgProvider",
    "ConstructorDescriptor",
    "FieldDescriptor",
    "Kind",
    "TypeDescriptor",
    "TypeMetadata",
]


class Kind(StrEnum):
    """Encoding strategy for a type."""

    NULL = auto()
    SCALAR = auto()
    ENUM = auto()
    ARRAY = auto()
    SEQUENCE = auto()
    MAP = auto()
    COMPOSITE = auto()


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Classification of a type hint or runtime value.

    ``type`` is the class to instantiate (scalar, enum, container or
    composite class) and ``args`` holds element type hints for containers.
    """

    kind: Kind
    type: Any = None
    args: tuple[Any, ...] = ()
    nullable: bool = False


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Describes a serialized field of a composite type."""

    name: str
    type_hint: Any
    required: bool
    owner: type


@dataclass(frozen=True, slots=True)
class ConstructorDescriptor:
    """Describes one way of constructing a composite type.

    ``name`` is ``"__init__"`` for the class call itself, otherwise the name
    of an alternative constructor. ``annotated`` is False when the callable
    has parameters that no ``ConstructorArg`` covers.
    """

    name: str
    parameters: tuple[ConstructorArg, ...]
    annotated: bool = True

    @property
    def is_default(self) -> bool:
        return self.name == "__init__" and self.annotated and not self.parameters


@dataclass(frozen=True, slots=True)
class ArgProvider:
    """Describes a member whose value is written as a constructor attribute."""

    name: str
    type: type
    member: str
    is_property: bool
    owner: type


@dataclass(frozen=True, slots=True)
class TypeMetadata:
    """Everything the codec knows about a composite type."""

    type: type
    fields: tuple[FieldDescriptor, ...]
    constructors: tuple[ConstructorDescriptor, ...]
    providers: tuple[ArgProvider, ...]

    def find_field(self, name: str) -> FieldDescriptor:
        """Look up an effective field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        raise FieldNotFound(self.type.__qualname__, name)
