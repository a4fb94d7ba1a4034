"""Conversion between scalar values and their XML text form."""

import re
from enum import Enum
from typing import Any

from .serialization import MalformedScalar, UnknownEnumConstant


class Char(str):
    """A string holding exactly one character."""

    __slots__ = ()

    def __new__(cls, value: str) -> "Char":
        if len(value) != 1:
            raise ValueError(f"Char requires exactly one character, got {value!r}")
        return super().__new__(cls, value)


SCALAR_TYPES: tuple[type, ...] = (bool, int, float, Char, str)

# ASCII decimal literals, plus the special values repr() gives floats
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?inf|nan")


def is_scalar_type(t: Any) -> bool:
    """Check if ``t`` is a scalar class the primitive codec converts."""
    return isinstance(t, type) and issubclass(t, SCALAR_TYPES)


def to_text(value: Any) -> str:
    """Format a scalar or enum value as element text."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def from_text(text: str | None, target: type) -> Any:
    """Parse element text into an instance of ``target``.

    Args:
        text: The element text; ``None`` is treated as empty.
        target: A scalar class or an ``Enum`` subclass.

    Raises:
        UnknownEnumConstant: ``target`` is an enum without a constant named ``text``.
        MalformedScalar: The text is not a valid literal for ``target``.
    """
    text = text or ""

    if issubclass(target, Enum):
        try:
            return target[text]
        except KeyError:
            raise UnknownEnumConstant(target.__qualname__, text) from None

    if issubclass(target, bool):
        lowered = text.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        raise MalformedScalar(f"{text!r} is not a boolean", type_name="bool")

    if issubclass(target, (int, float)):
        literal = text.strip()
        pattern = _INTEGER if issubclass(target, int) else _DECIMAL
        if not pattern.fullmatch(literal):
            raise MalformedScalar(
                f"{text!r} is not a valid {target.__name__}", type_name=target.__name__
            )
        return target(literal)

    if issubclass(target, Char):
        try:
            return target(text)
        except ValueError as exc:
            raise MalformedScalar(str(exc), type_name=target.__name__) from exc

    if issubclass(target, str):
        return target(text)

    raise MalformedScalar(f"{target.__qualname__} is not a scalar type", type_name=target.__qualname__)
