"""Type expression parser using Lark.

Turns strings such as ``dict[str, list[myapp.models:Widget]]`` into type
hints the codec can decode against.
"""

import collections
import collections.abc as abc
import importlib
import os
from functools import reduce
from typing import Any, Union

from lark import Lark
from lark.exceptions import LarkError, VisitError
from lark.visitors import Transformer

from .codec.primitives import Char

_g_parser: Lark | None = None

BUILTIN_NAMES: dict[str, Any] = {
    "None": None,
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
    "char": Char,
    "list": list,
    "dict": dict,
    "set": set,
    "frozenset": frozenset,
    "tuple": tuple,
    "deque": collections.deque,
    "OrderedDict": collections.OrderedDict,
    "Collection": abc.Collection,
    "Iterable": abc.Iterable,
    "Sequence": abc.Sequence,
    "MutableSequence": abc.MutableSequence,
    "Set": abc.Set,
    "MutableSet": abc.MutableSet,
    "Mapping": abc.Mapping,
    "MutableMapping": abc.MutableMapping,
}


class TypeExpressionError(ValueError):
    """Raised when a type expression cannot be parsed or resolved."""


def _import_object(module_name: str, qualname: str) -> Any:
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise TypeExpressionError(f"Cannot import module {module_name}: {exc}") from exc

    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise TypeExpressionError(f"{module_name} has no attribute {qualname}") from None
    return obj


def resolve_name(name: str) -> Any:
    """Resolve a builtin name, ``module:Qual.Name`` or ``module.Name``."""
    if ":" in name:
        module_name, qualname = name.split(":", 1)
        return _import_object(module_name, qualname)
    if name in BUILTIN_NAMES:
        return BUILTIN_NAMES[name]
    if "." not in name:
        raise TypeExpressionError(f"Unknown type {name}")
    module_name, qualname = name.rsplit(".", 1)
    return _import_object(module_name, qualname)


class TypeTransformer(Transformer):
    """Transform parse tree into type hints."""

    def start(self, args: list[Any]) -> Any:
        return args[0]

    def ref(self, args: list[Any]) -> Any:
        return resolve_name(":".join(str(a) for a in args))

    def ellipsis(self, args: list[Any]) -> Any:
        return Ellipsis

    def generic(self, args: list[Any]) -> Any:
        origin, params = args[0], args[1:]
        if not params:
            return origin
        if origin is None or not hasattr(origin, "__class_getitem__"):
            raise TypeExpressionError(f"{origin!r} does not take type parameters")
        return origin[params[0]] if len(params) == 1 else origin[tuple(params)]

    def type(self, args: list[Any]) -> Any:
        if len(args) == 1:
            return args[0]
        return reduce(lambda a, b: Union[a, b], args)


def parse_type(text: str) -> Any:
    """Parse a type expression into a type hint."""
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/typeexpr.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar)

    try:
        tree = _g_parser.parse(text)
        return TypeTransformer().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, TypeExpressionError):
            raise exc.orig_exc from None
        raise TypeExpressionError(str(exc.orig_exc)) from exc
    except LarkError as exc:
        raise TypeExpressionError(f"Invalid type expression {text!r}: {exc}") from exc
