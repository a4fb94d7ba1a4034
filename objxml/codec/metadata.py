"""Discovery of serialized fields, constructors and attribute providers."""

import dataclasses
import inspect
import logging
import threading
import typing
from typing import Any

from .serialization import (
    METADATA_KEY,
    TypeConstructionFailure,
    XmlFieldInfo,
    constructor_params,
    provider_arg,
)
from .types import ArgProvider, ConstructorDescriptor, FieldDescriptor, TypeMetadata

logger = logging.getLogger(__name__)


def _hierarchy(cls: type) -> list[type]:
    """Classes from ``cls`` up to, but excluding, ``object``."""
    return [klass for klass in cls.__mro__ if klass is not object]


def _own_fields(klass: type, hints: dict[str, Any]) -> list[FieldDescriptor]:
    if not dataclasses.is_dataclass(klass):
        return []

    own = inspect.get_annotations(klass)
    result: list[FieldDescriptor] = []
    for f in dataclasses.fields(klass):
        info: XmlFieldInfo | None = f.metadata.get(METADATA_KEY)
        if info is None or f.name not in own:
            continue
        result.append(
            FieldDescriptor(
                name=f.name,
                type_hint=hints.get(f.name, f.type),
                required=not info.optional,
                owner=klass,
            )
        )
    return result


def _covers(func: Any, declared: tuple, *, skip_first: bool) -> bool:
    """Check every parameter of ``func`` without a default is covered by ``declared``."""
    params = list(inspect.signature(func).parameters.values())
    if skip_first:
        params = params[1:]
    positional = [
        p
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    if len(declared) > len(positional) and not any(
        p.kind is inspect.Parameter.VAR_POSITIONAL for p in params
    ):
        return False
    rest = [p for p in params if p not in positional[: len(declared)]]
    return all(
        p.default is not inspect.Parameter.empty
        or p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in rest
    )


def _constructors(cls: type) -> list[ConstructorDescriptor]:
    result: list[ConstructorDescriptor] = []

    init = cls.__init__
    declared = constructor_params(init) or ()
    try:
        annotated = _covers(init, declared, skip_first=True)
        result.append(ConstructorDescriptor("__init__", declared, annotated))
        # An attribute-driven __init__ whose parameters all have defaults is also the default
        if declared and _covers(init, (), skip_first=True):
            result.append(ConstructorDescriptor("__init__", ()))
    except ValueError:
        # No signature available for some builtin initializers
        result.append(ConstructorDescriptor("__init__", ()))

    seen: set[str] = set()
    for klass in _hierarchy(cls):
        for name, member in vars(klass).items():
            if name in seen or not isinstance(member, (classmethod, staticmethod)):
                continue
            seen.add(name)
            # An inherited staticmethod builds the ancestor, not cls
            if isinstance(member, staticmethod) and klass is not cls:
                continue
            declared = constructor_params(member.__func__)
            if declared is None:
                continue
            skip_first = isinstance(member, classmethod)
            annotated = _covers(member.__func__, declared, skip_first=skip_first)
            result.append(ConstructorDescriptor(name, declared, annotated))

    return result


def _takes_no_arguments(func: Any) -> bool:
    try:
        return _covers(func, (), skip_first=True)
    except ValueError:
        return False


def _providers(cls: type) -> list[ArgProvider]:
    seen: set[str] = set()
    result: list[ArgProvider] = []
    for klass in _hierarchy(cls):
        for member_name, member in vars(klass).items():
            is_property = isinstance(member, property)
            func = member.fget if is_property else member
            arg = provider_arg(func)
            if arg is None or arg.name in seen:
                continue
            if not is_property and not (callable(func) and _takes_no_arguments(func)):
                logger.debug(
                    "Ignoring provider %s.%s: it takes arguments", klass.__qualname__, member_name
                )
                continue
            seen.add(arg.name)
            result.append(ArgProvider(arg.name, arg.type, member_name, is_property, klass))
    return result


class MetadataResolver:
    """Resolves and caches :class:`TypeMetadata` per type.

    The cache is populated on first access and guarded by a lock, so
    concurrent first lookups of the same type resolve it once.
    """

    def __init__(self) -> None:
        self._cache: dict[type, TypeMetadata] = {}
        self._lock = threading.Lock()

    def resolve(self, cls: type) -> TypeMetadata:
        """Return the metadata for ``cls``, computing it on first use."""
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(cls)
            if cached is None:
                cached = self._build(cls)
                self._cache[cls] = cached
            return cached

    def fields(self, cls: type) -> tuple[FieldDescriptor, ...]:
        return self.resolve(cls).fields

    def constructors(self, cls: type) -> tuple[ConstructorDescriptor, ...]:
        return self.resolve(cls).constructors

    def providers(self, cls: type) -> tuple[ArgProvider, ...]:
        return self.resolve(cls).providers

    def find_field(self, cls: type, name: str) -> FieldDescriptor:
        return self.resolve(cls).find_field(name)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def _build(self, cls: type) -> TypeMetadata:
        try:
            hints = typing.get_type_hints(cls, include_extras=True)
        except (NameError, TypeError) as exc:
            raise TypeConstructionFailure(
                f"Cannot resolve type hints of {cls.__qualname__}: {exc}",
                type_name=cls.__qualname__,
            ) from exc

        fields: list[FieldDescriptor] = []
        seen: set[str] = set()
        for klass in _hierarchy(cls):
            for f in _own_fields(klass, hints):
                # Most-derived declaration wins
                if f.name in seen:
                    logger.debug("%s.%s shadows %s", cls.__qualname__, f.name, klass.__qualname__)
                    continue
                seen.add(f.name)
                fields.append(f)

        metadata = TypeMetadata(
            type=cls,
            fields=tuple(fields),
            constructors=tuple(_constructors(cls)),
            providers=tuple(_providers(cls)),
        )
        logger.debug(
            "Resolved %s: %d fields, %d constructors, %d providers",
            cls.__qualname__,
            len(metadata.fields),
            len(metadata.constructors),
            len(metadata.providers),
        )
        return metadata


default_resolver = MetadataResolver()
