"""Decoding of XML element trees into object graphs."""

import dataclasses
import logging
import xml.etree.ElementTree as ET
from typing import Any

from . import primitives
from .classify import describe
from .metadata import MetadataResolver, default_resolver
from .serialization import (
    MalformedStream,
    NoSuitableConstructor,
    RequiredFieldMissing,
    SerializationError,
    TypeConstructionFailure,
)
from .types import ConstructorDescriptor, Kind, TypeDescriptor, TypeMetadata
from .writer import ENTRY_TAG, KEY_TAG, VALUE_TAG

logger = logging.getLogger(__name__)

_CONTAINER_KINDS = (Kind.ARRAY, Kind.SEQUENCE, Kind.MAP)


def _is_empty(element: ET.Element) -> bool:
    """An element written for ``None``: no text, attributes or children."""
    return not element.text and not element.attrib and len(element) == 0


def select_constructor(
    metadata: TypeMetadata, attributes: dict[str, str]
) -> ConstructorDescriptor:
    """Choose the constructor to build an element with ``attributes``.

    A type with a single parameterless constructor always uses it. Otherwise
    a constructor is a candidate when each of its parameters names a present
    attribute. The first candidate consuming every attribute wins; failing
    that, the candidate with the most parameters (first found on ties).

    Raises:
        NoSuitableConstructor: No constructor's parameters are all present.
    """
    constructors = metadata.constructors
    if len(constructors) == 1 and constructors[0].is_default:
        return constructors[0]

    best: ConstructorDescriptor | None = None
    for candidate in constructors:
        if not candidate.annotated:
            continue
        if any(p.name not in attributes for p in candidate.parameters):
            continue
        if len(candidate.parameters) == len(attributes):
            return candidate
        if best is None or len(candidate.parameters) > len(best.parameters):
            best = candidate

    if best is None:
        raise NoSuitableConstructor(metadata.type.__qualname__, sorted(attributes))
    return best


class Reader:
    """Recursively decodes elements into instances of declared types.

    Decoding always follows the declared type: a field declared as a base
    class is rebuilt as that base class whatever subclass was written.
    """

    def __init__(self, resolver: MetadataResolver | None = None) -> None:
        self._resolver = resolver or default_resolver

    def read(self, element: ET.Element, type_hint: Any) -> Any:
        """Decode ``element`` as an instance of ``type_hint``."""
        return self._read_value(element, describe(type_hint))

    def _read_value(self, element: ET.Element, descriptor: TypeDescriptor) -> Any:
        if descriptor.nullable and _is_empty(element):
            return None

        match descriptor.kind:
            case Kind.NULL:
                return None
            case Kind.SCALAR | Kind.ENUM:
                if len(element):
                    raise MalformedStream(
                        f"<{element.tag}> holds elements where text was expected",
                        type_name=descriptor.type.__qualname__,
                    )
                return primitives.from_text(element.text, descriptor.type)
            case Kind.ARRAY:
                return tuple(self._read_items(element, descriptor))
            case Kind.SEQUENCE:
                return self._read_sequence(element, descriptor)
            case Kind.MAP:
                return self._read_map(element, descriptor)
            case _:
                return self._read_composite(element, descriptor.type)

    def _read_items(self, element: ET.Element, descriptor: TypeDescriptor) -> list[Any]:
        (item_hint,) = descriptor.args
        items: list[Any] = []
        for child in element:
            if child.tag != VALUE_TAG:
                raise MalformedStream(
                    f"Expected <{VALUE_TAG}> inside <{element.tag}>, found <{child.tag}>"
                )
            items.append(self.read(child, item_hint))
        return items

    def _read_sequence(self, element: ET.Element, descriptor: TypeDescriptor) -> Any:
        items = self._read_items(element, descriptor)
        if descriptor.type is list:
            return items
        try:
            return descriptor.type(items)
        except Exception as exc:
            raise TypeConstructionFailure(
                f"Cannot build {descriptor.type.__qualname__} from decoded items: {exc}",
                type_name=descriptor.type.__qualname__,
            ) from exc

    def _read_map(self, element: ET.Element, descriptor: TypeDescriptor) -> Any:
        key_hint, value_hint = descriptor.args
        pairs: dict[Any, Any] = {}
        for entry in element:
            if entry.tag != ENTRY_TAG:
                raise MalformedStream(
                    f"Expected <{ENTRY_TAG}> inside <{element.tag}>, found <{entry.tag}>"
                )
            keys = entry.findall(KEY_TAG)
            values = entry.findall(VALUE_TAG)
            if len(keys) != 1 or len(values) != 1 or len(entry) != 2:
                raise MalformedStream(
                    f"<{ENTRY_TAG}> in <{element.tag}> needs exactly one <{KEY_TAG}> "
                    f"and one <{VALUE_TAG}>"
                )
            pairs[self.read(keys[0], key_hint)] = self.read(values[0], value_hint)

        if descriptor.type is dict:
            return pairs
        try:
            return descriptor.type(pairs)
        except Exception as exc:
            raise TypeConstructionFailure(
                f"Cannot build {descriptor.type.__qualname__} from decoded entries: {exc}",
                type_name=descriptor.type.__qualname__,
            ) from exc

    def _construct(self, element: ET.Element, cls: type, metadata: TypeMetadata) -> Any:
        attributes = dict(element.attrib)
        chosen = select_constructor(metadata, attributes)
        logger.debug(
            "Constructing %s via %s(%s)",
            cls.__qualname__,
            chosen.name,
            ", ".join(p.name for p in chosen.parameters),
        )

        args = [primitives.from_text(attributes[p.name], p.type) for p in chosen.parameters]
        factory = cls if chosen.name == "__init__" else getattr(cls, chosen.name)
        try:
            return factory(*args)
        except Exception as exc:
            raise TypeConstructionFailure(
                f"{cls.__qualname__}.{chosen.name} failed: {exc}", type_name=cls.__qualname__
            ) from exc

    def _read_composite(self, element: ET.Element, cls: type) -> Any:
        metadata = self._resolver.resolve(cls)
        instance = self._construct(element, cls, metadata)

        decoded: dict[str, Any] = {}
        for child in element:
            f = metadata.find_field(child.tag)
            try:
                descriptor = describe(f.type_hint)
                if _is_empty(child):
                    # Required values and containers are never read back as None
                    if f.required or descriptor.kind in _CONTAINER_KINDS:
                        descriptor = dataclasses.replace(descriptor, nullable=False)
                    else:
                        logger.debug(
                            "Skipping empty optional field %s.%s", cls.__qualname__, f.name
                        )
                        continue
                decoded[f.name] = self._read_value(child, descriptor)
            except SerializationError as exc:
                if exc.field_name is None:
                    exc.type_name = cls.__qualname__
                    exc.field_name = f.name
                raise

        frozen = dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen
        assign = object.__setattr__ if frozen else setattr
        for name, value in decoded.items():
            try:
                assign(instance, name, value)
            except Exception as exc:
                raise TypeConstructionFailure(
                    f"Cannot assign {cls.__qualname__}.{name}: {exc}",
                    type_name=cls.__qualname__,
                    field_name=name,
                ) from exc

        for f in metadata.fields:
            if f.required and getattr(instance, f.name, None) is None:
                raise RequiredFieldMissing(cls.__qualname__, f.name)

        return instance
