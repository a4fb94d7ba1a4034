"""Encoding of object graphs into XML element trees."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Mapping
from typing import Any

from . import primitives
from .classify import describe_value
from .metadata import MetadataResolver, default_resolver
from .serialization import RequiredFieldMissing, SerializationError, TypeConstructionFailure
from .types import Kind

logger = logging.getLogger(__name__)

VALUE_TAG = "value"
ENTRY_TAG = "entry"
KEY_TAG = "key"


class Writer:
    """Recursively encodes values as :class:`xml.etree.ElementTree.Element` trees.

    Dispatch uses the runtime type of each value, so an instance of a subclass
    stored in a field declared as its base writes the subclass's fields.
    """

    def __init__(self, resolver: MetadataResolver | None = None) -> None:
        self._resolver = resolver or default_resolver

    def write(self, value: Any, tag: str) -> ET.Element:
        """Encode ``value`` as an element named ``tag``."""
        element = ET.Element(tag)
        self._write_into(element, value)
        return element

    def _write_into(self, element: ET.Element, value: Any) -> None:
        descriptor = describe_value(value)

        match descriptor.kind:
            case Kind.NULL | Kind.SCALAR | Kind.ENUM:
                element.text = primitives.to_text(value)
            case Kind.ARRAY | Kind.SEQUENCE:
                self._write_items(element, value)
            case Kind.MAP:
                self._write_map(element, value)
            case _:
                self._write_composite(element, value)

    def _write_items(self, element: ET.Element, items: Iterable[Any]) -> None:
        for item in items:
            self._write_into(ET.SubElement(element, VALUE_TAG), item)

    def _write_map(self, element: ET.Element, mapping: Mapping[Any, Any]) -> None:
        for key, item in mapping.items():
            entry = ET.SubElement(element, ENTRY_TAG)
            self._write_into(ET.SubElement(entry, KEY_TAG), key)
            self._write_into(ET.SubElement(entry, VALUE_TAG), item)

    def _write_composite(self, element: ET.Element, obj: Any) -> None:
        cls = type(obj)
        metadata = self._resolver.resolve(cls)

        for provider in metadata.providers:
            try:
                member = getattr(obj, provider.member)
                current = member if provider.is_property else member()
            except Exception as exc:
                raise TypeConstructionFailure(
                    f"{cls.__qualname__}.{provider.member} failed: {exc}",
                    type_name=cls.__qualname__,
                    field_name=provider.name,
                ) from exc
            if current is None:
                continue
            element.set(provider.name, primitives.to_text(current))

        for f in metadata.fields:
            current = getattr(obj, f.name)
            if current is None and f.required:
                raise RequiredFieldMissing(f.owner.__qualname__, f.name)
            try:
                self._write_into(ET.SubElement(element, f.name), current)
            except SerializationError as exc:
                if exc.type_name is None:
                    exc.type_name = cls.__qualname__
                    exc.field_name = f.name
                raise

        if not metadata.fields:
            logger.debug("%s has no serialized fields", cls.__qualname__)
