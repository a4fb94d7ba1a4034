"""Runtime entry points for objxml encoding and decoding."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import IO, Any, TypeVar, overload

from .metadata import MetadataResolver, default_resolver
from .reader import Reader
from .serialization import MalformedStream, SerializationError
from .writer import Writer

T = TypeVar("T")


@dataclass(frozen=True)
class CodecOptions:
    """Document-level settings shared by encoding and decoding.

    Attributes:
        root_tag: Name of the document element holding the value.
        xml_declaration: Whether to emit an ``<?xml ...?>`` header.
        encoding: Encoding named in the declaration.
        indent: Indentation for pretty printing, or None for compact output.
    """

    root_tag: str = "data"
    xml_declaration: bool = True
    encoding: str = "UTF-8"
    indent: str | None = None


DEFAULT_OPTIONS = CodecOptions()


class XmlSerializer:
    """Converts values to and from XML documents.

    Example:
        serializer = XmlSerializer(CodecOptions(indent="  "))
        text = serializer.to_xml(Person(name="Ann", age=33))
        person = serializer.from_xml(text, Person)
    """

    def __init__(
        self,
        options: CodecOptions | None = None,
        *,
        resolver: MetadataResolver | None = None,
    ) -> None:
        self.options = options or DEFAULT_OPTIONS
        resolver = resolver or default_resolver
        self._writer = Writer(resolver)
        self._reader = Reader(resolver)

    def to_xml(self, value: Any) -> str:
        """Encode ``value`` into an XML document string."""
        try:
            root = self._writer.write(value, self.options.root_tag)
        except RecursionError as exc:
            raise SerializationError(
                f"Object graph of {type(value).__qualname__} is too deep or cyclic",
                type_name=type(value).__qualname__,
            ) from exc

        if self.options.indent is not None:
            ET.indent(root, space=self.options.indent)

        body = ET.tostring(root, encoding="unicode")
        if self.options.xml_declaration:
            return f'<?xml version="1.0" encoding="{self.options.encoding}"?>\n{body}'
        return body

    @overload
    def from_xml(self, text: str, target_type: type[T]) -> T: ...

    @overload
    def from_xml(self, text: str, target_type: Any) -> Any: ...

    def from_xml(self, text: str, target_type: Any) -> Any:
        """Decode an XML document string into an instance of ``target_type``."""
        try:
            root = ET.fromstring(text)
        except ET.ParseError as exc:
            raise MalformedStream(f"Invalid XML: {exc}") from exc
        return self._decode_root(root, target_type)

    def write(self, value: Any, stream: IO[str]) -> None:
        """Encode ``value`` to a text stream, closing it afterwards."""
        try:
            stream.write(self.to_xml(value))
        finally:
            stream.close()

    def read(self, stream: IO[str], target_type: Any) -> Any:
        """Decode a value from a text stream, closing it afterwards."""
        try:
            root = ET.parse(stream).getroot()
        except ET.ParseError as exc:
            raise MalformedStream(f"Invalid XML: {exc}") from exc
        finally:
            stream.close()
        return self._decode_root(root, target_type)

    def _decode_root(self, root: ET.Element, target_type: Any) -> Any:
        if root.tag != self.options.root_tag:
            raise MalformedStream(
                f"Expected document element <{self.options.root_tag}>, found <{root.tag}>"
            )
        try:
            return self._reader.read(root, target_type)
        except RecursionError as exc:
            raise SerializationError("Document is nested too deeply") from exc


def encode_to_text(value: Any, options: CodecOptions | None = None) -> str:
    """Encode ``value`` into an XML document string."""
    return XmlSerializer(options).to_xml(value)


def decode_from_text(text: str, target_type: Any, options: CodecOptions | None = None) -> Any:
    """Decode an XML document string into an instance of ``target_type``."""
    return XmlSerializer(options).from_xml(text, target_type)


def encode_to_stream(value: Any, stream: IO[str], options: CodecOptions | None = None) -> None:
    """Encode ``value`` into a text stream. The stream is closed on return."""
    XmlSerializer(options).write(value, stream)


def decode_from_stream(stream: IO[str], target_type: Any, options: CodecOptions | None = None) -> Any:
    """Decode a value from a text stream. The stream is closed on return."""
    return XmlSerializer(options).read(stream, target_type)
