"""Command-line interface for inspecting types and converting documents."""

import logging
import sys
from dataclasses import dataclass
from typing import IO, Any

import click
from dataclasses_json import DataClassJsonMixin
from rich.console import Console
from rich.logging import RichHandler
from rich.pretty import Pretty
from rich.table import Table

from objxml.codec import (
    CodecOptions,
    SerializationError,
    TypeMetadata,
    XmlSerializer,
    default_resolver,
)
from objxml.typeexpr import TypeExpressionError, parse_type


@dataclass
class FieldReport(DataClassJsonMixin):
    """A serialized field as shown by ``inspect``."""

    name: str
    type: str
    required: bool
    owner: str


@dataclass
class ConstructorReport(DataClassJsonMixin):
    """A constructor as shown by ``inspect``."""

    name: str
    parameters: dict[str, str]
    annotated: bool


@dataclass
class ProviderReport(DataClassJsonMixin):
    """An attribute provider as shown by ``inspect``."""

    attribute: str
    type: str
    member: str


@dataclass
class TypeReport(DataClassJsonMixin):
    """Everything ``inspect`` reports about a type."""

    name: str
    fields: list[FieldReport]
    constructors: list[ConstructorReport]
    providers: list[ProviderReport]

    @classmethod
    def from_metadata(cls, metadata: TypeMetadata) -> "TypeReport":
        return cls(
            name=f"{metadata.type.__module__}:{metadata.type.__qualname__}",
            fields=[
                FieldReport(f.name, _type_name(f.type_hint), f.required, f.owner.__qualname__)
                for f in metadata.fields
            ],
            constructors=[
                ConstructorReport(
                    c.name, {p.name: p.type.__name__ for p in c.parameters}, c.annotated
                )
                for c in metadata.constructors
            ],
            providers=[
                ProviderReport(p.name, p.type.__name__, p.member) for p in metadata.providers
            ],
        )


def _type_name(hint: Any) -> str:
    """Format a type hint without module noise for builtin types."""
    if isinstance(hint, type):
        return hint.__qualname__
    return repr(hint).replace("typing.", "")


def _load_type(expression: str) -> Any:
    try:
        return parse_type(expression)
    except TypeExpressionError as exc:
        print(f"Error: {exc}")
        sys.exit(1)


def _fail(exc: SerializationError) -> None:
    print(f"Error ({exc.kind}): {exc}")
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log codec activity")
def cli(verbose: bool) -> None:
    """objxml object graph serializer."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
            force=True,
        )


@cli.command()
@click.argument("type_expr", metavar="TYPE")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def inspect(type_expr: str, output_json: bool) -> None:
    """Display the serialized fields and constructors of a type."""
    target = _load_type(type_expr)
    if not isinstance(target, type):
        print(f"Error: {type_expr} is not a class")
        sys.exit(1)

    try:
        report = TypeReport.from_metadata(default_resolver.resolve(target))
    except SerializationError as exc:
        _fail(exc)
        return

    if output_json:
        print(report.to_json(indent=2))
    else:
        _output_plain(report)


def _output_plain(report: TypeReport) -> None:
    """Output type info using rich text formatting."""
    console = Console()

    console.print(f"[bold cyan]{report.name}[/bold cyan]")
    console.print()

    console.print("[bold cyan]Fields[/bold cyan]")
    field_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    field_table.add_column("Name", style="white")
    field_table.add_column("Type", style="yellow")
    field_table.add_column("Required", style="green")
    field_table.add_column("Declared in", style="dim")
    for f in report.fields:
        field_table.add_row(f.name, f.type, "yes" if f.required else "no", f.owner)
    console.print(field_table)
    console.print()

    console.print("[bold cyan]Constructors[/bold cyan]")
    ctor_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    ctor_table.add_column("Name", style="white")
    ctor_table.add_column("Attributes", style="yellow")
    ctor_table.add_column("Usable", style="green")
    for c in report.constructors:
        params = ", ".join(f"{name}: {t}" for name, t in c.parameters.items())
        ctor_table.add_row(c.name, params or "-", "yes" if c.annotated else "no")
    console.print(ctor_table)

    if report.providers:
        console.print()
        console.print("[bold cyan]Attributes written[/bold cyan]")
        provider_table = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
        provider_table.add_column("Attribute", style="white")
        provider_table.add_column("Type", style="yellow")
        provider_table.add_column("Member", style="dim")
        for p in report.providers:
            provider_table.add_row(p.attribute, p.type, p.member)
        console.print(provider_table)


@cli.command()
@click.argument("type_expr", metavar="TYPE")
@click.option("--input", "-i", "input_file", type=click.File("r"), default="-", help="XML file")
@click.option("--root-tag", default="data", help="Document element name")
def decode(type_expr: str, input_file: IO[str], root_tag: str) -> None:
    """Decode an XML document and pretty-print the value."""
    target = _load_type(type_expr)
    serializer = XmlSerializer(CodecOptions(root_tag=root_tag))

    try:
        value = serializer.from_xml(input_file.read(), target)
    except SerializationError as exc:
        _fail(exc)
        return

    Console().print(Pretty(value))


@cli.command(name="format")
@click.argument("type_expr", metavar="TYPE")
@click.option("--input", "-i", "input_file", type=click.File("r"), default="-", help="XML file")
@click.option("--output", "-o", "output_file", type=click.File("w"), default="-", help="Output file")
@click.option("--indent", type=int, default=2, help="Spaces per level, 0 for compact output")
@click.option("--root-tag", default="data", help="Document element name")
def format_(
    type_expr: str, input_file: IO[str], output_file: IO[str], indent: int, root_tag: str
) -> None:
    """Decode an XML document and write it back in normalized form."""
    target = _load_type(type_expr)
    options = CodecOptions(root_tag=root_tag, indent=" " * indent if indent > 0 else None)
    serializer = XmlSerializer(options)

    try:
        value = serializer.from_xml(input_file.read(), target)
        document = serializer.to_xml(value)
    except SerializationError as exc:
        _fail(exc)
        return

    output_file.write(document + "\n")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
