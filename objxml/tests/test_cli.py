"""Tests for CLI interface."""

import json
import logging

import pytest
from click.testing import CliRunner

from objxml.cli import cli

MODELS = "objxml.tests.codec.models"


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def describe_inspect_command():
    def outputs_json(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", f"{MODELS}:Person", "--json"])
        expect(result.exit_code) == 0

        report = json.loads(result.output)
        expect(report["name"]) == f"{MODELS}:Person"
        expect([f["name"] for f in report["fields"]]) == ["name", "age", "nickname"]
        expect(report["fields"][2]["required"]) == False
        expect(report["fields"][2]["type"]) == "str | None"
        expect([c["name"] for c in report["constructors"]]) == ["__init__", "named", "aged"]
        expect(report["constructors"][2]["parameters"]) == {"name": "str", "age": "int"}
        expect(report["providers"]) == []

    def reports_attribute_providers(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", f"{MODELS}:ContentButton", "--json"])
        expect(result.exit_code) == 0

        report = json.loads(result.output)
        expect(report["providers"]) == [{"attribute": "id", "type": "str", "member": "id"}]
        expect(report["fields"][-1]["owner"]) == "UiElement"

    def outputs_tables(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", f"{MODELS}:Button"])
        expect(result.exit_code) == 0
        expect(result.output).includes("Fields")
        expect(result.output).includes("style_id")
        expect(result.output).includes("Constructors")
        expect(result.output).includes("Attributes written")

    def fails_on_unknown_type(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", "Widget"])
        expect(result.exit_code) == 1
        expect(result.output).includes("Unknown type Widget")

    def fails_on_non_class_type(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", "int | None"])
        expect(result.exit_code) == 1
        expect(result.output).includes("is not a class")


def describe_decode_command():
    def prints_decoded_value(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["decode", f"{MODELS}:Point"], input="<data><x>1</x><y>2</y></data>"
        )
        expect(result.exit_code) == 0
        expect(result.output).includes("Point(x=1, y=2)")

    def decodes_generic_types(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["decode", "list[int]"], input="<data><value>4</value><value>5</value></data>"
        )
        expect(result.exit_code) == 0
        expect(result.output).includes("[4, 5]")

    def honours_root_tag(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["decode", "int", "--root-tag", "n"], input="<n>7</n>"
        )
        expect(result.exit_code) == 0
        expect(result.output.strip()) == "7"

    def reads_input_file(expect):
        runner = CliRunner()
        with runner.isolated_filesystem():
            with open("point.xml", "w") as f:
                f.write("<data><x>9</x></data>")
            result = runner.invoke(cli, ["decode", f"{MODELS}:Point", "-i", "point.xml"])
        expect(result.exit_code) == 0
        expect(result.output).includes("Point(x=9, y=0)")

    def reports_codec_errors(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["decode", f"{MODELS}:Palette"], input="<data><shade>BLUE</shade></data>"
        )
        expect(result.exit_code) == 1
        expect(result.output).includes("Error (UnknownEnumConstant)")

    def reports_malformed_documents(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["decode", f"{MODELS}:Point"], input="<data>")
        expect(result.exit_code) == 1
        expect(result.output).includes("Error (MalformedStream)")

    def accepts_verbose_flag(expect, restore_logging):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["-v", "decode", f"{MODELS}:Point"], input="<data><x>1</x></data>"
        )
        expect(result.exit_code) == 0


def describe_format_command():
    def normalizes_document(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["format", f"{MODELS}:Point"], input="<data><y>2</y>   <x>1</x></data>"
        )
        expect(result.exit_code) == 0
        expect(result.output) == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<data>\n  <x>1</x>\n  <y>2</y>\n</data>\n"
        )

    def writes_compact_output_file(expect):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["format", f"{MODELS}:Person", "--indent", "0", "-o", "out.xml"],
                input='<data name="Ann" age="3" />',
            )
            with open("out.xml") as f:
                content = f.read()
        expect(result.exit_code) == 0
        expect(content).includes("<data><name>Ann</name><age>3</age><nickname /></data>")

    def reports_missing_required_fields(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["format", f"{MODELS}:Account"], input="<data><note>x</note></data>"
        )
        expect(result.exit_code) == 1
        expect(result.output).includes("Error (RequiredFieldMissing)")
