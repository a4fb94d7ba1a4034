"""Tests for encoding values into element trees."""

import xml.etree.ElementTree as ET

import pytest

from objxml.codec import Char, RequiredFieldMissing

from .models import (
    Account,
    Button,
    Color,
    ContentButton,
    Derived,
    Inventory,
    Label,
    Panel,
    Person,
    Point,
    Scalars,
    Ticket,
)


def _tags(element):
    return [child.tag for child in element]


def describe_scalars():
    def writes_scalar_text(expect, writer):
        expect(writer.write(5, "data").text) == "5"
        expect(writer.write("hi", "data").text) == "hi"
        expect(writer.write(False, "data").text) == "false"
        expect(writer.write(Char("q"), "data").text) == "q"

    def writes_null_as_empty_element(expect, writer):
        element = writer.write(None, "data")
        expect(element.text) == ""
        expect(len(element)) == 0

    def writes_enum_constant_name(expect, writer):
        expect(writer.write(Color.RED, "data").text) == "RED"


def describe_composites():
    def writes_one_child_per_field(expect, writer):
        element = writer.write(Point(3, -4), "data")
        expect(element.tag) == "data"
        expect(_tags(element)) == ["x", "y"]
        expect(element.find("x").text) == "3"
        expect(element.find("y").text) == "-4"
        expect(element.attrib) == {}

    def writes_scalar_fields(expect, writer):
        element = writer.write(Scalars(flag=True, initial=Char("z"), color=Color.BLUE), "data")
        expect(element.find("flag").text) == "true"
        expect(element.find("initial").text) == "z"
        expect(element.find("color").text) == "BLUE"
        expect(element.find("priority").text) == "LOW"

    def skips_fields_without_metadata(expect, writer):
        element = writer.write(Person(name="Ann", built_by="aged"), "data")
        expect(_tags(element)) == ["name", "age", "nickname"]

    def writes_optional_null_field_as_empty_element(expect, writer):
        element = writer.write(Account(owner="ann"), "data")
        expect(element.find("note").text) == ""
        expect(element.find("home").text) == ""

    def writes_most_derived_fields_first(expect, writer):
        element = writer.write(Derived(label="d", count=2, extra=True), "data")
        expect(_tags(element)) == ["label", "extra", "count"]

    def writes_constructor_arguments_as_attributes(expect, writer):
        element = writer.write(Button("ok"), "data")
        expect(element.attrib) == {"id": "ok"}
        expect(_tags(element)) == ["enabled", "visible", "style_id"]

    def writes_method_providers_and_skips_those_taking_arguments(expect, writer):
        element = writer.write(Ticket(title="train"), "data")
        expect(element.attrib) == {"code": "5"}

    def writes_nested_composites(expect, writer):
        button = ContentButton("c1")
        button.content = [Label("l1"), Label("l2")]
        button.content[1].text = "second"

        element = writer.write(button, "data")
        labels = element.find("content").findall("value")
        expect(len(labels)) == 2
        expect(labels[0].get("id")) == "l1"
        expect(labels[1].find("text").text) == "second"

    def writes_runtime_type_of_field_values(expect, writer):
        panel = Panel("p")
        panel.children = [Button("b")]
        element = writer.write(panel, "data")
        child = element.find("children/value")
        expect(child.find("enabled").text) == "true"

    def does_not_mutate_the_source(expect, writer):
        inventory = Inventory(tags=["a"], counts={"a": 1})
        writer.write(inventory, "data")
        expect(inventory) == Inventory(tags=["a"], counts={"a": 1})


def describe_collections():
    def wraps_sequence_elements_in_value_nodes(expect, writer):
        element = writer.write(["x", "y", "z"], "data")
        expect(_tags(element)) == ["value", "value", "value"]
        expect([v.text for v in element]) == ["x", "y", "z"]

    def wraps_tuple_elements_in_value_nodes(expect, writer):
        element = writer.write((1, 2), "data")
        expect([v.text for v in element]) == ["1", "2"]

    def wraps_nested_sequences(expect, writer):
        element = writer.write(Inventory(grid=[[1, 2], [3]]), "data")
        rows = element.find("grid").findall("value")
        expect([len(row) for row in rows]) == [2, 1]
        expect(rows[1].find("value").text) == "3"

    def writes_map_entries(expect, writer):
        element = writer.write({"a": 1, "b": 2}, "data")
        expect(_tags(element)) == ["entry", "entry"]
        for entry in element:
            expect(_tags(entry)) == ["key", "value"]
        pairs = {e.find("key").text: e.find("value").text for e in element}
        expect(pairs) == {"a": "1", "b": "2"}

    def writes_composite_map_values(expect, writer):
        element = writer.write({"origin": Point(0, 0)}, "data")
        value = element.find("entry/value")
        expect(_tags(value)) == ["x", "y"]

    def writes_null_elements(expect, writer):
        element = writer.write(Inventory(gaps=[1, None]), "data")
        gaps = element.find("gaps").findall("value")
        expect([g.text for g in gaps]) == ["1", ""]


def describe_errors():
    def rejects_missing_required_field(expect, writer):
        with pytest.raises(RequiredFieldMissing) as exinfo:
            writer.write(Account(owner=None), "data")
        expect(exinfo.value.type_name) == "Account"
        expect(exinfo.value.field_name) == "owner"

    def rejects_missing_required_field_in_nested_value(expect, writer):
        with pytest.raises(RequiredFieldMissing) as exinfo:
            writer.write({"k": Account()}, "data")
        expect(exinfo.value.field_name) == "owner"

    def produces_serializable_trees(expect, writer):
        text = ET.tostring(writer.write(Point(1, 2), "data"), encoding="unicode")
        expect(text) == "<data><x>1</x><y>2</y></data>"
