# tests/test_reflect.py
"""Tests for descriptors derived from dataclasses, pydantic models and enums."""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional, Union

import pytest
from pydantic import BaseModel, Field

from typesynth.reflect import schema_description, schema_example, sealed

REF = "#/components/schemas/"


class Color(Enum):
    RED = "r"
    GREEN = "g"


@dataclass
class Point:
    x: float
    y: float = field(default=0.0, metadata={"description": "Vertical offset", "example": 2.5})
    label: Optional[str] = None


@dataclass
class TreeNode:
    value: str
    children: list["TreeNode"] = field(default_factory=list)
    parent: Optional["TreeNode"] = None


@sealed
@schema_description("A drawable shape")
class Shape:
    pass


@dataclass
class Circle(Shape):
    radius: float


@dataclass
class Rectangle(Shape):
    width: float
    height: float


@sealed
class Vehicle:
    @dataclass
    class Car:
        doors: int

    @dataclass
    class Bike:
        gears: int


@schema_example({"name": "ada", "tags": ["admin"]})
class User(BaseModel):
    name: str = Field(description="Display name", examples=["ada"])
    email: Optional[str] = None
    tags: set[str] = set()
    color: Color = Color.RED
    scores: dict[str, int] = {}
    home: Optional[Point] = None


class TestTypeRefFor:

    @pytest.mark.parametrize(
        "annotation,expected",
        [
            (str, "string"),
            (int, "int"),
            (float, "double"),
            (bool, "boolean"),
            (datetime.datetime, "string"),
            (list[int], "list[int]"),
            (list[list[str]], "list[list[string]]"),
            (set[Point], "set[Point]"),
            (tuple[int, ...], "list[int]"),
            (tuple[int, str], "list"),
            (dict[str, int], "map[string, int]"),
            (list, "list"),
            (Literal["a", "b"], "string"),
            (Union[int, str], "any"),
            (Any, "any"),
            (Point, "Point"),
        ],
    )
    def test_mapping(self, annotation, expected):
        from typesynth.reflect import type_ref_for

        ref, nullable = type_ref_for(annotation)
        assert str(ref) == expected
        assert nullable is False

    def test_optional(self):
        from typesynth.reflect import type_ref_for

        ref, nullable = type_ref_for(Optional[list[Point]])
        assert str(ref) == "list[Point]"
        assert nullable is True

    def test_pipe_none(self):
        from typesynth.reflect import type_ref_for

        ref, nullable = type_ref_for(int | None)
        assert str(ref) == "int"
        assert nullable is True


class TestDescribe:

    def test_enum(self):
        from typesynth.descriptors import TypeKind
        from typesynth.reflect import describe

        descriptor = describe(Color)
        assert descriptor.kind is TypeKind.ENUMERATION
        assert descriptor.constants == ["RED", "GREEN"]

    def test_dataclass(self):
        from typesynth.reflect import describe

        descriptor = describe(Point)
        assert [f.name for f in descriptor.fields] == ["x", "y", "label"]
        y = descriptor.fields[1]
        assert y.description == "Vertical offset"
        assert y.example == 2.5
        assert descriptor.fields[2].nullable is True

    def test_forward_references(self):
        from typesynth.reflect import describe

        descriptor = describe(TreeNode)
        children, parent = descriptor.fields[1], descriptor.fields[2]
        assert str(children.type) == "list[TreeNode]"
        assert parent.type.name == "TreeNode"
        assert parent.nullable is True

    def test_sealed_base(self):
        from typesynth.descriptors import TypeKind
        from typesynth.reflect import describe

        descriptor = describe(Shape)
        assert descriptor.kind is TypeKind.VARIANT_SET
        assert descriptor.variants == ["Circle", "Rectangle"]
        assert descriptor.description == "A drawable shape"

    def test_markers_not_inherited(self):
        from typesynth.descriptors import TypeKind
        from typesynth.reflect import describe

        descriptor = describe(Circle)
        assert descriptor.kind is TypeKind.COMPOSITE
        assert descriptor.description is None

    def test_sealed_with_nested_classes(self):
        from typesynth.reflect import describe

        descriptor = describe(Vehicle)
        assert descriptor.variants == []
        assert descriptor.nested == ["Car", "Bike"]

    def test_pydantic_model(self):
        from typesynth.reflect import describe

        descriptor = describe(User)
        by_name = {f.name: f for f in descriptor.fields}
        assert by_name["name"].description == "Display name"
        assert by_name["name"].example == "ada"
        assert by_name["email"].nullable is True
        assert str(by_name["tags"].type) == "set[string]"
        assert by_name["color"].type.name == "Color"
        assert str(by_name["scores"].type) == "map[string, int]"
        assert descriptor.example == {"name": "ada", "tags": ["admin"]}


class TestCatalogFromClasses:

    def test_follows_field_types(self):
        from typesynth.reflect import catalog_from_classes

        catalog = catalog_from_classes(User)
        assert catalog.names() == ["User", "Color", "Point"]

    def test_sealed_pulls_in_subclasses(self):
        from typesynth.reflect import catalog_from_classes

        assert catalog_from_classes(Shape).names() == ["Shape", "Circle", "Rectangle"]

    def test_self_reference_listed_once(self):
        from typesynth.reflect import catalog_from_classes

        assert catalog_from_classes(TreeNode).names() == ["TreeNode"]

    def test_sealed_classes_end_to_end(self):
        from typesynth.config import SynthConfig
        from typesynth.reflect import catalog_from_classes
        from typesynth.schemas import SchemaRegistry

        registry = SchemaRegistry(catalog_from_classes(Shape, Vehicle), SynthConfig())
        registry.register_named("Shape")
        registry.register_named("Vehicle")

        schemas = registry.to_dict()
        assert schemas["Shape"]["discriminator"]["mapping"] == {
            "Circle": REF + "Circle",
            "Rectangle": REF + "Rectangle",
        }
        assert [r["$ref"] for r in schemas["Vehicle"]["oneOf"]] == [REF + "Car", REF + "Bike"]
        assert schemas["Circle"]["properties"]["radius"] == {"type": "number"}

    def test_catalog_from_module(self, tmp_path, monkeypatch):
        from typesynth.reflect import catalog_from_module

        (tmp_path / "reflect_sample_models.py").write_text(
            "from dataclasses import dataclass\n"
            "from enum import Enum\n"
            "\n"
            "class Status(Enum):\n"
            "    OPEN = 1\n"
            "    CLOSED = 2\n"
            "\n"
            "@dataclass\n"
            "class Ticket:\n"
            "    title: str\n"
            "    status: Status\n"
            "\n"
            "class NotDescribed:\n"
            "    pass\n",
            encoding="utf-8",
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        catalog = catalog_from_module("reflect_sample_models")
        assert sorted(catalog.names()) == ["Status", "Ticket"]
