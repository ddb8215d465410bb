"""Derive type descriptors from Python classes.

This is the one place that looks at live classes.  It runs once, up front,
and produces a :class:`~typesynth.descriptors.TypeCatalog`; the synthesis
engine only ever sees that catalog.

Supported classes:
    - ``enum.Enum`` subclasses -> enumerations (member names, in order).
    - classes decorated with :func:`sealed` -> variant sets whose variants
      are the direct subclasses, in definition order.
    - dataclasses and pydantic models -> composites.
    - any other class with annotations -> composite from its annotations.

Descriptions and examples come from :func:`schema_description` /
:func:`schema_example` on classes, ``dataclasses.field(metadata=...)`` keys
``description`` / ``example``, or pydantic ``Field(description=...,
examples=[...])``.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime
import decimal
import importlib
import inspect
import typing
import uuid
from enum import Enum
from pathlib import PurePath
from types import ModuleType, UnionType
from typing import Any, Callable, Iterable, Literal, Optional, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel

from .descriptors import FieldDescriptor, TypeCatalog, TypeDescriptor, TypeKind, TypeRef

__all__ = [
    "sealed",
    "schema_description",
    "schema_example",
    "describe",
    "type_ref_for",
    "catalog_from_classes",
    "catalog_from_module",
]

C = TypeVar("C", bound=type)

_SEALED_ATTR = "__schema_sealed__"
_DESCRIPTION_ATTR = "__schema_description__"
_EXAMPLE_ATTR = "__schema_example__"

_PRIMITIVE_NAMES: dict[type, str] = {
    str: "string",
    int: "int",
    float: "double",
    bool: "boolean",
    bytes: "string",
    datetime.datetime: "string",
    datetime.date: "string",
    datetime.time: "string",
    uuid.UUID: "string",
    decimal.Decimal: "number",
}

_LIST_ORIGINS = {
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Collection,
    collections.abc.Iterable,
}
_SET_ORIGINS = {set, frozenset, collections.abc.Set, collections.abc.MutableSet}
_MAP_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}


# ---------------------------------------------------------------------------
# Class markers
# ---------------------------------------------------------------------------


def sealed(cls: C) -> C:
    """Mark ``cls`` as a closed variant set of its direct subclasses."""
    setattr(cls, _SEALED_ATTR, True)
    return cls


def schema_description(text: str) -> Callable[[C], C]:
    def decorate(cls: C) -> C:
        setattr(cls, _DESCRIPTION_ATTR, text)
        return cls

    return decorate


def schema_example(value: Any) -> Callable[[C], C]:
    def decorate(cls: C) -> C:
        setattr(cls, _EXAMPLE_ATTR, value)
        return cls

    return decorate


def _own(cls: type, attr: str) -> Any:
    # Markers are not inherited: a subclass of a sealed base is a variant.
    return cls.__dict__.get(attr)


def _is_sealed(cls: type) -> bool:
    return bool(_own(cls, _SEALED_ATTR))


def _is_model(cls: type) -> bool:
    return isinstance(cls, type) and issubclass(cls, BaseModel) and cls is not BaseModel


def _is_enum(cls: type) -> bool:
    return isinstance(cls, type) and issubclass(cls, Enum) and cls is not Enum


def _is_describable(obj: Any) -> bool:
    if not isinstance(obj, type):
        return False
    return _is_enum(obj) or _is_sealed(obj) or dataclasses.is_dataclass(obj) or _is_model(obj)


def _nested_classes(cls: type) -> list[type]:
    prefix = f"{cls.__qualname__}."
    return [
        value
        for value in vars(cls).values()
        if isinstance(value, type) and value.__qualname__.startswith(prefix)
    ]


# ---------------------------------------------------------------------------
# Annotations -> TypeRef
# ---------------------------------------------------------------------------


def _split_optional(annotation: Any) -> tuple[Any, bool]:
    """Strip ``Optional`` / ``X | None``; return (inner, nullable)."""
    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        args = get_args(annotation)
        non_none = [a for a in args if a is not type(None)]
        nullable = len(non_none) != len(args)
        if len(non_none) == 1:
            inner, inner_nullable = _split_optional(non_none[0])
            return inner, nullable or inner_nullable
        # A general union has no single declared type.
        return Any, nullable
    return annotation, False


def _literal_ref(args: tuple[Any, ...]) -> TypeRef:
    kinds = {type(a) for a in args}
    if len(kinds) == 1:
        (kind,) = kinds
        if kind in _PRIMITIVE_NAMES:
            return TypeRef(name=_PRIMITIVE_NAMES[kind])
    return TypeRef(name="any")


def type_ref_for(annotation: Any) -> tuple[TypeRef, bool]:
    """Map a Python annotation to ``(TypeRef, nullable)``."""
    annotation, nullable = _split_optional(annotation)
    return _annotation_ref(annotation), nullable


def _annotation_ref(annotation: Any) -> TypeRef:
    if annotation is Any or annotation is None:
        return TypeRef(name="any")
    if annotation in _PRIMITIVE_NAMES:
        return TypeRef(name=_PRIMITIVE_NAMES[annotation])
    if annotation is PurePath or (isinstance(annotation, type) and issubclass(annotation, PurePath)):
        return TypeRef(name="string")

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Literal:
        return _literal_ref(args)
    if origin in _LIST_ORIGINS or origin in _SET_ORIGINS:
        name = "set" if origin in _SET_ORIGINS else "list"
        if not args:
            return TypeRef(name=name)
        return TypeRef(name=name, arguments=[_element_ref(args[0])])
    if origin is tuple:
        # Only homogeneous ``tuple[X, ...]`` has an element type.
        if len(args) == 2 and args[1] is Ellipsis:
            return TypeRef(name="list", arguments=[_element_ref(args[0])])
        return TypeRef(name="list")
    if origin in _MAP_ORIGINS:
        return TypeRef(name="map", arguments=[_element_ref(a) for a in args])

    if annotation in (list, tuple) or annotation in _LIST_ORIGINS:
        return TypeRef(name="list")
    if annotation in _SET_ORIGINS:
        return TypeRef(name="set")
    if annotation in _MAP_ORIGINS:
        return TypeRef(name="map")
    if isinstance(annotation, type):
        return TypeRef(name=annotation.__name__)
    return TypeRef(name="any")


def _element_ref(annotation: Any) -> TypeRef:
    inner, _ = _split_optional(annotation)
    return _annotation_ref(inner)


# ---------------------------------------------------------------------------
# Classes -> descriptors
# ---------------------------------------------------------------------------


def _field_annotations(cls: type) -> list[tuple[str, Any, Optional[str], Any]]:
    """(name, annotation, description, example) for each declared field."""
    if _is_model(cls):
        out = []
        for name, info in cls.model_fields.items():
            example = info.examples[0] if info.examples else None
            out.append((info.alias or name, info.annotation, info.description, example))
        return out

    hints = typing.get_type_hints(cls)
    if dataclasses.is_dataclass(cls):
        return [
            (f.name, hints.get(f.name, f.type), f.metadata.get("description"), f.metadata.get("example"))
            for f in dataclasses.fields(cls)
        ]

    own = inspect.get_annotations(cls)
    return [
        (name, hints.get(name, Any), None, None)
        for name in own
        if not name.startswith("_") and get_origin(hints.get(name)) is not typing.ClassVar
    ]


def _describe_fields(cls: type) -> list[FieldDescriptor]:
    fields = []
    for name, annotation, description, example in _field_annotations(cls):
        type_ref, nullable = type_ref_for(annotation)
        fields.append(
            FieldDescriptor(
                name=name,
                type=type_ref,
                nullable=nullable,
                description=description,
                example=example,
            )
        )
    return fields


def describe(cls: type) -> TypeDescriptor:
    """Build the descriptor of one class (no recursion into field types)."""
    description = _own(cls, _DESCRIPTION_ATTR)
    example = _own(cls, _EXAMPLE_ATTR)

    if _is_enum(cls):
        return TypeDescriptor(
            name=cls.__name__,
            kind=TypeKind.ENUMERATION,
            description=description,
            constants=[member.name for member in cls],
            example=example,
        )

    if _is_sealed(cls):
        return TypeDescriptor(
            name=cls.__name__,
            kind=TypeKind.VARIANT_SET,
            description=description,
            fields=_describe_fields(cls),
            variants=[sub.__name__ for sub in cls.__subclasses__()],
            nested=[nested.__name__ for nested in _nested_classes(cls)],
            example=example,
        )

    return TypeDescriptor(
        name=cls.__name__,
        kind=TypeKind.COMPOSITE,
        description=description,
        fields=_describe_fields(cls),
        example=example,
    )


def _annotation_classes(annotation: Any) -> Iterable[type]:
    if isinstance(annotation, type):
        yield annotation
    for arg in get_args(annotation):
        yield from _annotation_classes(arg)


def _referenced_classes(cls: type) -> list[type]:
    found: list[type] = []
    if _is_enum(cls):
        return found
    for _, annotation, _, _ in _field_annotations(cls):
        found.extend(c for c in _annotation_classes(annotation) if _is_describable(c))
    if _is_sealed(cls):
        found.extend(cls.__subclasses__())
        found.extend(_nested_classes(cls))
    return found


def catalog_from_classes(*classes: type) -> TypeCatalog:
    """Describe ``classes`` and every describable class they reach."""
    ordered: list[type] = []
    seen: set[type] = set()
    pending = list(classes)
    while pending:
        cls = pending.pop(0)
        if cls in seen:
            continue
        seen.add(cls)
        ordered.append(cls)
        pending.extend(c for c in _referenced_classes(cls) if c not in seen)
    return TypeCatalog(types=[describe(cls) for cls in ordered])


def catalog_from_module(module: ModuleType | str) -> TypeCatalog:
    """Describe every describable class defined in ``module``."""
    if isinstance(module, str):
        module = importlib.import_module(module)
    classes = [
        value
        for value in vars(module).values()
        if _is_describable(value) and value.__module__ == module.__name__
    ]
    return catalog_from_classes(*classes)
