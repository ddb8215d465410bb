"""Field-to-property mapping.

Maps one declared field type to a schema property: an inline primitive, a
``$ref`` to a recursively registered named type, or an array whose ``items``
are inferred from the container's type argument (one level of nested
containers is resolved).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple, Optional, Union

from ..descriptors import FieldDescriptor, TypeRef
from ..values import to_json_value
from .models import Reference, SchemaEntry, SchemaType

if TYPE_CHECKING:
    from .registry import SchemaRegistry

logger = logging.getLogger(__name__)

__all__ = [
    "PRIMITIVE_TYPES",
    "CONTAINER_TYPES",
    "OPAQUE_TYPES",
    "MappedProperty",
    "PropertyMapper",
    "is_named_type",
]

PRIMITIVE_TYPES: dict[str, SchemaType] = {
    "string": SchemaType.STRING,
    "str": SchemaType.STRING,
    "int": SchemaType.INTEGER,
    "int32": SchemaType.INTEGER,
    "int64": SchemaType.INTEGER,
    "long": SchemaType.INTEGER,
    "integer": SchemaType.INTEGER,
    "float": SchemaType.NUMBER,
    "double": SchemaType.NUMBER,
    "number": SchemaType.NUMBER,
    "bool": SchemaType.BOOLEAN,
    "boolean": SchemaType.BOOLEAN,
}

CONTAINER_TYPES = frozenset({"list", "array", "set", "frozenset", "sequence", "collection", "tuple"})

# Rendered as an inline ``type: object`` and never registered.
OPAQUE_TYPES = frozenset({"map", "dict", "mapping", "object", "any"})

Property = Union[Reference, SchemaEntry]


def is_named_type(type_ref: TypeRef) -> bool:
    """True for types that become a ``$ref`` rather than an inline schema."""
    name = type_ref.name
    return name not in PRIMITIVE_TYPES and name not in CONTAINER_TYPES and name not in OPAQUE_TYPES


class MappedProperty(NamedTuple):
    schema: Property
    required: bool
    is_reference: bool


class PropertyMapper:
    """Maps declared field types to schema properties.

    The registry is passed into every call; the mapper itself holds no
    state, so one instance can serve any number of build sessions.
    """

    def map_field(
        self,
        field: FieldDescriptor,
        registry: "SchemaRegistry",
        *,
        owner: str = "",
    ) -> MappedProperty:
        """Map one field of a composite.

        Required-ness comes from the declared nullability only, whether the
        result is inline or a reference.
        """
        subject = f"{owner}.{field.name}" if owner else field.name
        required = not field.nullable

        if is_named_type(field.type):
            ref = self._reference_to(field.type.name, registry, subject=subject)
            if ref is not None:
                return MappedProperty(ref, required, True)
            schema: Property = SchemaEntry(type=SchemaType.OBJECT)
        else:
            schema = self.map_type(field.type, registry, subject=subject)

        if isinstance(schema, SchemaEntry):
            if field.description:
                schema.description = field.description
            if field.example is not None:
                schema.example = self._convert_example(field.example, registry, subject)
        return MappedProperty(schema, required, False)

    def map_type(
        self,
        type_ref: TypeRef,
        registry: "SchemaRegistry",
        *,
        subject: str = "",
    ) -> Property:
        """Map a bare declared type."""
        name = type_ref.name
        if name in PRIMITIVE_TYPES:
            return SchemaEntry(type=PRIMITIVE_TYPES[name])
        if name in OPAQUE_TYPES:
            return SchemaEntry(type=SchemaType.OBJECT)
        if name in CONTAINER_TYPES:
            array = SchemaEntry(type=SchemaType.ARRAY)
            if registry.config.auto_generate_array_items:
                array.items = self._array_items(type_ref, registry, subject=subject)
            return array
        ref = self._reference_to(name, registry, subject=subject or name)
        if ref is None:
            return SchemaEntry(type=SchemaType.OBJECT)
        return ref

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def _array_items(
        self,
        container: TypeRef,
        registry: "SchemaRegistry",
        *,
        subject: str,
    ) -> Optional[Property]:
        if not container.arguments:
            # No type argument: leave ``items`` unset rather than guess.
            return None
        element = container.arguments[0]
        if element.name in CONTAINER_TYPES:
            return self._nested_array(element, registry, subject=subject)
        return self._element(element, registry, subject=subject)

    def _nested_array(
        self,
        inner: TypeRef,
        registry: "SchemaRegistry",
        *,
        subject: str,
    ) -> SchemaEntry:
        nested = SchemaEntry(type=SchemaType.ARRAY)
        if not inner.arguments:
            return nested
        element = inner.arguments[0]
        if element.name in CONTAINER_TYPES:
            # Only one level of nesting is resolved.
            nested.items = SchemaEntry(type=SchemaType.ARRAY)
        else:
            nested.items = self._element(element, registry, subject=subject)
        return nested

    def _element(
        self,
        element: TypeRef,
        registry: "SchemaRegistry",
        *,
        subject: str,
    ) -> Optional[Property]:
        if element.name in PRIMITIVE_TYPES:
            return SchemaEntry(type=PRIMITIVE_TYPES[element.name])
        if element.name in OPAQUE_TYPES:
            return SchemaEntry(type=SchemaType.OBJECT)
        # An element type that cannot be resolved leaves ``items`` unset.
        return self._reference_to(element.name, registry, subject=subject, fallback="items omitted")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reference_to(
        self,
        name: str,
        registry: "SchemaRegistry",
        *,
        subject: str,
        fallback: str = "rendered as inline object",
    ) -> Optional[Reference]:
        descriptor = registry.resolve(name)
        if descriptor is None:
            logger.warning("Type %r used by %s is not in the catalog; %s", name, subject or "a property", fallback)
            registry.record(subject or name, f"unknown type {name!r} {fallback}")
            return None
        return registry.register_schema(descriptor)

    @staticmethod
    def _convert_example(value: object, registry: "SchemaRegistry", subject: str) -> object:
        conversion = to_json_value(value)
        for note in conversion.diagnostics:
            registry.record(subject, note)
        return conversion.value
