"""Type classification and schema generation.

Each descriptor follows exactly one generation path:

- ``variant_set``: every variant is registered first, then a discriminated
  union is built over them.
- ``enumeration``: a string schema, with the constant list when enabled.
- ``composite``: an object schema whose fields are mapped in declared
  order; named field types become ``$ref`` properties.

All recursion goes back through the registry passed in by the caller, which
is what keeps self-referential and mutually-referential types finite.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple, Optional

from ..descriptors import TypeDescriptor, TypeKind
from ..values import to_json_value
from .models import SchemaEntry, SchemaType
from .properties import PropertyMapper
from .unions import DiscriminatedUnionBuilder

if TYPE_CHECKING:
    from .registry import SchemaRegistry

logger = logging.getLogger(__name__)

__all__ = [
    "SchemaSynthesisError",
    "GenerationPath",
    "Classification",
    "SchemaSynthesizer",
]


class SchemaSynthesisError(ValueError):
    """A descriptor cannot be turned into a schema.

    Raised for one type only; the registry contains it and records a
    diagnostic instead of aborting the whole build.
    """


class GenerationPath(str, Enum):
    VARIANT_SET = "variant_set"
    ENUMERATION = "enumeration"
    COMPOSITE = "composite"


class Classification(NamedTuple):
    path: GenerationPath
    variants: tuple[TypeDescriptor, ...] = ()


class SchemaSynthesizer:
    """Drives composite / enumeration / union generation for one descriptor."""

    def __init__(
        self,
        properties: Optional[PropertyMapper] = None,
        unions: Optional[DiscriminatedUnionBuilder] = None,
    ) -> None:
        self.properties = properties or PropertyMapper()
        self.unions = unions or DiscriminatedUnionBuilder()

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, descriptor: TypeDescriptor, registry: "SchemaRegistry") -> Classification:
        """Pick the generation path and resolve variants where relevant.

        A variant set that ends up with no variants at all is generated as
        a composite.
        """
        if descriptor.kind is TypeKind.ENUMERATION:
            return Classification(GenerationPath.ENUMERATION)
        if descriptor.kind is TypeKind.VARIANT_SET:
            variants = self._declared_variants(descriptor, registry)
            if not variants and registry.config.infer_variants_from_nested:
                variants = self._nested_variants(descriptor, registry)
            if variants:
                return Classification(GenerationPath.VARIANT_SET, tuple(variants))
            logger.warning("Variant set %r has no variants; generating it as an object", descriptor.name)
        return Classification(GenerationPath.COMPOSITE)

    def _declared_variants(
        self,
        descriptor: TypeDescriptor,
        registry: "SchemaRegistry",
    ) -> list[TypeDescriptor]:
        resolved: list[TypeDescriptor] = []
        for variant in descriptor.variants:
            if isinstance(variant, TypeDescriptor):
                resolved.append(variant)
                continue
            found = registry.resolve(variant)
            if found is None:
                raise SchemaSynthesisError(
                    f"Variant {variant!r} of {descriptor.name!r} is not in the type catalog"
                )
            resolved.append(found)
        return resolved

    def _nested_variants(
        self,
        descriptor: TypeDescriptor,
        registry: "SchemaRegistry",
    ) -> list[TypeDescriptor]:
        # Only structured nested declarations qualify; enums and unknown
        # names are never treated as alternatives.
        inferred: list[TypeDescriptor] = []
        for name in descriptor.nested:
            found = registry.resolve(name)
            if found is None or found.name == descriptor.name:
                continue
            if found.kind in (TypeKind.COMPOSITE, TypeKind.VARIANT_SET):
                inferred.append(found)
        if inferred:
            logger.warning(
                "Variant set %r declares no variants; inferred %s from nested declarations",
                descriptor.name,
                [v.name for v in inferred],
            )
        return inferred

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def synthesize(
        self,
        descriptor: TypeDescriptor,
        registry: "SchemaRegistry",
        *,
        discriminator: Optional[str] = None,
    ) -> SchemaEntry:
        classification = self.classify(descriptor, registry)
        if classification.path is GenerationPath.VARIANT_SET:
            entry = self._variant_set(descriptor, classification.variants, registry, discriminator)
        elif classification.path is GenerationPath.ENUMERATION:
            entry = self._enumeration(descriptor, registry)
        else:
            entry = self._composite(descriptor, registry)

        if descriptor.example is not None:
            conversion = to_json_value(descriptor.example)
            for note in conversion.diagnostics:
                registry.record(descriptor.name, note)
            entry.example = conversion.value
        return entry

    def _variant_set(
        self,
        descriptor: TypeDescriptor,
        variants: tuple[TypeDescriptor, ...],
        registry: "SchemaRegistry",
        discriminator: Optional[str],
    ) -> SchemaEntry:
        for variant in variants:
            registry.register_schema(variant)
        property_name = discriminator or registry.config.discriminator_property_name
        return self.unions.build(variants, property_name, descriptor.description)

    def _enumeration(self, descriptor: TypeDescriptor, registry: "SchemaRegistry") -> SchemaEntry:
        entry = SchemaEntry(type=SchemaType.STRING, description=descriptor.description)
        if registry.config.auto_generate_enum_values:
            entry.enum = list(descriptor.constants)
        return entry

    def _composite(self, descriptor: TypeDescriptor, registry: "SchemaRegistry") -> SchemaEntry:
        entry = SchemaEntry(type=SchemaType.OBJECT, description=descriptor.description)
        properties: dict = {}
        required: list[str] = []
        # A $ref carries no nullability, so reference fields are tracked
        # separately and merged into ``required`` once, at the end.
        reference_required: list[str] = []

        for field in descriptor.fields:
            if field.name in properties:
                raise SchemaSynthesisError(
                    f"Duplicate field {field.name!r} in {descriptor.name!r}"
                )
            mapped = self.properties.map_field(field, registry, owner=descriptor.name)
            properties[field.name] = mapped.schema
            if mapped.required:
                (reference_required if mapped.is_reference else required).append(field.name)

        merged = list(dict.fromkeys(required + reference_required))
        entry.properties = properties or None
        entry.required = merged or None
        return entry
