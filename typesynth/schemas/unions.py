"""Discriminated unions for closed variant sets."""

from __future__ import annotations

from typing import Optional, Sequence

from ..descriptors import TypeDescriptor
from .models import Discriminator, Reference, SchemaEntry

__all__ = ["DEFAULT_DISCRIMINATOR", "DiscriminatedUnionBuilder"]

DEFAULT_DISCRIMINATOR = "type"


class DiscriminatedUnionBuilder:
    """Builds ``oneOf`` plus a ``discriminator`` mapping from variants."""

    def build(
        self,
        variants: Sequence[TypeDescriptor],
        property_name: str = DEFAULT_DISCRIMINATOR,
        description: Optional[str] = None,
    ) -> SchemaEntry:
        """Return the union entry.

        ``oneOf`` follows the variant order.  The mapping is keyed by each
        variant's simple name; a later variant with the same name replaces
        the earlier mapping entry.  Variants without a name are skipped.
        """
        one_of: list[Reference] = []
        mapping: dict[str, str] = {}
        for variant in variants:
            if not variant.name:
                continue
            ref = Reference.to(variant.name)
            one_of.append(ref)
            mapping[variant.name] = ref.ref

        return SchemaEntry(
            one_of=one_of,
            discriminator=Discriminator(property_name=property_name, mapping=mapping),
            description=description,
        )
