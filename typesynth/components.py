"""Assembly of the ``components`` section.

:class:`ComponentsBuilder` accumulates schemas (synthesized through a
:class:`~typesynth.schemas.SchemaRegistry` or supplied by hand), security
schemes and named examples, and produces a :class:`Components` model with
empty sections omitted.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .config import SynthConfig
from .descriptors import TypeCatalog, TypeDescriptor
from .schemas import Reference, SchemaEntry, SchemaRegistry
from .values import Conversion, to_json_value

logger = logging.getLogger(__name__)

__all__ = ["SecurityScheme", "Example", "Components", "ComponentsBuilder"]


class SecurityScheme(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    scheme: Optional[str] = None
    bearer_format: Optional[str] = Field(None, alias="bearerFormat")


class Example(BaseModel):
    summary: Optional[str] = None
    description: Optional[str] = None
    value: Any = None


class Components(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schemas: Optional[Dict[str, SchemaEntry]] = None
    security_schemes: Optional[Dict[str, SecurityScheme]] = Field(None, alias="securitySchemes")
    examples: Optional[Dict[str, Example]] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ComponentsBuilder:
    """Collects schemas, security schemes and examples for one document."""

    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        *,
        catalog: Optional[TypeCatalog] = None,
        config: Optional[SynthConfig] = None,
    ) -> None:
        self.registry = registry if registry is not None else SchemaRegistry(catalog=catalog, config=config)
        self._manual: dict[str, SchemaEntry] = {}
        self._security_schemes: dict[str, SecurityScheme] = {}
        self._examples: dict[str, Example] = {}

    # --- schemas ---------------------------------------------------------

    def schema(self, name: str, entry: SchemaEntry) -> None:
        """Add a hand-written schema; it wins over a synthesized one."""
        self._manual[name] = entry

    def schema_for(
        self,
        descriptor: Union[TypeDescriptor, str],
        discriminator: Optional[str] = None,
    ) -> Optional[Reference]:
        """Synthesize and register a descriptor (or a catalog type name)."""
        if isinstance(descriptor, str):
            return self.registry.register_named(descriptor, discriminator=discriminator)
        return self.registry.register_schema(descriptor, discriminator=discriminator)

    def sealed_schema(self, descriptor: Union[TypeDescriptor, str], discriminator: str) -> Optional[Reference]:
        return self.schema_for(descriptor, discriminator)

    def schema_without_array_items(self, descriptor: Union[TypeDescriptor, str]) -> Optional[Reference]:
        with self.registry.override(auto_generate_array_items=False):
            return self.schema_for(descriptor)

    def schema_without_enum_values(self, descriptor: Union[TypeDescriptor, str]) -> Optional[Reference]:
        with self.registry.override(auto_generate_enum_values=False):
            return self.schema_for(descriptor)

    # --- security / examples ---------------------------------------------

    def security_scheme(
        self,
        name: str,
        type: str,
        scheme: Optional[str] = None,
        bearer_format: Optional[str] = None,
    ) -> None:
        self._security_schemes[name] = SecurityScheme(type=type, scheme=scheme, bearer_format=bearer_format)

    def example(
        self,
        name: str,
        value: Any,
        summary: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Conversion:
        """Add a named example; the value is converted best-effort."""
        conversion = to_json_value(value)
        for note in conversion.diagnostics:
            self.registry.record(f"examples.{name}", note)
        self._examples[name] = Example(summary=summary, description=description, value=conversion.value)
        return conversion

    # --- build -----------------------------------------------------------

    def build(self) -> Components:
        schemas = {**self.registry.schemas, **self._manual}
        return Components(
            schemas=schemas or None,
            security_schemes=self._security_schemes or None,
            examples=self._examples or None,
        )
