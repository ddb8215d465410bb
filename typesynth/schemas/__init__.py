"""Type-to-schema synthesis engine.

Main components:
    - SchemaRegistry: name-keyed entry table and cycle guard; the entry point.
    - SchemaSynthesizer: classifies descriptors and drives generation.
    - PropertyMapper: maps field types to inline, ``$ref`` or array schemas.
    - DiscriminatedUnionBuilder: ``oneOf`` + discriminator for variant sets.
"""

from .models import SCHEMA_REF_PREFIX, Diagnostic, Discriminator, Reference, SchemaEntry, SchemaType
from .properties import MappedProperty, PropertyMapper
from .registry import SchemaRegistry
from .synthesizer import Classification, GenerationPath, SchemaSynthesisError, SchemaSynthesizer
from .unions import DEFAULT_DISCRIMINATOR, DiscriminatedUnionBuilder

__all__ = [
    "SCHEMA_REF_PREFIX",
    "DEFAULT_DISCRIMINATOR",
    "Classification",
    "Diagnostic",
    "Discriminator",
    "DiscriminatedUnionBuilder",
    "GenerationPath",
    "MappedProperty",
    "PropertyMapper",
    "Reference",
    "SchemaEntry",
    "SchemaRegistry",
    "SchemaSynthesisError",
    "SchemaSynthesizer",
    "SchemaType",
]
