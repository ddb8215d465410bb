"""
typesynth: synthesize OpenAPI component schemas from type descriptors.

Main Components:
    - typesynth.descriptors: type descriptors and catalog loading
    - typesynth.reflect: descriptors from dataclasses, pydantic models and enums
    - typesynth.schemas: registry, synthesizer, property mapper, unions
    - typesynth.document: components assembly and JSON / YAML rendering
"""

from .components import ComponentsBuilder
from .descriptors import FieldDescriptor, TypeCatalog, TypeDescriptor, TypeKind, TypeRef, load_catalog, parse_catalog
from .document import build_document, to_json, to_yaml
from .schemas import Reference, SchemaEntry, SchemaRegistry

__version__ = "0.3.0"

__all__ = [
    "ComponentsBuilder",
    "FieldDescriptor",
    "Reference",
    "SchemaEntry",
    "SchemaRegistry",
    "TypeCatalog",
    "TypeDescriptor",
    "TypeKind",
    "TypeRef",
    "build_document",
    "load_catalog",
    "parse_catalog",
    "to_json",
    "to_yaml",
]
