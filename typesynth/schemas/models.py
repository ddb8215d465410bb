"""Schema entry models rendered into ``components.schemas``.

These models mirror the subset of the OpenAPI schema object that the
synthesis engine emits.  Python attribute names are snake_case; the
OpenAPI key names (``$ref``, ``oneOf``, ``propertyName``, ``not``) are
aliases, and :meth:`SchemaEntry.to_dict` renders with them while dropping
unset keys.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "SCHEMA_REF_PREFIX",
    "SchemaType",
    "Reference",
    "Discriminator",
    "SchemaEntry",
    "Diagnostic",
]

SCHEMA_REF_PREFIX = "#/components/schemas/"


class SchemaType(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"


class Reference(BaseModel):
    """A ``$ref`` pointer into the registry; never an owned schema."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ref: str = Field(..., alias="$ref")

    @classmethod
    def to(cls, name: str) -> "Reference":
        return cls(ref=f"{SCHEMA_REF_PREFIX}{name}")

    @property
    def name(self) -> str:
        """Schema name the reference points at."""
        return self.ref.rsplit("/", 1)[-1]

    def to_dict(self) -> dict[str, Any]:
        return {"$ref": self.ref}


class Discriminator(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_name: str = Field(..., alias="propertyName")
    # variant name -> reference path
    mapping: Dict[str, str] = Field(default_factory=dict)


class SchemaEntry(BaseModel):
    """One schema object: a finalized registry entry or an inline property."""

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[SchemaType] = None
    format: Optional[str] = None
    description: Optional[str] = None
    properties: Optional[Dict[str, Union[Reference, "SchemaEntry"]]] = None
    required: Optional[List[str]] = None
    items: Optional[Union[Reference, "SchemaEntry"]] = None
    one_of: Optional[List[Reference]] = Field(None, alias="oneOf")
    all_of: Optional[List[Union[Reference, "SchemaEntry"]]] = Field(None, alias="allOf")
    any_of: Optional[List[Union[Reference, "SchemaEntry"]]] = Field(None, alias="anyOf")
    not_: Optional[Union[Reference, "SchemaEntry"]] = Field(None, alias="not")
    discriminator: Optional[Discriminator] = None
    example: Any = None
    examples: Optional[Dict[str, Any]] = None
    enum: Optional[List[str]] = None

    def to_dict(self) -> dict[str, Any]:
        """Render with OpenAPI key names, omitting unset keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


SchemaEntry.model_rebuild()


class Diagnostic(BaseModel):
    """A contained failure: what was affected and why."""

    model_config = ConfigDict(frozen=True)

    subject: str
    message: str

    def __str__(self) -> str:
        return f"{self.subject}: {self.message}"
