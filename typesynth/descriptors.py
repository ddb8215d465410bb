"""Type descriptors: the pre-extracted input of the schema synthesis engine.

A *type catalog* is a flat, name-indexed collection of
:class:`TypeDescriptor` objects.  Descriptors are plain data: they are either
written by hand in a YAML/JSON catalog file or produced once from Python
classes by :mod:`typesynth.reflect`.  Synthesis never introspects live
classes, it only walks these descriptors.

Public API
----------
- :class:`TypeKind` / :class:`TypeRef` / :class:`FieldDescriptor` /
  :class:`TypeDescriptor` / :class:`TypeCatalog`: descriptor models.
- :func:`parse_catalog`: parse YAML or JSON text into a :class:`TypeCatalog`.
- :func:`load_catalog`: same, but reads from a file path.

Catalog format
--------------
.. code-block:: yaml

    types:
      - name: TreeNode
        fields:
          - {name: value, type: str}
          - {name: children, type: "list[TreeNode]", nullable: true}
      - name: Shape
        kind: variant_set
        variants:
          - name: Circle
            fields: [{name: radius, type: double}]
          - Rectangle
"""

from __future__ import annotations

import json
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, model_validator

__all__ = [
    "CatalogError",
    "TypeKind",
    "TypeRef",
    "FieldDescriptor",
    "TypeDescriptor",
    "TypeCatalog",
    "parse_catalog",
    "load_catalog",
]


class CatalogError(ValueError):
    """Raised when a catalog file cannot be read or does not validate."""


class TypeKind(str, Enum):
    """How a described type is shaped."""

    COMPOSITE = "composite"
    ENUMERATION = "enumeration"
    VARIANT_SET = "variant_set"


# ---------------------------------------------------------------------------
# Type strings
# ---------------------------------------------------------------------------

_GENERIC_RE = re.compile(r"^([A-Za-z_][\w.]*)\[(.*)\]$")
_NAME_RE = re.compile(r"^[A-Za-z_][\w.]*$")


def _split_arguments(raw: str) -> list[str]:
    """Split ``"str, list[int]"`` on top-level commas only."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in raw:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth < 0:
                raise ValueError(f"Unbalanced brackets in type arguments: {raw!r}")
        if ch == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    if depth != 0:
        raise ValueError(f"Unbalanced brackets in type arguments: {raw!r}")
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    if any(not p for p in parts):
        raise ValueError(f"Empty type argument in {raw!r}")
    return parts


def _parse_type_string(text: str) -> dict[str, Any]:
    """Turn ``list[list[int]]`` into nested ``{"name", "arguments"}`` dicts."""
    raw = re.sub(r"\s+", "", text)
    if _NAME_RE.match(raw):
        return {"name": raw, "arguments": []}
    m = _GENERIC_RE.match(raw)
    if m:
        # Element types carry no nullability; ``list[int?]`` reads as ``list[int]``.
        arguments = [a[:-1] if a.endswith("?") else a for a in _split_arguments(m.group(2))]
        return {"name": m.group(1), "arguments": arguments}
    raise ValueError(f"Unsupported type string: {text!r}")


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


class TypeRef(BaseModel):
    """Declared type of a field: a name plus ordered type arguments.

    Accepts a bare type string wherever a ``TypeRef`` is expected, so
    ``FieldDescriptor(name="xs", type="list[int]")`` works as well as the
    explicit ``{"name": "list", "arguments": [{"name": "int"}]}`` form.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: List["TypeRef"] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_type_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return _parse_type_string(data)
        return data

    @classmethod
    def parse(cls, text: str) -> "TypeRef":
        return cls.model_validate(text)

    def __str__(self) -> str:
        if not self.arguments:
            return self.name
        return f"{self.name}[{', '.join(str(a) for a in self.arguments)}]"


TypeRef.model_rebuild()


class FieldDescriptor(BaseModel):
    """One declared field of a composite type.

    A trailing ``?`` on a type string (``"TreeNode?"``) is shorthand for
    ``nullable: true``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeRef
    nullable: bool = False
    description: Optional[str] = None
    example: Any = None

    @model_validator(mode="before")
    @classmethod
    def _nullable_shorthand(cls, data: Any) -> Any:
        if isinstance(data, dict):
            declared = data.get("type")
            if isinstance(declared, str) and declared.strip().endswith("?"):
                data = {**data, "type": declared.strip()[:-1], "nullable": True}
        return data


class TypeDescriptor(BaseModel):
    """Immutable description of one named type.

    ``variants`` holds either inline descriptors or the names of other
    catalog entries.  ``nested`` lists the names of types declared inside
    this one; it is only consulted when a variant set declares no variants.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    kind: TypeKind = TypeKind.COMPOSITE
    description: Optional[str] = None
    fields: List[FieldDescriptor] = Field(default_factory=list)
    constants: List[str] = Field(default_factory=list)
    variants: List[Union["TypeDescriptor", str]] = Field(default_factory=list)
    nested: List[str] = Field(default_factory=list)
    example: Any = None


TypeDescriptor.model_rebuild()


class TypeCatalog(BaseModel):
    """Ordered descriptors plus a name index covering inline variants."""

    types: List[TypeDescriptor] = Field(default_factory=list)

    _index: Dict[str, TypeDescriptor] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        for descriptor in self.types:
            self._index_descriptor(descriptor)

    def _index_descriptor(self, descriptor: TypeDescriptor) -> None:
        if descriptor.name:
            # Same simple name twice: the later declaration wins.
            self._index[descriptor.name] = descriptor
        for variant in descriptor.variants:
            if isinstance(variant, TypeDescriptor):
                self._index_descriptor(variant)

    def get(self, name: str) -> Optional[TypeDescriptor]:
        return self._index.get(name)

    def names(self) -> list[str]:
        """Names of the top-level descriptors, in declaration order."""
        return [d.name for d in self.types if d.name]

    def all_names(self) -> list[str]:
        return list(self._index)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._index)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def parse_catalog(content: str, *, fmt: str = "yaml") -> TypeCatalog:
    """Parse catalog text into a :class:`TypeCatalog`.

    Parameters
    ----------
    content:
        Raw YAML or JSON text.  The document is either a mapping with a
        ``types`` list or a bare list of type descriptors.
    fmt:
        ``"yaml"`` or ``"json"``.

    Raises
    ------
    CatalogError
        When the text cannot be parsed or does not describe valid types.
    """
    try:
        if fmt == "json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise CatalogError(f"Invalid {fmt} catalog: {exc}") from exc

    if data is None:
        data = {"types": []}
    if isinstance(data, list):
        data = {"types": data}
    if not isinstance(data, dict):
        raise CatalogError("Catalog root must be a mapping with a 'types' list.")

    try:
        return TypeCatalog.model_validate(data)
    except ValidationError as exc:
        raise CatalogError(f"Invalid type catalog: {exc}") from exc


def load_catalog(path: str | Path) -> TypeCatalog:
    """Read a ``.yaml`` / ``.yml`` / ``.json`` catalog file."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"Cannot read catalog {path}: {exc}") from exc
    fmt = "json" if path.suffix.lower() == ".json" else "yaml"
    return parse_catalog(content, fmt=fmt)
