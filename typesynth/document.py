"""Minimal API document and its JSON / YAML rendering.

Only ``openapi``, ``info`` and ``components`` are produced; paths and
operations are left to whatever consumes the generated components.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

import yaml
from pydantic import BaseModel

from .components import Components, ComponentsBuilder
from .config import SynthConfig, get_config
from .descriptors import TypeCatalog
from .schemas import Diagnostic

logger = logging.getLogger(__name__)

__all__ = ["Info", "ApiDocument", "DocumentBuild", "build_document", "to_json", "to_yaml"]


class Info(BaseModel):
    title: str
    version: str
    description: Optional[str] = None


class ApiDocument(BaseModel):
    openapi: str = "3.1.0"
    info: Info
    components: Optional[Components] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class DocumentBuild:
    document: ApiDocument
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def build_document(
    catalog: TypeCatalog,
    type_names: Optional[Iterable[str]] = None,
    *,
    title: str = "API",
    version: str = "1.0.0",
    description: Optional[str] = None,
    config: Optional[SynthConfig] = None,
    discriminator: Optional[str] = None,
) -> DocumentBuild:
    """Build a document whose components hold the schemas of ``type_names``.

    Every top-level catalog type is registered when ``type_names`` is not
    given.  Each call uses a fresh registry.
    """
    config = config or get_config()
    names = list(type_names) if type_names else catalog.names()
    builder = ComponentsBuilder(catalog=catalog, config=config)
    for name in names:
        builder.schema_for(name, discriminator=discriminator)

    components = builder.build()
    document = ApiDocument(
        openapi=config.openapi_version,
        info=Info(title=title, version=version, description=description),
        components=components if components.to_dict() else None,
    )
    logger.info("Built document with %d schemas", len(builder.registry))
    return DocumentBuild(document, builder.registry.diagnostics)


def _as_dict(document: Union[ApiDocument, dict[str, Any]]) -> dict[str, Any]:
    return document.to_dict() if isinstance(document, ApiDocument) else document


def to_json(document: Union[ApiDocument, dict[str, Any]], *, indent: int = 2) -> str:
    return json.dumps(_as_dict(document), indent=indent, ensure_ascii=False)


def to_yaml(document: Union[ApiDocument, dict[str, Any]]) -> str:
    return yaml.safe_dump(
        _as_dict(document),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
