"""Schema registry: the name-keyed table of one document build.

The registry is the only mutable state of a build.  It owns:

- the finalized entries, one per type name;
- the set of names whose synthesis is currently on the call stack.

``register_schema`` consults both before recursing, which is the sole
mechanism that stops self-referential or mutually-referential type graphs
from recursing forever.  One registry serves exactly one build on one
thread; give concurrent builds their own instance.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from ..config import SynthConfig, get_config
from ..descriptors import TypeCatalog, TypeDescriptor
from ..utils.logging import log_schema_entry
from .models import Diagnostic, Reference, SchemaEntry, SchemaType
from .synthesizer import SchemaSynthesisError, SchemaSynthesizer

logger = logging.getLogger(__name__)

__all__ = ["SchemaRegistry"]


class SchemaRegistry:
    """Finalized schema entries plus the in-progress cycle guard."""

    def __init__(
        self,
        catalog: Optional[TypeCatalog] = None,
        config: Optional[SynthConfig] = None,
        synthesizer: Optional[SchemaSynthesizer] = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else TypeCatalog()
        self.config = config if config is not None else get_config()
        self.synthesizer = synthesizer or SchemaSynthesizer()
        self._entries: dict[str, SchemaEntry] = {}
        self._in_progress: set[str] = set()
        self._registered: dict[str, TypeDescriptor] = {}
        self._diagnostics: list[Diagnostic] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_schema(
        self,
        descriptor: TypeDescriptor,
        *,
        discriminator: Optional[str] = None,
    ) -> Optional[Reference]:
        """Register ``descriptor`` and return a reference to its entry.

        Idempotent: a finalized name is returned without re-synthesis, and a
        name that is already being synthesized further up the call stack is
        returned without recursing.  A descriptor without a name is ignored
        and yields ``None``.

        ``discriminator`` overrides the configured discriminator property
        for this descriptor only; variant sets reached recursively use the
        configured default.
        """
        name = descriptor.name
        if not name:
            logger.debug("Ignoring descriptor without a name")
            return None
        if name in self._entries:
            return Reference.to(name)
        if name in self._in_progress:
            logger.debug("Cycle through %r; emitting reference", name)
            return Reference.to(name)

        self._index(descriptor)
        self._in_progress.add(name)
        try:
            try:
                entry = self.synthesizer.synthesize(descriptor, self, discriminator=discriminator)
            except SchemaSynthesisError as exc:
                logger.warning("Schema synthesis failed for %r: %s", name, exc)
                self.record(name, str(exc))
                entry = SchemaEntry(type=SchemaType.OBJECT, description=descriptor.description)
            self._entries[name] = entry
        finally:
            self._in_progress.discard(name)

        if logger.isEnabledFor(logging.DEBUG):
            log_schema_entry(logger, name, json.dumps(entry.to_dict(), indent=2))
        return Reference.to(name)

    def _index(self, descriptor: TypeDescriptor) -> None:
        """Make ``descriptor`` and its inline variants resolvable by name.

        Sibling variants may refer to each other before either is registered.
        """
        if descriptor.name:
            self._registered.setdefault(descriptor.name, descriptor)
        for variant in descriptor.variants:
            if isinstance(variant, TypeDescriptor):
                self._index(variant)

    def register_named(self, name: str, *, discriminator: Optional[str] = None) -> Optional[Reference]:
        """Resolve ``name`` through the catalog and register it."""
        descriptor = self.resolve(name)
        if descriptor is None:
            logger.warning("Type %r is not in the catalog", name)
            self.record(name, "not in the type catalog")
            return None
        return self.register_schema(descriptor, discriminator=discriminator)

    def resolve(self, name: str) -> Optional[TypeDescriptor]:
        """Find the descriptor for ``name`` (explicitly registered first)."""
        found = self._registered.get(name)
        if found is not None:
            return found
        return self.catalog.get(name)

    @contextmanager
    def override(self, **changes: Any) -> Iterator["SchemaRegistry"]:
        """Temporarily swap in a copy of the configuration.

        Example
        -------
            with registry.override(auto_generate_array_items=False):
                registry.register_schema(matrix)
        """
        previous = self.config
        self.config = previous.model_copy(update=changes)
        try:
            yield self
        finally:
            self.config = previous

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def record(self, subject: str, message: str) -> None:
        self._diagnostics.append(Diagnostic(subject=subject, message=message))

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def schemas(self) -> Mapping[str, SchemaEntry]:
        return MappingProxyType(self._entries)

    @property
    def in_progress(self) -> frozenset[str]:
        return frozenset(self._in_progress)

    def get(self, name: str) -> Optional[SchemaEntry]:
        return self._entries.get(name)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {name: entry.to_dict() for name, entry in self._entries.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
