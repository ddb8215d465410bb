"""Best-effort conversion of example values into JSON-compatible data.

Example values embedded in a document (``example`` on a schema or property,
named ``components.examples``) can be arbitrary Python objects.  Conversion
never raises: a field that cannot be read is skipped with a note, a nested
value that cannot be converted becomes a placeholder, and a value that
cannot be converted at all becomes a sentinel string.  The outcome is
reported through :class:`Conversion` so callers can branch on it without
inspecting strings.
"""

from __future__ import annotations

import base64
import dataclasses
import datetime
import decimal
import inspect
import logging
import uuid
from collections.abc import Mapping
from enum import Enum
from pathlib import PurePath
from typing import Any, Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)

__all__ = ["Conversion", "to_json_value", "sentinel_for"]

SENTINEL_PREFIX = "SERIALIZATION_FAILED"


@dataclasses.dataclass(frozen=True)
class Conversion:
    """Result of :func:`to_json_value`."""

    value: Any
    diagnostics: tuple[str, ...] = ()
    failed: bool = False

    @property
    def status(self) -> Literal["clean", "partial", "failed"]:
        if self.failed:
            return "failed"
        return "partial" if self.diagnostics else "clean"

    @property
    def ok(self) -> bool:
        return self.status == "clean"


def sentinel_for(value: Any, exc: BaseException) -> str:
    return f"{SENTINEL_PREFIX}[{type(value).__name__}]: {exc}"


def to_json_value(value: Any) -> Conversion:
    """Convert ``value`` to JSON-compatible data without raising."""
    notes: list[str] = []
    try:
        converted = _convert(value, notes, path="$", active=set())
    except Exception as exc:
        logger.warning("Example value of type %s could not be converted: %s", type(value).__name__, exc)
        notes.append(f"$: {exc}")
        return Conversion(sentinel_for(value, exc), tuple(notes), failed=True)
    return Conversion(converted, tuple(notes))


def _convert(value: Any, notes: list[str], *, path: str, active: set[int]) -> Any:
    if isinstance(value, Enum):
        return value.name
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (uuid.UUID, decimal.Decimal, PurePath)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")

    if id(value) in active:
        notes.append(f"{path}: cyclic reference replaced with null")
        return None
    active.add(id(value))
    try:
        if isinstance(value, Mapping):
            return {
                str(key): _convert_nested(item, notes, path=f"{path}.{key}", active=active)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple, set, frozenset)):
            return [
                _convert_nested(item, notes, path=f"{path}[{index}]", active=active)
                for index, item in enumerate(value)
            ]
        if isinstance(value, BaseModel):
            try:
                return value.model_dump(mode="json")
            except Exception as exc:
                logger.debug("model_dump failed for %s, reading fields instead: %s", type(value).__name__, exc)
        return _convert_object(value, notes, path=path, active=active)
    finally:
        active.discard(id(value))


def _convert_nested(value: Any, notes: list[str], *, path: str, active: set[int]) -> Any:
    try:
        return _convert(value, notes, path=path, active=active)
    except Exception as exc:
        notes.append(f"{path}: {exc}")
        return sentinel_for(value, exc)


def _public_fields(value: Any) -> list[str]:
    if dataclasses.is_dataclass(value):
        return [f.name for f in dataclasses.fields(value)]
    names: list[str] = []
    if isinstance(value, BaseModel):
        names.extend(type(value).model_fields)
    elif hasattr(value, "__dict__"):
        names.extend(n for n in vars(value) if not n.startswith("_"))
    for name, member in inspect.getmembers(type(value)):
        if isinstance(member, property) and not name.startswith("_") and name not in names:
            names.append(name)
    return names


def _convert_object(value: Any, notes: list[str], *, path: str, active: set[int]) -> dict[str, Any]:
    names = _public_fields(value)
    if not names:
        raise TypeError(f"{type(value).__name__} has no readable fields")

    out: dict[str, Any] = {}
    for name in names:
        try:
            item = getattr(value, name)
        except Exception as exc:
            logger.debug("Skipping field %r of %s: %s", name, type(value).__name__, exc)
            notes.append(f"{path}.{name}: skipped ({exc})")
            continue
        out[name] = _convert_nested(item, notes, path=f"{path}.{name}", active=active)
    return out
