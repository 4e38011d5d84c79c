"""
schema-enforcer — enforcement entry points

File: src/schema_enforcer/core/enforcer.py

Purpose
- Normalize a schema once, validate the initial value, and hand back the enforced root.

Functional requirements
- Array/object schemas default a missing initial value to an empty container (or the
  schema ``default`` when defaults are in use).
- Primitive schemas need an initial value; the validated value itself is returned.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from schema_enforcer.config.options import EnforcementOptions
from schema_enforcer.core.containers import (
    EnforcedArray,
    EnforcedContainer,
    EnforcedObject,
    to_plain,
)
from schema_enforcer.core.defaults import apply_defaults, default_for
from schema_enforcer.core.schema import MISSING, NormalizedSchema, SchemaKind, normalize
from schema_enforcer.core.validator import validate_value
from schema_enforcer.errors import EnforcementError
from schema_enforcer.observability import get_logger

_LOGGER = get_logger(__name__)

SchemaLike = Mapping[str, Any] | NormalizedSchema
OptionsLike = EnforcementOptions | Mapping[str, object] | None


def enforce(schema: SchemaLike, options: OptionsLike = None, initial: Any = MISSING) -> Any:
    """Return ``initial`` under live enforcement of ``schema``.

    Array and object schemas produce an ``EnforcedArray``/``EnforcedObject``. Any other
    schema kind validates ``initial`` and returns it unchanged.
    """

    normalized = normalize(schema, options)
    if initial is MISSING and normalized.has_default:
        initial = default_for(normalized)

    if normalized.kind is SchemaKind.ARRAY:
        enforced: Any = EnforcedArray(normalized, initial)
    elif normalized.kind is SchemaKind.OBJECT:
        enforced = EnforcedObject(normalized, initial)
    else:
        if initial is MISSING:
            raise EnforcementError(
                f"an initial value is required to enforce a {normalized.kind} schema"
            )
        enforced = apply_defaults(normalized, initial)
        validate_value(normalized, enforced)
        return enforced

    _LOGGER.debug("schema_enforced", kind=str(normalized.kind), size=len(enforced))
    return enforced


def validate(schema: SchemaLike, value: Any, options: OptionsLike = None) -> None:
    """Raise ``SchemaViolationError`` unless ``value`` satisfies ``schema``."""

    validate_value(normalize(schema, options), value)


def is_enforced(value: object, kind: SchemaKind | str | None = None) -> bool:
    """Whether ``value`` is an enforced container (optionally of ``kind``)."""

    actual = enforcement_kind(value)
    if actual is None:
        return False
    return kind is None or actual == SchemaKind(kind)


def enforcement_kind(value: object) -> SchemaKind | None:
    if isinstance(value, EnforcedContainer):
        return value.enforcement_kind
    return None


__all__ = [
    "OptionsLike",
    "SchemaLike",
    "enforce",
    "enforcement_kind",
    "is_enforced",
    "to_plain",
    "validate",
]
