"""
schema-enforcer — schema normalization

File: src/schema_enforcer/core/schema.py

Purpose
- Turn a raw Swagger/JSON-Schema mapping plus enforcement options into an immutable
  ``NormalizedSchema`` tree that the validator and the enforced containers consume.

What should be included in this file
- ``SchemaKind`` tag resolution (explicit ``type`` or inferred from structure).
- Facet filtering: a facet survives only when its option flag is on and the raw
  schema defines it.
- ``allOf`` resolution: object schemas always expose a non-empty branch list.
- Definition checks for malformed facets (bad type, pattern, bounds).

Functional requirements
- ``normalize`` on an already normalized schema returns the same instance.
- Every nested property/item/branch schema is itself normalized.

Non-functional requirements
- Pure transformation; the raw schema is never mutated.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from schema_enforcer.config.options import EnforcementOptions, resolve_options
from schema_enforcer.constants import SCHEMA_TYPES
from schema_enforcer.core.signature import Signature, member_signature
from schema_enforcer.errors import SchemaDefinitionError


class SchemaKind(StrEnum):
    """Resolved schema type tag; downstream code never re-infers it."""

    ARRAY = "array"
    OBJECT = "object"
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    BOOLEAN = "boolean"
    UNTYPED = "undefined"


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

CONTAINER_KINDS: Final[frozenset[SchemaKind]] = frozenset({SchemaKind.ARRAY, SchemaKind.OBJECT})
_NUMERIC_KINDS: Final[frozenset[SchemaKind]] = frozenset({SchemaKind.NUMBER, SchemaKind.INTEGER})
_EMPTY_PROPERTIES: Final[Mapping[str, NormalizedSchema]] = MappingProxyType({})


@dataclass(frozen=True, slots=True, eq=False)
class NormalizedSchema:
    """Immutable, facet-filtered, composition-resolved schema node.

    Object schemas keep their object facets on the branches in ``all_of``; a branch
    is itself an object-kind node with an empty ``all_of``.
    """

    kind: SchemaKind
    enum: tuple[object, ...] | None = None
    enum_signatures: frozenset[Signature] = frozenset()
    maximum: int | float | None = None
    exclusive_maximum: bool = False
    minimum: int | float | None = None
    exclusive_minimum: bool = False
    multiple_of: int | float | None = None
    max_length: int | None = None
    min_length: int | None = None
    pattern: str | None = None
    pattern_regex: re.Pattern[str] | None = field(default=None, repr=False)
    items: NormalizedSchema | None = None
    max_items: int | None = None
    min_items: int | None = None
    unique_items: bool = False
    properties: Mapping[str, NormalizedSchema] | None = None
    required: frozenset[str] = frozenset()
    additional_properties: NormalizedSchema | bool | None = None
    max_properties: int | None = None
    min_properties: int | None = None
    all_of: tuple[NormalizedSchema, ...] = ()
    declared_names: frozenset[str] = frozenset()
    default: object = MISSING

    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_KINDS

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def object_branches(self) -> tuple[NormalizedSchema, ...]:
        """Branches whose object facets apply to an object value."""

        return self.all_of or (self,)

    def property_schemas(self, name: str) -> tuple[NormalizedSchema, ...]:
        """Every branch-declared schema for property ``name``, in branch order."""

        found: list[NormalizedSchema] = []
        for branch in self.object_branches():
            if branch.properties is not None and name in branch.properties:
                found.append(branch.properties[name])
        return tuple(found)

    def is_required(self, name: str) -> bool:
        return any(name in branch.required for branch in self.object_branches())


def normalize(
    raw: Mapping[str, object] | NormalizedSchema,
    options: EnforcementOptions | Mapping[str, object] | None = None,
) -> NormalizedSchema:
    """Normalize ``raw`` under ``options``; normalized input is returned unchanged."""

    if isinstance(raw, NormalizedSchema):
        return raw
    return _Normalizer(resolve_options(options)).schema(raw, "")


class _Normalizer:
    __slots__ = ("_options",)

    def __init__(self, options: EnforcementOptions) -> None:
        self._options = options

    def schema(self, raw: object, path: str) -> NormalizedSchema:
        if isinstance(raw, NormalizedSchema):
            return raw
        if raw is True:
            return NormalizedSchema(kind=SchemaKind.UNTYPED)
        if not isinstance(raw, Mapping):
            raise SchemaDefinitionError(path, f"expected schema object, got {type(raw).__name__}")

        kind = _resolve_kind(raw, path)
        facets = self._facets(raw, path)
        default = raw["default"] if self._options.use_defaults and "default" in raw else MISSING

        if kind is SchemaKind.OBJECT:
            branches = self._object_branches(raw, path, facets)
            declared: set[str] = set()
            for branch in branches:
                if branch.properties is not None:
                    declared.update(branch.properties)
            return NormalizedSchema(
                kind=kind,
                all_of=tuple(branches),
                declared_names=frozenset(declared),
                default=default,
            )

        all_of = self._composition(raw, path)
        return NormalizedSchema(kind=kind, all_of=all_of, default=default, **facets)

    def _object_branches(
        self,
        raw: Mapping[str, object],
        path: str,
        facets: dict[str, object],
    ) -> list[NormalizedSchema]:
        facets.pop("items", None)
        own = NormalizedSchema(
            kind=SchemaKind.OBJECT,
            declared_names=frozenset(facets.get("properties") or ()),  # type: ignore[arg-type]
            **facets,  # type: ignore[arg-type]
        )
        if "allOf" not in raw:
            return [own]

        branches: list[NormalizedSchema] = []
        if _has_own_object_facets(own):
            branches.append(own)
        for branch in self._composition(raw, path):
            if branch.kind is SchemaKind.OBJECT:
                branches.extend(branch.object_branches())
            else:
                branches.append(branch)
        if not branches:
            branches.append(own)
        return branches

    def _composition(self, raw: Mapping[str, object], path: str) -> tuple[NormalizedSchema, ...]:
        raw_all_of = raw.get("allOf")
        if raw_all_of is None:
            return ()
        if not _is_list(raw_all_of) or not raw_all_of:
            raise SchemaDefinitionError(_join(path, "allOf"), "allOf must be a non-empty list")
        return tuple(
            self.schema(branch, _join(path, "allOf", str(index)))
            for index, branch in enumerate(raw_all_of)
        )

    def _facets(self, raw: Mapping[str, object], path: str) -> dict[str, object]:
        enabled = self._options.is_enabled
        out: dict[str, object] = {}

        if enabled("enum") and "enum" in raw:
            values = raw["enum"]
            if not _is_list(values):
                raise SchemaDefinitionError(_join(path, "enum"), "enum must be a list")
            out["enum"] = tuple(values)
            out["enum_signatures"] = frozenset(member_signature(value) for value in values)

        if enabled("maximum"):
            bound = _bound(raw, "maximum", "exclusiveMaximum", path, upper=True)
            if bound is not None:
                out["maximum"], out["exclusive_maximum"] = bound
        if enabled("minimum"):
            bound = _bound(raw, "minimum", "exclusiveMinimum", path, upper=False)
            if bound is not None:
                out["minimum"], out["exclusive_minimum"] = bound
        if enabled("multipleOf") and "multipleOf" in raw:
            divisor = _as_number(raw["multipleOf"], _join(path, "multipleOf"))
            if divisor <= 0:
                raise SchemaDefinitionError(_join(path, "multipleOf"), "must be > 0")
            out["multiple_of"] = divisor

        for facet, name in (
            ("maxLength", "max_length"),
            ("minLength", "min_length"),
            ("maxItems", "max_items"),
            ("minItems", "min_items"),
            ("maxProperties", "max_properties"),
            ("minProperties", "min_properties"),
        ):
            if enabled(facet) and facet in raw:
                out[name] = _as_count(raw[facet], _join(path, facet))

        if enabled("pattern") and "pattern" in raw:
            source = raw["pattern"]
            if not isinstance(source, str):
                raise SchemaDefinitionError(_join(path, "pattern"), "pattern must be a string")
            try:
                out["pattern_regex"] = re.compile(source)
            except re.error as exc:
                raise SchemaDefinitionError(_join(path, "pattern"), f"invalid pattern: {exc}") from exc
            out["pattern"] = source

        if enabled("uniqueItems") and "uniqueItems" in raw:
            flag = raw["uniqueItems"]
            if not isinstance(flag, bool):
                raise SchemaDefinitionError(_join(path, "uniqueItems"), "must be a boolean")
            out["unique_items"] = flag

        if "items" in raw:
            out["items"] = self._items(raw["items"], _join(path, "items"))

        self._object_facets(raw, path, out)
        return out

    def _items(self, raw_items: object, path: str) -> NormalizedSchema:
        if _is_list(raw_items):
            return self.schema({"allOf": list(raw_items)}, path)
        return self.schema(raw_items, path)

    def _object_facets(self, raw: Mapping[str, object], path: str, out: dict[str, object]) -> None:
        enforce_required = self._options.required
        required: set[str] = set()

        raw_properties = raw.get("properties")
        if raw_properties is not None:
            properties_path = _join(path, "properties")
            if not isinstance(raw_properties, Mapping):
                raise SchemaDefinitionError(properties_path, "properties must be an object")
            normalized: dict[str, NormalizedSchema] = {}
            for name, raw_property in raw_properties.items():
                if not isinstance(name, str):
                    raise SchemaDefinitionError(properties_path, "property names must be strings")
                normalized[name] = self.schema(raw_property, _join(properties_path, name))
                if (
                    enforce_required
                    and isinstance(raw_property, Mapping)
                    and raw_property.get("required") is True
                ):
                    required.add(name)
            out["properties"] = MappingProxyType(normalized) if normalized else _EMPTY_PROPERTIES

        raw_required = raw.get("required")
        if enforce_required and _is_list(raw_required):
            for name in raw_required:
                if not isinstance(name, str):
                    raise SchemaDefinitionError(
                        _join(path, "required"), "required entries must be strings"
                    )
                required.add(name)
        if required:
            out["required"] = frozenset(required)

        if self._options.additional_properties and "additionalProperties" in raw:
            additional = raw["additionalProperties"]
            if isinstance(additional, bool):
                out["additional_properties"] = additional
            else:
                out["additional_properties"] = self.schema(
                    additional, _join(path, "additionalProperties")
                )


def _resolve_kind(raw: Mapping[str, object], path: str) -> SchemaKind:
    declared = raw.get("type")
    if declared is not None:
        if not isinstance(declared, str) or declared not in SCHEMA_TYPES:
            raise SchemaDefinitionError(
                _join(path, "type"),
                f"unsupported type {declared!r}; expected one of {', '.join(SCHEMA_TYPES)}",
            )
        return SchemaKind(declared)
    if "items" in raw:
        return SchemaKind.ARRAY
    if "properties" in raw:
        return SchemaKind.OBJECT

    raw_all_of = raw.get("allOf")
    if _is_list(raw_all_of):
        kinds = {
            _resolve_kind(branch, _join(path, "allOf", str(index)))
            for index, branch in enumerate(raw_all_of)
            if isinstance(branch, Mapping)
        }
        kinds.discard(SchemaKind.UNTYPED)
        if len(kinds) == 1:
            return kinds.pop()
    return SchemaKind.UNTYPED


def _has_own_object_facets(branch: NormalizedSchema) -> bool:
    return (
        branch.properties is not None
        or bool(branch.required)
        or branch.additional_properties is not None
        or branch.max_properties is not None
        or branch.min_properties is not None
        or branch.enum is not None
    )


def _bound(
    raw: Mapping[str, object],
    key: str,
    exclusive_key: str,
    path: str,
    *,
    upper: bool,
) -> tuple[int | float, bool] | None:
    value = raw.get(key)
    exclusive = raw.get(exclusive_key)
    inclusive_bound = _as_number(value, _join(path, key)) if value is not None else None

    if exclusive is None or isinstance(exclusive, bool):
        if inclusive_bound is None:
            return None
        return inclusive_bound, bool(exclusive)

    exclusive_bound = _as_number(exclusive, _join(path, exclusive_key))
    if inclusive_bound is None:
        return exclusive_bound, True
    tighter = exclusive_bound <= inclusive_bound if upper else exclusive_bound >= inclusive_bound
    if tighter:
        return exclusive_bound, True
    return inclusive_bound, False


def _as_number(value: object, path: str) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaDefinitionError(path, f"expected number, got {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        raise SchemaDefinitionError(path, "expected finite number")
    return value


def _as_count(value: object, path: str) -> int:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaDefinitionError(path, f"expected integer, got {type(value).__name__}")
    if value < 0:
        raise SchemaDefinitionError(path, "must be >= 0")
    return value


def _is_list(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _join(path: str, *segments: str) -> str:
    return path + "".join(f"/{segment}" for segment in segments)


__all__ = [
    "CONTAINER_KINDS",
    "MISSING",
    "NormalizedSchema",
    "SchemaKind",
    "normalize",
]
