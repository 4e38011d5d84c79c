"""Stable constants shared across the enforcement core and its collaborators."""

from __future__ import annotations

from typing import Final

# Validation facets that can be switched off by enforcement options, in schema spelling.
FACET_NAMES: Final[tuple[str, ...]] = (
    "enum",
    "multipleOf",
    "maximum",
    "minimum",
    "maxLength",
    "minLength",
    "pattern",
    "maxItems",
    "minItems",
    "uniqueItems",
    "additionalProperties",
    "maxProperties",
    "minProperties",
    "required",
)

# Schema facet -> ``EnforcementOptions`` field name.
OPTION_FIELD_BY_FACET: Final[dict[str, str]] = {
    "enum": "enum",
    "multipleOf": "multiple_of",
    "maximum": "maximum",
    "minimum": "minimum",
    "maxLength": "max_length",
    "minLength": "min_length",
    "pattern": "pattern",
    "maxItems": "max_items",
    "minItems": "min_items",
    "uniqueItems": "unique_items",
    "additionalProperties": "additional_properties",
    "maxProperties": "max_properties",
    "minProperties": "min_properties",
    "required": "required",
}

SCHEMA_TYPES: Final[tuple[str, ...]] = (
    "object",
    "array",
    "number",
    "integer",
    "string",
    "boolean",
)

DEFAULT_OPTIONS_FILE: Final[str] = "schema_enforcer.toml"
ENV_PREFIX: Final[str] = "SCHEMA_ENFORCER_"
DEFAULT_RESPONSE_CODE: Final[str] = "default"

__all__ = [
    "DEFAULT_OPTIONS_FILE",
    "DEFAULT_RESPONSE_CODE",
    "ENV_PREFIX",
    "FACET_NAMES",
    "OPTION_FIELD_BY_FACET",
    "SCHEMA_TYPES",
]
