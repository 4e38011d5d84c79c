"""Population of schema ``default`` values into values that are about to be enforced."""

from __future__ import annotations

import copy
from collections.abc import Mapping

from schema_enforcer.core.schema import NormalizedSchema, SchemaKind
from schema_enforcer.core.validator import is_json_array, is_json_object


def apply_defaults(schema: NormalizedSchema | None, value: object) -> object:
    """Return ``value`` with missing declared properties filled from their defaults.

    The input is never mutated; a copy is made only along paths where a default is
    actually inserted. Defaults exist on a normalized schema only when the
    ``use_defaults`` option was enabled at normalization time.
    """

    if schema is None:
        return value
    if schema.kind is SchemaKind.OBJECT and is_json_object(value):
        return _apply_object(schema, value)  # type: ignore[arg-type]
    if schema.kind is SchemaKind.ARRAY and schema.items is not None and is_json_array(value):
        items = list(value)  # type: ignore[call-overload]
        filled = [apply_defaults(schema.items, item) for item in items]
        if all(new is old for new, old in zip(filled, items)):
            return value
        return filled
    for branch in schema.all_of:
        value = apply_defaults(branch, value)
    return value


def default_for(schema: NormalizedSchema) -> object:
    """Fresh copy of ``schema.default`` with nested defaults applied."""

    return apply_defaults(schema, copy.deepcopy(schema.default))


def _apply_object(schema: NormalizedSchema, value: Mapping[str, object]) -> object:
    updates: dict[str, object] = {}
    for name in _declared_in_order(schema):
        property_schemas = schema.property_schemas(name)
        if name in value:
            current = value[name]
            filled = current
            for property_schema in property_schemas:
                filled = apply_defaults(property_schema, filled)
            if filled is not current:
                updates[name] = filled
            continue
        for property_schema in property_schemas:
            if property_schema.has_default:
                updates[name] = default_for(property_schema)
                break

    for branch in schema.object_branches():
        if branch.kind is not SchemaKind.OBJECT:
            continue
        additional = branch.additional_properties
        if not isinstance(additional, NormalizedSchema):
            continue
        for key, current in value.items():
            if key in schema.declared_names:
                continue
            filled = apply_defaults(additional, updates.get(key, current))
            if filled is not current:
                updates[key] = filled

    if not updates:
        return value
    merged = dict(value)
    merged.update(updates)
    return merged


def _declared_in_order(schema: NormalizedSchema) -> list[str]:
    names: dict[str, None] = {}
    for branch in schema.object_branches():
        if branch.properties is not None:
            names.update(dict.fromkeys(branch.properties))
    return list(names)


__all__ = ["apply_defaults", "default_for"]
