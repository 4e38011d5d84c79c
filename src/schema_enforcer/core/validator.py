"""
schema-enforcer — value validation against normalized schemas

File: src/schema_enforcer/core/validator.py

Purpose
- Check one in-memory value against a ``NormalizedSchema`` and raise on the first
  violation. Also exposes the bound/uniqueness helpers the enforced containers reuse
  when a mutation changes only part of a value.

Functional requirements
- Non-serializable values fail with TYPE wherever no schema constrains them.
- Object validation walks every ``allOf`` branch in order.
- Every failure raises ``SchemaViolationError`` with a stable code and a path.

Non-functional requirements
- Pure and synchronous; never mutates the value.
"""

from __future__ import annotations

import math
import reprlib
from collections.abc import Iterable, Mapping, Sequence
from typing import NoReturn

from schema_enforcer.core.schema import NormalizedSchema, SchemaKind
from schema_enforcer.core.signature import Signature, member_signature
from schema_enforcer.errors import ErrorCode, SchemaViolationError

_short = reprlib.Repr()
_short.maxstring = 60
_short.maxother = 60


def is_json_array(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def is_json_object(value: object) -> bool:
    return isinstance(value, Mapping)


def join_path(path: str, segment: object) -> str:
    return f"{path}/{segment}"


def describe(value: object) -> str:
    return _short.repr(value)


def type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_json_object(value):
        return "object"
    if is_json_array(value):
        return "array"
    return type(value).__name__


def item_signature(value: object) -> Signature:
    return member_signature(value)


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units; characters outside the BMP count twice."""

    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def validate_value(schema: NormalizedSchema, value: object, path: str = "") -> None:
    """Raise ``SchemaViolationError`` unless ``value`` satisfies ``schema``."""

    kind = schema.kind
    if kind is SchemaKind.OBJECT:
        _validate_object(schema, value, path)
        return

    if kind is SchemaKind.ARRAY:
        _validate_array(schema, value, path)
    elif kind is SchemaKind.NUMBER or kind is SchemaKind.INTEGER:
        _validate_number(schema, value, path)
    elif kind is SchemaKind.STRING:
        _validate_string(schema, value, path)
    elif kind is SchemaKind.BOOLEAN:
        if not isinstance(value, bool):
            _fail(ErrorCode.TYPE, path, f"Invalid type: Expected a boolean. Received: {type_name(value)}")
    else:
        require_serializable(value, path)
        # Untyped facets apply to whatever kind the value turns out to be.
        if isinstance(value, str):
            _validate_string(schema, value, path)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            _validate_number(schema, value, path)
        elif is_json_array(value):
            _validate_array(schema, value, path)

    _check_enum(schema, value, path)
    for branch in schema.all_of:
        validate_value(branch, value, path)


def require_serializable(value: object, path: str = "") -> None:
    """Raise TYPE unless ``value`` is made only of JSON-representable parts."""

    _check_serializable(value, path, set())


def check_item(schema: NormalizedSchema, item: object, path: str) -> None:
    """Validate one array element against ``schema.items`` (or serializability)."""

    if schema.items is not None:
        validate_value(schema.items, item, path)
    else:
        require_serializable(item, path)


def check_array_length(schema: NormalizedSchema, length: int, path: str = "") -> None:
    if schema.max_items is not None and length > schema.max_items:
        _fail(
            ErrorCode.LEN,
            path,
            f"Array length {length} is greater than allowable maximum length {schema.max_items}",
        )
    if schema.min_items is not None and length < schema.min_items:
        _fail(
            ErrorCode.LEN,
            path,
            f"Array length {length} is less than allowable minimum length {schema.min_items}",
        )


def check_property_count(branch: NormalizedSchema, count: int, path: str = "") -> None:
    if branch.max_properties is not None and count > branch.max_properties:
        _fail(
            ErrorCode.LEN,
            path,
            f"The object has more properties than the allowed maximum: {branch.max_properties}",
        )
    if branch.min_properties is not None and count < branch.min_properties:
        _fail(
            ErrorCode.LEN,
            path,
            f"The object has fewer properties than the allowed minimum: {branch.min_properties}",
        )


def check_unique(
    values: Iterable[object],
    path: str = "",
    *,
    members: Mapping[Signature, int] | None = None,
    offset: int = 0,
) -> tuple[Signature, ...]:
    """Return the signatures of ``values``; raise UNIQ on a duplicate.

    Duplicates are searched among ``values`` themselves and, when given, among the
    live ``members`` multiset. ``offset`` is the index the first value will occupy.
    """

    signatures = tuple(item_signature(value) for value in values)
    seen: dict[Signature, int] = {}
    for position, item_sig in enumerate(signatures):
        index = offset + position
        if members is not None and members.get(item_sig, 0) > 0:
            _fail(
                ErrorCode.UNIQ,
                path,
                f"Array requires that all items be unique. Item at index {index} is already present",
            )
        first = seen.get(item_sig)
        if first is not None:
            _fail(
                ErrorCode.UNIQ,
                path,
                f"Array requires that all items be unique. Duplicates at indexes: {first}, {index}",
            )
        seen[item_sig] = index
    return signatures


def additional_schemas(schema: NormalizedSchema) -> tuple[NormalizedSchema, ...] | None:
    """Schemas that undeclared keys must satisfy, or ``None`` when they are forbidden.

    An empty tuple means undeclared keys are allowed and only need to be serializable.
    """

    branches = [branch for branch in schema.object_branches() if branch.kind is SchemaKind.OBJECT]
    if any(branch.additional_properties is False for branch in branches):
        return None
    found = tuple(
        branch.additional_properties
        for branch in branches
        if isinstance(branch.additional_properties, NormalizedSchema)
    )
    if found or any(branch.additional_properties is True for branch in branches):
        return found
    if any(branch.properties is not None for branch in branches):
        return None
    return ()


def reject_undeclared(keys: Sequence[str], path: str = "") -> NoReturn:
    _fail(ErrorCode.NPER, path, "Property not allowed: " + ", ".join(keys))


def _validate_array(schema: NormalizedSchema, value: object, path: str) -> None:
    if not is_json_array(value):
        _fail(ErrorCode.TYPE, path, f"Invalid type: Expected an array. Received: {type_name(value)}")
    items: Sequence[object] = value  # type: ignore[assignment]
    check_array_length(schema, len(items), path)
    if schema.unique_items:
        check_unique(items, path)
    for index, item in enumerate(items):
        check_item(schema, item, join_path(path, index))


def _validate_object(schema: NormalizedSchema, value: object, path: str) -> None:
    if not is_json_object(value):
        _fail(
            ErrorCode.TYPE,
            path,
            f"Invalid type: Expected a non null object. Received: {type_name(value)}",
        )
    mapping: Mapping[object, object] = value  # type: ignore[assignment]
    for key in mapping:
        if not isinstance(key, str):
            _fail(ErrorCode.TYPE, path, f"Invalid property name {key!r}: keys must be strings")

    count = len(mapping)
    declared = schema.declared_names
    undeclared = [key for key in mapping if key not in declared]

    for branch in schema.object_branches():
        if branch.kind is not SchemaKind.OBJECT:
            validate_value(branch, value, path)
            continue

        check_property_count(branch, count, path)
        properties = branch.properties or {}
        for name, property_schema in properties.items():
            if name in mapping:
                validate_value(property_schema, mapping[name], join_path(path, name))
            elif name in branch.required:
                _fail(ErrorCode.REQ, join_path(path, name), f"Missing required property: {name}")
        for name in sorted(branch.required):
            if name not in properties and name not in mapping:
                _fail(ErrorCode.REQ, join_path(path, name), f"Missing required property: {name}")

        additional = branch.additional_properties
        if isinstance(additional, NormalizedSchema):
            for key in undeclared:
                validate_value(additional, mapping[key], join_path(path, key))
        _check_enum(branch, value, path)

    if undeclared:
        allowed = additional_schemas(schema)
        if allowed is None:
            reject_undeclared(undeclared, path)  # type: ignore[arg-type]
        elif not allowed:
            for key in undeclared:
                require_serializable(mapping[key], join_path(path, key))


def _validate_number(schema: NormalizedSchema, value: object, path: str) -> None:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or (isinstance(value, float) and not math.isfinite(value))
    ):
        _fail(
            ErrorCode.TYPE,
            path,
            f"Invalid type: Expected a number or an integer. Received: {type_name(value)}",
        )
    number: int | float = value  # type: ignore[assignment]

    if schema.maximum is not None:
        if schema.exclusive_maximum and number == schema.maximum:
            _fail(ErrorCode.MAX, path, f"Value {number} over exclusive maximum {schema.maximum}")
        if number > schema.maximum:
            qualifier = "exclusive " if schema.exclusive_maximum else ""
            _fail(ErrorCode.NMAX, path, f"Value {number} over {qualifier}maximum {schema.maximum}")

    if schema.minimum is not None:
        if schema.exclusive_minimum and number == schema.minimum:
            _fail(ErrorCode.MIN, path, f"Value {number} under exclusive minimum {schema.minimum}")
        if number < schema.minimum:
            qualifier = "exclusive " if schema.exclusive_minimum else ""
            _fail(ErrorCode.NMIN, path, f"Value {number} under {qualifier}minimum {schema.minimum}")

    if schema.multiple_of is not None and number % schema.multiple_of != 0:
        _fail(ErrorCode.NMULT, path, f"Value {number} not a multiple of {schema.multiple_of}")

    if schema.kind is SchemaKind.INTEGER and not (
        isinstance(number, int) or number.is_integer()
    ):
        _fail(ErrorCode.NINT, path, f"Value {number} must be an integer")


def _validate_string(schema: NormalizedSchema, value: object, path: str) -> None:
    if not isinstance(value, str):
        _fail(ErrorCode.TYPE, path, f"Invalid type: Expected a string. Received: {type_name(value)}")

    if schema.max_length is not None or schema.min_length is not None:
        length = utf16_length(value)
        if schema.max_length is not None and length > schema.max_length:
            _fail(
                ErrorCode.SMAX,
                path,
                f"Value {describe(value)} has length ({length}) above max length {schema.max_length}",
            )
        if schema.min_length is not None and length < schema.min_length:
            _fail(
                ErrorCode.SMIN,
                path,
                f"Value {describe(value)} has length ({length}) below min length {schema.min_length}",
            )

    if schema.pattern_regex is not None and schema.pattern_regex.search(value) is None:
        _fail(ErrorCode.SPAT, path, f"Value {describe(value)} does not match pattern {schema.pattern}")


def _check_enum(schema: NormalizedSchema, value: object, path: str) -> None:
    if schema.enum is None:
        return
    if item_signature(value) not in schema.enum_signatures:
        _fail(
            ErrorCode.ENUM,
            path,
            f"Value {describe(value)} does not match enum options: {describe(list(schema.enum))}",
        )


def _check_serializable(value: object, path: str, active: set[int]) -> None:
    if value is None or isinstance(value, (bool, str, int)):
        return
    if isinstance(value, float):
        if not math.isfinite(value):
            _fail(ErrorCode.TYPE, path, f"Invalid value: {value} is not a finite number")
        return

    if is_json_object(value) or is_json_array(value):
        marker = id(value)
        if marker in active:
            _fail(ErrorCode.TYPE, path, "Invalid value: cyclic structures are not serializable")
        active.add(marker)
        try:
            if is_json_object(value):
                for key, item in value.items():  # type: ignore[attr-defined]
                    if not isinstance(key, str):
                        _fail(ErrorCode.TYPE, path, f"Invalid property name {key!r}: keys must be strings")
                    _check_serializable(item, join_path(path, key), active)
            else:
                for index, item in enumerate(value):  # type: ignore[arg-type]
                    _check_serializable(item, join_path(path, index), active)
        finally:
            active.discard(marker)
        return

    _fail(
        ErrorCode.TYPE,
        path,
        f"Invalid type: {type(value).__name__} values are not serializable",
    )


def _fail(code: ErrorCode, path: str, detail: str) -> NoReturn:
    raise SchemaViolationError(code, path, detail)


__all__ = [
    "additional_schemas",
    "check_array_length",
    "check_item",
    "check_property_count",
    "check_unique",
    "describe",
    "is_json_array",
    "is_json_object",
    "item_signature",
    "join_path",
    "reject_undeclared",
    "require_serializable",
    "type_name",
    "utf16_length",
    "validate_value",
]
