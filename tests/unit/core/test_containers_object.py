"""
schema-enforcer — unit tests for EnforcedObject

File: tests/unit/core/test_containers_object.py

Purpose
- Validate property assignment, deletion, and bulk updates against object schemas,
  including ``allOf`` branches, additional-property rules, and count limits.
"""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from schema_enforcer.core.containers import EnforcedArray, EnforcedObject, to_plain
from schema_enforcer.core.schema import normalize
from schema_enforcer.errors import EnforcementError, ErrorCode, SchemaViolationError

PERSON = normalize(
    {
        "type": "object",
        "properties": {
            "name": {"type": "string", "maxLength": 5},
            "age": {"type": "integer", "minimum": 0},
            "tags": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["name"],
    }
)
OPEN = {"additionalProperties": True}
OPEN_LIMITED = normalize({"type": "object", "maxProperties": 2, "minProperties": 1})


def _person(**values: object) -> EnforcedObject:
    return EnforcedObject(PERSON, {"name": "ann", **values})


def _violation(operation: object, *args: object) -> SchemaViolationError:
    with pytest.raises(SchemaViolationError) as excinfo:
        operation(*args)  # type: ignore[operator]
    return excinfo.value


def test_construction_checks_required_properties() -> None:
    with pytest.raises(SchemaViolationError) as excinfo:
        EnforcedObject(PERSON)
    assert excinfo.value.code is ErrorCode.REQ

    assert _person(age=3) == {"name": "ann", "age": 3}


def test_wrong_schema_kind_is_an_enforcement_error() -> None:
    with pytest.raises(EnforcementError):
        EnforcedObject(normalize({"type": "array"}))


def test_setitem_validates_property_schema() -> None:
    person = _person()

    person["age"] = 30
    assert person["age"] == 30

    error = _violation(person.__setitem__, "age", -1)
    assert error.code is ErrorCode.NMIN
    assert error.path == "/age"
    assert _violation(person.__setitem__, "name", "too long").code is ErrorCode.SMAX
    assert person == {"name": "ann", "age": 30}


def test_setitem_rejects_undeclared_and_non_string_keys() -> None:
    person = _person()

    assert _violation(person.__setitem__, "email", "a@b").code is ErrorCode.NPER
    assert _violation(person.__setitem__, 1, "x").code is ErrorCode.TYPE
    assert "email" not in person


def test_delete_required_property_is_rejected() -> None:
    person = _person(age=1)

    error = _violation(person.__delitem__, "name")
    assert error.code is ErrorCode.REQ
    assert error.detail == "Cannot delete required property: name"

    del person["age"]
    assert person == {"name": "ann"}
    with pytest.raises(KeyError):
        del person["age"]


def test_property_count_limits() -> None:
    limited = EnforcedObject(OPEN_LIMITED, {"a": 1})
    limited["b"] = 2
    limited["b"] = 3

    assert _violation(limited.__setitem__, "c", 4).code is ErrorCode.LEN
    del limited["b"]
    assert _violation(limited.__delitem__, "a").code is ErrorCode.LEN
    assert limited == {"a": 1}


def test_open_object_requires_serializable_values() -> None:
    limited = EnforcedObject(OPEN_LIMITED, {"a": 1})
    assert _violation(limited.__setitem__, "b", {1, 2}).code is ErrorCode.TYPE


def test_update_is_atomic() -> None:
    person = _person(age=1)

    error = _violation(person.update, {"age": 2, "name": 5})
    assert error.code is ErrorCode.TYPE
    assert person == {"name": "ann", "age": 1}

    person.update({"age": 2}, name="bob")
    assert person == {"name": "bob", "age": 2}


def test_clear_and_pop_respect_required() -> None:
    person = _person(age=1)

    assert person.pop("age") == 1
    assert _violation(person.clear).code is ErrorCode.REQ
    assert person == {"name": "ann"}

    limited = EnforcedObject(normalize({"type": "object"}), {"a": 1})
    limited.clear()
    assert limited == {}


def test_setdefault_and_get() -> None:
    person = _person()

    assert person.setdefault("age", 7) == 7
    assert person.setdefault("age", 9) == 7
    assert person.get("tags") is None


def test_nested_array_is_wrapped_with_its_path() -> None:
    person = _person()
    person["tags"] = ["a"]
    tags = person["tags"]

    assert isinstance(tags, EnforcedArray)
    assert tags.path == "/tags"
    error = _violation(tags.push, 1)
    assert error.path == "/tags/1"
    assert person["tags"] == ["a"]


def test_assigned_values_are_copied() -> None:
    source = ["a"]
    person = _person(tags=source)

    source.append("b")
    person["tags"].push("c")

    assert person["tags"] == ["a", "c"]
    assert source == ["a", "b"]


def test_all_of_property_schemas_all_apply() -> None:
    schema = normalize(
        {
            "allOf": [
                {"properties": {"code": {"type": "string"}}},
                {"properties": {"code": {"maxLength": 2}}},
            ]
        }
    )
    value = EnforcedObject(schema)

    value["code"] = "ab"
    assert _violation(value.__setitem__, "code", "abc").code is ErrorCode.SMAX
    assert _violation(value.__setitem__, "code", 12).code is ErrorCode.TYPE
    assert _violation(value.__setitem__, "other", 1).code is ErrorCode.NPER


def test_additional_properties_schema_governs_undeclared_keys() -> None:
    schema = normalize({"type": "object", "additionalProperties": {"type": "number"}}, OPEN)
    value = EnforcedObject(schema)

    value["x"] = 1
    error = _violation(value.__setitem__, "y", "one")
    assert error.code is ErrorCode.TYPE
    assert error.path == "/y"


def test_additional_properties_needs_its_option_enabled() -> None:
    raw = {
        "type": "object",
        "properties": {"a": {"type": "string"}},
        "additionalProperties": {"type": "number"},
    }
    closed = EnforcedObject(normalize(raw))
    opened = EnforcedObject(normalize(raw, OPEN))

    assert _violation(closed.__setitem__, "b", 1).code is ErrorCode.NPER
    assert closed == {}
    opened["b"] = 1
    assert opened == {"b": 1}


def test_nested_additional_property_objects_are_enforced() -> None:
    schema = normalize(
        {
            "type": "object",
            "additionalProperties": {"type": "object", "properties": {"n": {"type": "number"}}},
        },
        OPEN,
    )
    value = EnforcedObject(schema, {"first": {"n": 1}})

    assert isinstance(value["first"], EnforcedObject)
    assert _violation(value["first"].__setitem__, "n", "x").path == "/first/n"


def test_object_enum_is_checked_on_every_change() -> None:
    schema = normalize({"type": "object", "enum": [{"a": 1}, {"a": 2}]})
    value = EnforcedObject(schema, {"a": 1})

    value["a"] = 2
    assert _violation(value.__setitem__, "a", 3).code is ErrorCode.ENUM
    assert _violation(value.__setitem__, "b", 1).code is ErrorCode.ENUM
    assert value == {"a": 2}


def test_defaults_fill_nested_values_on_assignment() -> None:
    schema = normalize(
        {
            "type": "object",
            "properties": {
                "count": {"type": "number", "default": 0},
                "child": {
                    "type": "object",
                    "properties": {"flag": {"type": "boolean", "default": True}},
                },
            },
        },
        {"useDefaults": True},
    )
    value = EnforcedObject(schema)
    assert value == {"count": 0}

    value["child"] = {}
    assert value["child"] == {"flag": True}


def test_to_plain_and_copy() -> None:
    person = _person(tags=["x"])

    plain = to_plain(person)
    assert plain == {"name": "ann", "tags": ["x"]}
    assert type(plain["tags"]) is list

    copied = person.copy()
    copied["tags"].push("y")
    assert person["tags"] == ["x"]


def test_rejection_is_logged() -> None:
    person = _person()

    with capture_logs() as logs:
        with pytest.raises(SchemaViolationError):
            person["age"] = "old"

    rejected = [entry for entry in logs if entry["event"] == "enforced_mutation_rejected"]
    assert rejected
    assert rejected[0]["kind"] == "object"
    assert rejected[0]["operation"] == "setitem"
    assert rejected[0]["path"] == "/age"
