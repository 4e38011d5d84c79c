"""
schema-enforcer — unit tests for response schema lookup

File: tests/unit/response/test_lookup.py

Purpose
- Validate response schema discovery on request objects decorated by Swagger
  middleware and enforcement of the discovered schema.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from schema_enforcer import EnforcedArray, EnforcedObject, EnforcementError, SchemaViolationError
from schema_enforcer.response import (
    SchemaLookupError,
    enforce_response,
    is_manageable,
    schema_for_response,
)

PETS = {"type": "array", "items": {"type": "object", "properties": {"name": {"type": "string"}}}}


def _request(responses: object) -> SimpleNamespace:
    return SimpleNamespace(swagger=SimpleNamespace(operation={"responses": responses}))


def test_default_response_schema_is_found() -> None:
    request = _request({"default": {"schema": PETS}})
    assert schema_for_response(request) is PETS


def test_numeric_codes_match_int_and_str_keys() -> None:
    by_str = _request({"200": {"schema": PETS}})
    by_int = _request({200: {"schema": PETS}})

    assert schema_for_response(by_str, 200) is PETS
    assert schema_for_response(by_int, "200") is PETS


@pytest.mark.parametrize(
    ("request_object", "message"),
    [
        (SimpleNamespace(), "swagger does not exist"),
        (SimpleNamespace(swagger=None), "operation does not exist at swagger"),
        (SimpleNamespace(swagger=SimpleNamespace(operation={})), "responses does not exist at swagger.operation"),
        (_request({"404": {"schema": PETS}}), "default does not exist at swagger.operation.responses"),
        (_request({"default": {}}), "schema does not exist at swagger.operation.responses.default"),
    ],
)
def test_missing_segments_are_named(request_object: object, message: str) -> None:
    with pytest.raises(SchemaLookupError, match=message) as excinfo:
        schema_for_response(request_object)
    assert str(excinfo.value).startswith("Unexpected object structure.")


def test_non_object_schema_is_rejected() -> None:
    with pytest.raises(SchemaLookupError, match="is not an object"):
        schema_for_response(_request({"default": {"schema": "pets"}}))


def test_is_manageable() -> None:
    assert is_manageable(_request({"default": {"schema": PETS}}))
    assert is_manageable(_request({"201": {"schema": {"properties": {}}}}), 201)
    assert not is_manageable(_request({"default": {"schema": {"type": "string"}}}))
    assert not is_manageable(SimpleNamespace())


def test_enforce_response_builds_enforced_body() -> None:
    request = _request({"default": {"schema": PETS}})

    body = enforce_response(request, initial=[{"name": "rex"}])

    assert isinstance(body, EnforcedArray)
    assert isinstance(body[0], EnforcedObject)
    with pytest.raises(SchemaViolationError):
        body.push({"name": 3})


def test_enforce_response_rejects_primitive_schemas() -> None:
    request = _request({"default": {"schema": {"type": "number"}}})

    with pytest.raises(EnforcementError, match="array or object"):
        enforce_response(request)
