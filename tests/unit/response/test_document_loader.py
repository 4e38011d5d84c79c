"""
schema-enforcer — unit tests for schema document loading

File: tests/unit/response/test_document_loader.py

Purpose
- Validate JSON/YAML document parsing and path-template resolution of response schemas.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from schema_enforcer.response import (
    DocumentLoadError,
    SchemaLookupError,
    find_response_schema,
    load_document,
    load_response_schema,
)

PET = {"type": "object", "properties": {"id": {"type": "integer"}}}
PETS = {"type": "array", "items": PET}

SWAGGER = {
    "swagger": "2.0",
    "basePath": "/api/v1",
    "paths": {
        "/pets": {"get": {"responses": {"200": {"schema": PETS}}}},
        "/pets/{petId}": {
            "get": {"responses": {"200": {"schema": PET}, "default": {"schema": {"type": "object"}}}}
        },
        "/pets/mine": {"get": {"responses": {"200": {"schema": PETS}}}},
    },
}


def test_load_json_and_yaml(tmp_path: Path) -> None:
    json_path = tmp_path / "api.json"
    yaml_path = tmp_path / "api.yaml"
    json_path.write_text(json.dumps(SWAGGER), encoding="utf-8")
    yaml_path.write_text(yaml.safe_dump(SWAGGER), encoding="utf-8")

    assert load_document(json_path) == SWAGGER
    assert load_document(yaml_path) == SWAGGER


def test_load_errors(tmp_path: Path) -> None:
    broken_json = tmp_path / "broken.json"
    broken_json.write_text("{", encoding="utf-8")
    broken_yaml = tmp_path / "broken.yml"
    broken_yaml.write_text("a: [", encoding="utf-8")

    with pytest.raises(DocumentLoadError, match="invalid JSON"):
        load_document(broken_json)
    with pytest.raises(DocumentLoadError, match="invalid YAML"):
        load_document(broken_yaml)
    with pytest.raises(DocumentLoadError, match="unable to read"):
        load_document(tmp_path / "missing.yaml")


def test_template_matching_with_base_path() -> None:
    assert find_response_schema(SWAGGER, "/api/v1/pets", "get", 200) == PETS
    assert find_response_schema(SWAGGER, "/api/v1/pets/17", "GET", "200") == PET
    assert find_response_schema(SWAGGER, "/api/v1/pets/17/?q=1", "get", 200) == PET
    assert find_response_schema(SWAGGER, "/api/v1/pets/17") == {"type": "object"}


def test_literal_templates_win() -> None:
    assert find_response_schema(SWAGGER, "/api/v1/pets/mine", "get", 200) == PETS


def test_unmatched_paths_and_operations() -> None:
    with pytest.raises(SchemaLookupError, match="no path template matches"):
        find_response_schema(SWAGGER, "/api/v1/owners")
    with pytest.raises(SchemaLookupError, match="post does not exist"):
        find_response_schema(SWAGGER, "/api/v1/pets", "post")
    with pytest.raises(SchemaLookupError, match="404 does not exist"):
        find_response_schema(SWAGGER, "/api/v1/pets", "get", 404)
    with pytest.raises(SchemaLookupError, match="paths does not exist"):
        find_response_schema({}, "/pets")


def test_load_response_schema_from_file(tmp_path: Path) -> None:
    path = tmp_path / "api.yaml"
    path.write_text(yaml.safe_dump(SWAGGER), encoding="utf-8")

    assert load_response_schema(path, "/api/v1/pets", "get", 200) == PETS


def test_top_level_must_be_an_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(DocumentLoadError, match="top level"):
        load_response_schema(path, "/pets")
