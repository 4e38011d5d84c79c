"""Glue for enforcing Swagger response bodies: schema lookup, document loading, placeholders."""

from schema_enforcer.response.loader import (
    DocumentLoadError,
    find_response_schema,
    load_document,
    load_response_schema,
)
from schema_enforcer.response.lookup import (
    SchemaLookupError,
    enforce_response,
    is_manageable,
    schema_for_response,
    select_response_schema,
)
from schema_enforcer.response.parameters import inject_parameters

__all__ = [
    "DocumentLoadError",
    "SchemaLookupError",
    "enforce_response",
    "find_response_schema",
    "inject_parameters",
    "is_manageable",
    "load_document",
    "load_response_schema",
    "schema_for_response",
    "select_response_schema",
]
