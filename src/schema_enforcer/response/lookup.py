"""
schema-enforcer — response schema lookup

File: src/schema_enforcer/response/lookup.py

Purpose
- Locate the response schema attached to a request by Swagger middleware
  (``request.swagger.operation.responses[<code>].schema``) and enforce it.

Functional requirements
- Segments may be attributes or mapping keys.
- Missing segments raise ``SchemaLookupError`` naming the walked path.
- Only array/object response schemas are manageable.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from schema_enforcer.constants import DEFAULT_RESPONSE_CODE
from schema_enforcer.core.enforcer import OptionsLike, enforce
from schema_enforcer.core.schema import MISSING, normalize
from schema_enforcer.errors import EnforcementError, SchemaEnforcerError

_RESPONSES_CHAIN = ("swagger", "operation", "responses")


class SchemaLookupError(SchemaEnforcerError, LookupError):
    """Raised when a request does not carry the expected response schema structure."""


def schema_for_response(
    request: object,
    response_code: int | str = DEFAULT_RESPONSE_CODE,
) -> Mapping[str, Any]:
    """Return the raw response schema for ``response_code`` on ``request``."""

    walked = ""
    node: object = request
    for segment in _RESPONSES_CHAIN:
        node = _step(node, segment, walked)
        walked = f"{walked}.{segment}" if walked else segment
    return select_response_schema(node, response_code, walked)


def select_response_schema(
    responses: object,
    response_code: int | str,
    where: str,
) -> Mapping[str, Any]:
    """Pick ``responses[code].schema``; numeric codes match int or str keys."""

    code = str(response_code)
    response = _step(responses, code, where, alternate=int(code) if code.isdigit() else None)
    schema = _step(response, "schema", f"{where}.{code}")
    if not isinstance(schema, Mapping):
        raise SchemaLookupError(f"schema at {where}.{code}.schema is not an object")
    return schema


def is_manageable(request: object, response_code: int | str = DEFAULT_RESPONSE_CODE) -> bool:
    """Whether the response schema exists and is array- or object-typed."""

    try:
        schema = schema_for_response(request, response_code)
    except SchemaLookupError:
        return False
    return normalize(schema).is_container


def enforce_response(
    request: object,
    response_code: int | str = DEFAULT_RESPONSE_CODE,
    options: OptionsLike = None,
    initial: Any = MISSING,
) -> Any:
    """Build the enforced response body for ``request``."""

    normalized = normalize(schema_for_response(request, response_code), options)
    if not normalized.is_container:
        raise EnforcementError(
            "Response object can only be managed if the schema is an array or object"
        )
    return enforce(normalized, initial=initial)


def _step(node: object, key: str, walked: str, *, alternate: object = None) -> object:
    if isinstance(node, Mapping):
        if key in node:
            return node[key]
        if alternate is not None and alternate in node:
            return node[alternate]
    elif node is not None and hasattr(node, key):
        return getattr(node, key)
    location = f" at {walked}" if walked else ""
    raise SchemaLookupError(f"Unexpected object structure. {key} does not exist{location}")


__all__ = [
    "SchemaLookupError",
    "enforce_response",
    "is_manageable",
    "schema_for_response",
    "select_response_schema",
]
