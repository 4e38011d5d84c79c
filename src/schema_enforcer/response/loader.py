"""
schema-enforcer — schema document loading

File: src/schema_enforcer/response/loader.py

Purpose
- Read JSON or YAML schema/Swagger documents from disk and resolve the response schema
  of a concrete request URL against the document's path templates.

Functional requirements
- ``.json`` parses as JSON; ``.yaml``/``.yml`` (and anything else) parses with
  ``yaml.safe_load``.
- ``{param}`` segments in path templates match exactly one URL segment.
- ``basePath`` is honored when present.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final
from urllib.parse import urlsplit

import yaml

from schema_enforcer.constants import DEFAULT_RESPONSE_CODE
from schema_enforcer.errors import SchemaEnforcerError
from schema_enforcer.response.lookup import SchemaLookupError, select_response_schema

_JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})
_TEMPLATE_SEGMENT: Final[re.Pattern[str]] = re.compile(r"\{[^/{}]+\}")


class DocumentLoadError(SchemaEnforcerError, ValueError):
    """Raised when a document cannot be read or parsed."""


def load_document(path: str | Path) -> Any:
    """Parse the JSON or YAML document at ``path``."""

    document_path = Path(path).expanduser()
    try:
        text = document_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"unable to read document {document_path}: {exc}") from exc

    if document_path.suffix.lower() in _JSON_SUFFIXES:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentLoadError(f"invalid JSON in {document_path}: {exc}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DocumentLoadError(f"invalid YAML in {document_path}: {exc}") from exc


def load_response_schema(
    path: str | Path,
    url_path: str,
    method: str = "get",
    response_code: int | str = DEFAULT_RESPONSE_CODE,
) -> Mapping[str, Any]:
    """Resolve the response schema for ``method url_path`` from a Swagger document."""

    document = load_document(path)
    if not isinstance(document, Mapping):
        raise DocumentLoadError(f"document {path} must contain an object at the top level")
    return find_response_schema(document, url_path, method, response_code)


def find_response_schema(
    document: Mapping[str, Any],
    url_path: str,
    method: str = "get",
    response_code: int | str = DEFAULT_RESPONSE_CODE,
) -> Mapping[str, Any]:
    paths = document.get("paths")
    if not isinstance(paths, Mapping):
        raise SchemaLookupError("Unexpected object structure. paths does not exist")

    request_path = _strip_base_path(urlsplit(url_path).path or "/", document.get("basePath"))
    template = _match_template(paths, request_path)
    if template is None:
        raise SchemaLookupError(f"no path template matches {request_path}")

    path_item = paths[template]
    verb = method.lower()
    operation = path_item.get(verb) if isinstance(path_item, Mapping) else None
    if not isinstance(operation, Mapping):
        raise SchemaLookupError(f"Unexpected object structure. {verb} does not exist at paths.{template}")
    responses = operation.get("responses")
    if responses is None:
        raise SchemaLookupError(
            f"Unexpected object structure. responses does not exist at paths.{template}.{verb}"
        )
    return select_response_schema(responses, response_code, f"paths.{template}.{verb}.responses")


def _strip_base_path(request_path: str, base_path: object) -> str:
    if not isinstance(base_path, str):
        return request_path
    prefix = base_path.rstrip("/")
    if prefix and (request_path == prefix or request_path.startswith(prefix + "/")):
        return request_path[len(prefix) :] or "/"
    return request_path


def _match_template(paths: Mapping[str, Any], request_path: str) -> str | None:
    # Literal templates win over parameterized ones.
    candidates = sorted(
        (key for key in paths if isinstance(key, str)),
        key=lambda template: (len(_TEMPLATE_SEGMENT.findall(template)), template),
    )
    for template in candidates:
        if _template_pattern(template).fullmatch(request_path):
            return template
    return None


def _template_pattern(template: str) -> re.Pattern[str]:
    pieces: list[str] = []
    position = 0
    for match in _TEMPLATE_SEGMENT.finditer(template):
        pieces.append(re.escape(template[position : match.start()]))
        pieces.append("[^/]+")
        position = match.end()
    pieces.append(re.escape(template[position:]))
    return re.compile("".join(pieces) + "/?")


__all__ = [
    "DocumentLoadError",
    "find_response_schema",
    "load_document",
    "load_response_schema",
]
