"""Command-line interface router for schema-enforcer."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from schema_enforcer.config import (
    EnforcementOptions,
    canonical_option_name,
    load_options,
)
from schema_enforcer.core import normalize, validate_value
from schema_enforcer.errors import ROOT_PATH_LABEL, SchemaViolationError
from schema_enforcer.observability import LOG_FORMATS, configure_logging, get_logger
from schema_enforcer.response import load_document, load_response_schema
from schema_enforcer.ui.render import create_renderer, emit_json

_LOGGER = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 2

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="schema-enforcer",
        description=(
            "schema-enforcer — validate JSON/YAML documents against Swagger/JSON-Schema.\n\n"
            "Common workflows:\n"
            "  schema-enforcer validate schema.yaml data.json\n"
            "  schema-enforcer validate api.yaml body.json --url /pets/1 --code 200\n"
            "  schema-enforcer options --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--options",
        dest="options_path",
        default=None,
        help="Path to enforcement options TOML (default: ./schema_enforcer.toml if present).",
    )
    common.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="OPTION=BOOL",
        help="Override one enforcement option, e.g. --set uniqueItems=true (repeatable).",
    )
    common.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    common.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for enforcement events (default: WARNING).",
    )
    common.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default="text",
        help="Log line format written to stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # validate ------------------------------------------------------------
    validate_parser = subparsers.add_parser(
        "validate",
        parents=[common],
        help="Validate a data document against a schema",
        description=(
            "Validate DATA against SCHEMA. With --url, SCHEMA is a Swagger document and the\n"
            "response schema for that request is used.\n\n"
            "Examples:\n"
            "  schema-enforcer validate schema.json data.json\n"
            "  schema-enforcer validate api.yaml pets.json --url /pets --code 200 --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    validate_parser.add_argument("schema", help="Schema (or Swagger) document, JSON or YAML")
    validate_parser.add_argument("data", help="Data document to validate, JSON or YAML")
    validate_parser.add_argument("--url", default=None, help="Request path to resolve in a Swagger document")
    validate_parser.add_argument("--method", default="get", help="HTTP method for --url (default: get)")
    validate_parser.add_argument("--code", default="default", help="Response code for --url (default: default)")
    validate_parser.set_defaults(handler=_cmd_validate)

    # options -------------------------------------------------------------
    options_parser = subparsers.add_parser(
        "options",
        parents=[common],
        help="Show effective enforcement options",
        description=(
            "Display the effective options after merging defaults, file, env, and --set.\n\n"
            "Examples:\n"
            "  schema-enforcer options\n"
            "  SCHEMA_ENFORCER_UNIQUE_ITEMS=true schema-enforcer options --json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    options_parser.set_defaults(handler=_cmd_options)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    configure_logging(namespace.log_level, log_format=namespace.log_format)
    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_validate(args: argparse.Namespace) -> int:
    options = _load_effective_options(args)
    if args.url is not None:
        raw_schema: Any = load_response_schema(args.schema, args.url, args.method, args.code)
    else:
        raw_schema = load_document(args.schema)
    schema = normalize(raw_schema, options)
    data = load_document(args.data)

    try:
        validate_value(schema, data)
    except SchemaViolationError as exc:
        _LOGGER.debug(
            "document_validated", kind=str(schema.kind), valid=False, code=str(exc.code)
        )
        if args.json:
            emit_json(
                {
                    "command": "validate",
                    "valid": False,
                    "code": str(exc.code),
                    "path": exc.path or ROOT_PATH_LABEL,
                    "detail": exc.detail,
                }
            )
        else:
            renderer = create_renderer()
            renderer.fail(f"{args.data}: {exc}")
        return 1

    _LOGGER.debug("document_validated", kind=str(schema.kind), valid=True)
    if args.json:
        emit_json({"command": "validate", "valid": True, "kind": str(schema.kind)})
    else:
        create_renderer().ok(f"{args.data} matches {schema.kind} schema")
    return 0


def _cmd_options(args: argparse.Namespace) -> int:
    options = _load_effective_options(args)
    payload = options.to_dict()
    if args.json:
        emit_json({"command": "options", "options": payload})
        return 0
    create_renderer().table({key: json.dumps(value) for key, value in payload.items()})
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_effective_options(args: argparse.Namespace) -> EnforcementOptions:
    overrides = _parse_overrides(getattr(args, "overrides", None) or [])
    return load_options(args.options_path, overrides=overrides)


def _parse_overrides(entries: Sequence[str]) -> dict[str, bool]:
    parsed: dict[str, bool] = {}
    for entry in entries:
        key, separator, raw_value = entry.partition("=")
        if not separator or not key.strip():
            raise CLIError(f"invalid --set value {entry!r}; expected OPTION=true|false")
        lowered = raw_value.strip().lower()
        if lowered not in {"true", "false"}:
            raise CLIError(f"invalid --set value {entry!r}; expected OPTION=true|false")
        parsed[canonical_option_name(key)] = lowered == "true"
    return parsed


__all__ = ["CLIError", "build_parser", "run_cli"]
