"""
schema-enforcer — enforcement options loader.

File: src/schema_enforcer/config/loader.py

Purpose
- Load effective enforcement options from defaults, a TOML file, environment
  variables, and explicit overrides.

What should be included in this file
- Precedence logic: overrides > env (SCHEMA_ENFORCER_) > file > defaults.
- TOML loading via ``tomllib``.
- Deterministic environment variable mapping and boolean coercion.
- Deterministic JSON dump of the effective options.

Functional requirements
- Reject unknown option keys and non-boolean values via options validation.

Non-functional requirements
- Keep loading deterministic and reproducible.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from schema_enforcer.config.options import (
    OPTION_FIELDS,
    EnforcementOptions,
    assert_valid_options,
    merge_options,
)
from schema_enforcer.constants import DEFAULT_OPTIONS_FILE, ENV_PREFIX
from schema_enforcer.errors import SchemaEnforcerError

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})


class OptionsLoadError(SchemaEnforcerError, ValueError):
    """Raised when options cannot be loaded or overrides cannot be coerced."""


def load_options(
    options_path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    overrides: Mapping[str, object] | None = None,
) -> EnforcementOptions:
    """Load effective options with deterministic precedence: overrides > env > file > defaults."""

    resolved_path = _resolve_options_path(options_path)
    explicit_path = options_path is not None
    env_map = dict(os.environ if environ is None else environ)

    file_payload = _load_toml_file(resolved_path, required=explicit_path)
    options = assert_valid_options(file_payload)

    env_overrides = _collect_env_overrides(env_map)
    if env_overrides:
        options = merge_options(options, env_overrides)

    if overrides:
        options = merge_options(options, overrides)

    return options


def load_options_file(path: str | Path) -> EnforcementOptions:
    """Load options from a specific TOML file path, ignoring the environment."""

    return load_options(path, environ={})


def dump_effective_options(options: EnforcementOptions) -> str:
    """Return deterministic JSON dump of the effective options."""

    return json.dumps(options.to_dict(), sort_keys=True, separators=(",", ":"))


def env_name_for_option(field_name: str) -> str:
    return ENV_PREFIX + field_name.upper()


def _resolve_options_path(options_path: str | Path | None) -> Path:
    if options_path is None:
        return (Path.cwd() / DEFAULT_OPTIONS_FILE).resolve()
    return Path(options_path).expanduser().resolve()


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise OptionsLoadError(f"options file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise OptionsLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise OptionsLoadError(f"unable to read options file {path}: {exc}") from exc

    return parsed


def _collect_env_overrides(environ: Mapping[str, str]) -> dict[str, bool]:
    overrides: dict[str, bool] = {}
    for field_name in OPTION_FIELDS:
        env_name = env_name_for_option(field_name)
        raw = environ.get(env_name)
        if raw is None:
            continue
        overrides[field_name] = _coerce_env_bool(raw, env_name)
    return overrides


def _coerce_env_bool(raw: str, env_name: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise OptionsLoadError(f"{env_name} must be a boolean (true/false/1/0/yes/no/on/off)")


__all__ = [
    "OptionsLoadError",
    "dump_effective_options",
    "env_name_for_option",
    "load_options",
    "load_options_file",
]
