"""
schema-enforcer config package public API.

File: src/schema_enforcer/config/__init__.py

Purpose
- Export enforcement option types, validation entrypoints, and the options loader.

Functional requirements
- Support loading from ``schema_enforcer.toml`` + ``SCHEMA_ENFORCER_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from schema_enforcer.config.loader import (
    OptionsLoadError,
    dump_effective_options,
    env_name_for_option,
    load_options,
    load_options_file,
)
from schema_enforcer.config.options import (
    DEFAULT_OPTIONS,
    OPTION_FIELDS,
    EnforcementOptions,
    OptionsValidationError,
    OptionsValidationIssue,
    OptionsValidationResult,
    assert_valid_options,
    canonical_option_name,
    default_options,
    merge_options,
    resolve_options,
    validate_options,
)

__all__ = [
    "DEFAULT_OPTIONS",
    "OPTION_FIELDS",
    "EnforcementOptions",
    "OptionsLoadError",
    "OptionsValidationError",
    "OptionsValidationIssue",
    "OptionsValidationResult",
    "assert_valid_options",
    "canonical_option_name",
    "default_options",
    "dump_effective_options",
    "env_name_for_option",
    "load_options",
    "load_options_file",
    "merge_options",
    "resolve_options",
    "validate_options",
]
