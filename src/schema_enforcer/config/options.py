"""
schema-enforcer — enforcement options and validation.

File: src/schema_enforcer/config/options.py

Purpose
- Define the per-facet enforcement switches, their documented defaults, and strict
  validation of option payloads coming from code, TOML files, or the environment.

What should be included in this file
- The immutable ``EnforcementOptions`` value and its default table.
- Validation rules for unknown keys and non-boolean values with structured issues.
- Deterministic merge helpers for layered option sources.

Functional requirements
- Accept schema spelling (``maxLength``) and Python spelling (``max_length``) for keys.
- Accept flat payloads and payloads nested under an ``enforce`` section.

Non-functional requirements
- Keep rules deterministic and easy to audit.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import asdict, dataclass, fields
from typing import Any, Final

from schema_enforcer.constants import FACET_NAMES, OPTION_FIELD_BY_FACET
from schema_enforcer.errors import SchemaEnforcerError

_CAMEL_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ENFORCE_SECTION: Final[str] = "enforce"


@dataclass(frozen=True, slots=True)
class EnforcementOptions:
    """Which schema facets are checked, plus default population."""

    enum: bool = True
    multiple_of: bool = True
    maximum: bool = True
    minimum: bool = True
    max_length: bool = True
    min_length: bool = False
    pattern: bool = True
    max_items: bool = True
    min_items: bool = False
    unique_items: bool = False
    additional_properties: bool = False
    max_properties: bool = True
    min_properties: bool = True
    required: bool = True
    use_defaults: bool = False

    def is_enabled(self, facet: str) -> bool:
        """Return whether the schema facet ``facet`` (schema spelling) is enforced."""

        field_name = OPTION_FIELD_BY_FACET.get(facet)
        if field_name is None:
            raise KeyError(f"unknown validation facet {facet!r}")
        return bool(getattr(self, field_name))

    def enabled_facets(self) -> tuple[str, ...]:
        return tuple(facet for facet in FACET_NAMES if self.is_enabled(facet))

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)


OPTION_FIELDS: Final[tuple[str, ...]] = tuple(item.name for item in fields(EnforcementOptions))
DEFAULT_OPTIONS: Final[EnforcementOptions] = EnforcementOptions()


@dataclass(frozen=True, slots=True)
class OptionsValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class OptionsValidationResult:
    """Validation result with parsed options when no issues were found."""

    options: EnforcementOptions | None
    issues: tuple[OptionsValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.options is not None and not self.issues


class OptionsValidationError(SchemaEnforcerError, ValueError):
    """Raised when strict options validation fails."""

    def __init__(self, issues: Sequence[OptionsValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid enforcement options:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[OptionsValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(OptionsValidationIssue(path=path, message=message))

    def items(self) -> tuple[OptionsValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_options() -> EnforcementOptions:
    """Return the documented default option table."""

    return DEFAULT_OPTIONS


def canonical_option_name(key: str) -> str:
    """Map ``maxLength``/``max_length``/``max-length`` to the dataclass field name."""

    snake = _CAMEL_CASE_BOUNDARY.sub(r"\1_\2", key.strip()).replace("-", "_").lower()
    return snake


def validate_options(payload: Mapping[str, object] | object) -> OptionsValidationResult:
    """Validate an options payload and return structured issues with deterministic paths."""

    issues = _IssueCollector()
    flags = _collect_flags(payload, issues)
    if issues.has_issues:
        return OptionsValidationResult(options=None, issues=issues.items())
    return OptionsValidationResult(options=EnforcementOptions(**flags), issues=())


def assert_valid_options(payload: Mapping[str, object] | object) -> EnforcementOptions:
    """Validate options and raise ``OptionsValidationError`` on failure."""

    result = validate_options(payload)
    if result.options is None:
        raise OptionsValidationError(result.issues)
    return result.options


def resolve_options(
    options: EnforcementOptions | Mapping[str, object] | None,
) -> EnforcementOptions:
    """Coerce ``None``, a mapping payload, or an instance into ``EnforcementOptions``."""

    if options is None:
        return DEFAULT_OPTIONS
    if isinstance(options, EnforcementOptions):
        return options
    return assert_valid_options(options)


def merge_options(
    base: EnforcementOptions | Mapping[str, object] | None,
    overlay: Mapping[str, object],
) -> EnforcementOptions:
    """Apply ``overlay`` flags on top of ``base`` and re-validate the result."""

    resolved = resolve_options(base)
    merged: dict[str, Any] = resolved.to_dict()
    issues = _IssueCollector()
    merged.update(_collect_flags(overlay, issues, include_defaults=False))
    if issues.has_issues:
        raise OptionsValidationError(issues.items())
    return EnforcementOptions(**merged)


def _collect_flags(
    payload: Mapping[str, object] | object,
    issues: _IssueCollector,
    *,
    include_defaults: bool = True,
) -> dict[str, bool]:
    flags: dict[str, bool] = DEFAULT_OPTIONS.to_dict() if include_defaults else {}
    if isinstance(payload, EnforcementOptions):
        flags.update(payload.to_dict())
        return flags
    if not isinstance(payload, Mapping):
        issues.add("<root>", f"expected object, got {type(payload).__name__}")
        return flags

    for key in sorted(payload, key=str):
        value = payload[key]
        if not isinstance(key, str):
            issues.add("<root>", f"option keys must be strings, got {key!r}")
            continue
        if key == _ENFORCE_SECTION:
            if not isinstance(value, Mapping):
                issues.add(key, "enforce section must be an object")
                continue
            for facet_key in sorted(value, key=str):
                _collect_one(facet_key, value[facet_key], f"{key}.{facet_key}", flags, issues)
            continue
        _collect_one(key, value, key, flags, issues)
    return flags


def _collect_one(
    key: object,
    value: object,
    path: str,
    flags: dict[str, bool],
    issues: _IssueCollector,
) -> None:
    if not isinstance(key, str):
        issues.add(path, "option keys must be strings")
        return
    name = canonical_option_name(key)
    if name not in OPTION_FIELDS:
        issues.add(path, f"unknown option {key!r}")
        return
    if not isinstance(value, bool):
        issues.add(path, f"expected boolean, got {type(value).__name__}")
        return
    flags[name] = value


__all__ = [
    "DEFAULT_OPTIONS",
    "OPTION_FIELDS",
    "EnforcementOptions",
    "OptionsValidationError",
    "OptionsValidationIssue",
    "OptionsValidationResult",
    "assert_valid_options",
    "canonical_option_name",
    "default_options",
    "merge_options",
    "resolve_options",
    "validate_options",
]
