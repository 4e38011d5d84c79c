"""
schema-enforcer — error taxonomy

File: src/schema_enforcer/errors.py

Purpose
- Define the single exception hierarchy raised by normalization, validation, and
  live enforcement, plus the stable short codes attached to schema violations.

Functional requirements
- Every violated constraint maps to exactly one ``ErrorCode``.
- Violations carry the offending path, a machine-readable code, and a readable detail.

Non-functional requirements
- No recovery happens here; callers translate errors into user-facing responses.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

ROOT_PATH_LABEL: Final[str] = "<root>"


class ErrorCode(StrEnum):
    """Stable short codes, one per violated constraint."""

    TYPE = "TYPE"
    REQ = "REQ"
    NPER = "NPER"
    MAX = "MAX"
    NMAX = "NMAX"
    MIN = "MIN"
    NMIN = "NMIN"
    NMULT = "NMULT"
    NINT = "NINT"
    SMAX = "SMAX"
    SMIN = "SMIN"
    SPAT = "SPAT"
    LEN = "LEN"
    UNIQ = "UNIQ"
    ENUM = "ENUM"


class SchemaEnforcerError(Exception):
    """Base class for every error raised by this package."""


class SchemaViolationError(SchemaEnforcerError, ValueError):
    """Raised when a value or a mutation violates its schema."""

    def __init__(self, code: ErrorCode, path: str, detail: str) -> None:
        self.code = ErrorCode(code)
        self.path = path
        self.detail = detail
        super().__init__(f"Error at {path or ROOT_PATH_LABEL}: {detail} [{self.code}]")


class SchemaDefinitionError(SchemaEnforcerError, ValueError):
    """Raised when a schema definition itself is malformed."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"invalid schema at {path or ROOT_PATH_LABEL}: {message}")


class EnforcementError(SchemaEnforcerError, TypeError):
    """Raised when enforcement is requested for something that cannot be enforced."""


__all__ = [
    "ROOT_PATH_LABEL",
    "EnforcementError",
    "ErrorCode",
    "SchemaDefinitionError",
    "SchemaEnforcerError",
    "SchemaViolationError",
]
