"""Enforcement engine: signatures, schema normalization, validation, and enforced containers."""

from schema_enforcer.core.containers import (
    EnforcedArray,
    EnforcedContainer,
    EnforcedObject,
    adopt,
    to_plain,
)
from schema_enforcer.core.defaults import apply_defaults
from schema_enforcer.core.enforcer import (
    enforce,
    enforcement_kind,
    is_enforced,
    validate,
)
from schema_enforcer.core.schema import MISSING, NormalizedSchema, SchemaKind, normalize
from schema_enforcer.core.signature import Signature, equal, signature
from schema_enforcer.core.validator import require_serializable, validate_value

__all__ = [
    "MISSING",
    "EnforcedArray",
    "EnforcedContainer",
    "EnforcedObject",
    "NormalizedSchema",
    "SchemaKind",
    "Signature",
    "adopt",
    "apply_defaults",
    "enforce",
    "enforcement_kind",
    "equal",
    "is_enforced",
    "normalize",
    "require_serializable",
    "signature",
    "to_plain",
    "validate",
    "validate_value",
]
