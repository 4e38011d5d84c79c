"""
schema-enforcer — live JSON-Schema enforcement for in-memory values

File: src/schema_enforcer/__init__.py

Purpose
- Package root. Re-exports the small public API: ``enforce``/``validate`` entry
  points, the enforced container types, options, and the error taxonomy.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).

Key interfaces / contracts
- ``enforce(schema, options=None, initial=MISSING)`` returns an ``EnforcedArray``,
  an ``EnforcedObject``, or the validated primitive.
- ``validate(schema, value, options=None)`` raises ``SchemaViolationError``.
"""

from schema_enforcer.config import EnforcementOptions, load_options
from schema_enforcer.core import (
    MISSING,
    EnforcedArray,
    EnforcedContainer,
    EnforcedObject,
    NormalizedSchema,
    SchemaKind,
    Signature,
    enforce,
    enforcement_kind,
    equal,
    is_enforced,
    normalize,
    signature,
    to_plain,
    validate,
)
from schema_enforcer.errors import (
    EnforcementError,
    ErrorCode,
    SchemaDefinitionError,
    SchemaEnforcerError,
    SchemaViolationError,
)

__version__ = "0.3.0"

__all__ = [
    "MISSING",
    "EnforcedArray",
    "EnforcedContainer",
    "EnforcedObject",
    "EnforcementError",
    "EnforcementOptions",
    "ErrorCode",
    "NormalizedSchema",
    "SchemaDefinitionError",
    "SchemaEnforcerError",
    "SchemaKind",
    "SchemaViolationError",
    "Signature",
    "__version__",
    "enforce",
    "enforcement_kind",
    "equal",
    "is_enforced",
    "load_options",
    "normalize",
    "signature",
    "to_plain",
    "validate",
]
