"""Utility exports for hashing helpers."""

from schema_enforcer.utils.hashing import sha256_bytes, sha256_text

__all__ = [
    "sha256_bytes",
    "sha256_text",
]
