"""
schema-enforcer — hashing utilities

File: src/schema_enforcer/utils/hashing.py

Purpose
- Provide deterministic SHA-256 helpers used to compact canonical signatures.

Non-functional requirements
- Standard library only; digests are lowercase hex and platform independent.
"""

from __future__ import annotations

import hashlib

__all__ = [
    "sha256_bytes",
    "sha256_text",
]


def sha256_bytes(data: bytes) -> str:
    """Return SHA-256 hex digest for raw bytes."""

    return hashlib.sha256(data).hexdigest()


def sha256_text(text: str, *, encoding: str = "utf-8") -> str:
    """Return SHA-256 hex digest for text encoded with ``encoding``.

    Lone surrogates are escaped rather than rejected so any Python string hashes.
    """

    return sha256_bytes(text.encode(encoding, errors="surrogatepass"))
