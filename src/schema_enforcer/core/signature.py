"""Order-independent structural signatures for equality, enum, and uniqueness checks."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Final

from schema_enforcer.utils.hashing import sha256_text

_CYCLE_OPEN: Final[str] = "\u001a"
_CYCLE_CLOSE: Final[str] = "\u001b"
_ROOT_CHAIN: Final[str] = "#"
MEMBER_DIGEST_THRESHOLD: Final[int] = 256

__all__ = [
    "MEMBER_DIGEST_THRESHOLD",
    "Signature",
    "equal",
    "member_signature",
    "signature",
]


@dataclass(frozen=True, slots=True)
class Signature:
    """Canonical fingerprint of a value.

    Two signatures compare equal iff the signed values are deeply equal, with object
    key order ignored. ``digested`` signatures hold a SHA-256 hex digest of the
    canonical text instead of the text itself.
    """

    container: bool
    value: str
    digested: bool = False

    def equal(self, other: object, *, recursive: bool = False) -> bool:
        digest_over = 0 if self.digested else None
        return self == signature(other, recursive=recursive, digest_over=digest_over)

    def __str__(self) -> str:
        return ("1" if self.container else "0") + self.value


def signature(
    value: object, *, recursive: bool = False, digest_over: int | None = None
) -> Signature:
    """Return the canonical signature of ``value``.

    Canonical text longer than ``digest_over`` characters is replaced by its SHA-256
    digest.

    With ``recursive`` enabled, a value that is reached again while it is still being
    signed contributes a back-reference marker naming the chain where it was first
    entered. Without it, cyclic input raises ``ValueError``.
    """

    if isinstance(value, Signature):
        return value
    parts: list[str] = []
    _build(value, _ROOT_CHAIN, parts, {}, recursive)
    text = "".join(parts)
    container = _is_object(value) or _is_array(value)
    if digest_over is None or len(text) <= digest_over:
        return Signature(container=container, value=text)
    return Signature(container=container, value=sha256_text(text), digested=True)


def member_signature(value: object) -> Signature:
    """Signature kept for enum and uniqueness membership; large values are digested."""

    return signature(value, recursive=True, digest_over=MEMBER_DIGEST_THRESHOLD)


def equal(left: object, right: object, *, recursive: bool = False) -> bool:
    """Return whether two values are structurally equal, ignoring object key order."""

    return signature(left, recursive=recursive) == signature(right, recursive=recursive)


def _build(
    value: object,
    chain: str,
    parts: list[str],
    active: dict[int, str],
    recursive: bool,
) -> None:
    if _is_object(value) or _is_array(value):
        marker = id(value)
        seen_at = active.get(marker)
        if seen_at is not None:
            if not recursive:
                raise ValueError(f"cyclic value at {chain}; sign it with recursive=True")
            parts.append(_CYCLE_OPEN + _string_token(seen_at) + _CYCLE_CLOSE)
            return
        active[marker] = chain
        try:
            if _is_object(value):
                _build_object(value, chain, parts, active, recursive)  # type: ignore[arg-type]
            else:
                _build_array(value, chain, parts, active, recursive)  # type: ignore[arg-type]
        finally:
            del active[marker]
        return
    parts.append(_scalar_token(value))


def _build_object(
    value: Mapping[object, object],
    chain: str,
    parts: list[str],
    active: dict[int, str],
    recursive: bool,
) -> None:
    keyed = sorted(((_key_token(key), key) for key in value), key=lambda item: item[0])
    parts.append("{")
    for token, key in keyed:
        parts.append(",")
        parts.append(token)
        parts.append(":")
        _build(value[key], f"{chain}/{_chain_segment(key)}", parts, active, recursive)
    parts.append("}")


def _build_array(
    value: Sequence[object],
    chain: str,
    parts: list[str],
    active: dict[int, str],
    recursive: bool,
) -> None:
    parts.append("[")
    for index, item in enumerate(value):
        parts.append(",")
        _build(item, f"{chain}/{index}", parts, active, recursive)
    parts.append("]")


def _is_object(value: object) -> bool:
    return isinstance(value, Mapping)


def _is_array(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _key_token(key: object) -> str:
    if isinstance(key, str):
        return _string_token(key)
    return _scalar_token(key)


def _chain_segment(key: object) -> str:
    return key if isinstance(key, str) else repr(key)


def _scalar_token(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_token(value)
    if isinstance(value, str):
        return _string_token(value)
    return f"<{type(value).__qualname__}:{value!r}>"


def _float_token(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _string_token(value: str) -> str:
    # JSON escaping keeps delimiters inside strings from colliding with structure.
    return json.dumps(value, ensure_ascii=False)
