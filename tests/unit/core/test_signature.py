"""
schema-enforcer — unit tests for canonical signatures

File: tests/unit/core/test_signature.py

Purpose
- Validate order-independent structural signatures used by enum and uniqueness checks.

What this test file should cover
- Key-order independence and array-order sensitivity.
- Number normalization (ints vs integral floats, booleans never numbers).
- Cycle handling in recursive and non-recursive modes.
- Digested signatures and the membership signature used by enum and uniqueness checks.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from schema_enforcer.core.signature import (
    MEMBER_DIGEST_THRESHOLD,
    Signature,
    equal,
    member_signature,
    signature,
)
from schema_enforcer.utils import sha256_text

_SCALARS = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.text(max_size=8),
)


def test_object_key_order_does_not_matter() -> None:
    assert equal({"a": 1, "b": [1, 2]}, {"b": [1, 2], "a": 1})
    assert signature({"x": {"y": 1, "z": 2}}) == signature({"x": {"z": 2, "y": 1}})


def test_array_order_matters() -> None:
    assert not equal([1, 2], [2, 1])
    assert equal((1, 2), [1, 2])


def test_scalars_compare_by_value_and_type() -> None:
    assert equal(1, 1.0)
    assert not equal(True, 1)
    assert not equal("1", 1)
    assert not equal(None, "null")
    assert not equal({}, [])
    assert equal(float("nan"), float("nan"))


def test_container_flag_and_string_form() -> None:
    array_sig = signature([1])
    scalar_sig = signature(1)

    assert array_sig.container is True
    assert scalar_sig.container is False
    assert str(array_sig).startswith("1")
    assert str(scalar_sig).startswith("0")


def test_signature_equal_accepts_raw_values() -> None:
    assert signature({"a": 1}).equal({"a": 1})
    assert not signature({"a": 1}).equal({"a": 2})


def test_signature_of_signature_is_identity() -> None:
    sig = signature([1, 2])
    assert signature(sig) is sig


def test_non_recursive_cycle_raises_value_error() -> None:
    cyclic: list[object] = []
    cyclic.append(cyclic)

    with pytest.raises(ValueError, match="cyclic"):
        signature(cyclic)


def test_recursive_mode_terminates_and_matches_equivalent_cycles() -> None:
    first: dict[str, object] = {"name": "a"}
    first["self"] = first
    second: dict[str, object] = {"name": "a"}
    second["self"] = second
    other: dict[str, object] = {"name": "b"}
    other["self"] = other

    assert equal(first, second, recursive=True)
    assert not equal(first, other, recursive=True)


def test_shared_non_cyclic_references_are_not_cycles() -> None:
    shared = [1, 2]
    assert equal([shared, shared], [[1, 2], [1, 2]])


def test_digested_signatures_are_sha256_and_consistent() -> None:
    left = signature({"a": [1, 2, 3]}, digest_over=0)
    right = signature({"a": [1, 2, 3]}, digest_over=0)

    assert isinstance(left, Signature)
    assert left.digested is True
    assert left.value == sha256_text(signature({"a": [1, 2, 3]}).value)
    assert left == right
    assert left.equal({"a": [1, 2, 3]})
    assert left != signature({"a": [1, 2, 3]})


def test_member_signatures_digest_only_large_values() -> None:
    small = {"a": [1, 2, 3]}
    large = {"text": "x" * MEMBER_DIGEST_THRESHOLD, "n": 1}

    assert member_signature(small) == signature(small, recursive=True)
    assert member_signature(small).digested is False
    assert member_signature(large).digested is True
    reordered = {"n": 1.0, "text": "x" * MEMBER_DIGEST_THRESHOLD}
    assert member_signature(large) == member_signature(reordered)
    assert member_signature(large).equal(dict(reversed(list(large.items()))))
    assert member_signature(large) != member_signature({**large, "n": 2})


@settings(max_examples=60, deadline=None)
@given(st.dictionaries(st.text(max_size=6), _SCALARS, max_size=8))
def test_property_signature_ignores_insertion_order(data: dict[str, object]) -> None:
    reordered = dict(reversed(list(data.items())))
    assert signature(data) == signature(reordered)


@settings(max_examples=60, deadline=None)
@given(st.lists(_SCALARS, max_size=8), st.lists(_SCALARS, max_size=8))
def test_property_array_signatures_match_iff_values_equal(
    left: list[object], right: list[object]
) -> None:
    expected = len(left) == len(right) and all(equal(a, b) for a, b in zip(left, right))
    assert equal(left, right) is expected
