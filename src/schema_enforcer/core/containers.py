"""
schema-enforcer — enforced containers

File: src/schema_enforcer/core/containers.py

Purpose
- ``EnforcedArray`` and ``EnforcedObject`` guard every mutation of a list/dict-like
  value with schema validation and recursively wrap nested array/object values.

What should be included in this file
- Python sequence/mapping protocols (``MutableSequence``/``MutableMapping``).
- Array operations with relative-index semantics: push, pop, shift, unshift, splice,
  concat, fill, filter, map, slice, copy_within.
- Uniqueness bookkeeping as a multiset of item signatures.

Functional requirements
- A rejected operation raises before anything is changed.
- Derived containers (concat, filter, map, slice, splice result) are new instances.
- Every wrapper owns its store; stored nested values are copies of what was given.

Non-functional requirements
- Single-writer use; no internal locking.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping, MutableSequence
from typing import Any, ClassVar, SupportsIndex, overload

from schema_enforcer.core.defaults import apply_defaults
from schema_enforcer.core.schema import MISSING, NormalizedSchema, SchemaKind
from schema_enforcer.core.signature import Signature
from schema_enforcer.core.validator import (
    additional_schemas,
    check_array_length,
    check_item,
    check_property_count,
    check_unique,
    is_json_array,
    is_json_object,
    item_signature,
    join_path,
    reject_undeclared,
    require_serializable,
    validate_value,
)
from schema_enforcer.errors import (
    ROOT_PATH_LABEL,
    EnforcementError,
    ErrorCode,
    SchemaViolationError,
)
from schema_enforcer.observability import get_logger

_LOGGER = get_logger(__name__)


class EnforcedContainer:
    """Shared surface of both container kinds."""

    __slots__ = ()

    enforcement_kind: ClassVar[SchemaKind]
    _schema: NormalizedSchema
    _path: str

    __hash__ = None  # type: ignore[assignment]

    @property
    def schema(self) -> NormalizedSchema:
        return self._schema

    @property
    def path(self) -> str:
        return self._path

    def to_plain(self) -> Any:
        raise NotImplementedError

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_plain(), **kwargs)

    def _rejected(self, operation: str, exc: SchemaViolationError) -> None:
        _LOGGER.debug(
            "enforced_mutation_rejected",
            kind=str(self.enforcement_kind),
            operation=operation,
            code=str(exc.code),
            path=exc.path or ROOT_PATH_LABEL,
        )


class EnforcedArray(EnforcedContainer, MutableSequence[Any]):
    """A list-like value whose contents always satisfy an array schema."""

    __slots__ = ("_schema", "_path", "_store", "_members")

    enforcement_kind: ClassVar[SchemaKind] = SchemaKind.ARRAY

    def __init__(
        self,
        schema: NormalizedSchema,
        initial: Iterable[Any] | object = MISSING,
        *,
        path: str = "",
    ) -> None:
        _require_kind(schema, SchemaKind.ARRAY)
        value = [] if initial is MISSING else initial
        value = apply_defaults(schema, value)
        validate_value(schema, value, path)
        self._populate(schema, value, path)  # type: ignore[arg-type]

    @classmethod
    def _trusted(cls, schema: NormalizedSchema, items: Iterable[Any], path: str) -> EnforcedArray:
        instance = cls.__new__(cls)
        instance._populate(schema, items, path)
        return instance

    def _populate(self, schema: NormalizedSchema, items: Iterable[Any], path: str) -> None:
        self._schema = schema
        self._path = path
        self._store: list[Any] = [
            adopt(schema.items, item, join_path(path, index)) for index, item in enumerate(items)
        ]
        self._members: Counter[Signature] | None = (
            Counter(item_signature(item) for item in self._store) if schema.unique_items else None
        )

    # -- read access -------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._store)

    @overload
    def __getitem__(self, index: SupportsIndex) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> EnforcedArray: ...

    def __getitem__(self, index: SupportsIndex | slice) -> Any:
        if isinstance(index, slice):
            return self._derive(self._store[index], "getitem")
        return self._store[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._store)

    def __contains__(self, value: object) -> bool:
        return value in self._store

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (list, EnforcedArray)):
            return self._store == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._store!r})"

    def to_plain(self) -> list[Any]:
        return [to_plain(item) for item in self._store]

    def copy(self) -> EnforcedArray:
        return EnforcedArray._trusted(self._schema, self._store, self._path)

    # -- Python sequence mutation --------------------------------------------------

    def __setitem__(self, index: SupportsIndex | slice, value: Any) -> None:
        if isinstance(index, slice):
            start, stop = self._contiguous(index)
            self._replace(start, stop, list(value), "setitem")
            return
        length = len(self._store)
        position = _python_index(index, length)
        if position == length:
            self._replace(length, length, [value], "setitem")
            return
        if not 0 <= position < length:
            raise IndexError("enforced array assignment index out of range")
        self._replace(position, position + 1, [value], "setitem")

    def __delitem__(self, index: SupportsIndex | slice) -> None:
        if isinstance(index, slice):
            start, stop = self._contiguous(index)
            self._replace(start, stop, [], "delitem")
            return
        position = self._existing_index(index)
        self._replace(position, position + 1, [], "delitem")

    def __iadd__(self, values: Iterable[Any]) -> EnforcedArray:  # type: ignore[override]
        self.extend(values)
        return self

    def insert(self, index: SupportsIndex, value: Any) -> None:
        length = len(self._store)
        position = _python_index(index, length)
        position = min(max(position, 0), length)
        self._replace(position, position, [value], "insert")

    def append(self, value: Any) -> None:
        length = len(self._store)
        self._replace(length, length, [value], "append")

    def extend(self, values: Iterable[Any]) -> None:
        length = len(self._store)
        self._replace(length, length, list(values), "extend")

    def pop(self, index: SupportsIndex = -1) -> Any:
        if not self._store:
            raise IndexError("pop from empty enforced array")
        position = self._existing_index(index)
        return self._replace(position, position + 1, [], "pop")[0]

    def clear(self) -> None:
        self._replace(0, len(self._store), [], "clear")

    def reverse(self) -> None:
        self._reorder(self._store[::-1], "reverse")

    def sort(self, *, key: Callable[[Any], Any] | None = None, reverse: bool = False) -> None:
        self._reorder(sorted(self._store, key=key, reverse=reverse), "sort")

    # -- array operations ---------------------------------------------------------

    def push(self, *values: Any) -> int:
        """Append ``values`` in order and return the new length."""

        length = len(self._store)
        self._replace(length, length, list(values), "push")
        return len(self._store)

    def shift(self) -> Any:
        """Remove and return the first element."""

        if not self._store:
            raise IndexError("shift from empty enforced array")
        return self._replace(0, 1, [], "shift")[0]

    def unshift(self, *values: Any) -> int:
        """Prepend ``values`` in order and return the new length."""

        self._replace(0, 0, list(values), "unshift")
        return len(self._store)

    def splice(self, start: int, delete_count: int | None = None, *items: Any) -> EnforcedArray:
        """Remove ``delete_count`` elements at ``start``, insert ``items`` there.

        Returns the removed elements as a new enforced array. Nothing changes when the
        resulting array would not satisfy the schema.
        """

        length = len(self._store)
        begin = _relative_index(start, length)
        if delete_count is None:
            count = length - begin
        else:
            count = min(max(delete_count, 0), length - begin)
        removed = self._replace(begin, begin + count, list(items), "splice")
        return EnforcedArray._trusted(self._schema, removed, self._path)

    def concat(self, *values: Any) -> EnforcedArray:
        """New enforced array of this array's items followed by ``values``.

        Array arguments contribute their items, anything else is added as one item.
        """

        derived = list(self._store)
        for value in values:
            if is_json_array(value):
                derived.extend(value)
            else:
                derived.append(value)
        return self._derive(derived, "concat")

    def filter(self, predicate: Callable[[Any], object]) -> EnforcedArray:
        return self._derive([item for item in self._store if predicate(item)], "filter")

    def map(self, transform: Callable[[Any], Any]) -> EnforcedArray:
        return self._derive([transform(item) for item in self._store], "map")

    def slice(self, start: int | None = None, end: int | None = None) -> EnforcedArray:
        begin, stop = self._relative_range(start, end)
        return self._derive(self._store[begin:stop], "slice")

    def fill(self, value: Any, start: int | None = None, end: int | None = None) -> EnforcedArray:
        """Set every position in ``[start, end)`` to ``value``; returns this array."""

        begin, stop = self._relative_range(start, end)
        if begin >= stop:
            return self
        candidate = apply_defaults(self._schema.items, value)
        try:
            check_item(self._schema, candidate, join_path(self._path, begin))
        except SchemaViolationError as exc:
            self._rejected("fill", exc)
            raise
        self._replace(begin, stop, [candidate] * (stop - begin), "fill", validate_items=False)
        return self

    def copy_within(self, target: int, start: int = 0, end: int | None = None) -> EnforcedArray:
        """Copy the items in ``[start, end)`` over the positions starting at ``target``."""

        length = len(self._store)
        destination = _relative_index(target, length)
        begin, stop = self._relative_range(start, end)
        count = min(stop - begin, length - destination)
        if count <= 0:
            return self
        segment = self._store[begin : begin + count]
        self._replace(destination, destination + count, segment, "copy_within", validate_items=False)
        return self

    # -- internals -----------------------------------------------------------------

    def _replace(
        self,
        start: int,
        stop: int,
        values: list[Any],
        operation: str,
        *,
        validate_items: bool = True,
    ) -> list[Any]:
        schema = self._schema
        try:
            if validate_items:
                values = [apply_defaults(schema.items, value) for value in values]
                for offset, value in enumerate(values):
                    check_item(schema, value, join_path(self._path, start + offset))
            check_array_length(schema, len(self._store) - (stop - start) + len(values), self._path)
            members = None
            if self._members is not None:
                members = self._members.copy()
                members.subtract(item_signature(item) for item in self._store[start:stop])
                signatures = check_unique(values, self._path, members=members, offset=start)
                members.update(signatures)
            if self._has_whole_value_checks():
                candidate = [*self._store[:start], *values, *self._store[stop:]]
                validate_value(schema, candidate, self._path)
        except SchemaViolationError as exc:
            self._rejected(operation, exc)
            raise

        wrapped = [
            adopt(schema.items, value, join_path(self._path, start + offset))
            for offset, value in enumerate(values)
        ]
        removed = self._store[start:stop]
        self._store[start:stop] = wrapped
        if members is not None:
            self._members = +members
        return removed

    def _reorder(self, items: list[Any], operation: str) -> None:
        if self._has_whole_value_checks():
            try:
                validate_value(self._schema, items, self._path)
            except SchemaViolationError as exc:
                self._rejected(operation, exc)
                raise
        self._store[:] = items

    def _has_whole_value_checks(self) -> bool:
        return self._schema.enum is not None or bool(self._schema.all_of)

    def _derive(self, items: list[Any], operation: str) -> EnforcedArray:
        try:
            return EnforcedArray(self._schema, items, path=self._path)
        except SchemaViolationError as exc:
            self._rejected(operation, exc)
            raise

    def _existing_index(self, index: SupportsIndex) -> int:
        length = len(self._store)
        position = _python_index(index, length)
        if not 0 <= position < length:
            raise IndexError("enforced array index out of range")
        return position

    def _contiguous(self, index: slice) -> tuple[int, int]:
        start, stop, step = index.indices(len(self._store))
        if step != 1:
            raise ValueError("enforced arrays only support contiguous slices")
        return start, max(start, stop)

    def _relative_range(self, start: int | None, end: int | None) -> tuple[int, int]:
        length = len(self._store)
        begin = 0 if start is None else _relative_index(start, length)
        stop = length if end is None else _relative_index(end, length)
        return begin, max(begin, stop)


class EnforcedObject(EnforcedContainer, MutableMapping[str, Any]):
    """A dict-like value whose properties always satisfy an object schema."""

    __slots__ = ("_schema", "_path", "_store")

    enforcement_kind: ClassVar[SchemaKind] = SchemaKind.OBJECT

    def __init__(
        self,
        schema: NormalizedSchema,
        initial: Mapping[str, Any] | object = MISSING,
        *,
        path: str = "",
    ) -> None:
        _require_kind(schema, SchemaKind.OBJECT)
        value = {} if initial is MISSING else initial
        value = apply_defaults(schema, value)
        validate_value(schema, value, path)
        self._populate(schema, value, path)  # type: ignore[arg-type]

    @classmethod
    def _trusted(cls, schema: NormalizedSchema, items: Mapping[str, Any], path: str) -> EnforcedObject:
        instance = cls.__new__(cls)
        instance._populate(schema, items, path)
        return instance

    def _populate(self, schema: NormalizedSchema, items: Mapping[str, Any], path: str) -> None:
        self._schema = schema
        self._path = path
        self._store: dict[str, Any] = {}
        for key, value in items.items():
            self._store[key] = adopt(self._storage_schema(key), value, join_path(path, key))

    def __len__(self) -> int:
        return len(self._store)

    def __getitem__(self, key: str) -> Any:
        return self._store[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self._store == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._store!r})"

    def to_plain(self) -> dict[str, Any]:
        return {key: to_plain(value) for key, value in self._store.items()}

    def copy(self) -> EnforcedObject:
        return EnforcedObject._trusted(self._schema, self._store, self._path)

    def __setitem__(self, key: str, value: Any) -> None:
        path = join_path(self._path, key)
        try:
            if not isinstance(key, str):
                raise SchemaViolationError(
                    ErrorCode.TYPE, self._path, f"Invalid property name {key!r}: keys must be strings"
                )
            target_schemas = self._target_schemas(key)
            if key not in self._store:
                self._check_counts(len(self._store) + 1)
            candidate = value
            for target in target_schemas:
                candidate = apply_defaults(target, candidate)
            if target_schemas:
                for target in target_schemas:
                    validate_value(target, candidate, path)
            else:
                require_serializable(candidate, path)
            if self._has_whole_value_checks():
                validate_value(self._schema, {**self._store, key: candidate}, self._path)
        except SchemaViolationError as exc:
            self._rejected("setitem", exc)
            raise
        self._store[key] = adopt(self._storage_schema(key), candidate, path)

    def __delitem__(self, key: str) -> None:
        if key not in self._store:
            raise KeyError(key)
        try:
            if self._schema.is_required(key):
                raise SchemaViolationError(
                    ErrorCode.REQ, join_path(self._path, key), f"Cannot delete required property: {key}"
                )
            self._check_counts(len(self._store) - 1)
            if self._has_whole_value_checks():
                remaining = {name: item for name, item in self._store.items() if name != key}
                validate_value(self._schema, remaining, self._path)
        except SchemaViolationError as exc:
            self._rejected("delitem", exc)
            raise
        del self._store[key]

    def update(self, other: Any = (), /, **kwargs: Any) -> None:  # type: ignore[override]
        incoming = dict(other)
        incoming.update(kwargs)
        if not incoming:
            return
        candidate = dict(self._store)
        candidate.update(incoming)
        self._commit(candidate, "update", changed=incoming)

    def setdefault(self, key: str, default: Any = None) -> Any:
        if key not in self._store:
            self[key] = default
        return self._store[key]

    def clear(self) -> None:
        self._commit({}, "clear", changed={})

    def _commit(self, candidate: dict[str, Any], operation: str, *, changed: Mapping[str, Any]) -> None:
        try:
            candidate = apply_defaults(self._schema, candidate)  # type: ignore[assignment]
            validate_value(self._schema, candidate, self._path)
        except SchemaViolationError as exc:
            self._rejected(operation, exc)
            raise
        store: dict[str, Any] = {}
        for key, value in candidate.items():
            if key in self._store and key not in changed and value is self._store[key]:
                store[key] = value
            else:
                store[key] = adopt(self._storage_schema(key), value, join_path(self._path, key))
        self._store = store

    def _target_schemas(self, key: str) -> tuple[NormalizedSchema, ...]:
        if key in self._schema.declared_names:
            return self._schema.property_schemas(key)
        allowed = additional_schemas(self._schema)
        if allowed is None:
            reject_undeclared([key], self._path)
        return allowed

    def _storage_schema(self, key: str) -> NormalizedSchema | None:
        if key in self._schema.declared_names:
            candidates = self._schema.property_schemas(key)
        else:
            candidates = additional_schemas(self._schema) or ()
        return _merged_container_schema(candidates)

    def _check_counts(self, count: int) -> None:
        for branch in self._schema.object_branches():
            if branch.kind is SchemaKind.OBJECT:
                check_property_count(branch, count, self._path)

    def _has_whole_value_checks(self) -> bool:
        return any(
            branch.kind is not SchemaKind.OBJECT or branch.enum is not None
            for branch in self._schema.object_branches()
        )


def adopt(schema: NormalizedSchema | None, value: Any, path: str) -> Any:
    """Store form of an already validated ``value``.

    Container kinds get a fresh wrapper; anything else is stored as a plain copy.
    """

    if schema is not None:
        if schema.kind is SchemaKind.ARRAY and is_json_array(value):
            return EnforcedArray._trusted(schema, value, path)
        if schema.kind is SchemaKind.OBJECT and is_json_object(value):
            return EnforcedObject._trusted(schema, value, path)
    return to_plain(value)


def to_plain(value: Any) -> Any:
    """Deep copy of ``value`` with every enforced container turned into list/dict."""

    if isinstance(value, EnforcedContainer):
        return value.to_plain()
    if is_json_object(value):
        return {key: to_plain(item) for key, item in value.items()}
    if is_json_array(value):
        return [to_plain(item) for item in value]
    return value


def _merged_container_schema(candidates: tuple[NormalizedSchema, ...]) -> NormalizedSchema | None:
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    if all(candidate.kind is SchemaKind.OBJECT for candidate in candidates):
        branches: list[NormalizedSchema] = []
        declared: set[str] = set()
        for candidate in candidates:
            branches.extend(candidate.object_branches())
            declared.update(candidate.declared_names)
        return NormalizedSchema(
            kind=SchemaKind.OBJECT,
            all_of=tuple(branches),
            declared_names=frozenset(declared),
        )
    for candidate in candidates:
        if candidate.is_container:
            return candidate
    return None


def _require_kind(schema: NormalizedSchema, kind: SchemaKind) -> None:
    if not isinstance(schema, NormalizedSchema):
        raise EnforcementError(f"expected a normalized schema, got {type(schema).__name__}")
    if schema.kind is not kind:
        raise EnforcementError(f"cannot build an enforced {kind} from a {schema.kind} schema")


def _python_index(index: SupportsIndex, length: int) -> int:
    position = index.__index__()
    return position + length if position < 0 else position


def _relative_index(index: int, length: int) -> int:
    if index < 0:
        return max(length + index, 0)
    return min(index, length)


__all__ = [
    "EnforcedArray",
    "EnforcedContainer",
    "EnforcedObject",
    "adopt",
    "to_plain",
]
