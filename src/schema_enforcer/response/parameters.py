"""``{name}`` placeholder substitution in string values of response bodies."""

from __future__ import annotations

import re
from collections.abc import Mapping, MutableMapping, Sequence

_Replacement = tuple[re.Pattern[str], str]


def inject_parameters(recursive: bool, target: object, data: Mapping[str, object]) -> None:
    """Replace ``{key}`` with ``str(data[key])`` in every string value of ``target``.

    ``target`` is a mapping or a sequence of mappings and is changed in place. Nested
    containers are visited only when ``recursive`` is true. Enforced containers
    validate each replaced value like any other assignment.
    """

    replacements = [
        (re.compile(r"\{" + re.escape(str(key)) + r"\}"), _as_text(value))
        for key, value in data.items()
    ]
    _inject(target, replacements, recursive)


def _inject(target: object, replacements: list[_Replacement], recursive: bool) -> None:
    items = target if _is_array(target) else [target]
    for item in items:  # type: ignore[union-attr]
        if not isinstance(item, MutableMapping):
            continue
        for key in list(item):
            value = item[key]
            if isinstance(value, str):
                replaced = value
                for pattern, text in replacements:
                    replaced = pattern.sub(lambda _match, text=text: text, replaced)
                if replaced != value:
                    item[key] = replaced
            elif recursive and (isinstance(value, Mapping) or _is_array(value)):
                _inject(value, replacements, True)


def _is_array(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _as_text(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["inject_parameters"]
