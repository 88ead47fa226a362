# topmark:header:start
#
#   project      : Plugline
#   file         : params.py
#   file_relpath : src/plugline/http/params.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Request parameter decoding.

Query strings and form bodies use bracket notation for nested parameters,
so ``user[name]=Dweezil&user[role]=admin`` decodes to
``{"user": {"name": "Dweezil", "role": "admin"}}``. Scalars are kept as
strings; when a key repeats, the last value wins.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final
from urllib.parse import parse_qsl

_KEY_RE: Final[re.Pattern[str]] = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")


def split_key(key: str) -> list[str]:
    """Split ``a[b][c]`` into ``["a", "b", "c"]``; malformed keys are kept whole."""
    m = _KEY_RE.match(key)
    if m is None:
        return [key]
    head, rest = m.group(1), m.group(2)
    parts = [head]
    if rest:
        parts.extend(p for p in rest[1:-1].split("]["))
    return parts


def put_nested(target: dict[str, Any], parts: list[str], value: Any) -> None:
    """Store ``value`` in ``target`` following the key path ``parts``."""
    node = target
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


def merge_params(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two parameter mappings; ``override`` wins on conflicts."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_params(current, value)
        else:
            merged[key] = value
    return merged


def decode_params(
    query_string: str = "",
    body: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Decode a query string and optional body params into one mapping.

    Args:
        query_string (str): Raw query string, without the leading ``?``.
        body (Mapping[str, Any] | None): Already-parsed body params. Flat
            bracket keys are expanded the same way as query keys.

    Returns:
        dict[str, Any]: Decoded params; body values override query values.
    """
    decoded: dict[str, Any] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        put_nested(decoded, split_key(key), value)

    if body:
        body_params: dict[str, Any] = {}
        for key, value in body.items():
            put_nested(body_params, split_key(key), value)
        decoded = merge_params(decoded, body_params)
    return decoded
