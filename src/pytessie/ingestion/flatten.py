"""Key flattening.

Turns a nested JSON-like value into a ``{dotted path: scalar}`` mapping.
List indexes become ``i<n>`` segments so they never collide with object
keys (``{"a": [10]}`` flattens to ``{"a.i0": 10}``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pytessie._constants import MAX_FLATTEN_DEPTH

_logger = logging.getLogger(__name__)


class _FlattenAborted(Exception):
    """Raised internally when the input is cyclic or too deep."""


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def flatten(value: Any, prefix: str = "", *, max_depth: int = MAX_FLATTEN_DEPTH) -> dict[str, Any]:
    """Flatten *value* into a path -> scalar mapping.

    Empty containers produce no entries. A scalar with an empty *prefix*
    yields ``{"": value}``. Cyclic or over-deep input fails closed: the
    result is empty and nothing is partially emitted.
    """

    out: dict[str, Any] = {}
    active: set[int] = set()

    def rec(val: Any, path: str, depth: int) -> None:
        if isinstance(val, Mapping) or isinstance(val, (list, tuple)):
            if depth >= max_depth:
                raise _FlattenAborted(f"depth limit {max_depth} exceeded at {path!r}")
            marker = id(val)
            if marker in active:
                raise _FlattenAborted(f"cycle detected at {path!r}")
            active.add(marker)
            try:
                if isinstance(val, Mapping):
                    for k, v in val.items():
                        rec(v, _join(path, str(k)), depth + 1)
                else:
                    for i, item in enumerate(val):
                        rec(item, _join(path, f"i{i}"), depth + 1)
            finally:
                active.discard(marker)
            return
        out[path] = val

    try:
        rec(value, prefix, 0)
    except _FlattenAborted as exc:
        _logger.debug("Discarding malformed payload: %s", exc)
        return {}
    return out
