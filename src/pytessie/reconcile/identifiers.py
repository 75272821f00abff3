"""Stable identifier derivation.

Identifiers are a pure function of the raw key: a cleaned, human-readable
prefix plus a short MD5 digest of the *original* key. Truncating the
readable part therefore never makes two different keys collide.
"""

from __future__ import annotations

import hashlib
import re

from pytessie._constants import (
    CATEGORY_HASH_LENGTH,
    CATEGORY_PREFIX,
    IDENTIFIER_HASH_LENGTH,
    IDENTIFIER_MAX_LENGTH,
    LINK_PREFIX,
)

_INVALID_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")
_UNDERSCORE_RUN_RE = re.compile(r"_+")

_EMPTY_PLACEHOLDER = "x"


def clean_key(raw_key: str) -> str:
    """Reduce *raw_key* to ``[A-Za-z0-9_]`` without leading/trailing/double underscores."""
    cleaned = _INVALID_CHARS_RE.sub("_", raw_key)
    cleaned = _UNDERSCORE_RUN_RE.sub("_", cleaned)
    return cleaned.strip("_")


def key_hash(raw_key: str, length: int = IDENTIFIER_HASH_LENGTH) -> str:
    return hashlib.md5(raw_key.encode("utf-8")).hexdigest()[:length]  # noqa: S324


def make_identifier(
    raw_key: str,
    *,
    prefix: str = "",
    max_length: int = IDENTIFIER_MAX_LENGTH,
    hash_length: int = IDENTIFIER_HASH_LENGTH,
) -> str:
    """Derive a stable identifier of at most *max_length* characters.

    >>> make_identifier("charge_state.battery_level")  # doctest: +SKIP
    'charge_state_battery_level_5c8e0d0a41'
    """
    digest = key_hash(raw_key, hash_length)
    budget = max_length - len(prefix) - 1 - len(digest)
    if budget < 1:
        return f"{prefix}{digest}"[:max_length]

    base = clean_key(raw_key)[:budget].rstrip("_") or _EMPTY_PLACEHOLDER
    return f"{prefix}{base}_{digest}"


def category_identifier(name: str, parent_key: str = "") -> str:
    """Managed identifier of a category, derived from its name and parent."""
    raw = f"{parent_key}/{name}" if parent_key else name
    digest = key_hash(raw, CATEGORY_HASH_LENGTH)
    budget = IDENTIFIER_MAX_LENGTH - len(CATEGORY_PREFIX) - 1 - len(digest)
    base = clean_key(name)[:budget].rstrip("_") or _EMPTY_PLACEHOLDER
    return f"{CATEGORY_PREFIX}{base}_{digest}"


def link_identifier(path: str) -> str:
    """Identifier of the per-signal link from a category to a point."""
    return make_identifier(path, prefix=LINK_PREFIX)
