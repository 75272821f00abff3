"""Normalization helpers.

Centralizes lenient parsing of the stringly-typed numbers vehicle APIs
like to send.
"""

from __future__ import annotations

import math
import re
from typing import Any

# Key-name suffixes whose numeric strings are integers (epoch times, ids).
_TELEMETRY_INT_KEY_RE = re.compile(r"(?:Time|time|Timestamp|timestamp|_at|At|Id|ID|_id)$")


def looks_numeric(value: Any) -> bool:
    """Return True for strings holding a finite decimal number."""
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not text:
        return False
    try:
        parsed = float(text)
    except ValueError:
        return False
    return math.isfinite(parsed)


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def parse_int_string(text: str) -> int:
    """Parse *text* as an integer without a float round trip.

    Decimal strings such as ``"12.7"`` are truncated.
    """
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        return int(float(text))


def coerce_numeric_string(key: str, text: str) -> int | float:
    """Coerce a numeric-looking telemetry string by its key name.

    Keys ending in a time or identifier suffix become integers, anything
    else becomes a float.
    """
    if _TELEMETRY_INT_KEY_RE.search(key):
        return parse_int_string(text)
    return float(text.strip())
