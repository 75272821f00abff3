"""Helpers for safe debug logging.

Tessie requests carry bearer tokens and the streaming URL embeds an access
token in its query string. This module redacts both before DEBUG logs.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_TOKEN_KEYS: frozenset[str] = frozenset(
    {"access_token", "api_token", "authorization", "telemetry_token", "token"}
)

_TOKEN_QUERY_RE = re.compile(r"(access_token=)[^&\s]+", re.IGNORECASE)


def redact_url(url: str) -> str:
    """Mask ``access_token`` query values in *url*."""
    return _TOKEN_QUERY_RE.sub(r"\1<redacted>", url)


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of a decoded JSON *value* with token fields masked.

    Token-named keys are replaced wholesale, URLs inside strings lose their
    ``access_token`` and long strings are cut to *max_string* characters.
    """
    if isinstance(value, Mapping):
        return {
            str(key): "<redacted>" if str(key).lower() in _TOKEN_KEYS else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if isinstance(value, str):
        text = redact_url(value)
        return text if len(text) <= max_string else f"{text[:max_string]}…<truncated>"
    return value
