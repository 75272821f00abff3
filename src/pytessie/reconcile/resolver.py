"""Type and presentation resolution.

``resolve(path, value)`` is a pure function: identical input always yields
the identical :class:`Resolution`, which keeps reconciliation idempotent.
"""

from __future__ import annotations

import re

from pytessie._constants import ACTION_PREFIX, REST_PREFIX, TELEMETRY_PREFIX
from pytessie.ingestion.normalize import looks_numeric
from pytessie.models.point import Category, DataType, Profile, Resolution
from pytessie.models.signal import Scalar
from pytessie.reconcile.profiles import LOCK, NUMERIC_KEYWORD_PROFILES, SWITCH

_IDENTIFIER_PATH_RE = re.compile(r"\b(vehicle_id|user_id|id|id_s|vin)\b", re.IGNORECASE)
_TIMESTAMP_PATH_RE = re.compile(r"(timestamp|time|_at)$", re.IGNORECASE)

_ORIGIN_PREFIXES: tuple[str, ...] = (f"{REST_PREFIX}.", f"{TELEMETRY_PREFIX}.")

# REST sections that map onto a category regardless of keywords.
_SECTION_CATEGORIES: tuple[tuple[str, Category], ...] = (
    ("charge_state.", Category.CHARGING),
    ("climate_state.", Category.CLIMATE),
    ("drive_state.", Category.DRIVING),
)

_KEYWORD_CATEGORIES: tuple[tuple[tuple[str, ...], Category], ...] = (
    (("soc", "charge", "battery", "energy", "range", "charger"), Category.CHARGING),
    (("temp", "hvac", "climate", "defrost", "seat", "heater", "wiper"), Category.CLIMATE),
    (("speed", "gps", "heading", "location", "odometer", "route", "gear"), Category.DRIVING),
    (("lock", "sentry", "valet", "pin", "door", "trunk"), Category.SECURITY),
)


def strip_origin(path: str) -> str:
    """Drop a leading ``rest.`` / ``telemetry.`` segment."""
    lowered = path.lower()
    for prefix in _ORIGIN_PREFIXES:
        if lowered.startswith(prefix):
            return path[len(prefix) :]
    return path


def is_action_path(path: str) -> bool:
    lowered = path.lower()
    return lowered.startswith(f"{ACTION_PREFIX}.") or lowered.startswith("act_")


def resolve_data_type(path: str, value: Scalar) -> DataType:
    if isinstance(value, bool):
        return DataType.BOOLEAN
    if _IDENTIFIER_PATH_RE.search(path):
        return DataType.STRING
    if isinstance(value, int):
        return DataType.INTEGER
    if isinstance(value, float):
        return DataType.FLOAT
    if looks_numeric(value):
        if _TIMESTAMP_PATH_RE.search(path):
            return DataType.INTEGER
        return DataType.FLOAT
    return DataType.STRING


def resolve_profile(path: str, data_type: DataType) -> Profile | None:
    lowered = path.lower()
    if data_type == DataType.BOOLEAN:
        return LOCK if "locked" in lowered else SWITCH
    if data_type.is_numeric:
        for keywords, profile in NUMERIC_KEYWORD_PROFILES:
            if any(keyword in lowered for keyword in keywords):
                return profile
    return None


def resolve_category(path: str) -> Category:
    if is_action_path(path):
        return Category.ACTIONS
    lowered = strip_origin(path).lower()
    for prefix, category in _SECTION_CATEGORIES:
        if lowered.startswith(prefix):
            return category
    for keywords, category in _KEYWORD_CATEGORIES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return Category.GENERAL


def resolve(path: str, value: Scalar) -> Resolution:
    """Classify a flattened signal into data type, profile and category."""
    data_type = resolve_data_type(path, value)
    return Resolution(
        data_type=data_type,
        profile=resolve_profile(path, data_type),
        category=resolve_category(path),
    )
