"""Streaming telemetry frame decoding.

Frames reach us in one of two historical shapes, told apart only by the
fields present:

* ``{"DataID": "<rx guid>", "Buffer": "<base64 json>"}`` as forwarded by a
  host WebSocket client, or
* the inner JSON directly: either the envelope itself carries a ``data``
  list, or an object/JSON string sits under ``Payload``, ``Data`` or a
  plain-text ``Buffer``.

The inner payload follows the fleet-telemetry layout::

    {"vin": "...", "createdAt": "...", "data": [
        {"key": "ChargeLimitSoc", "value": {"intValue": 80}},
        {"key": "Odometer", "value": {"invalid": true}}
    ]}

Decoding is stateless and never raises; noise is dropped at the smallest
possible granularity.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from pytessie._constants import TELEMETRY_PREFIX, TELEMETRY_RX_DATA_ID
from pytessie.ingestion.normalize import coerce_numeric_string, looks_numeric, parse_int_string
from pytessie.models.signal import Scalar, Signal, SignalOrigin

_logger = logging.getLogger(__name__)

_INNER_FIELDS: tuple[str, ...] = ("Payload", "Data", "Buffer")


class _TelemetryDatum(BaseModel):
    """One ``{key, value}`` entry of a telemetry ``data`` list."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    key: StrictStr
    value: dict[str, Any]


def _load_json(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(raw, str):
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return None


def _decode_buffer(buffer: str) -> Any:
    try:
        decoded = base64.b64decode(buffer, validate=True)
    except (binascii.Error, ValueError):
        # Already-decoded JSON text in the Buffer field.
        return _load_json(buffer)
    return _load_json(decoded)


def _unwrap_envelope(packet: Mapping[str, Any]) -> dict[str, Any] | None:
    """Locate the inner telemetry payload of an outer frame."""
    data_id = packet.get("DataID")
    buffer = packet.get("Buffer")
    if isinstance(buffer, str) and buffer:
        if data_id not in (None, TELEMETRY_RX_DATA_ID):
            return None
        inner = _decode_buffer(buffer)
        # Non-object buffers are ping/pong keepalives.
        return inner if isinstance(inner, dict) else None

    if isinstance(packet.get("data"), list):
        return dict(packet)

    for field in _INNER_FIELDS:
        candidate = packet.get(field)
        if isinstance(candidate, str):
            candidate = _load_json(candidate)
        if isinstance(candidate, dict):
            return candidate
    return None


def _is_out_of_band(payload: Mapping[str, Any]) -> bool:
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        _logger.debug("Telemetry error frame: %s", errors)
        return True
    if "connectionId" in payload and "status" in payload:
        _logger.debug(
            "Telemetry connectivity frame: connection=%s status=%s",
            payload.get("connectionId"),
            payload.get("status"),
        )
        return True
    return False


def _coerce_string(key: str, text: str) -> Scalar:
    if looks_numeric(text):
        return coerce_numeric_string(key, text)
    return text


def _typed_values(key: str, value: Mapping[str, Any]) -> list[tuple[str, Scalar]]:
    """Decode the tagged value union of one datum.

    Returns an empty list for invalid or structurally malformed values.
    """
    if value.get("invalid"):
        return []

    flag = value.get("booleanValue")
    if isinstance(flag, bool):
        return [(key, flag)]

    for field in ("intValue", "longValue"):
        number = value.get(field)
        if isinstance(number, int) and not isinstance(number, bool):
            return [(key, number)]
        if looks_numeric(number):
            # int64 values arrive as JSON strings.
            return [(key, parse_int_string(number))]

    for field in ("floatValue", "doubleValue"):
        number = value.get(field)
        if isinstance(number, (int, float)) and not isinstance(number, bool):
            return [(key, float(number))]
        if looks_numeric(number):
            return [(key, float(number))]

    text = value.get("stringValue")
    if isinstance(text, str):
        return [(key, _coerce_string(key, text))]

    location = value.get("locationValue")
    if isinstance(location, Mapping):
        pairs: list[tuple[str, Scalar]] = []
        for axis in ("latitude", "longitude"):
            coord = location.get(axis)
            if isinstance(coord, (int, float)) and not isinstance(coord, bool):
                pairs.append((f"{key}.{axis}", float(coord)))
        return pairs

    # Enum-style fields such as ``shiftStateValue`` or ``chargingValue``.
    for field, other in value.items():
        if not field.endswith("Value"):
            continue
        if isinstance(other, str):
            return [(key, _coerce_string(key, other))]
        if isinstance(other, (bool, int, float)):
            return [(key, other)]
    return []


def decode_frame(frame: bytes | str, *, expected_vin: str | None = None) -> list[tuple[str, Scalar]]:
    """Decode one inbound frame into ordered ``(key, value)`` pairs.

    Undecodable frames, keepalives, error and connectivity frames, and
    frames for a different VIN all yield ``[]``. Duplicate keys are kept in
    arrival order.
    """
    packet = _load_json(frame)
    if not isinstance(packet, dict):
        return []

    payload = _unwrap_envelope(packet)
    if payload is None or _is_out_of_band(payload):
        return []

    entries = payload.get("data")
    if not isinstance(entries, list):
        return []

    vin = payload.get("vin")
    if expected_vin and isinstance(vin, str) and vin and vin != expected_vin:
        _logger.debug("Ignoring telemetry frame for foreign VIN %s", vin)
        return []

    pairs: list[tuple[str, Scalar]] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            datum = _TelemetryDatum.model_validate(entry)
        except ValidationError:
            continue
        if not datum.key:
            continue
        pairs.extend(_typed_values(datum.key, datum.value))

    if "createdAt" in payload and payload["createdAt"] is not None:
        pairs.append(("_createdAt", str(payload["createdAt"])))
    if "isResend" in payload and payload["isResend"] is not None:
        pairs.append(("_isResend", bool(payload["isResend"])))
    return pairs


def signals_from_pairs(pairs: list[tuple[str, Scalar]]) -> list[Signal]:
    return [
        Signal(path=f"{TELEMETRY_PREFIX}.{key}", value=value, origin=SignalOrigin.TELEMETRY) for key, value in pairs
    ]


def signals_from_frame(frame: bytes | str, *, expected_vin: str | None = None) -> list[Signal]:
    """Decode *frame* into telemetry signals (paths prefixed ``telemetry.``)."""
    return signals_from_pairs(decode_frame(frame, expected_vin=expected_vin))
