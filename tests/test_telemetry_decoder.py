from __future__ import annotations

import base64
import json

from pytessie._constants import TELEMETRY_RX_DATA_ID
from pytessie.ingestion.telemetry import decode_frame, signals_from_frame
from pytessie.models.signal import SignalOrigin


def _inner(*entries: dict[str, object], **extra: object) -> dict[str, object]:
    return {"vin": "5YJ3E1EA7KF000001", "data": list(entries), **extra}


def _envelope(inner: object) -> str:
    buffer = base64.b64encode(json.dumps(inner).encode()).decode()
    return json.dumps({"DataID": TELEMETRY_RX_DATA_ID, "Buffer": buffer})


def test_base64_envelope_is_decoded() -> None:
    frame = _envelope(_inner({"key": "ChargeLimitSoc", "value": {"intValue": 80}}))
    assert decode_frame(frame) == [("ChargeLimitSoc", 80)]


def test_bytes_frames_are_accepted() -> None:
    frame = _envelope(_inner({"key": "Locked", "value": {"booleanValue": True}})).encode()
    assert decode_frame(frame) == [("Locked", True)]


def test_direct_inner_payload() -> None:
    frame = json.dumps(_inner({"key": "Odometer", "value": {"doubleValue": 12345.6}}))
    assert decode_frame(frame) == [("Odometer", 12345.6)]


def test_payload_field_carries_inner_json_string() -> None:
    inner = json.dumps(_inner({"key": "Gear", "value": {"shiftStateValue": "ShiftStateD"}}))
    assert decode_frame(json.dumps({"Payload": inner})) == [("Gear", "ShiftStateD")]


def test_plain_text_buffer() -> None:
    inner = json.dumps(_inner({"key": "Soc", "value": {"floatValue": 71.5}}))
    assert decode_frame(json.dumps({"Buffer": inner})) == [("Soc", 71.5)]


def test_one_valid_and_one_valueless_entry() -> None:
    frame = json.dumps(
        _inner(
            {"key": "InsideTemp", "value": {"doubleValue": 21.0}},
            {"key": "OutsideTemp", "value": {}},
        )
    )
    assert decode_frame(frame) == [("InsideTemp", 21.0)]


def test_invalid_and_malformed_entries_are_skipped() -> None:
    frame = json.dumps(
        _inner(
            {"key": "Odometer", "value": {"invalid": True}},
            {"key": 5, "value": {"intValue": 1}},
            {"value": {"intValue": 1}},
            "garbage",
            {"key": "VehicleSpeed", "value": {"intValue": 42}},
        )
    )
    assert decode_frame(frame) == [("VehicleSpeed", 42)]


def test_numeric_strings_follow_key_suffix() -> None:
    frame = json.dumps(
        _inner(
            {"key": "ScheduledChargingStartTime", "value": {"stringValue": "1700000000"}},
            {"key": "EstBatteryRange", "value": {"stringValue": "245.5"}},
            {"key": "CarType", "value": {"stringValue": "model3"}},
            {"key": "Odometer", "value": {"longValue": "98765"}},
        )
    )
    assert decode_frame(frame) == [
        ("ScheduledChargingStartTime", 1700000000),
        ("EstBatteryRange", 245.5),
        ("CarType", "model3"),
        ("Odometer", 98765),
    ]


def test_large_integer_strings_keep_precision() -> None:
    big = 2**63 - 1
    frame = json.dumps(
        _inner(
            {"key": "RouteId", "value": {"stringValue": str(big)}},
            {"key": "EnergyRemaining", "value": {"longValue": str(big)}},
            {"key": "StartedAt", "value": {"stringValue": "1700000000.9"}},
        )
    )
    assert decode_frame(frame) == [("RouteId", big), ("EnergyRemaining", big), ("StartedAt", 1700000000)]


def test_location_value_expands_to_coordinates() -> None:
    frame = json.dumps(_inner({"key": "Location", "value": {"locationValue": {"latitude": 52.5, "longitude": 13.4}}}))
    assert decode_frame(frame) == [("Location.latitude", 52.5), ("Location.longitude", 13.4)]


def test_duplicates_and_order_are_kept() -> None:
    frame = json.dumps(
        _inner(
            {"key": "Soc", "value": {"intValue": 70}},
            {"key": "Gear", "value": {"stringValue": "P"}},
            {"key": "Soc", "value": {"intValue": 71}},
        )
    )
    assert decode_frame(frame) == [("Soc", 70), ("Gear", "P"), ("Soc", 71)]


def test_metadata_is_appended() -> None:
    frame = json.dumps(
        _inner({"key": "Soc", "value": {"intValue": 70}}, createdAt="2026-01-01T00:00:00Z", isResend=False)
    )
    assert decode_frame(frame) == [("Soc", 70), ("_createdAt", "2026-01-01T00:00:00Z"), ("_isResend", False)]


def test_control_frames_are_discarded() -> None:
    assert decode_frame("not json") == []
    assert decode_frame(b"\xff\xfe") == []
    assert decode_frame(json.dumps([1, 2])) == []
    assert decode_frame(_envelope("pong")) == []
    assert decode_frame(json.dumps({"DataID": "{OTHER}", "Buffer": "e30="})) == []
    assert decode_frame(json.dumps({"errors": [{"name": "x"}], "data": []})) == []
    assert decode_frame(json.dumps({"connectionId": "abc", "status": "connected"})) == []
    assert decode_frame(json.dumps({"vin": "X"})) == []


def test_foreign_vin_is_ignored() -> None:
    frame = json.dumps(_inner({"key": "Soc", "value": {"intValue": 70}}))
    assert decode_frame(frame, expected_vin="OTHERVIN") == []
    assert decode_frame(frame, expected_vin="5YJ3E1EA7KF000001") == [("Soc", 70)]


def test_signals_from_frame_prefix() -> None:
    frame = json.dumps(_inner({"key": "Soc", "value": {"intValue": 70}}))
    signals = signals_from_frame(frame)
    assert [(s.path, s.value, s.origin) for s in signals] == [("telemetry.Soc", 70, SignalOrigin.TELEMETRY)]
