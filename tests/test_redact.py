from __future__ import annotations

from pytessie._redact import redact_for_log, redact_url


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "result": True,
        "access_token": "abc",
        "Authorization": "Bearer abc",
        "nested": {"api_token": "xyz", "ok": 1},
        "items": [{"telemetry_token": "t"}],
    }

    redacted = redact_for_log(payload)
    assert redacted["result"] is True
    assert redacted["access_token"] == "<redacted>"
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["nested"] == {"api_token": "<redacted>", "ok": 1}
    assert redacted["items"] == [{"telemetry_token": "<redacted>"}]


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_url_masks_access_token() -> None:
    url = "wss://streaming.tessie.com/VIN1?access_token=secret&x=1"
    assert redact_url(url) == "wss://streaming.tessie.com/VIN1?access_token=<redacted>&x=1"
    assert redact_for_log({"url": url})["url"] == "wss://streaming.tessie.com/VIN1?access_token=<redacted>&x=1"


def test_redact_for_log_masks_token_before_truncating() -> None:
    url = "wss://streaming.tessie.com/VIN1?access_token=" + "s" * 600

    redacted = redact_for_log({"url": url}, max_string=80)["url"]
    assert "sss" not in redacted
    assert redacted.startswith("wss://streaming.tessie.com/VIN1?access_token=<redacted>")
