from __future__ import annotations

from pyblackjack._redact import redact_for_log, short_address


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "function": "startGame",
        "from": "0xAbCdEf0000000000000000000000000000001234",
        "signedTx": "0xf86c...",
        "headers": {"Authorization": "Bearer abc"},
        "nested": [{"privateKey": "0xdead"}],
    }

    redacted = redact_for_log(payload)
    assert redacted["function"] == "startGame"
    assert redacted["signedTx"] == "<redacted>"
    assert redacted["headers"]["Authorization"] == "<redacted>"
    assert redacted["nested"][0]["privateKey"] == "<redacted>"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_summarizes_bytes() -> None:
    assert redact_for_log(b"\x00\x01\x02") == "<bytes:3b>"


def test_short_address() -> None:
    assert short_address("0xAbCdEf0000000000000000000000000000001234") == "0xAbCd...1234"
    assert short_address("0x1234") == "0x1234"
