"""Helpers for safe debug logging.

Gateway payloads can carry signed transaction blobs and auth headers.  This
module redacts sensitive fields before DEBUG logs and shortens account
addresses for display.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_REDACTED = "<redacted>"
_MAX_DEPTH = 20

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "cookie",
        "password",
        "privatekey",
        "rawtransaction",
        "signature",
        "signedtx",
        "token",
    }
)


def short_address(address: str) -> str:
    """Return ``0x1234...abcd`` for a full hex address."""
    if len(address) <= 12:
        return address
    return f"{address[:6]}...{address[-4:]}"


def _is_sensitive(key: Any) -> bool:
    return str(key).lower() in _SENSITIVE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with secrets masked and long strings cut."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    def nested(item: Any) -> Any:
        return redact_for_log(item, max_string=max_string, _depth=_depth + 1)

    if isinstance(value, Mapping):
        return {str(k): _REDACTED if _is_sensitive(k) else nested(v) for k, v in value.items()}
    if isinstance(value, Sequence):
        return [nested(item) for item in value]
    return repr(value)
