"""Normalization helpers.

Centralizes conversion of remote-native encodings (decimal strings, ``0x``
hex strings, JSON numbers) into Python values.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any


def safe_int(value: Any) -> int | None:
    """Parse a remote integer without losing precision.

    Accepts ints, decimal strings and ``0x``-prefixed hex strings.  Floats
    are only accepted when integral.  Anything else yields ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            if text.lower().startswith(("0x", "-0x")):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            return None
    return None


def require_int(value: Any, *, field: str) -> int:
    """Like :func:`safe_int` but raises :class:`ValueError` on bad input."""
    parsed = safe_int(value)
    if parsed is None:
        raise ValueError(f"{field}: expected an integer, got {value!r}")
    return parsed


def safe_address(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text if text else None


def int_sequence(value: Any, *, field: str) -> list[int]:
    """Parse a remote array of integers."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValueError(f"{field}: expected an array, got {value!r}")
    return [require_int(item, field=field) for item in value]
