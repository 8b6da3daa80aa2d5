"""Coercion helpers for GTFS payload values.

The feed is loosely typed: coordinates and sequences arrive as numbers or
numeric strings, blank strings stand in for missing values, and 64-bit
timestamps may be strings. These helpers turn any of that into a value or
``None`` and never raise.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic.alias_generators import to_snake


def safe_float(value: Any) -> float | None:
    """Finite float, or ``None`` for blanks, garbage, NaN and infinities."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def safe_int(value: Any) -> int | None:
    # Digit strings are converted directly so large epoch values keep full precision.
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    parsed = safe_float(value)
    return None if parsed is None else int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_keys(data: Any) -> Any:
    """Recursively rewrite mapping keys as snake_case.

    The API itself answers in snake_case, but protobuf-to-JSON dumps of the
    realtime feed use camelCase (``tripId``, ``routeId``).
    """
    if isinstance(data, dict):
        return {to_snake(str(key)): normalize_keys(value) for key, value in data.items()}
    if isinstance(data, list):
        return [normalize_keys(item) for item in data]
    return data
