"""
Duration extraction and normalization.

Stored durations reach the report code either as a JSON object with
``hours``/``minutes`` sub-fields or as hour and minute counts that were
summed separately by an aggregate query. Both are decoded into the
Structured | RawPair union, extracted into a raw (hours, minutes) pair and
normalized so that minutes fall in [0, 60).
"""

import json
import math
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from models.timecards import NormalizedDuration, RawDuration, RawPair, Structured

_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def to_int(value: Any) -> int:
    """
    Coerce a stored hour/minute value to a non-negative integer.

    Decimals are truncated and text is read up to the first non-digit
    ("1.9" -> 1, "12abc" -> 12). Anything unreadable, and any negative
    result, becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, int):
        result = value
    elif isinstance(value, (float, Decimal)):
        if not math.isfinite(value):
            return 0
        result = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return 0
        result = int(match.group())

    return result if result > 0 else 0


def decode_duration(value: Any) -> RawDuration | None:
    """
    Decode a stored duration into the tagged union, or None if absent/unreadable.

    Only JSON objects are stored durations; arrays and bare numbers read as
    None, matching the database rollups. A RawPair comes only from
    ``extract_pair`` or an already tagged value.
    """
    if value is None:
        return None
    if isinstance(value, (Structured, RawPair)):
        return value

    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except ValueError:
            return None

    if isinstance(value, Mapping):
        return Structured(
            hours=to_int(value.get("hours")),
            minutes=to_int(value.get("minutes")),
        )

    return None


def extract(raw: Any) -> tuple[int, int]:
    """
    Return the raw (hours, minutes) held by a stored duration.

    Does not normalize: ``extract(Structured(2, 75)) == (2, 75)``. Absent or
    malformed values give ``(0, 0)``.
    """
    decoded = decode_duration(raw)
    if decoded is None:
        return 0, 0
    return to_int(decoded.hours), to_int(decoded.minutes)


def extract_pair(hours: Any, minutes: Any) -> tuple[int, int]:
    """Extract a duration supplied as two separately summed scalars."""
    return extract(RawPair(hours=to_int(hours), minutes=to_int(minutes)))


def normalize(hours: int, minutes: int) -> NormalizedDuration:
    """Carry whole hours out of ``minutes``."""
    return NormalizedDuration(hours=hours + minutes // 60, minutes=minutes % 60)


def sum_raw(pairs: Iterable[tuple[int, int]]) -> tuple[int, int]:
    """Sum hours and minutes independently, without carrying."""
    total_hours = 0
    total_minutes = 0
    for hours, minutes in pairs:
        total_hours += hours
        total_minutes += minutes
    return total_hours, total_minutes


def total_seconds(pair: tuple[int, int]) -> int:
    hours, minutes = pair
    return hours * 3600 + minutes * 60
