"""Parsing of captured text into numbers and instants.

Captured parameters are always strings. Capture predicates and expression
formatters share these helpers so that "matches as a date" and "formats as
a date" agree on what the text means.

Numeric text is read as seconds since the Unix epoch, except for the
millisecond-based expressions. ISO 8601 text without an offset is read as UTC.

Python 3.13+.
"""

from __future__ import annotations

import math
import re
import time
from datetime import UTC, datetime

from lexi18n.constants import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    MS_PER_WEEK,
)
from lexi18n.enums import TimeUnit

__all__ = [
    "ISO_8601_PATTERN",
    "epoch_millis",
    "from_epoch_millis",
    "is_integer",
    "is_numeric",
    "now_millis",
    "parse_iso8601",
    "truncate_to_unit",
]

_NUMERIC = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?[0-9]+")

# Date and time down to minutes, optionally seconds and fraction. Searched,
# not anchored, so offsets and trailing designators are accepted.
ISO_8601_PATTERN = re.compile(
    r"(\d{4}-[01]\d-[0-3]\dT[0-2]\d:[0-5]\d:[0-5]\d\.\d+)"
    r"|(\d{4}-[01]\d-[0-3]\dT[0-2]\d:[0-5]\d:[0-5]\d)"
    r"|(\d{4}-[01]\d-[0-3]\dT[0-2]\d:[0-5]\d)"
)

_FIXED_UNIT_MS: dict[TimeUnit, int] = {
    TimeUnit.MILLISECOND: 1,
    TimeUnit.SECOND: MS_PER_SECOND,
    TimeUnit.MINUTE: MS_PER_MINUTE,
    TimeUnit.HOUR: MS_PER_HOUR,
    TimeUnit.DAY: MS_PER_DAY,
    TimeUnit.WEEK: MS_PER_WEEK,
}


def is_numeric(text: str) -> bool:
    """Whether text is a finite decimal number without surrounding whitespace.

    Example:
        >>> is_numeric("130"), is_numeric("-1.5e3"), is_numeric(" 1"), is_numeric("")
        (True, True, False, False)
    """
    return isinstance(text, str) and _NUMERIC.fullmatch(text) is not None


def is_integer(text: str) -> bool:
    """Whether text is an optionally signed run of ASCII digits."""
    return isinstance(text, str) and _INTEGER.fullmatch(text) is not None


def parse_iso8601(text: str) -> datetime | None:
    """Parse an ISO 8601 date-time, returning None when not recognized.

    The text must contain at least a date and an hour:minute time.
    Naive results are assumed to be UTC.

    Example:
        >>> parse_iso8601("2024-01-02T03:04:05Z").isoformat()
        '2024-01-02T03:04:05+00:00'
        >>> parse_iso8601("2024-01-02") is None
        True
    """
    if not isinstance(text, str) or ISO_8601_PATTERN.search(text) is None:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def epoch_millis(text: str, *, numeric_unit_ms: int = MS_PER_SECOND) -> float | None:
    """Milliseconds since the Unix epoch for numeric or ISO 8601 text.

    Args:
        text: Captured parameter
        numeric_unit_ms: Milliseconds per unit of numeric text (1000 for
            Unix timestamps in seconds, 1 for Unix millis)

    Returns:
        Epoch milliseconds, or None if text is neither numeric nor ISO 8601
    """
    if is_numeric(text):
        value = float(text) * numeric_unit_ms
        return value if math.isfinite(value) else None
    parsed = parse_iso8601(text)
    if parsed is None:
        return None
    return parsed.timestamp() * MS_PER_SECOND


def from_epoch_millis(millis: float) -> datetime:
    """Aware UTC datetime for epoch milliseconds.

    Raises:
        OverflowError, ValueError, OSError: If out of the datetime range
    """
    return datetime.fromtimestamp(millis / MS_PER_SECOND, tz=UTC)


def now_millis() -> float:
    """Current wall-clock time in epoch milliseconds."""
    return time.time() * MS_PER_SECOND


def truncate_to_unit(millis: float, unit: TimeUnit) -> int:
    """Index of the unit-sized bucket containing an instant.

    Two instants compare equal after truncation when they fall within the
    same second, day, calendar month, etc. Month and year buckets follow
    the UTC calendar; weeks are counted from the epoch.
    """
    fixed = _FIXED_UNIT_MS.get(unit)
    if fixed is not None:
        return math.floor(millis / fixed)
    moment = from_epoch_millis(millis)
    if unit is TimeUnit.MONTH:
        return moment.year * 12 + moment.month - 1
    return moment.year
