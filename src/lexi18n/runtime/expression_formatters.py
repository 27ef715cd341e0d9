"""Named formatters usable in value placeholders.

A value such as ``"{0 | relative time}"`` pipes the first captured parameter
through the ``relative time`` formatter. Capture expressions also name one of
these formatters as their default, applied when a placeholder has no
explicit pipeline.

Registered formatters:
    as is                    - text unchanged
    number                   - locale number, up to 3 fraction digits
    date                     - short date
    datetime                 - short date with medium time
    timestamp                - numeric date with 24h time and milliseconds;
                               numeric input is in milliseconds
    long date                - long date
    long datetime            - long date with long time
    relative time            - "in 3 days", "2 hours ago"
    relative time duration   - "3 days", "2 hours"
    in <unit>s               - relative time forced to one unit
    to <unit>s               - duration decomposed down to one unit,
                               joined as a list ("1 year, 2 months and 3 days")

Numeric input to time formatters is seconds since the epoch unless noted.
Dates are rendered in UTC.

Python 3.13+. Uses Babel via LocaleContext.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType

from lexi18n.constants import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_MONTH,
    MS_PER_SECOND,
    MS_PER_WEEK,
    MS_PER_YEAR,
)
from lexi18n.diagnostics.errors import FormattingError
from lexi18n.enums import TimeUnit

from .locale_context import LocaleContext
from .value_parsing import epoch_millis, from_epoch_millis, now_millis

__all__ = [
    "AS_IS",
    "FORMATTERS",
    "ExpressionFormatter",
    "get_formatter",
    "relative_time_format",
]


@dataclass(frozen=True, slots=True)
class ExpressionFormatter:
    """A named text formatter.

    Attributes:
        name: Name used in value pipelines ("number", "long date")
        format: Callable taking the text and a LocaleContext

    Raises from format:
        FormattingError: When the text cannot be interpreted
    """

    name: str
    format: Callable[[str, LocaleContext], str]


# Units picked by relative-time formatting, coarsest first
_RELATIVE_UNITS: tuple[tuple[TimeUnit, float], ...] = (
    (TimeUnit.YEAR, MS_PER_YEAR),
    (TimeUnit.MONTH, MS_PER_MONTH),
    (TimeUnit.DAY, MS_PER_DAY),
    (TimeUnit.HOUR, MS_PER_HOUR),
    (TimeUnit.MINUTE, MS_PER_MINUTE),
    (TimeUnit.SECOND, MS_PER_SECOND),
)

# Units used by "in <unit>s" and "to <unit>s", coarsest first
_UNIT_LENGTHS: dict[TimeUnit, float] = {
    TimeUnit.YEAR: MS_PER_YEAR,
    TimeUnit.MONTH: MS_PER_MONTH,
    TimeUnit.WEEK: MS_PER_WEEK,
    TimeUnit.DAY: MS_PER_DAY,
    TimeUnit.HOUR: MS_PER_HOUR,
    TimeUnit.MINUTE: MS_PER_MINUTE,
    TimeUnit.SECOND: MS_PER_SECOND,
}


def _millis(text: str, *, numeric_unit_ms: int = MS_PER_SECOND) -> float:
    millis = epoch_millis(text, numeric_unit_ms=numeric_unit_ms)
    if millis is None:
        msg = f"Not a timestamp or ISO 8601 date: '{text}'"
        raise FormattingError(msg, fallback_value=text)
    return millis


def _instant(text: str, *, numeric_unit_ms: int = MS_PER_SECOND) -> datetime:
    millis = _millis(text, numeric_unit_ms=numeric_unit_ms)
    try:
        return from_epoch_millis(millis)
    except (OverflowError, ValueError, OSError) as e:
        msg = f"Date out of range: '{text}'"
        raise FormattingError(msg, fallback_value=text) from e


def _pick_relative_unit(elapsed: float) -> tuple[int, TimeUnit]:
    for unit, length in _RELATIVE_UNITS:
        if abs(elapsed) > length:
            return round(elapsed / length), unit
    return 0, TimeUnit.SECOND


def relative_time_format(
    ctx: LocaleContext, target_ms: float, now_ms: float | None = None
) -> str:
    """Render an instant relative to now using its largest significant unit.

    The unit is the coarsest of year, month, day, hour, minute and second
    whose length is exceeded by the distance to now; closer instants
    render as zero seconds.

    Args:
        ctx: Formatting locale
        target_ms: Instant in epoch milliseconds
        now_ms: Reference instant; defaults to the current time

    Example:
        >>> ctx = LocaleContext.create("en")
        >>> relative_time_format(ctx, 3 * 86_400_000 + 5, now_ms=0)
        'in 3 days'
    """
    reference = now_millis() if now_ms is None else now_ms
    value, unit = _pick_relative_unit(target_ms - reference)
    return ctx.format_relative(value, unit)


def _format_as_is(text: str, _ctx: LocaleContext) -> str:
    return text


def _format_number(text: str, ctx: LocaleContext) -> str:
    return ctx.format_number(text)


def _format_date(text: str, ctx: LocaleContext) -> str:
    return ctx.format_date(_instant(text))


def _format_datetime(text: str, ctx: LocaleContext) -> str:
    return ctx.format_datetime(_instant(text))


def _format_timestamp(text: str, ctx: LocaleContext) -> str:
    return ctx.format_timestamp(_instant(text, numeric_unit_ms=1))


def _format_long_date(text: str, ctx: LocaleContext) -> str:
    return ctx.format_date(_instant(text), date_style="long")


def _format_long_datetime(text: str, ctx: LocaleContext) -> str:
    return ctx.format_datetime(_instant(text), date_style="long", time_style="long")


def _format_relative_time(text: str, ctx: LocaleContext) -> str:
    return relative_time_format(ctx, _millis(text))


def _format_relative_duration(text: str, ctx: LocaleContext) -> str:
    value, unit = _pick_relative_unit(_millis(text) - now_millis())
    return ctx.format_duration(value, unit)


def _in_unit(unit: TimeUnit) -> Callable[[str, LocaleContext], str]:
    length = _UNIT_LENGTHS[unit]

    def format_in_unit(text: str, ctx: LocaleContext) -> str:
        elapsed = _millis(text) - now_millis()
        return ctx.format_relative(round(elapsed / length), unit)

    return format_in_unit


def _to_unit(unit: TimeUnit) -> Callable[[str, LocaleContext], str]:
    chain: list[tuple[TimeUnit, float]] = []
    for candidate, length in _UNIT_LENGTHS.items():
        chain.append((candidate, length))
        if candidate is unit:
            break

    def format_to_unit(text: str, ctx: LocaleContext) -> str:
        # Whole target units only; finer remainders are dropped
        smallest = chain[-1][1]
        remaining = round(abs(_millis(text) - now_millis()) / smallest) * smallest
        parts: list[str] = []
        for candidate, length in chain:
            quantity = math.floor(remaining / length)
            remaining -= quantity * length
            if quantity:
                parts.append(ctx.format_duration(quantity, candidate))
        if not parts:
            return ctx.format_duration(0, unit)
        return ctx.format_list(parts)

    return format_to_unit


def _build_formatters() -> dict[str, ExpressionFormatter]:
    simple: dict[str, Callable[[str, LocaleContext], str]] = {
        "as is": _format_as_is,
        "number": _format_number,
        "date": _format_date,
        "datetime": _format_datetime,
        "timestamp": _format_timestamp,
        "long date": _format_long_date,
        "long datetime": _format_long_datetime,
        "relative time": _format_relative_time,
        "relative time duration": _format_relative_duration,
    }
    for unit in _UNIT_LENGTHS:
        simple[f"in {unit.value}s"] = _in_unit(unit)
        simple[f"to {unit.value}s"] = _to_unit(unit)
    return {name: ExpressionFormatter(name, function) for name, function in simple.items()}


FORMATTERS: MappingProxyType[str, ExpressionFormatter] = MappingProxyType(_build_formatters())
"""Read-only registry of value formatters by name."""

AS_IS: ExpressionFormatter = FORMATTERS["as is"]


def get_formatter(name: str) -> ExpressionFormatter | None:
    """Look up a value formatter by name, or None if unregistered."""
    return FORMATTERS.get(name)
