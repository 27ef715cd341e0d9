"""Locale context for thread-safe, locale-scoped formatting.

This module provides locale-aware formatting without global state mutation.
Uses Babel for CLDR-compliant number, date, relative-time and list formatting.

Architecture:
    - LocaleContext: Immutable locale configuration container
    - Formatters use Babel (thread-safe, CLDR-based)
    - No dependency on Python's locale module (avoids global state)
    - Expression formatters receive a LocaleContext, never a raw locale string

Python 3.13+. Uses Babel for i18n.
"""

import logging
from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import ClassVar, Literal

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import lists as babel_lists
from babel import numbers as babel_numbers
from babel import units as babel_units

from lexi18n.constants import FALLBACK_LOCALE, MAX_LOCALE_CACHE_SIZE
from lexi18n.diagnostics.errors import FormattingError
from lexi18n.enums import TimeUnit
from lexi18n.locale_utils import get_babel_locale, normalize_locale

__all__ = ["LocaleContext"]

logger = logging.getLogger(__name__)

type DateStyle = Literal["short", "medium", "long", "full"]

# Babel measures relative time in these units; each length matches
# babel.dates.format_timedelta so the requested unit is always selected.
_BABEL_SECONDS: dict[TimeUnit, int] = {
    TimeUnit.SECOND: 1,
    TimeUnit.MINUTE: 60,
    TimeUnit.HOUR: 3600,
    TimeUnit.DAY: 3600 * 24,
    TimeUnit.WEEK: 3600 * 24 * 7,
    TimeUnit.MONTH: 3600 * 24 * 30,
    TimeUnit.YEAR: 3600 * 24 * 365,
}

# Default pattern for the time part of timestamps: 24h clock with milliseconds
_TIMESTAMP_TIME_PATTERN = "HH:mm:ss.SSS"


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Immutable locale configuration for formatting operations.

    Use LocaleContext.create() factory to construct instances. Unknown locales
    fall back to en_US with a warning; the original code is preserved.

    Examples:
        >>> ctx = LocaleContext.create('en-GB')
        >>> ctx.format_number('0.001')
        '0.001'

        >>> ctx = LocaleContext.create('fr-FR')
        >>> ctx.format_number('0.001')
        '0,001'

        >>> ctx = LocaleContext.create('invalid-locale')
        >>> ctx.is_fallback
        True

    Thread Safety:
        LocaleContext is immutable and thread-safe. Cache operations are
        protected by RLock.
    """

    _cache: ClassVar[OrderedDict[str, "LocaleContext"]] = OrderedDict()
    _cache_lock: ClassVar[RLock] = RLock()

    locale_code: str
    _babel_locale: Locale
    is_fallback: bool = False

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the locale context cache."""
        with cls._cache_lock:
            cls._cache.clear()

    @classmethod
    def cache_size(cls) -> int:
        """Get current number of cached LocaleContext instances."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def create(cls, locale_code: str) -> "LocaleContext":
        """Create LocaleContext with graceful fallback for invalid locales.

        "en-GB", "en_GB" and "en-UK" all share one cache entry.

        Args:
            locale_code: BCP 47 locale identifier (e.g., 'en-US', 'fr-FR')

        Returns:
            LocaleContext instance. For unknown/invalid locales, uses en_US
            rules while preserving the original locale_code for debugging.
        """
        cache_key = normalize_locale(locale_code)

        with cls._cache_lock:
            if cache_key in cls._cache:
                cls._cache.move_to_end(cache_key)
                return cls._cache[cache_key]

        used_fallback = False
        try:
            babel_locale = get_babel_locale(cache_key)
        except UnknownLocaleError as e:
            logger.warning("Unknown locale '%s': %s. Falling back to en_US", locale_code, e)
            babel_locale = get_babel_locale(FALLBACK_LOCALE)
            used_fallback = True
        except ValueError as e:
            logger.warning(
                "Invalid locale format '%s': %s. Falling back to en_US", locale_code, e
            )
            babel_locale = get_babel_locale(FALLBACK_LOCALE)
            used_fallback = True

        ctx = cls(locale_code=locale_code, _babel_locale=babel_locale, is_fallback=used_fallback)

        with cls._cache_lock:
            if cache_key in cls._cache:
                return cls._cache[cache_key]
            if len(cls._cache) >= MAX_LOCALE_CACHE_SIZE:
                cls._cache.popitem(last=False)
            cls._cache[cache_key] = ctx
            return ctx

    @property
    def babel_locale(self) -> Locale:
        """Pre-validated Babel Locale object for this context."""
        return self._babel_locale

    def format_number(
        self,
        value: str | int | Decimal,
        *,
        minimum_fraction_digits: int = 0,
        maximum_fraction_digits: int = 3,
        use_grouping: bool = True,
    ) -> str:
        """Format number with locale-specific separators.

        Strings are converted through Decimal so no binary float rounding
        leaks into the output.

        Args:
            value: Number or numeric text to format
            minimum_fraction_digits: Minimum decimal places (default: 0)
            maximum_fraction_digits: Maximum decimal places (default: 3)
            use_grouping: Use thousands separator (default: True)

        Returns:
            Formatted number string according to locale rules

        Raises:
            FormattingError: If value is not numeric; fallback is str(value)
        """
        try:
            number = Decimal(value) if isinstance(value, str) else value
            integer_part = "#,##0" if use_grouping else "0"
            if maximum_fraction_digits == 0:
                format_pattern = integer_part
            else:
                required = "0" * minimum_fraction_digits
                optional = "#" * (maximum_fraction_digits - minimum_fraction_digits)
                format_pattern = f"{integer_part}.{required}{optional}"

            return str(
                babel_numbers.format_decimal(
                    number,
                    format=format_pattern,
                    locale=self.babel_locale,
                )
            )
        except (ValueError, TypeError, InvalidOperation, AttributeError, KeyError) as e:
            fallback = str(value)
            msg = f"Number formatting failed for '{value}': {e}"
            raise FormattingError(msg, fallback_value=fallback) from e

    def format_date(self, value: datetime, *, date_style: DateStyle = "short") -> str:
        """Format the date part of a datetime in one of the CLDR styles."""
        try:
            return str(babel_dates.format_date(value, format=date_style, locale=self.babel_locale))
        except (ValueError, OverflowError, AttributeError, KeyError) as e:
            msg = f"Date formatting failed for '{value}': {e}"
            raise FormattingError(msg, fallback_value=value.isoformat()) from e

    def format_datetime(
        self,
        value: datetime,
        *,
        date_style: DateStyle = "short",
        time_style: DateStyle | None = "medium",
        time_pattern: str | None = None,
        date_skeleton: str | None = None,
    ) -> str:
        """Format a datetime by combining locale date and time representations.

        Args:
            value: Aware datetime to format
            date_style: Date format style (default: "short")
            time_style: Time format style (default: "medium"); None for date only
            time_pattern: Explicit CLDR time pattern, overrides time_style
            date_skeleton: CLDR skeleton for the date part, overrides date_style

        Returns:
            Formatted datetime string according to locale rules

        Raises:
            FormattingError: If Babel cannot format the value

        Examples:
            >>> from datetime import datetime, UTC
            >>> ctx = LocaleContext.create('en-US')
            >>> dt = datetime(2025, 10, 27, 14, 30, tzinfo=UTC)
            >>> ctx.format_datetime(dt, time_style=None)
            '10/27/25'
        """
        try:
            if date_skeleton is not None:
                date_str = babel_dates.format_skeleton(
                    date_skeleton, value, tzinfo=value.tzinfo, locale=self.babel_locale
                )
            else:
                date_str = babel_dates.format_date(
                    value, format=date_style, locale=self.babel_locale
                )
            if time_style is None and time_pattern is None:
                return str(date_str)

            time_str = babel_dates.format_time(
                value,
                format=time_pattern or time_style or "medium",
                tzinfo=value.tzinfo,
                locale=self.babel_locale,
            )
            # Pattern uses {0} for time and {1} for date per CLDR
            datetime_pattern = (
                self.babel_locale.datetime_formats.get(date_style)
                or self.babel_locale.datetime_formats.get("medium")
                or self.babel_locale.datetime_formats.get("short")
                or "{1} {0}"
            )
            if hasattr(datetime_pattern, "format"):
                return str(datetime_pattern.format(time_str, date_str))
            return str(datetime_pattern).format(time_str, date_str)
        except (ValueError, OverflowError, AttributeError, KeyError) as e:
            msg = f"DateTime formatting failed for '{value}': {e}"
            raise FormattingError(msg, fallback_value=value.isoformat()) from e

    def format_timestamp(self, value: datetime) -> str:
        """Format numeric date plus 24h time with milliseconds."""
        return self.format_datetime(
            value, date_skeleton="yMd", time_pattern=_TIMESTAMP_TIME_PATTERN
        )

    def format_relative(self, value: int, unit: TimeUnit) -> str:
        """Format a signed quantity of a unit relative to now.

        Negative values are in the past ("3 days ago"), others in the future
        ("in 3 days").
        """
        if unit is TimeUnit.MILLISECOND:
            value, unit = value // 1000, TimeUnit.SECOND
        seconds = value * _BABEL_SECONDS[unit]
        return str(
            babel_dates.format_timedelta(
                seconds,
                granularity=unit.value,
                threshold=float("inf"),
                add_direction=True,
                locale=self.babel_locale,
            )
        )

    def format_duration(self, value: int, unit: TimeUnit) -> str:
        """Format an unsigned quantity of a unit ("3 days")."""
        return str(
            babel_units.format_unit(abs(value), f"duration-{unit.value}", locale=self.babel_locale)
        )

    def format_list(self, items: Sequence[str]) -> str:
        """Join items with the locale's conjunction ("a, b and c")."""
        return str(babel_lists.format_list(list(items), locale=self.babel_locale))
