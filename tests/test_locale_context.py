"""Tests for LocaleContext - locale-aware formatting without global state.

Covers the bounded context cache, fallback for unknown locales, and the
number, date, relative-time and list formatting used by value formatters.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lexi18n.constants import MAX_LOCALE_CACHE_SIZE
from lexi18n.diagnostics.errors import FormattingError
from lexi18n.enums import TimeUnit
from lexi18n.runtime.locale_context import LocaleContext

# ============================================================================
# Cache Management Tests
# ============================================================================


class TestLocaleContextCacheManagement:
    """Test LocaleContext cache operations (clear_cache, cache_size)."""

    def test_clear_cache_empties_cache(self) -> None:
        """clear_cache() empties the cache."""
        LocaleContext.create("en-US")
        LocaleContext.create("de-DE")
        assert LocaleContext.cache_size() > 0

        LocaleContext.clear_cache()
        assert LocaleContext.cache_size() == 0

    def test_aliases_share_one_entry(self) -> None:
        """en-GB, en_GB and en-UK resolve to the same cached context."""
        first = LocaleContext.create("en-GB")
        assert LocaleContext.create("en_GB") is first
        assert LocaleContext.create("en-UK") is first
        assert LocaleContext.cache_size() == 1

    def test_cache_is_bounded(self) -> None:
        """The oldest entry is evicted at MAX_LOCALE_CACHE_SIZE."""
        for index in range(MAX_LOCALE_CACHE_SIZE + 5):
            LocaleContext.create(f"x{index:03d}-unknown")
        assert LocaleContext.cache_size() == MAX_LOCALE_CACHE_SIZE


# ============================================================================
# Fallback Tests
# ============================================================================


class TestLocaleContextFallback:
    """Unknown locales format with en_US rules."""

    def test_unknown_locale_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="lexi18n.runtime.locale_context"):
            ctx = LocaleContext.create("xx-YY")
        assert ctx.is_fallback
        assert ctx.locale_code == "xx-YY"
        assert ctx.format_number("1234.5") == "1,234.5"
        assert "Falling back to en_US" in caplog.text

    def test_known_locale_is_not_fallback(self) -> None:
        assert not LocaleContext.create("de-DE").is_fallback


# ============================================================================
# Formatting Tests
# ============================================================================


class TestLocaleContextNumbers:
    @pytest.mark.parametrize(
        ("locale", "value", "expected"),
        [
            ("en-US", "1234.5678", "1,234.568"),
            ("de-DE", "1234.5", "1.234,5"),
            ("en-GB", "0.001", "0.001"),
            ("fr-FR", "0.001", "0,001"),
            ("en-US", "-3", "-3"),
        ],
    )
    def test_format_number(self, locale: str, value: str, expected: str) -> None:
        assert LocaleContext.create(locale).format_number(value) == expected

    def test_options(self) -> None:
        ctx = LocaleContext.create("en-US")
        assert ctx.format_number(Decimal("1234"), minimum_fraction_digits=2) == "1,234.00"
        assert ctx.format_number("1234.5", maximum_fraction_digits=0) == "1,234"
        assert ctx.format_number("1234", use_grouping=False) == "1234"

    def test_invalid_number(self) -> None:
        with pytest.raises(FormattingError) as exc_info:
            LocaleContext.create("en-US").format_number("twelve")
        assert exc_info.value.fallback_value == "twelve"

    @given(value=st.integers(min_value=-(10**12), max_value=10**12))
    def test_grouping_removed_gives_digits(self, value: int) -> None:
        """Without grouping, integers format as their decimal digits."""
        ctx = LocaleContext.create("en-US")
        assert ctx.format_number(str(value), use_grouping=False) == str(value)


class TestLocaleContextDates:
    _MOMENT = datetime(2025, 10, 27, 14, 30, tzinfo=UTC)

    def test_short_date(self) -> None:
        assert LocaleContext.create("en-US").format_date(self._MOMENT) == "10/27/25"

    def test_long_date(self) -> None:
        ctx = LocaleContext.create("en-US")
        assert ctx.format_date(self._MOMENT, date_style="long") == "October 27, 2025"

    def test_datetime_date_only(self) -> None:
        ctx = LocaleContext.create("en-US")
        assert ctx.format_datetime(self._MOMENT, time_style=None) == "10/27/25"

    def test_datetime_combines_parts(self) -> None:
        rendered = LocaleContext.create("de-DE").format_datetime(self._MOMENT)
        assert "27.10.25" in rendered
        assert "14:30:00" in rendered

    def test_timestamp(self) -> None:
        rendered = LocaleContext.create("en-US").format_timestamp(self._MOMENT)
        assert "10/27/2025" in rendered
        assert "14:30:00.000" in rendered


class TestLocaleContextRelative:
    @pytest.mark.parametrize(
        ("value", "unit", "expected"),
        [
            (3, TimeUnit.DAY, "in 3 days"),
            (-2, TimeUnit.HOUR, "2 hours ago"),
            (48, TimeUnit.HOUR, "in 48 hours"),
            (5000, TimeUnit.MILLISECOND, "in 5 seconds"),
        ],
    )
    def test_format_relative(self, value: int, unit: TimeUnit, expected: str) -> None:
        assert LocaleContext.create("en").format_relative(value, unit) == expected

    def test_format_duration(self) -> None:
        ctx = LocaleContext.create("en")
        assert ctx.format_duration(3, TimeUnit.DAY) == "3 days"
        assert ctx.format_duration(-1, TimeUnit.HOUR) == "1 hour"

    def test_format_list(self) -> None:
        ctx = LocaleContext.create("en")
        assert ctx.format_list(["1 day", "2 hours"]) == "1 day and 2 hours"
        assert ctx.format_list(["a", "b", "c"]) == "a, b, and c"
