"""Tests for LocaleContext and BabelFormatters - locale-aware formatting.

Tests immutable locale configuration, thread-safe caching, and CLDR-compliant
formatting for numbers, dates and currency via Babel, plus ICU style name
resolution in BabelFormatters.
"""

from __future__ import annotations

import threading
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from icuflow.diagnostics import DiagnosticCode, FormattingError
from icuflow.runtime.locale_context import BabelFormatters, LocaleContext

# ============================================================================
# Cache Management Tests
# ============================================================================


class TestLocaleContextCache:
    """Test LocaleContext cache operations."""

    def test_clear_cache_empties_cache(self) -> None:
        """clear_cache() empties the cache."""
        LocaleContext.clear_cache()
        LocaleContext.create("en-US")
        LocaleContext.create("de-DE")
        assert LocaleContext.cache_size() == 2

        LocaleContext.clear_cache()
        assert LocaleContext.cache_size() == 0

    def test_cache_returns_same_instance(self) -> None:
        """Cache returns the same instance for the same locale."""
        LocaleContext.clear_cache()

        assert LocaleContext.create("en-US") is LocaleContext.create("en_US")

    def test_concurrent_create_returns_one_instance(self) -> None:
        LocaleContext.clear_cache()
        results: list[LocaleContext] = []

        def create_context() -> None:
            results.append(LocaleContext.create("fr-FR"))

        threads = [threading.Thread(target=create_context) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 4
        assert all(ctx is results[0] for ctx in results)


# ============================================================================
# Fallback Tests
# ============================================================================


class TestLocaleContextFallback:
    def test_valid_locale(self) -> None:
        ctx = LocaleContext.create("cs")

        assert not ctx.is_fallback
        assert ctx.babel_locale.language == "cs"

    def test_unknown_locale_falls_back_to_en_us(self) -> None:
        ctx = LocaleContext.create("xx-YY")

        assert ctx.is_fallback
        assert ctx.locale_code == "xx-YY"
        assert str(ctx.babel_locale) == "en_US"


# ============================================================================
# Number Formatting Tests
# ============================================================================


class TestFormatNumber:
    @pytest.mark.parametrize(
        ("locale", "expected"),
        [("en-US", "1,234.5"), ("de-DE", "1.234,5"), ("en-IN", "1,234.5")],
    )
    def test_grouping_by_locale(self, locale: str, expected: str) -> None:
        assert LocaleContext.create(locale).format_number(1234.5) == expected

    def test_fraction_digits(self) -> None:
        ctx = LocaleContext.create("en-US")

        assert ctx.format_number(1.5, minimum_fraction_digits=2) == "1.50"
        assert ctx.format_number(Decimal("2.345"), maximum_fraction_digits=0) == "2"

    def test_without_grouping(self) -> None:
        assert LocaleContext.create("en-US").format_number(1234, use_grouping=False) == "1234"

    def test_pattern_overrides_options(self) -> None:
        ctx = LocaleContext.create("en-US")
        assert ctx.format_number(-1234.56, pattern="#,##0.00;(#,##0.00)") == "(1,234.56)"

    def test_percent(self) -> None:
        assert LocaleContext.create("en-US").format_percent(0.25) == "25%"

    def test_currency(self) -> None:
        ctx = LocaleContext.create("en-US")

        assert ctx.format_currency(123.45, currency="EUR") == "€123.45"
        assert ctx.format_currency(5, currency="JPY") == "¥5"


# ============================================================================
# Date Formatting Tests
# ============================================================================


class TestFormatDatetime:
    def test_date_styles(self) -> None:
        ctx = LocaleContext.create("en-US")
        day = date(2025, 10, 27)

        assert ctx.format_datetime(day, date_style="short") == "10/27/25"
        assert ctx.format_datetime(day, date_style="long") == "October 27, 2025"

    def test_pattern(self) -> None:
        dt = datetime(2025, 10, 27, 14, 30, tzinfo=UTC)
        assert LocaleContext.create("en-US").format_datetime(dt, pattern="yyyy-MM-dd") == (
            "2025-10-27"
        )

    def test_iso_string(self) -> None:
        ctx = LocaleContext.create("en-US")
        assert ctx.format_datetime("2025-10-27", date_style="short") == "10/27/25"

    def test_invalid_string_raises_with_fallback(self) -> None:
        with pytest.raises(FormattingError) as exc_info:
            LocaleContext.create("en-US").format_datetime("next tuesday")

        assert exc_info.value.fallback_value == "next tuesday"
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.FORMATTING_FAILED


# ============================================================================
# BabelFormatters Tests
# ============================================================================


class TestBabelFormatters:
    """ICU style names to LocaleContext calls."""

    def test_resolve_style(self) -> None:
        formatters = BabelFormatters({"price": {"style": "currency", "currency": "EUR"}})

        assert formatters.resolve_style(None) == {}
        assert formatters.resolve_style("percent") == {"style": "percent"}
        assert formatters.resolve_style("price") == {"style": "currency", "currency": "EUR"}

    def test_call_formats_take_precedence(self) -> None:
        formatters = BabelFormatters({"price": {"style": "currency", "currency": "EUR"}})
        formats = {"price": {"style": "currency", "currency": "CZK"}, "tight": {"pattern": "#"}}

        assert formatters.resolve_style("price", formats)["currency"] == "CZK"
        assert formatters.resolve_style("tight", formats) == {"pattern": "#"}
        assert formatters.resolve_style("percent", formats) == {"style": "percent"}

    def test_resolved_style_is_a_copy(self) -> None:
        formatters = BabelFormatters({"precise": {"minimum_fraction_digits": 2}})

        formatters.resolve_style("precise")["minimum_fraction_digits"] = 5

        assert formatters.resolve_style("precise") == {"minimum_fraction_digits": 2}

    @pytest.mark.parametrize(
        ("style", "value", "expected"),
        [
            (None, 1234.5, "1,234.5"),
            ("integer", 2.6, "3"),
            ("percent", 0.5, "50%"),
            ("precise", 1234.5, "1,234.50"),
            ("price", 9.5, "€9.50"),
            ("unknown-style", 3, "3"),
        ],
    )
    def test_number_styles(self, style: str | None, value: float, expected: str) -> None:
        formatters = BabelFormatters(
            {
                "precise": {"minimum_fraction_digits": 2},
                "price": {"style": "currency", "currency": "EUR"},
            }
        )
        assert formatters.number(value, style, language="en") == expected

    def test_numeric_string(self) -> None:
        assert BabelFormatters().number("1234", None, language="de") == "1.234"

    def test_not_a_number(self) -> None:
        with pytest.raises(FormattingError) as exc_info:
            BabelFormatters().number("many", None, language="en")

        assert exc_info.value.fallback_value == "many"

    def test_currency_without_code(self) -> None:
        with pytest.raises(FormattingError):
            BabelFormatters().number(5, "currency", language="en")

    @pytest.mark.parametrize(
        ("style", "expected"),
        [(None, "Oct 27, 2025"), ("short", "10/27/25"), ("bogus", "Oct 27, 2025")],
    )
    def test_date_styles(self, style: str | None, expected: str) -> None:
        assert BabelFormatters().date(date(2025, 10, 27), style, language="en") == expected

    def test_custom_date_pattern(self) -> None:
        formatters = BabelFormatters({"iso": {"pattern": "yyyy-MM-dd"}})
        assert formatters.date(date(2025, 10, 27), "iso", language="en") == "2025-10-27"

    def test_not_a_date(self) -> None:
        with pytest.raises(FormattingError) as exc_info:
            BabelFormatters().date(42, None, language="en")

        assert exc_info.value.fallback_value == "42"
