"""Locale context for thread-safe, locale-scoped formatting.

This module provides locale-aware formatting without global state mutation.
Uses Babel for CLDR-compliant number, date, and currency formatting, and
exposes it to compiled messages through :class:`BabelFormatters`.

Architecture:
    - LocaleContext: Immutable locale configuration container (LRU cached)
    - BabelFormatters: Formatters implementation resolving ICU style names
      (built-in or user-defined) to LocaleContext calls
    - No dependency on Python's locale module (avoids global state)

Style resolution:
    A style name found in the per-call ``formats`` or in ``format_styles``
    maps to its option mapping; any other name is a built-in style:
    ``{"style": name}``.
    Number styles: decimal (default), integer, percent, currency.
    Date styles: short, medium (default), long, full.

Python 3.12+. Uses Babel for i18n.
"""

import logging
from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import ClassVar, Literal

from babel import Locale, UnknownLocaleError
from babel import dates as babel_dates
from babel import numbers as babel_numbers

from icuflow.constants import MAX_LOCALE_CACHE_SIZE
from icuflow.diagnostics import ErrorTemplate, FormattingError
from icuflow.locale_utils import normalize_locale

__all__ = ["BabelFormatters", "LocaleContext"]

logger = logging.getLogger(__name__)

type DateStyle = Literal["short", "medium", "long", "full"]

_DATE_STYLES: frozenset[str] = frozenset(("short", "medium", "long", "full"))
_NUMBER_OPTIONS = ("minimum_fraction_digits", "maximum_fraction_digits", "use_grouping", "pattern")


@dataclass(frozen=True, slots=True)
class LocaleContext:
    """Immutable locale configuration for formatting operations.

    Use LocaleContext.create() to construct instances; it validates the
    locale and reuses cached instances.

    Examples:
        >>> ctx = LocaleContext.create('en-US')
        >>> ctx.format_number(1234.5)
        '1,234.5'

        >>> ctx = LocaleContext.create('de-DE')
        >>> ctx.format_number(1234.5)
        '1.234,5'

        >>> # Invalid locales fall back to en_US with warning logged
        >>> ctx = LocaleContext.create('invalid-locale')
        >>> ctx.is_fallback
        True

    Thread Safety:
        LocaleContext is immutable and thread-safe. Cache operations are
        protected by RLock.
    """

    # OrderedDict provides LRU semantics with O(1) operations
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
        """Current number of cached LocaleContext instances."""
        with cls._cache_lock:
            return len(cls._cache)

    @classmethod
    def create(cls, locale_code: str) -> "LocaleContext":
        """Create LocaleContext with graceful fallback for invalid locales.

        For unknown or invalid locales, logs a warning and falls back to
        en_US while preserving the original locale_code for debugging.

        Args:
            locale_code: BCP 47 or POSIX locale identifier

        Returns:
            LocaleContext instance (cached per normalized locale code)
        """
        cache_key = normalize_locale(locale_code)

        with cls._cache_lock:
            if cache_key in cls._cache:
                cls._cache.move_to_end(cache_key)
                return cls._cache[cache_key]

        used_fallback = False
        try:
            babel_locale = Locale.parse(cache_key)
        except UnknownLocaleError as e:
            logger.warning("Unknown locale '%s': %s. Falling back to en_US", locale_code, e)
            babel_locale = Locale.parse("en_US")
            used_fallback = True
        except (ValueError, TypeError) as e:
            logger.warning(
                "Invalid locale format '%s': %s. Falling back to en_US", locale_code, e
            )
            babel_locale = Locale.parse("en_US")
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
        value: int | float | Decimal,
        *,
        minimum_fraction_digits: int = 0,
        maximum_fraction_digits: int = 3,
        use_grouping: bool = True,
        pattern: str | None = None,
    ) -> str:
        """Format number with locale-specific separators.

        Args:
            value: Number to format (int, float, or Decimal)
            minimum_fraction_digits: Minimum decimal places (default: 0)
            maximum_fraction_digits: Maximum decimal places (default: 3)
            use_grouping: Use thousands separator (default: True)
            pattern: Custom number pattern (overrides other parameters)

        Returns:
            Formatted number string according to locale rules

        Raises:
            FormattingError: If Babel cannot format the value

        Examples:
            >>> ctx = LocaleContext.create('en-US')
            >>> ctx.format_number(1234.5)
            '1,234.5'
            >>> ctx.format_number(-1234.56, pattern="#,##0.00;(#,##0.00)")
            '(1,234.56)'
        """
        try:
            if pattern is not None:
                return str(
                    babel_numbers.format_decimal(value, format=pattern, locale=self.babel_locale)
                )

            # '#,##0' = integer with grouping, '#,##0.0##' = 1-3 decimal places
            integer_part = "#,##0" if use_grouping else "0"
            if maximum_fraction_digits == 0:
                value = round(value)
                format_pattern = integer_part
            elif minimum_fraction_digits == maximum_fraction_digits:
                format_pattern = f"{integer_part}.{'0' * minimum_fraction_digits}"
            else:
                required = "0" * minimum_fraction_digits
                optional = "#" * (maximum_fraction_digits - minimum_fraction_digits)
                format_pattern = f"{integer_part}.{required}{optional}"

            return str(
                babel_numbers.format_decimal(value, format=format_pattern, locale=self.babel_locale)
            )
        except (ValueError, TypeError, InvalidOperation, AttributeError, KeyError) as e:
            diagnostic = ErrorTemplate.formatting_failed("number", value, str(e))
            raise FormattingError(diagnostic, fallback_value=str(value)) from e

    def format_percent(self, value: int | float | Decimal, *, pattern: str | None = None) -> str:
        """Format a ratio as percentage: 0.25 -> '25%'.

        Example:
            >>> LocaleContext.create('en-US').format_percent(0.25)
            '25%'
        """
        try:
            return str(babel_numbers.format_percent(value, format=pattern, locale=self.babel_locale))
        except (ValueError, TypeError, InvalidOperation, AttributeError, KeyError) as e:
            diagnostic = ErrorTemplate.formatting_failed("percent", value, str(e))
            raise FormattingError(diagnostic, fallback_value=str(value)) from e

    def format_currency(
        self,
        value: int | float | Decimal,
        *,
        currency: str,
        currency_display: Literal["symbol", "code", "name"] = "symbol",
        pattern: str | None = None,
    ) -> str:
        """Format currency with locale-specific rules.

        Args:
            value: Monetary amount
            currency: ISO 4217 currency code (EUR, USD, JPY, ...)
            currency_display: "symbol" (default), "code" or "name"
            pattern: Custom currency pattern (overrides currency_display)

        Examples:
            >>> LocaleContext.create('en-US').format_currency(123.45, currency='EUR')
            '€123.45'
        """
        try:
            if pattern is not None:
                return str(
                    babel_numbers.format_currency(
                        value,
                        currency,
                        format=pattern,
                        locale=self.babel_locale,
                        currency_digits=True,
                    )
                )

            if currency_display == "name":
                return str(
                    babel_numbers.format_currency(
                        value,
                        currency,
                        locale=self.babel_locale,
                        currency_digits=True,
                        format_type="name",
                    )
                )

            if currency_display == "code":
                # Double currency sign in a CLDR pattern selects the ISO code
                standard_pattern = self.babel_locale.currency_formats.get("standard")
                raw_pattern = getattr(standard_pattern, "pattern", "")
                if "\xa4" in raw_pattern:
                    return str(
                        babel_numbers.format_currency(
                            value,
                            currency,
                            format=raw_pattern.replace("\xa4", "\xa4\xa4"),
                            locale=self.babel_locale,
                            currency_digits=True,
                        )
                    )
                logger.debug("Currency pattern for locale %s lacks placeholder", self.locale_code)

            return str(
                babel_numbers.format_currency(
                    value,
                    currency,
                    locale=self.babel_locale,
                    currency_digits=True,
                    format_type="standard",
                )
            )
        except (ValueError, TypeError, InvalidOperation, AttributeError, KeyError) as e:
            diagnostic = ErrorTemplate.formatting_failed("currency", f"{currency} {value}", str(e))
            raise FormattingError(diagnostic, fallback_value=f"{currency} {value}") from e

    def format_datetime(
        self,
        value: datetime | date | str,
        *,
        date_style: DateStyle = "medium",
        time_style: DateStyle | None = None,
        pattern: str | None = None,
    ) -> str:
        """Format a date or datetime with locale-specific formatting.

        Args:
            value: date, datetime or ISO 8601 string
            date_style: Date format style (default: "medium")
            time_style: Time format style (default: None - date only)
            pattern: Custom datetime pattern (overrides style parameters)

        Raises:
            FormattingError: If the string value is not ISO 8601 or Babel fails

        Examples:
            >>> from datetime import datetime, UTC
            >>> ctx = LocaleContext.create('en-US')
            >>> dt = datetime(2025, 10, 27, 14, 30, tzinfo=UTC)
            >>> ctx.format_datetime(dt, date_style='short')
            '10/27/25'
            >>> ctx.format_datetime(dt, pattern='yyyy-MM-dd')
            '2025-10-27'
        """
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value)
            except ValueError as e:
                diagnostic = ErrorTemplate.formatting_failed("date", value, "not ISO 8601 format")
                raise FormattingError(diagnostic, fallback_value=value) from e

        try:
            if pattern is not None:
                return str(
                    babel_dates.format_datetime(value, format=pattern, locale=self.babel_locale)
                )

            date_str = str(babel_dates.format_date(value, format=date_style, locale=self.babel_locale))
            if not time_style:
                return date_str

            time_str = babel_dates.format_time(value, format=time_style, locale=self.babel_locale)
            # CLDR dateTimeFormat uses {0} for time and {1} for date
            datetime_pattern = (
                self.babel_locale.datetime_formats.get(date_style)
                or self.babel_locale.datetime_formats.get("medium")
                or "{1} {0}"
            )
            return str(datetime_pattern).format(time_str, date_str)
        except (ValueError, OverflowError, TypeError, AttributeError, KeyError) as e:
            diagnostic = ErrorTemplate.formatting_failed("date", value, str(e))
            raise FormattingError(diagnostic, fallback_value=value.isoformat()) from e


def _coerce_number(value: object) -> int | float | Decimal:
    """Numbers pass through; numeric strings become Decimal."""
    match value:
        case bool():
            pass
        case int() | float() | Decimal():
            return value
        case str():
            try:
                return Decimal(value)
            except InvalidOperation:
                pass
    diagnostic = ErrorTemplate.formatting_failed("number", value, "not a number")
    raise FormattingError(diagnostic, fallback_value=str(value))


class BabelFormatters:
    """Formatters implementation backed by LocaleContext.

    Args:
        format_styles: Named custom styles, e.g.
            ``{"price": {"style": "currency", "currency": "EUR"}}``

    Example:
        >>> formatters = BabelFormatters({"precise": {"minimum_fraction_digits": 2}})
        >>> formatters.number(1234.5, "precise", language="en")
        '1,234.50'
        >>> formatters.number(0.25, "percent", language="en")
        '25%'
    """

    __slots__ = ("_format_styles",)

    def __init__(self, format_styles: Mapping[str, Mapping[str, object]] | None = None) -> None:
        self._format_styles: dict[str, Mapping[str, object]] = dict(format_styles or {})

    def resolve_style(
        self, style: str | None, formats: Mapping[str, Mapping[str, object]] | None = None
    ) -> dict[str, object]:
        """Option mapping of a style name.

        Styles passed with the call (``formats``) win over configured
        ``format_styles``, which win over built-in style names.
        """
        if style is None:
            return {}
        if formats and style in formats:
            return dict(formats[style])
        if style in self._format_styles:
            return dict(self._format_styles[style])
        return {"style": style}

    def number(
        self,
        value: object,
        style: str | None,
        *,
        language: str,
        formats: Mapping[str, Mapping[str, object]] | None = None,
    ) -> str:
        ctx = LocaleContext.create(language)
        number = _coerce_number(value)
        options = self.resolve_style(style, formats)
        kind = options.pop("style", "decimal")
        pattern = options.get("pattern")

        match kind:
            case "percent":
                return ctx.format_percent(number, pattern=pattern)  # type: ignore[arg-type]
            case "currency":
                currency = options.get("currency")
                if not isinstance(currency, str):
                    diagnostic = ErrorTemplate.formatting_failed(
                        "currency", value, "style has no 'currency' code"
                    )
                    raise FormattingError(diagnostic, fallback_value=str(value))
                return ctx.format_currency(
                    number,
                    currency=currency,
                    currency_display=options.get("currency_display", "symbol"),  # type: ignore[arg-type]
                    pattern=pattern,  # type: ignore[arg-type]
                )
            case "integer":
                return ctx.format_number(number, maximum_fraction_digits=0)
            case "decimal":
                kwargs = {key: options[key] for key in _NUMBER_OPTIONS if key in options}
                return ctx.format_number(number, **kwargs)  # type: ignore[arg-type]
            case _:
                logger.debug("Unknown number style '%s', using decimal", kind)
                return ctx.format_number(number)

    def date(
        self,
        value: object,
        style: str | None,
        *,
        language: str,
        formats: Mapping[str, Mapping[str, object]] | None = None,
    ) -> str:
        ctx = LocaleContext.create(language)
        if not isinstance(value, (date, str)):
            diagnostic = ErrorTemplate.formatting_failed("date", value, "not a date")
            raise FormattingError(diagnostic, fallback_value=str(value))

        options = self.resolve_style(style, formats)
        date_style = options.pop("style", options.pop("date_style", "medium"))
        if date_style not in _DATE_STYLES:
            logger.debug("Unknown date style '%s', using medium", date_style)
            date_style = "medium"

        return ctx.format_datetime(
            value,
            date_style=date_style,  # type: ignore[arg-type]
            time_style=options.get("time_style"),  # type: ignore[arg-type]
            pattern=options.get("pattern"),  # type: ignore[arg-type]
        )
