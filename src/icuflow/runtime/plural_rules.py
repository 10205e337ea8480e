"""CLDR plural rules implementation using Babel.

Provides cardinal and ordinal plural category selection for all locales
using Babel's CLDR data. This is the PluralRuleTable consumed by the
compiler and the I18n runtime.

Python 3.12+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

import functools
import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol

from babel.core import UnknownLocaleError

from icuflow.constants import MAX_LOCALE_CACHE_SIZE, OTHER_CASE
from icuflow.locale_utils import get_babel_locale

if TYPE_CHECKING:
    from babel import Locale

__all__ = ["BabelPluralRules", "PluralRuleTable", "select_plural_category"]

logger = logging.getLogger(__name__)

type Number = int | float | Decimal


class PluralRuleTable(Protocol):
    """Maps (language, number) to a CLDR plural category."""

    def category(self, language: str, n: Number, *, ordinal: bool = False) -> str:
        """Return one of zero, one, two, few, many, other."""
        ...


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def _resolve_locale(locale: str) -> "Locale | None":
    """Babel locale for a code, or None (warned once per code) if unknown."""
    try:
        return get_babel_locale(locale)
    except (UnknownLocaleError, ValueError, TypeError) as e:
        logger.warning("No plural rules for locale '%s': %s. Using '%s'", locale, e, OTHER_CASE)
        return None


def select_plural_category(n: Number, locale: str, *, ordinal: bool = False) -> str:
    """Select CLDR plural category for number using Babel's CLDR data.

    Args:
        n: Number to categorize
        locale: Locale code (e.g., "lv_LV", "en_US", "ar-SA")
        ordinal: Use ordinal rules (1st, 2nd, ...) instead of cardinal rules

    Returns:
        Plural category: "zero", "one", "two", "few", "many", or "other".
        Unknown or invalid locales always yield "other".

    Examples:
        >>> select_plural_category(1, "en_US")
        'one'
        >>> select_plural_category(5, "ru_RU")
        'many'
        >>> select_plural_category(2, "en", ordinal=True)
        'two'
        >>> select_plural_category(42, "ja_JP")
        'other'
    """
    locale_obj = _resolve_locale(locale)
    if locale_obj is None:
        return OTHER_CASE

    plural_rule = locale_obj.ordinal_form if ordinal else locale_obj.plural_form
    return plural_rule(n)


class BabelPluralRules:
    """PluralRuleTable backed by Babel's CLDR data."""

    __slots__ = ()

    def category(self, language: str, n: Number, *, ordinal: bool = False) -> str:
        return select_plural_category(n, language, ordinal=ordinal)
