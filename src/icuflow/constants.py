"""Shared constants for icuflow.

Centralized values used across extraction, pattern building, compilation and
the runtime. Placing constants here avoids circular imports between the
``extraction``, ``icu`` and ``runtime`` packages.

Constants are grouped by domain:
- Depth limits: Recursion protection for parsing and evaluation
- Cache limits: Memory bounds for caching subsystems
- Plural categories: CLDR category labels accepted in choice cases
- Catalog defaults: File naming for stored catalogs

Python 3.12+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    "DEFAULT_COMPILE_CACHE_SIZE",
    # Plural categories
    "PLURAL_CATEGORIES",
    "OTHER_CASE",
    # Catalog defaults
    "CATALOG_BASENAME",
    "DEFAULT_LOCALE_DIR",
    "DEFAULT_RECEIVERS",
    "CHOICE_VALUE_NAME",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Unified maximum nesting depth for ICU patterns.
# Used by: pattern parser (nested choice bodies) and compiler (evaluation).
# Real catalogs rarely nest choices more than three levels deep; anything
# past 100 is malformed input and would otherwise end in RecursionError.
MAX_DEPTH: int = 100

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached LocaleContext instances.
# 128 covers typical multi-region applications (major locales + variants).
MAX_LOCALE_CACHE_SIZE: int = 128

# Maximum compiled messages kept per I18n instance.
DEFAULT_COMPILE_CACHE_SIZE: int = 1000

# ============================================================================
# PLURAL CATEGORIES
# ============================================================================

# CLDR plural categories, in canonical order.
PLURAL_CATEGORIES: tuple[str, ...] = ("zero", "one", "two", "few", "many", "other")

# Mandatory fallback case of every choice.
OTHER_CASE: str = "other"

# ============================================================================
# CATALOG DEFAULTS
# ============================================================================

# Stored catalogs live at <locale_dir>/<locale>/messages.<ext>
CATALOG_BASENAME: str = "messages"

DEFAULT_LOCALE_DIR: str = "locale"

# Call receivers recognised by the Python source adapter: i18n.t(...), ...
DEFAULT_RECEIVERS: tuple[str, ...] = ("i18n",)

# Argument name of a choice call that is a message of its own:
# i18n.plural(n, ...) is the message "{value, plural, ...}".
CHOICE_VALUE_NAME: str = "value"
