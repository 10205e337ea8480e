"""Runtime: translation, plural rules and locale-aware formatting.

Exports:
    I18n: Translation runtime (load / activate / use / translate)
    BabelPluralRules, PluralRuleTable, select_plural_category: CLDR plural rules
    BabelFormatters, LocaleContext: Babel-backed number and date formatting
    CompileCache: LRU cache of compiled messages
    ChoicePart, FormatPart: Results of the choice and format helpers

Python 3.12+. External dependency: Babel.
"""

from .cache import CompileCache
from .i18n import I18n
from .locale_context import BabelFormatters, LocaleContext
from .parts import ChoicePart, FormatPart, MessagePart
from .plural_rules import BabelPluralRules, PluralRuleTable, select_plural_category

__all__ = [
    "BabelFormatters",
    "BabelPluralRules",
    "ChoicePart",
    "CompileCache",
    "FormatPart",
    "I18n",
    "LocaleContext",
    "MessagePart",
    "PluralRuleTable",
    "select_plural_category",
]
