"""Enumerations for icuflow type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so they render directly into ICU
patterns and JSON catalogs.

Python 3.12+.
"""

from enum import StrEnum


class ChoiceType(StrEnum):
    """Kind of choice construct.

    The value is the ICU argument type keyword: str(ChoiceType.SELECT_ORDINAL) == "selectordinal"
    """

    PLURAL = "plural"
    """Cardinal plural: {count, plural, one {# item} other {# items}}"""

    SELECT_ORDINAL = "selectordinal"
    """Ordinal plural: {place, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}"""

    SELECT = "select"
    """Exact string match: {gender, select, male {he} female {she} other {they}}"""

    @property
    def uses_plural_rules(self) -> bool:
        """True for plural and selectordinal (CLDR labels, offset, octothorpe)."""
        return self is not ChoiceType.SELECT


class FormatType(StrEnum):
    """Kind of formatted argument: {value, number, percent}"""

    DATE = "date"
    NUMBER = "number"


class PluralRuleType(StrEnum):
    """Which CLDR rule set to consult."""

    CARDINAL = "cardinal"
    ORDINAL = "ordinal"


class CatalogFormat(StrEnum):
    """On-disk catalog formats understood by CatalogStore."""

    JSON = "json"
    """Full record per message: defaults, translation, origin, obsolete."""

    MINIMAL = "minimal"
    """Message id mapped directly to its translation."""

    PO = "po"
    """Gettext PO file written through Babel."""


__all__ = [
    "CatalogFormat",
    "ChoiceType",
    "FormatType",
    "PluralRuleType",
]
