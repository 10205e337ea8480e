"""Catalog data model.

A catalog maps message identifiers to CatalogEntry records for one locale;
catalogs for all locales are kept in ``{locale: catalog}`` mappings. The
language-agnostic result of extraction is a ``{id: ExtractedEntry}`` mapping.

JSON record shape (one per message, per locale)::

    {"defaults"?: str, "translation": str, "origin": [[file, line], ...], "obsolete"?: true}

Python 3.12+. Zero external dependencies.
"""

from collections.abc import Mapping
from dataclasses import dataclass

__all__ = [
    "Catalog",
    "CatalogEntry",
    "CatalogStats",
    "Catalogs",
    "ExtractedCatalog",
    "ExtractedEntry",
    "Origin",
    "catalog_stats",
]

type Origin = tuple[str, int]


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Translation record of one message in one locale.

    Attributes:
        translation: Translated pattern ("" when not translated yet)
        defaults: Source pattern of a message with a custom identifier;
            None for messages keyed by their own text
        origin: Source locations (file, line) the message was found at
        obsolete: True when the message is no longer found in source
    """

    translation: str = ""
    defaults: str | None = None
    origin: tuple[Origin, ...] = ()
    obsolete: bool = False

    def to_dict(self) -> dict[str, object]:
        """JSON record; ``defaults`` and ``obsolete`` only when set.

        Example:
            >>> CatalogEntry("Ahoj", origin=(("app.py", 3),)).to_dict()
            {'translation': 'Ahoj', 'origin': [['app.py', 3]]}
        """
        record: dict[str, object] = {}
        if self.defaults is not None:
            record["defaults"] = self.defaults
        record["translation"] = self.translation
        record["origin"] = [[file, line] for file, line in self.origin]
        if self.obsolete:
            record["obsolete"] = True
        return record

    @classmethod
    def from_dict(cls, record: Mapping[str, object]) -> "CatalogEntry":
        """Build an entry from a JSON record; missing fields take defaults."""
        defaults = record.get("defaults")
        origin = record.get("origin") or ()
        return cls(
            translation=str(record.get("translation") or ""),
            defaults=str(defaults) if defaults is not None else None,
            origin=tuple((str(file), int(line)) for file, line in origin),  # type: ignore[attr-defined]
            obsolete=bool(record.get("obsolete", False)),
        )


@dataclass(frozen=True, slots=True)
class ExtractedEntry:
    """Language-agnostic record of a message found in source.

    Attributes:
        defaults: Source pattern when the message has a custom identifier
        origin: Every location the message was found at
    """

    defaults: str | None = None
    origin: tuple[Origin, ...] = ()


type Catalog = dict[str, CatalogEntry]
type Catalogs = dict[str, Catalog]
type ExtractedCatalog = Mapping[str, ExtractedEntry]


@dataclass(frozen=True, slots=True)
class CatalogStats:
    """Message counts of one locale catalog.

    Attributes:
        total: Messages still present in source (obsolete excluded)
        missing: Of those, messages without a translation
    """

    total: int
    missing: int


def catalog_stats(catalog: Mapping[str, CatalogEntry]) -> CatalogStats:
    """Count total and untranslated messages, ignoring obsolete entries.

    Example:
        >>> catalog_stats({"a": CatalogEntry("A"), "b": CatalogEntry("")})
        CatalogStats(total=2, missing=1)
    """
    active = [entry for entry in catalog.values() if not entry.obsolete]
    return CatalogStats(
        total=len(active),
        missing=sum(1 for entry in active if not entry.translation),
    )
