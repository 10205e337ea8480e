"""Catalog merger: reconcile extracted messages with stored catalogs.

For every locale in ``prev_catalogs`` (a None catalog means "known locale,
never extracted"):

1. Each extracted id gets an entry with the extracted defaults and origin.
   The source locale is seeded with ``defaults or id``; an existing
   translation is kept unless it is empty or ``overwrite`` is set.
   Other locales keep their previous translation, or "" for new ids.
2. Ids that are no longer extracted are carried forward marked obsolete.
3. Nothing else appears in the result.

The locale set comes from ``prev_catalogs`` only. Merging is deterministic,
performs no I/O and must see the complete extracted key set.

Python 3.12+. Zero external dependencies.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace

from .types import Catalog, CatalogEntry, Catalogs, ExtractedCatalog

__all__ = ["CatalogMerger", "merge_catalogs"]

logger = logging.getLogger(__name__)

type PrevCatalogs = Mapping[str, Mapping[str, CatalogEntry] | None]


class CatalogMerger:
    """Merges an extracted catalog into per-locale catalogs.

    Args:
        source_locale: Locale whose translations are seeded from source text
        overwrite: Replace existing source-locale translations with the
            extracted text (other locales are never overwritten)

    Example:
        >>> from icuflow.catalog.types import ExtractedEntry
        >>> merger = CatalogMerger("en")
        >>> result = merger.merge({"en": None, "cs": None}, {"Hello": ExtractedEntry()})
        >>> result["en"]["Hello"].translation, result["cs"]["Hello"].translation
        ('Hello', '')
    """

    __slots__ = ("_changed_defaults", "overwrite", "source_locale")

    def __init__(self, source_locale: str, *, overwrite: bool = False) -> None:
        self.source_locale = source_locale
        self.overwrite = overwrite
        self._changed_defaults: tuple[str, ...] = ()

    def merge(
        self,
        prev_catalogs: PrevCatalogs,
        next_catalog: ExtractedCatalog,
        *,
        overwrite: bool | None = None,
    ) -> Catalogs:
        """Merge next_catalog into every locale of prev_catalogs.

        Args:
            prev_catalogs: ``{locale: catalog or None}``
            next_catalog: ``{id: ExtractedEntry}`` from the current extraction
            overwrite: Override the merger's overwrite setting for this call

        Returns:
            New ``{locale: catalog}``; inputs are not modified
        """
        overwrite = self.overwrite if overwrite is None else overwrite
        changed: dict[str, None] = {}

        result: Catalogs = {}
        for locale, prev in prev_catalogs.items():
            result[locale] = self._merge_locale(
                locale, prev or {}, next_catalog, overwrite=overwrite, changed=changed
            )

        self._changed_defaults = tuple(changed)
        return result

    def changed_defaults(self) -> tuple[str, ...]:
        """Ids whose defaults differ from the stored ones, from the last merge."""
        return self._changed_defaults

    def _merge_locale(
        self,
        locale: str,
        prev: Mapping[str, CatalogEntry],
        next_catalog: ExtractedCatalog,
        *,
        overwrite: bool,
        changed: dict[str, None],
    ) -> Catalog:
        is_source = locale == self.source_locale
        catalog: Catalog = {}

        for message_id, extracted in next_catalog.items():
            prev_entry = prev.get(message_id)

            if (
                prev_entry is not None
                and extracted.defaults is not None
                and prev_entry.defaults != extracted.defaults
                and message_id not in changed
            ):
                changed[message_id] = None
                logger.debug("Defaults changed for %r", message_id)

            if is_source:
                seed = extracted.defaults if extracted.defaults is not None else message_id
                if prev_entry is None or overwrite or not prev_entry.translation:
                    translation = seed
                else:
                    translation = prev_entry.translation
            else:
                translation = prev_entry.translation if prev_entry is not None else ""

            catalog[message_id] = CatalogEntry(
                translation=translation,
                defaults=extracted.defaults,
                origin=extracted.origin,
            )

        for message_id, prev_entry in prev.items():
            if message_id not in next_catalog:
                catalog[message_id] = replace(prev_entry, obsolete=True)

        return catalog


def merge_catalogs(
    prev_catalogs: PrevCatalogs,
    next_catalog: ExtractedCatalog,
    source_locale: str,
    *,
    overwrite: bool = False,
) -> Catalogs:
    """Functional form of :meth:`CatalogMerger.merge`."""
    return CatalogMerger(source_locale, overwrite=overwrite).merge(prev_catalogs, next_catalog)
