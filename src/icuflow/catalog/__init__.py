"""Translation catalogs: data model, merging and on-disk storage.

Exports:
    CatalogEntry, ExtractedEntry: Per-message records
    CatalogMerger, merge_catalogs: Reconcile extracted messages with catalogs
    CatalogStore: Read/write catalogs (json, minimal, po)
    CatalogStats, catalog_stats: Total/missing message counts

Python 3.12+. External dependency: Babel (PO files).
"""

from .merge import CatalogMerger, merge_catalogs
from .storage import CatalogStore
from .types import (
    Catalog,
    CatalogEntry,
    Catalogs,
    CatalogStats,
    ExtractedCatalog,
    ExtractedEntry,
    Origin,
    catalog_stats,
)

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Data model
    "Catalog",
    "CatalogEntry",
    "Catalogs",
    "ExtractedCatalog",
    "ExtractedEntry",
    "Origin",
    # Merging
    "CatalogMerger",
    "merge_catalogs",
    # Storage
    "CatalogStore",
    # Statistics
    "CatalogStats",
    "catalog_stats",
]
