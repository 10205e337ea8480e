"""Extract workflow: source files to updated catalogs on disk.

Runs the pipeline stages in order:

1. extract messages from the configured source paths
2. consolidate them into one ``{id: ExtractedEntry}`` catalog
3. read the previous catalog of every locale directory
4. merge, then write every locale back in the configured format

Python 3.12+. External dependency: Babel (PO catalogs).
"""

import logging
from dataclasses import dataclass

from icuflow.catalog import CatalogMerger, CatalogStats, CatalogStore, catalog_stats
from icuflow.config import ProjectConfig
from icuflow.diagnostics import ExtractionError
from icuflow.extraction import collect, extract_paths

__all__ = ["ExtractReport", "run_extract"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractReport:
    """Outcome of one extract run.

    Attributes:
        stats: Message counts per locale, after the merge
        errors: Messages skipped because they are invalid
        changed_defaults: Ids whose source text changed under a custom id
    """

    stats: dict[str, CatalogStats]
    errors: tuple[ExtractionError, ...] = ()
    changed_defaults: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        """True when every message was extracted."""
        return not self.errors


def run_extract(config: ProjectConfig, *, overwrite: bool = False) -> ExtractReport:
    """Extract messages and update the catalogs of all locales.

    Locales are the locale subdirectories of ``config.locale_dir``; the
    source locale is added when its directory does not exist yet.

    Args:
        config: Project settings
        overwrite: Replace source-locale translations with the source text

    Returns:
        Per-locale statistics and the extraction errors
    """
    result = extract_paths(
        config.src_paths,
        ignore=config.ignore_patterns,
        receivers=config.receivers,
        workers=config.workers,
    )
    extracted = collect(result.messages)

    store = CatalogStore(config.locale_dir, config.format, config.prev_format)
    prev_catalogs = store.read_all()
    if config.source_locale and config.source_locale not in prev_catalogs:
        prev_catalogs[config.source_locale] = None
    if not prev_catalogs:
        logger.warning("No locales found in %s; nothing to write", config.locale_dir)

    merger = CatalogMerger(config.source_locale, overwrite=overwrite)
    catalogs = merger.merge(prev_catalogs, extracted)
    store.write_all(catalogs)

    return ExtractReport(
        stats={locale: catalog_stats(catalog) for locale, catalog in catalogs.items()},
        errors=result.errors,
        changed_defaults=merger.changed_defaults(),
    )
