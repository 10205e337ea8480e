"""icuflow - ICU MessageFormat extraction, catalogs and runtime.

Extracts parameterized messages from Python source and markup templates,
normalizes them into ICU MessageFormat patterns, reconciles them with
per-locale translation catalogs, and renders them at runtime with CLDR
plural rules and Babel formatting.

Public API:
    I18n - Runtime: load catalogs, activate a language, translate
    PatternExtractor - Source nodes to message descriptors
    extract_paths, collect - Extract messages from files into a catalog
    CatalogMerger, merge_catalogs - Reconcile extracted messages with catalogs
    CatalogStore - Read/write catalogs (json, minimal, po)
    compile_message, parse_pattern, serialize_pattern - ICU patterns
    ProjectConfig, load_config, run_extract - Project workflow

Exceptions:
    IcuFlowError - Base exception class
    ExtractionError - Invalid message construct in source
    PatternSyntaxError - Malformed ICU pattern
    FormattingError - Locale-aware formatting failure
    CatalogFormatError - Unknown or unreadable catalog format

Submodules:
    icuflow.extraction - Adapters, extractor, source node types
    icuflow.icu - Pattern builder, parser, serializer, compiler
    icuflow.catalog - Catalog data model, merge, storage
    icuflow.runtime - I18n, plural rules, LocaleContext
    icuflow.diagnostics - Error types and diagnostic formatting
"""

# Extraction loads first: icu.builder depends on its descriptor types
from .extraction import PatternExtractor, collect, extract_paths
from .catalog import CatalogMerger, CatalogStore, merge_catalogs  # noqa: I001
from .config import ProjectConfig, load_config
from .diagnostics import (
    CatalogFormatError,
    ExtractionError,
    FormattingError,
    IcuFlowError,
    PatternSyntaxError,
)
from .icu import compile_message
from .icu import parse as parse_pattern
from .icu import serialize as serialize_pattern
from .runtime import I18n
from .workflow import run_extract

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError  # noqa: E402
from importlib.metadata import version as _get_version  # noqa: E402

try:
    __version__ = _get_version("icuflow")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CatalogFormatError",
    "CatalogMerger",
    "CatalogStore",
    "ExtractionError",
    "FormattingError",
    "I18n",
    "IcuFlowError",
    "PatternExtractor",
    "PatternSyntaxError",
    "ProjectConfig",
    "__version__",
    "collect",
    "compile_message",
    "extract_paths",
    "load_config",
    "merge_catalogs",
    "parse_pattern",
    "run_extract",
    "serialize_pattern",
]
