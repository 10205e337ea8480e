"""Message extraction from application source.

Adapters turn Python modules (``ast``) and markup templates (``html.parser``)
into a closed set of source nodes; the PatternExtractor turns those into
message descriptors and ICU patterns; collect() consolidates them by id.

Exports:
    PatternExtractor: Source nodes -> ExtractedMessage
    MessageDescriptor, ExtractedMessage: Extraction results
    extract_source, extract_file, extract_paths: Extraction driver
    collect: Extracted messages -> {id: ExtractedEntry}

Python 3.12+. Zero external dependencies.
"""

# Node and descriptor modules load first: icu.builder imports descriptor types
from .nodes import SourceMessage
from .descriptor import ExtractedMessage, MessageDescriptor  # noqa: I001
from .extractor import PatternExtractor, case_label
from .collect import ExtractionResult, collect, extract_file, extract_paths, extract_source
from .markup import parse_markup
from .python_source import parse_python

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Extraction
    "PatternExtractor",
    "case_label",
    "SourceMessage",
    "MessageDescriptor",
    "ExtractedMessage",
    # Adapters
    "parse_markup",
    "parse_python",
    # Driver
    "ExtractionResult",
    "collect",
    "extract_file",
    "extract_paths",
    "extract_source",
]
