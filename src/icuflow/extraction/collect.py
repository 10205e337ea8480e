"""Extraction driver: files and directories to extracted catalogs.

Runs the matching source adapter for each file, feeds every top-level message
through one PatternExtractor and gathers the results. An invalid message is
logged and recorded; extraction continues with the next message.

File kinds:
    .py                         Python source (ast adapter)
    .html, .htm, .xml, .jinja   Markup templates (HTMLParser adapter)

Thread Safety:
    extract_paths() may fan out over a ThreadPoolExecutor. Adapters and the
    extractor hold no shared state; results are concatenated in input order.

Python 3.12+. Zero external dependencies.
"""

import ast
import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from icuflow.catalog.types import ExtractedEntry, Origin
from icuflow.constants import DEFAULT_RECEIVERS
from icuflow.diagnostics import ErrorTemplate, ExtractionError

from .descriptor import ExtractedMessage
from .extractor import PatternExtractor
from .markup import parse_markup
from .nodes import SourceMessage
from .python_source import PythonSourceAdapter

__all__ = [
    "ExtractionResult",
    "collect",
    "extract_file",
    "extract_paths",
    "extract_source",
]

logger = logging.getLogger(__name__)

_PYTHON_SUFFIXES = frozenset({".py"})
_MARKUP_SUFFIXES = frozenset({".html", ".htm", ".xml", ".jinja", ".jinja2"})


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Messages and errors of one extraction run.

    Attributes:
        messages: Extracted messages in source order
        errors: Invalid messages (and unparseable files) that were skipped
    """

    messages: tuple[ExtractedMessage, ...] = ()
    errors: tuple[ExtractionError, ...] = ()

    def __add__(self, other: "ExtractionResult") -> "ExtractionResult":
        return ExtractionResult(self.messages + other.messages, self.errors + other.errors)


def is_supported(path: Path) -> bool:
    """True for files an adapter exists for."""
    suffix = path.suffix.lower()
    return suffix in _PYTHON_SUFFIXES or suffix in _MARKUP_SUFFIXES


def _source_messages(
    source: str, filename: str, receivers: Sequence[str]
) -> tuple[list[SourceMessage], list[ExtractionError]]:
    """Adapter output: messages, and call sites the adapter rejected."""
    if Path(filename).suffix.lower() in _MARKUP_SUFFIXES:
        return parse_markup(source, filename), []
    adapter = PythonSourceAdapter(filename, receivers)
    adapter.visit(ast.parse(source, filename=filename))
    return adapter.messages, adapter.errors


def extract_source(
    source: str,
    filename: str,
    *,
    receivers: Sequence[str] = DEFAULT_RECEIVERS,
) -> ExtractionResult:
    """Extract the messages of one source text.

    The adapter is chosen by the filename suffix; anything that is not a
    markup template is read as Python.

    Args:
        source: File contents
        filename: Path recorded in message origins
        receivers: Runtime instance names recognised in Python source

    Returns:
        Extracted messages and the errors of skipped messages
    """
    try:
        source_messages, errors = _source_messages(source, filename, receivers)
    except SyntaxError as e:
        error = ExtractionError(ErrorTemplate.source_unparseable(filename, str(e)))
        logger.warning("%s", error)
        return ExtractionResult(errors=(error,))

    extractor = PatternExtractor()
    messages: list[ExtractedMessage] = []

    for source_message in source_messages:
        try:
            extracted = extractor.extract(source_message)
        except ExtractionError as e:
            logger.warning("%s", e)
            errors.append(e)
            continue
        if extracted is not None:
            messages.append(extracted)

    return ExtractionResult(tuple(messages), tuple(errors))


def extract_file(
    path: str | Path,
    *,
    receivers: Sequence[str] = DEFAULT_RECEIVERS,
) -> ExtractionResult:
    """Extract the messages of one file (read as UTF-8)."""
    path = Path(path)
    logger.debug("Extracting %s", path)
    return extract_source(path.read_text(encoding="utf-8"), str(path), receivers=receivers)


def _iter_files(paths: Iterable[str | Path], ignore: Sequence[re.Pattern[str]]) -> Iterator[Path]:
    for root in paths:
        root = Path(root)
        candidates = sorted(p for p in root.rglob("*") if p.is_file()) if root.is_dir() else [root]
        for path in candidates:
            if any(pattern.search(path.as_posix()) for pattern in ignore):
                logger.debug("Ignoring %s", path)
                continue
            if is_supported(path):
                yield path


def extract_paths(
    paths: Iterable[str | Path],
    *,
    ignore: Iterable[str] = (),
    receivers: Sequence[str] = DEFAULT_RECEIVERS,
    workers: int | None = None,
) -> ExtractionResult:
    """Extract every supported file below the given files and directories.

    Args:
        paths: Files and directories (searched recursively)
        ignore: Regular expressions matched case-insensitively against paths
        receivers: Runtime instance names recognised in Python source
        workers: Threads for per-file extraction; None or 1 runs serially

    Returns:
        Combined result, files in input order (directories sorted)
    """
    patterns = [re.compile(pattern, re.IGNORECASE) for pattern in ignore]
    files = list(_iter_files(paths, patterns))

    if workers is not None and workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda f: extract_file(f, receivers=receivers), files))
    else:
        results = [extract_file(f, receivers=receivers) for f in files]

    combined = sum(results, ExtractionResult())
    logger.info(
        "Extracted %d messages from %d files (%d errors)",
        len(combined.messages),
        len(files),
        len(combined.errors),
    )
    return combined


def collect(messages: Iterable[ExtractedMessage]) -> dict[str, ExtractedEntry]:
    """Consolidate extracted messages into a catalog keyed by message id.

    Origins of repeated ids are concatenated in order; the first ``defaults``
    found for an id is kept.

    Example:
        >>> from icuflow.diagnostics import SourceLocation
        >>> from icuflow.extraction.nodes import SourceMessage, Text
        >>> extractor = PatternExtractor()
        >>> found = [
        ...     extractor.extract(SourceMessage((Text("Hi"),), SourceLocation("a.py", line)))
        ...     for line in (1, 7)
        ... ]
        >>> collect(found)["Hi"].origin
        (('a.py', 1), ('a.py', 7))
    """
    defaults: dict[str, str | None] = {}
    origins: dict[str, list[Origin]] = {}

    for message in messages:
        if message.id not in origins:
            defaults[message.id] = message.defaults
            origins[message.id] = []
        elif defaults[message.id] is None:
            defaults[message.id] = message.defaults
        origins[message.id].append(message.origin.as_origin())

    return {
        message_id: ExtractedEntry(defaults=defaults[message_id], origin=tuple(origins[message_id]))
        for message_id in origins
    }
