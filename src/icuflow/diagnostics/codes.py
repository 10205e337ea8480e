"""Diagnostic codes and data structures.

Defines error codes, source locations, and diagnostic messages.
Python 3.12+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceLocation",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Extraction errors (invalid choice/format invocations)
        2000-2999: Pattern errors (ICU MessageFormat syntax)
        3000-3999: Runtime errors (formatting failures)
        4000-4999: Catalog errors (storage formats)
    """

    # Extraction errors (1000-1999)
    MISSING_VALUE = 1001
    INVALID_VALUE_TYPE = 1002
    MISSING_CASES = 1003
    MISSING_OTHER_CASE = 1004
    INVALID_CASE_LABEL = 1005
    COMPUTED_LABEL_NOT_ALLOWED = 1006
    INVALID_OFFSET = 1007
    INVALID_FORMAT_ARGUMENT = 1008
    SOURCE_UNPARSEABLE = 1009
    NON_LITERAL_MESSAGE = 1010

    # Pattern errors (2000-2999)
    PATTERN_UNEXPECTED_EOF = 2001
    PATTERN_UNEXPECTED_CHAR = 2002
    PATTERN_EMPTY_ARGUMENT = 2003
    PATTERN_MISSING_OTHER = 2004
    PATTERN_INVALID_OFFSET = 2005
    PATTERN_DEPTH_EXCEEDED = 2006

    # Runtime errors (3000-3999)
    FORMATTING_FAILED = 3001

    # Catalog errors (4000-4999)
    CATALOG_UNKNOWN_FORMAT = 4001
    CATALOG_UNREADABLE = 4002


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Location of an extracted message in application source.

    Attributes:
        file: Source file path as given to the extractor
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """

    file: str
    line: int
    column: int = 0

    def __post_init__(self) -> None:
        """Validate SourceLocation invariants.

        Raises:
            ValueError: If line is less than 1 or column is negative.
        """
        if self.line < 1:
            msg = f"SourceLocation.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 0:
            msg = f"SourceLocation.column must be >= 0, got {self.column}"
            raise ValueError(msg)

    def __str__(self) -> str:
        if self.column:
            return f"{self.file}:{self.line}:{self.column}"
        return f"{self.file}:{self.line}"

    def as_origin(self) -> tuple[str, int]:
        """Catalog origin pair ``(file, line)``."""
        return (self.file, self.line)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        location: Source location (None for errors without one)
        hint: Suggestion for fixing the error
        position: Character offset inside an ICU pattern (pattern errors)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    location: SourceLocation | None = None
    hint: str | None = None
    position: int | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like a compiler error.

        Example output:
            error[MISSING_OTHER_CASE]: Missing fallback case 'other'
              --> app/views.py:12:5
              = help: Add an 'other' case

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
