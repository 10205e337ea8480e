"""icuflow exception hierarchy with structured diagnostics.

All exceptions can carry a Diagnostic object for rich error information.

Python 3.12+. Zero external dependencies.
"""

from .codes import Diagnostic, SourceLocation

__all__ = [
    "CatalogFormatError",
    "ComputedLabelNotAllowedError",
    "ExtractionError",
    "FormattingError",
    "IcuFlowError",
    "InvalidCaseLabelError",
    "InvalidFormatArgumentError",
    "InvalidOffsetError",
    "InvalidValueTypeError",
    "MissingCasesError",
    "MissingOtherCaseError",
    "MissingValueError",
    "NonLiteralMessageError",
    "PatternSyntaxError",
]


class IcuFlowError(Exception):
    """Base exception for all icuflow errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize IcuFlowError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class ExtractionError(IcuFlowError):
    """Invalid message construct found while extracting from source.

    Aborts extraction of the single message it was raised for; adapters
    record it and continue with sibling messages.
    """

    @property
    def location(self) -> SourceLocation | None:
        """Source location the error was detected at."""
        return self.diagnostic.location if self.diagnostic else None


class MissingValueError(ExtractionError):
    """Choice or format invocation lacks a value variable."""


class InvalidValueTypeError(ExtractionError):
    """Value is a literal or expression, not a variable reference."""


class MissingCasesError(ExtractionError):
    """Choice invocation without any case."""


class MissingOtherCaseError(ExtractionError):
    """Choice invocation without the 'other' case."""


class InvalidCaseLabelError(ExtractionError):
    """Plural/selectordinal label outside the CLDR set and not '=N'."""


class ComputedLabelNotAllowedError(ExtractionError):
    """Case label computed at runtime."""


class InvalidOffsetError(ExtractionError):
    """Offset given as a variable."""


class InvalidFormatArgumentError(ExtractionError):
    """Second format argument is neither string, variable nor plain mapping."""


class NonLiteralMessageError(ExtractionError):
    """Message text built at runtime (f-string or variable) instead of written literally."""


class PatternSyntaxError(IcuFlowError):
    """Malformed ICU MessageFormat pattern.

    Attributes:
        position: Character offset of the error inside the pattern
        line: Line number of the error (1-indexed)
        column: Column number of the error (1-indexed)
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        position: int = 0,
        line: int = 1,
        column: int = 1,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.line = line
        self.column = column


class FormattingError(IcuFlowError):
    """Raised when locale-aware formatting fails.

    The error carries a fallback_value that the compiler renders in place of
    the formatted value, so output stays usable while the failure is logged.

    Attributes:
        fallback_value: String to use in output when formatting fails
    """

    def __init__(self, message: str | Diagnostic, fallback_value: str) -> None:
        super().__init__(message)
        self.fallback_value = fallback_value


class CatalogFormatError(IcuFlowError):
    """Unknown catalog format or a stored catalog that cannot be decoded."""
