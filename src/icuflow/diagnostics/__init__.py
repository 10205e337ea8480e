"""Diagnostic system for icuflow errors.

Provides structured error diagnostics with codes, source locations and hints.

Python 3.12+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceLocation
from .errors import (
    CatalogFormatError,
    ComputedLabelNotAllowedError,
    ExtractionError,
    FormattingError,
    IcuFlowError,
    InvalidCaseLabelError,
    InvalidFormatArgumentError,
    InvalidOffsetError,
    InvalidValueTypeError,
    MissingCasesError,
    MissingOtherCaseError,
    MissingValueError,
    NonLiteralMessageError,
    PatternSyntaxError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "CatalogFormatError",
    "ComputedLabelNotAllowedError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
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
    "OutputFormat",
    "PatternSyntaxError",
    "SourceLocation",
]
