"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.12+. Zero external dependencies.
"""

from icuflow.constants import MAX_DEPTH, PLURAL_CATEGORIES

from .codes import Diagnostic, DiagnosticCode, SourceLocation


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Keeps messages testable and consistent across the extraction, pattern and
    catalog layers.
    """

    @staticmethod
    def missing_value(construct: str, location: SourceLocation | None) -> Diagnostic:
        """Choice or format invocation without a value variable."""
        return Diagnostic(
            code=DiagnosticCode.MISSING_VALUE,
            message=f"Value argument of {construct} is missing",
            location=location,
            hint="Pass the variable being formatted as 'value' (or first argument)",
        )

    @staticmethod
    def invalid_value_type(construct: str, location: SourceLocation | None) -> Diagnostic:
        """Value given as a literal or expression instead of a variable."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_VALUE_TYPE,
            message=f"Value of {construct} must be a variable",
            location=location,
            hint="Assign the expression to a variable first",
        )

    @staticmethod
    def missing_cases(construct: str, location: SourceLocation | None) -> Diagnostic:
        """Choice invocation without any case."""
        return Diagnostic(
            code=DiagnosticCode.MISSING_CASES,
            message=(
                f"Missing {construct} choices. At least fallback argument 'other' is required"
            ),
            location=location,
        )

    @staticmethod
    def missing_other_case(construct: str, location: SourceLocation | None) -> Diagnostic:
        """Choice invocation without the mandatory 'other' case."""
        return Diagnostic(
            code=DiagnosticCode.MISSING_OTHER_CASE,
            message=f"Missing fallback argument 'other' in {construct}",
            location=location,
            hint="Add an 'other' case",
        )

    @staticmethod
    def invalid_case_label(label: str, location: SourceLocation | None) -> Diagnostic:
        """Plural label outside the CLDR set and not an exact match."""
        categories = ", ".join(PLURAL_CATEGORIES)
        return Diagnostic(
            code=DiagnosticCode.INVALID_CASE_LABEL,
            message=f"Invalid plural rule '{label}'",
            location=location,
            hint=(
                f"Must be {categories} or exact number depending on your source language "
                "('one' and 'other' for English)"
            ),
        )

    @staticmethod
    def computed_label(location: SourceLocation | None) -> Diagnostic:
        """Case label computed at runtime."""
        return Diagnostic(
            code=DiagnosticCode.COMPUTED_LABEL_NOT_ALLOWED,
            message="Computed properties aren't allowed",
            location=location,
            hint="Case labels must be written literally",
        )

    @staticmethod
    def invalid_offset(location: SourceLocation | None) -> Diagnostic:
        """Offset given as a variable."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_OFFSET,
            message="Offset argument cannot be a variable",
            location=location,
            hint="Use a number or string literal",
        )

    @staticmethod
    def invalid_format_argument(location: SourceLocation | None) -> Diagnostic:
        """Second format argument of an unsupported shape."""
        return Diagnostic(
            code=DiagnosticCode.INVALID_FORMAT_ARGUMENT,
            message=(
                "Format can be either string for built-in formats, variable or "
                "object for custom defined formats"
            ),
            location=location,
        )

    @staticmethod
    def non_literal_message(construct: str, location: SourceLocation | None) -> Diagnostic:
        """Message text that is not a string literal."""
        return Diagnostic(
            code=DiagnosticCode.NON_LITERAL_MESSAGE,
            message=f"Message text of {construct} must be a string literal",
            location=location,
            hint=(
                "f-strings and variables are filled in before translation; write "
                "{placeholders} in the text and pass values as keyword arguments"
            ),
        )

    @staticmethod
    def source_unparseable(filename: str, reason: str) -> Diagnostic:
        """Source file the adapter could not parse at all."""
        return Diagnostic(
            code=DiagnosticCode.SOURCE_UNPARSEABLE,
            message=f"Cannot parse '{filename}': {reason}",
        )

    @staticmethod
    def unexpected_eof(position: int) -> Diagnostic:
        """Pattern ended inside an argument."""
        return Diagnostic(
            code=DiagnosticCode.PATTERN_UNEXPECTED_EOF,
            message=f"Unexpected end of pattern at position {position}",
            position=position,
        )

    @staticmethod
    def unexpected_char(found: str, expected: str, position: int) -> Diagnostic:
        """Pattern character that does not fit the grammar."""
        return Diagnostic(
            code=DiagnosticCode.PATTERN_UNEXPECTED_CHAR,
            message=f"Expected {expected} but found '{found}' at position {position}",
            position=position,
        )

    @staticmethod
    def empty_argument(position: int) -> Diagnostic:
        """Argument without a name: {} or {,number}."""
        return Diagnostic(
            code=DiagnosticCode.PATTERN_EMPTY_ARGUMENT,
            message=f"Argument name expected at position {position}",
            position=position,
        )

    @staticmethod
    def pattern_missing_other(name: str, position: int) -> Diagnostic:
        """Choice argument in a pattern without 'other'."""
        return Diagnostic(
            code=DiagnosticCode.PATTERN_MISSING_OTHER,
            message=f"Choice argument '{name}' has no 'other' case",
            position=position,
            hint="Every plural, selectordinal and select argument needs 'other'",
        )

    @staticmethod
    def pattern_invalid_offset(value: str, position: int) -> Diagnostic:
        """offset: followed by something other than an integer."""
        return Diagnostic(
            code=DiagnosticCode.PATTERN_INVALID_OFFSET,
            message=f"Invalid offset '{value}' at position {position}",
            position=position,
        )

    @staticmethod
    def depth_exceeded(max_depth: int = MAX_DEPTH) -> Diagnostic:
        """Nested choices beyond the depth limit."""
        return Diagnostic(
            code=DiagnosticCode.PATTERN_DEPTH_EXCEEDED,
            message=f"Maximum nesting depth ({max_depth}) exceeded",
            hint="Flatten nested plural/select arguments",
        )

    @staticmethod
    def formatting_failed(kind: str, value: object, reason: str) -> Diagnostic:
        """Babel could not format a value."""
        return Diagnostic(
            code=DiagnosticCode.FORMATTING_FAILED,
            message=f"{kind.capitalize()} formatting failed for '{value}': {reason}",
        )

    @staticmethod
    def unknown_catalog_format(name: str) -> Diagnostic:
        """Catalog format name with no registered reader/writer."""
        return Diagnostic(
            code=DiagnosticCode.CATALOG_UNKNOWN_FORMAT,
            message=f"Unknown catalog format '{name}'",
            hint="Use one of: json, minimal, po",
        )

    @staticmethod
    def catalog_unreadable(path: str, reason: str) -> Diagnostic:
        """Stored catalog that cannot be decoded."""
        return Diagnostic(
            code=DiagnosticCode.CATALOG_UNREADABLE,
            message=f"Cannot read catalog '{path}': {reason}",
        )
