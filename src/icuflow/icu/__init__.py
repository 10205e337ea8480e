"""ICU MessageFormat patterns: building, parsing, serialization, compilation.

Modules:
    builder: MessageDescriptor -> canonical pattern text and message id
    parser: pattern text -> token tree
    serializer: token tree -> pattern text
    compiler: pattern or tokens -> CompiledMessage callable

Python 3.12+.
"""

from .builder import (
    build_pattern,
    escape_text,
    message_identifier,
    normalize_whitespace,
    render_segments,
)
from .compiler import CompiledMessage, Formatters, FormatStyles, compile_message, format_value
from .parser import parse
from .serializer import serialize
from .tokens import Argument, Choice, ChoiceCase, Format, Octothorpe, Text, Token

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Tokens
    "Argument",
    "Choice",
    "ChoiceCase",
    "Format",
    "Octothorpe",
    "Text",
    "Token",
    # Building
    "build_pattern",
    "escape_text",
    "message_identifier",
    "normalize_whitespace",
    "render_segments",
    # Parsing
    "parse",
    "serialize",
    # Compilation
    "CompiledMessage",
    "FormatStyles",
    "Formatters",
    "compile_message",
    "format_value",
]
