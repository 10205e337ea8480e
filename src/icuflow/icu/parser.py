"""ICU MessageFormat pattern parser.

Parses the pattern subset produced by the pattern builder and stored in
catalogs into a token tree (:mod:`icuflow.icu.tokens`):

    message   := (text | argument | '#')*
    argument  := '{' name '}'
               | '{' name ',' type [',' style] '}'
               | '{' name ',' choice-type ',' ['offset:' int] (label '{' message '}')+ '}'

Quoting follows ICU apostrophe rules: ``''`` is a literal apostrophe, and an
apostrophe directly before ``{``, ``}`` (or ``#`` inside a plural body) starts
quoted literal text that runs to the next single apostrophe. Any other
apostrophe is literal.

Markup placeholders (``<0>...</0>``) are plain text at this level.

Security:
    Nesting of choice arguments is bounded by MAX_DEPTH (DepthGuard), so
    hostile catalogs cannot exhaust the interpreter stack.

Python 3.12+. Zero external dependencies.
"""

import re

from icuflow.constants import MAX_DEPTH, OTHER_CASE
from icuflow.core.depth_guard import DepthGuard
from icuflow.diagnostics import Diagnostic, ErrorTemplate, PatternSyntaxError
from icuflow.enums import ChoiceType

from .cursor import Cursor, ParseResult
from .tokens import Argument, Choice, ChoiceCase, Format, Octothorpe, Text, Token

__all__ = ["parse"]

_CHOICE_TYPES: frozenset[str] = frozenset(ChoiceType)
_OFFSET_PREFIX = "offset:"
_OFFSET_RE = re.compile(r"-?\d+")

# Characters that end a name, type or case label
_NAME_TERMINATORS = frozenset("{},")
_LABEL_TERMINATORS = frozenset("{}")


def parse(pattern: str, *, max_depth: int = MAX_DEPTH) -> tuple[Token, ...]:
    """Parse an ICU pattern into tokens.

    Args:
        pattern: ICU MessageFormat pattern
        max_depth: Maximum nesting of choice arguments

    Returns:
        Token tuple; adjacent text is merged into one Text token

    Raises:
        PatternSyntaxError: If the pattern is malformed
        DepthLimitExceededError: If choices nest deeper than max_depth

    Example:
        >>> parse("Hello {name}")
        (Text(value='Hello '), Argument(name='name'))
    """
    guard = DepthGuard(max_depth=max_depth)
    result = _parse_message(Cursor(pattern, 0), guard, in_plural=False, nested=False)
    return result.value


def _syntax_error(diagnostic: Diagnostic, cursor: Cursor) -> PatternSyntaxError:
    line, column = cursor.compute_line_col()
    return PatternSyntaxError(diagnostic, position=cursor.pos, line=line, column=column)


def _eof_error(cursor: Cursor) -> PatternSyntaxError:
    return _syntax_error(ErrorTemplate.unexpected_eof(cursor.pos), cursor)


def _parse_message(
    cursor: Cursor, guard: DepthGuard, *, in_plural: bool, nested: bool
) -> ParseResult[tuple[Token, ...]]:
    """Parse message content up to an unmatched '}' (nested) or EOF."""
    tokens: list[Token] = []
    text: list[str] = []

    def flush() -> None:
        if text:
            tokens.append(Text("".join(text)))
            text.clear()

    while not cursor.is_eof:
        char = cursor.current
        if char == "{":
            flush()
            argument = _parse_argument(cursor, guard, in_plural=in_plural)
            tokens.append(argument.value)
            cursor = argument.cursor
        elif char == "}":
            if nested:
                break
            raise _syntax_error(
                ErrorTemplate.unexpected_char(char, "text or '{'", cursor.pos), cursor
            )
        elif char == "#" and in_plural:
            flush()
            tokens.append(Octothorpe())
            cursor = cursor.advance()
        elif char == "'":
            quoted = _parse_apostrophe(cursor, in_plural=in_plural)
            text.append(quoted.value)
            cursor = quoted.cursor
        else:
            start = cursor
            while not cursor.is_eof and cursor.current not in "{}#'":
                cursor = cursor.advance()
            if cursor.pos == start.pos:
                # Lone '#' outside a plural body
                cursor = cursor.advance()
            text.append(start.slice_to(cursor.pos))

    flush()
    return ParseResult(tuple(tokens), cursor)


def _parse_apostrophe(cursor: Cursor, *, in_plural: bool) -> ParseResult[str]:
    """Resolve an apostrophe: escaped quote, quoted literal or plain character."""
    following = cursor.peek(1)
    if following == "'":
        return ParseResult("'", cursor.advance(2))

    quotes_syntax = following is not None and (
        following in "{}" or (following == "#" and in_plural)
    )
    if not quotes_syntax:
        return ParseResult("'", cursor.advance())

    cursor = cursor.advance()
    parts: list[str] = []
    while not cursor.is_eof:
        if cursor.current == "'":
            if cursor.peek(1) == "'":
                parts.append("'")
                cursor = cursor.advance(2)
                continue
            return ParseResult("".join(parts), cursor.advance())
        parts.append(cursor.current)
        cursor = cursor.advance()
    # Unterminated quote extends to the end of the pattern
    return ParseResult("".join(parts), cursor)


def _parse_word(cursor: Cursor, terminators: frozenset[str]) -> ParseResult[str]:
    """Read characters up to whitespace or a terminator."""
    start = cursor
    while not cursor.is_eof and not cursor.current.isspace() and cursor.current not in terminators:
        cursor = cursor.advance()
    return ParseResult(start.slice_to(cursor.pos), cursor)


def _parse_argument(cursor: Cursor, guard: DepthGuard, *, in_plural: bool) -> ParseResult[Token]:
    """Parse ``{name ...}`` starting at the opening brace."""
    cursor = cursor.advance().skip_whitespace()

    name = _parse_word(cursor, _NAME_TERMINATORS)
    if not name.value:
        raise _syntax_error(ErrorTemplate.empty_argument(cursor.pos), cursor)
    cursor = name.cursor.skip_whitespace()

    if cursor.is_eof:
        raise _eof_error(cursor)
    if cursor.current == "}":
        return ParseResult(Argument(name.value), cursor.advance())
    if cursor.current != ",":
        raise _syntax_error(
            ErrorTemplate.unexpected_char(cursor.current, "',' or '}'", cursor.pos), cursor
        )

    cursor = cursor.advance().skip_whitespace()
    arg_type = _parse_word(cursor, _NAME_TERMINATORS)
    if not arg_type.value:
        if cursor.is_eof:
            raise _eof_error(cursor)
        raise _syntax_error(
            ErrorTemplate.unexpected_char(cursor.current, "argument type", cursor.pos), cursor
        )
    cursor = arg_type.cursor.skip_whitespace()

    if cursor.is_eof:
        raise _eof_error(cursor)

    if arg_type.value in _CHOICE_TYPES:
        after_comma = cursor.expect(",")
        if after_comma is None:
            raise _syntax_error(
                ErrorTemplate.unexpected_char(cursor.current, "','", cursor.pos), cursor
            )
        return _parse_choice(
            after_comma, name.value, ChoiceType(arg_type.value), guard, in_plural=in_plural
        )

    return _parse_format(cursor, name.value, arg_type.value)


def _parse_format(cursor: Cursor, name: str, arg_type: str) -> ParseResult[Token]:
    """Parse the rest of ``{name,type[,style]}`` after the type."""
    if cursor.current == "}":
        return ParseResult(Format(name, arg_type), cursor.advance())
    if cursor.current != ",":
        raise _syntax_error(
            ErrorTemplate.unexpected_char(cursor.current, "',' or '}'", cursor.pos), cursor
        )

    cursor = cursor.advance()
    start = cursor
    while not cursor.is_eof and cursor.current not in _LABEL_TERMINATORS:
        cursor = cursor.advance()
    if cursor.is_eof:
        raise _eof_error(cursor)
    if cursor.current == "{":
        raise _syntax_error(ErrorTemplate.unexpected_char("{", "style name", cursor.pos), cursor)

    style = start.slice_to(cursor.pos).strip()
    return ParseResult(Format(name, arg_type, style or None), cursor.advance())


def _parse_choice(
    cursor: Cursor,
    name: str,
    kind: ChoiceType,
    guard: DepthGuard,
    *,
    in_plural: bool,
) -> ParseResult[Token]:
    """Parse offset and cases of a choice argument, up to its closing brace."""
    start = cursor
    cursor = cursor.skip_whitespace()

    offset = 0
    if kind.uses_plural_rules and cursor.source.startswith(_OFFSET_PREFIX, cursor.pos):
        cursor = cursor.advance(len(_OFFSET_PREFIX)).skip_whitespace()
        raw = _parse_word(cursor, _LABEL_TERMINATORS)
        if not _OFFSET_RE.fullmatch(raw.value):
            raise _syntax_error(ErrorTemplate.pattern_invalid_offset(raw.value, cursor.pos), cursor)
        offset = int(raw.value)
        cursor = raw.cursor

    # '#' binds to the nearest plural; select cases keep the enclosing binding
    body_in_plural = kind.uses_plural_rules or in_plural
    cases: list[ChoiceCase] = []

    with guard:
        while True:
            cursor = cursor.skip_whitespace()
            if cursor.is_eof:
                raise _eof_error(cursor)
            if cursor.current == "}":
                cursor = cursor.advance()
                break

            label = _parse_word(cursor, _LABEL_TERMINATORS)
            if not label.value:
                raise _syntax_error(
                    ErrorTemplate.unexpected_char(cursor.current, "case label", cursor.pos), cursor
                )
            cursor = label.cursor.skip_whitespace()
            if cursor.is_eof:
                raise _eof_error(cursor)
            if cursor.current != "{":
                raise _syntax_error(
                    ErrorTemplate.unexpected_char(cursor.current, "'{'", cursor.pos), cursor
                )

            body = _parse_message(cursor.advance(), guard, in_plural=body_in_plural, nested=True)
            cursor = body.cursor
            if cursor.is_eof:
                raise _eof_error(cursor)
            cursor = cursor.advance()
            cases.append(ChoiceCase(label.value, body.value))

    if not any(case.label == OTHER_CASE for case in cases):
        raise _syntax_error(ErrorTemplate.pattern_missing_other(name, start.pos), start)

    return ParseResult(Choice(name, kind, tuple(cases), offset), cursor)
