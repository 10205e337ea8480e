"""ICU token tree serializer.

Converts tokens back into canonical pattern text, in the same layout the
pattern builder renders: ``{name, type, offset:N label {...} ...}`` for
choices and ``{name,type[,style]}`` for formatted arguments.

Text is quoted where it would otherwise be read as syntax: apostrophes are
doubled, and text from the first brace (or ``#`` inside plural bodies) on is
wrapped in apostrophes.

Python 3.12+. Zero external dependencies.
"""

from collections.abc import Sequence

from .tokens import Argument, Choice, Format, Octothorpe, Text, Token

__all__ = ["serialize"]


def serialize(tokens: Sequence[Token]) -> str:
    """Serialize tokens into an ICU pattern.

    Example:
        >>> from icuflow.icu.parser import parse
        >>> serialize(parse("{count, plural, one {# item} other {# items}}"))
        '{count, plural, one {# item} other {# items}}'
    """
    return _serialize(tokens, in_plural=False)


def _serialize(tokens: Sequence[Token], *, in_plural: bool) -> str:
    parts: list[str] = []
    for token in tokens:
        match token:
            case Text(value=value):
                parts.append(_escape(value, in_plural=in_plural))
            case Argument(name=name):
                parts.append(f"{{{name}}}")
            case Format(name=name, type=arg_type, style=style):
                parts.append("{" + ",".join(filter(None, (name, arg_type, style))) + "}")
            case Octothorpe():
                parts.append("#")
            case Choice():
                parts.append(_serialize_choice(token, in_plural=in_plural))
    return "".join(parts)


def _serialize_choice(choice: Choice, *, in_plural: bool) -> str:
    body_in_plural = choice.type.uses_plural_rules or in_plural
    offset = f" offset:{choice.offset}" if choice.offset else ""
    cases = " ".join(
        f"{case.label} {{{_serialize(case.tokens, in_plural=body_in_plural)}}}"
        for case in choice.cases
    )
    return f"{{{choice.name}, {choice.type},{offset} {cases}}}"


def _escape(value: str, *, in_plural: bool) -> str:
    specials = "{}#" if in_plural else "{}"
    first = next((i for i, char in enumerate(value) if char in specials), None)
    if first is None:
        return value.replace("'", "''")
    # One quoted run from the first special character on; closing quotes
    # never touch a doubled apostrophe
    head, tail = value[:first], value[first:]
    return head.replace("'", "''") + "'" + tail.replace("'", "''") + "'"
