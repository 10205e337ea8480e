"""ICU pattern builder: message descriptors to canonical pattern text.

Renders a MessageDescriptor segment tree into one ICU MessageFormat string
and computes the catalog identifier of the message.

Rendering rules:
    - Segments are concatenated in document order, never reordered
    - Choice: ``{var, type, offset:N label {nested} ...}`` with labels in the
      insertion order of the case set
    - Format: ``{var,type[,style]}``; the style part is omitted without a style
    - Markup: ``<k>...</k>`` or ``<k/>``
    - Text: apostrophes are doubled and braces quoted, so literal text
      parses back as text. ``#`` is left as written: inside plural bodies
      it stands for the number

Python 3.12+. Zero external dependencies.
"""

import re
from collections.abc import Iterable

from icuflow.extraction.descriptor import (
    ChoiceForm,
    FormatSpec,
    MarkupClose,
    MarkupOpen,
    MessageDescriptor,
    Placeholder,
    Segment,
)

__all__ = [
    "build_pattern",
    "escape_text",
    "message_identifier",
    "normalize_whitespace",
    "render_choice",
    "render_format",
    "render_segments",
]

# Line breaks followed by indentation collapse into one space
_NEWLINE_INDENT_RE = re.compile(r"(?:\r\n|\r|\n)+\s+")
_BRACES_RE = re.compile(r"[{}]+")


def normalize_whitespace(text: str) -> str:
    """Collapse line breaks followed by indentation into a space, then trim.

    Example:
        >>> normalize_whitespace("  Hello\\n        world  ")
        'Hello world'
    """
    return _NEWLINE_INDENT_RE.sub(" ", text).strip()


def escape_text(text: str) -> str:
    """Quote literal text for a pattern.

    Apostrophes are doubled and every run of braces is quoted on its own,
    so a ``#`` between braces still reads as the plural number.

    Example:
        >>> escape_text("It's {#}")
        "It''s '{'#'}'"
    """
    return _BRACES_RE.sub(lambda match: f"'{match.group()}'", text.replace("'", "''"))


def render_segments(segments: Iterable[Segment]) -> str:
    """Concatenate segments into an (unnormalized) ICU pattern.

    Example:
        >>> render_segments(["It's ", Placeholder("n"), " {braces}"])
        "It''s {n} '{'braces'}'"
    """
    return "".join(_render_segment(segment) for segment in segments)


def _render_segment(segment: Segment) -> str:
    match segment:
        case str():
            return escape_text(segment)
        case Placeholder(name=name):
            return f"{{{name}}}"
        case MarkupOpen(index=index, self_closing=True):
            return f"<{index}/>"
        case MarkupOpen(index=index):
            return f"<{index}>"
        case MarkupClose(index=index):
            return f"</{index}>"
        case FormatSpec():
            return render_format(segment)
        case ChoiceForm():
            return render_choice(segment)
        case _:
            msg = f"Unknown segment: {type(segment).__name__}"
            raise TypeError(msg)


def render_format(spec: FormatSpec) -> str:
    """Render ``{var,type[,style]}``.

    Example:
        >>> from icuflow.enums import FormatType
        >>> render_format(FormatSpec("price", FormatType.NUMBER, "currency", "currency"))
        '{price,number,currency}'
    """
    parts = [spec.variable, str(spec.type)]
    if spec.style_name:
        parts.append(spec.style_name)
    return "{" + ",".join(parts) + "}"


def render_choice(form: ChoiceForm) -> str:
    """Render ``{var, type, offset:N label {nested} ...}``.

    Example:
        >>> from icuflow.enums import ChoiceType
        >>> form = ChoiceForm(
        ...     ChoiceType.PLURAL,
        ...     "count",
        ...     {"one": MessageDescriptor(("# book",)), "other": MessageDescriptor(("# books",))},
        ... )
        >>> render_choice(form)
        '{count, plural, one {# book} other {# books}}'
    """
    offset = f" offset:{form.offset}" if form.offset is not None else ""
    cases = " ".join(
        f"{label} {{{render_segments(case.segments)}}}" for label, case in form.cases.items()
    )
    return f"{{{form.variable}, {form.kind},{offset} {cases}}}"


def build_pattern(descriptor: MessageDescriptor) -> str:
    """Render a descriptor and apply whitespace normalization."""
    return normalize_whitespace(render_segments(descriptor.segments))


def message_identifier(pattern: str, explicit_id: str | None = None) -> tuple[str, str | None]:
    """Compute the catalog key and defaults of a message.

    Args:
        pattern: Normalized ICU pattern
        explicit_id: Identifier annotation written in source, if any

    Returns:
        ``(id, defaults)``. Without an explicit identifier the pattern is the
        key and defaults is None. With one, defaults is the pattern, or None
        when the pattern equals the identifier.

    Example:
        >>> message_identifier("Hello {name}")
        ('Hello {name}', None)
        >>> message_identifier("Hello {name}", "msg.hello")
        ('msg.hello', 'Hello {name}')
    """
    if not explicit_id:
        return pattern, None
    return explicit_id, (pattern if pattern != explicit_id else None)
