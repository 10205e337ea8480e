"""Message descriptors produced by the pattern extractor.

A MessageDescriptor is the intermediate, pre-catalog representation of one
extracted message: an ordered tree of segments (text, placeholders, choices,
formats, markup tags) plus the values, inline elements and custom formats the
message needs at runtime. Descriptors are immutable once returned from a
subtree; the ICU pattern builder renders them into canonical pattern text.

Python 3.12+. Zero external dependencies.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from icuflow.diagnostics import SourceLocation
from icuflow.enums import ChoiceType, FormatType

from .nodes import Expression, Markup, VariableRef

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Segments
    "Placeholder",
    "MarkupOpen",
    "MarkupClose",
    "FormatSpec",
    "ChoiceForm",
    "Segment",
    # Descriptors
    "MessageDescriptor",
    "ExtractedMessage",
]


@dataclass(frozen=True, slots=True)
class Placeholder:
    """Simple argument: ``{name}``"""

    name: str


@dataclass(frozen=True, slots=True)
class MarkupOpen:
    """Opening (or self-closing) markup placeholder: ``<0>`` / ``<0/>``"""

    index: int
    self_closing: bool = False


@dataclass(frozen=True, slots=True)
class MarkupClose:
    """Closing markup placeholder: ``</0>``"""

    index: int


@dataclass(frozen=True, slots=True)
class FormatSpec:
    """Formatted argument: ``{variable,type[,style_name]}``

    Attributes:
        variable: Name of the formatted variable
        type: date or number
        style: Built-in style name (str), custom style variable (VariableRef),
            inline style mapping, or None
        style_name: Name rendered into the pattern; the synthetic
            ``<type><n>`` name for inline styles
    """

    variable: str
    type: FormatType
    style: str | VariableRef | Mapping[str, object] | None = None
    style_name: str | None = None


@dataclass(frozen=True, slots=True)
class ChoiceForm:
    """Validated plural / selectordinal / select construct.

    Invariants (enforced by the extractor before construction):
        - cases contains 'other'
        - plural/selectordinal labels are CLDR categories or '=<int>'
        - offset is None for select and always a literal otherwise
    """

    kind: ChoiceType
    variable: str
    cases: Mapping[str, "MessageDescriptor"]
    offset: str | int | float | None = None


type Segment = str | Placeholder | MarkupOpen | MarkupClose | FormatSpec | ChoiceForm


@dataclass(frozen=True, slots=True)
class MessageDescriptor:
    """Extracted message tree and its runtime requirements.

    Attributes:
        segments: Pattern pieces in document order
        placeholders: Placeholder name -> value reference, in first-use order
        inline_nodes: Markup elements stripped of children; index k is ``<k>``
        custom_formats: Style name -> custom style (variable or inline mapping)
    """

    segments: tuple[Segment, ...] = ()
    placeholders: Mapping[str, VariableRef | Expression] = field(default_factory=dict)
    inline_nodes: tuple[Markup, ...] = ()
    custom_formats: Mapping[str, FormatSpec] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """ICU pattern assembled from the segments (not whitespace-normalized)."""
        from icuflow.icu.builder import render_segments  # noqa: PLC0415 - circular

        return render_segments(self.segments)


@dataclass(frozen=True, slots=True)
class ExtractedMessage:
    """Message ready for the catalog.

    Attributes:
        id: Catalog key (explicit identifier or the normalized pattern)
        pattern: Normalized ICU pattern
        descriptor: Descriptor the pattern was rendered from
        origin: Where the message was found
        defaults: Pattern text when an explicit identifier differs from it
    """

    id: str
    pattern: str
    descriptor: MessageDescriptor
    origin: SourceLocation
    defaults: str | None = None
