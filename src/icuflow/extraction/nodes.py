"""Source node variant set consumed by the pattern extractor.

Concrete source trees (Python ``ast``, markup templates) are adapted into
this small, closed set of frozen dataclasses at the boundary. The extractor
dispatches on these types only, so its logic never depends on a specific
parser's node classes.

Content nodes:
    Text      - literal text, emitted verbatim
    Argument  - embedded expression in interpolated text
    Choice    - plural / selectordinal / select invocation
    Format    - date / number invocation
    Markup    - inline element wrapping further content

Value shapes (what an attribute or call argument can be):
    VariableRef, Literal, ObjectLiteral, Expression

Python 3.12+. Zero external dependencies.
"""

from dataclasses import dataclass

from icuflow.diagnostics import SourceLocation
from icuflow.enums import ChoiceType, FormatType

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Value shapes
    "VariableRef",
    "Literal",
    "ObjectLiteral",
    "Expression",
    "SourceValue",
    # Content nodes
    "Text",
    "Argument",
    "ChoiceField",
    "Choice",
    "Format",
    "Markup",
    "Node",
    "Content",
    "SourceMessage",
]

# ============================================================================
# VALUE SHAPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class VariableRef:
    """Bare identifier reference: ``count``"""

    name: str


@dataclass(frozen=True, slots=True)
class Literal:
    """String or number literal: ``"short"``, ``1``"""

    value: str | int | float


@dataclass(frozen=True, slots=True)
class ObjectLiteral:
    """Inline key/value mapping: ``{"minimum_fraction_digits": 2}``

    Values are literals when the source wrote literals, expressions otherwise.
    """

    entries: tuple[tuple[str, "Literal | Expression"], ...]

    def as_dict(self) -> dict[str, object]:
        """Plain mapping of literal values (expressions kept as source text)."""
        return {
            key: value.value if isinstance(value, Literal) else value.source
            for key, value in self.entries
        }


@dataclass(frozen=True, slots=True)
class Expression:
    """Any other expression, kept as its source text."""

    source: str


type SourceValue = VariableRef | Literal | ObjectLiteral | Expression

# ============================================================================
# CONTENT NODES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text."""

    value: str


@dataclass(frozen=True, slots=True)
class Argument:
    """Embedded expression inside interpolated text: ``{name}``, ``{user.name}``"""

    expression: VariableRef | Expression


@dataclass(frozen=True, slots=True)
class ChoiceField:
    """One field of a choice invocation's attribute set.

    Attributes:
        key: Field name as written (``value``, ``offset``, ``one``, ``_0``),
            an int for numeric keys, or None when the key is computed
        value: Value shape for ``value``/``offset``, nested content for cases
        computed: True when the key is computed at runtime
        location: Where the field was written
    """

    key: str | int | None
    value: "SourceValue | Content"
    computed: bool = False
    location: SourceLocation | None = None


@dataclass(frozen=True, slots=True)
class Choice:
    """plural / selectordinal / select invocation with its raw fields."""

    kind: ChoiceType
    fields: tuple[ChoiceField, ...]
    location: SourceLocation | None = None


@dataclass(frozen=True, slots=True)
class Format:
    """date / number invocation with its raw positional arguments."""

    kind: FormatType
    arguments: tuple[SourceValue, ...]
    location: SourceLocation | None = None


@dataclass(frozen=True, slots=True)
class Markup:
    """Inline element; children are replaced by a numbered placeholder pair.

    Attributes:
        tag: Element name
        attributes: Element attributes in source order
        children: Nested content
        self_closing: Rendered as ``<k/>`` when True
        location: Where the element starts
    """

    tag: str
    attributes: tuple[tuple[str, str], ...] = ()
    children: "Content" = ()
    self_closing: bool = False
    location: SourceLocation | None = None


type Node = Text | Argument | Choice | Format | Markup
type Content = tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class SourceMessage:
    """One top-level translatable message found by an adapter.

    Attributes:
        content: Message content nodes
        location: Where the message starts
        explicit_id: Identifier annotation written in source, if any
    """

    content: Content
    location: SourceLocation
    explicit_id: str | None = None
