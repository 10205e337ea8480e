"""Pattern extractor: source node trees to message descriptors.

Walks the closed node variant set from :mod:`icuflow.extraction.nodes` and
produces a :class:`MessageDescriptor` for every top-level message, validating
choice and format invocations on the way.

Architecture:
    - One visit function per node variant (Text, Argument, Choice, Format, Markup)
    - Choice and Format fields are parsed once, at the entry point of the
      construct, into a validated ChoiceForm / FormatSpec
    - Counters (synthetic argument names, markup indices) live in a
      _MessageState created per top-level message and threaded through the
      recursive descent; it is never shared between messages

Error Handling:
    Invalid constructs raise an ExtractionError subclass tagged with the
    source location. The error aborts the current message only; adapters
    catch it and continue with sibling messages.

Python 3.12+. Zero external dependencies.
"""

import logging
import re
from dataclasses import dataclass, field, replace

from icuflow.constants import OTHER_CASE, PLURAL_CATEGORIES
from icuflow.diagnostics import (
    ComputedLabelNotAllowedError,
    ErrorTemplate,
    InvalidCaseLabelError,
    InvalidFormatArgumentError,
    InvalidOffsetError,
    InvalidValueTypeError,
    MissingCasesError,
    MissingOtherCaseError,
    MissingValueError,
    SourceLocation,
)
from icuflow.enums import FormatType
from icuflow.icu import builder as pattern_builder

from .descriptor import (
    ChoiceForm,
    ExtractedMessage,
    FormatSpec,
    MarkupClose,
    MarkupOpen,
    MessageDescriptor,
    Placeholder,
    Segment,
)
from .nodes import (
    Argument,
    Choice,
    ChoiceField,
    Content,
    Expression,
    Format,
    Literal,
    Markup,
    Node,
    ObjectLiteral,
    SourceMessage,
    SourceValue,
    Text,
    VariableRef,
)

__all__ = ["PatternExtractor", "case_label"]

logger = logging.getLogger(__name__)

_EXACT_LABEL_RE = re.compile(r"=\d+")
_UNDERSCORE_EXACT_RE = re.compile(r"_(\d+)")

_VALUE_FIELD = "value"
_OFFSET_FIELD = "offset"


def case_label(key: str | int) -> str:
    """Normalize a choice field key to an ICU case label.

    Numeric keys and ``_N`` keys (the spelling usable as a keyword argument
    or attribute name) become exact-match labels ``=N``.

    Example:
        >>> case_label(0)
        '=0'
        >>> case_label("_2")
        '=2'
        >>> case_label("few")
        'few'
    """
    if isinstance(key, int):
        return f"={key}"
    match = _UNDERSCORE_EXACT_RE.fullmatch(key)
    if match:
        return f"={match.group(1)}"
    return key


@dataclass(slots=True)
class _MessageState:
    """Per-message extraction state.

    Created for one top-level message and discarded afterwards, so counters
    restart at 0 for every message.
    """

    argument_index: int = 0
    element_index: int = 0
    placeholders: dict[str, VariableRef | Expression] = field(default_factory=dict)
    inline_nodes: list[Markup] = field(default_factory=list)
    custom_formats: dict[str, FormatSpec] = field(default_factory=dict)

    def next_argument(self) -> str:
        name = str(self.argument_index)
        self.argument_index += 1
        return name

    def next_element(self) -> int:
        index = self.element_index
        self.element_index += 1
        return index

    def next_format_name(self, kind: FormatType) -> str:
        """Synthetic style name ``<type><n>`` not yet used in this message."""
        pattern = re.compile(rf"{kind}\d+")
        n = sum(1 for name in self.custom_formats if pattern.fullmatch(name))
        while f"{kind}{n}" in self.custom_formats:
            n += 1
        return f"{kind}{n}"


class PatternExtractor:
    """Converts source node trees into message descriptors.

    Example:
        >>> extractor = PatternExtractor()
        >>> message = SourceMessage(
        ...     content=(Text("Hello "), Argument(VariableRef("name"))),
        ...     location=SourceLocation("app.py", 3),
        ... )
        >>> extractor.extract(message).id
        'Hello {name}'
    """

    def extract(self, message: SourceMessage) -> ExtractedMessage | None:
        """Extract one top-level message.

        Args:
            message: Message content found by an adapter

        Returns:
            The extracted message, or None when the normalized pattern is
            empty (nothing to extract)

        Raises:
            ExtractionError: If a choice or format invocation is invalid
        """
        descriptor = self.describe(message.content)
        pattern = pattern_builder.build_pattern(descriptor)
        if not pattern:
            logger.debug("Nothing to extract at %s", message.location)
            return None

        message_id, defaults = pattern_builder.message_identifier(pattern, message.explicit_id)
        logger.debug("Extracted message %r at %s", message_id, message.location)
        return ExtractedMessage(
            id=message_id,
            pattern=pattern,
            descriptor=descriptor,
            origin=message.location,
            defaults=defaults,
        )

    def describe(self, content: Content) -> MessageDescriptor:
        """Build the descriptor of one top-level message content."""
        state = _MessageState()
        segments = self._visit_content(content, state)
        return MessageDescriptor(
            segments=segments,
            placeholders=dict(state.placeholders),
            inline_nodes=tuple(state.inline_nodes),
            custom_formats=dict(state.custom_formats),
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _visit_content(self, content: Content, state: _MessageState) -> tuple[Segment, ...]:
        segments: list[Segment] = []
        for node in content:
            segments.extend(self._visit(node, state))
        return tuple(segments)

    def _visit(self, node: Node, state: _MessageState) -> list[Segment]:
        match node:
            case Text():
                return self._visit_text(node)
            case Argument():
                return self._visit_argument(node, state)
            case Choice():
                return [self._visit_choice(node, state)]
            case Format():
                return [self._visit_format(node, state)]
            case Markup():
                return self._visit_markup(node, state)
            case _:
                msg = f"Unknown source node: {type(node).__name__}"
                raise TypeError(msg)

    def _visit_text(self, node: Text) -> list[Segment]:
        return [node.value] if node.value else []

    def _visit_argument(self, node: Argument, state: _MessageState) -> list[Segment]:
        expression = node.expression
        if isinstance(expression, VariableRef):
            name = expression.name
            state.placeholders.setdefault(name, expression)
        else:
            name = state.next_argument()
            state.placeholders[name] = expression
        return [Placeholder(name)]

    def _visit_markup(self, node: Markup, state: _MessageState) -> list[Segment]:
        # Index is taken on entry so nested elements number in document order
        index = state.next_element()
        state.inline_nodes.append(replace(node, children=()))

        if node.self_closing:
            return [MarkupOpen(index, self_closing=True)]

        segments: list[Segment] = [MarkupOpen(index)]
        segments.extend(self._visit_content(node.children, state))
        segments.append(MarkupClose(index))
        return segments

    # ------------------------------------------------------------------
    # Choice: plural / selectordinal / select
    # ------------------------------------------------------------------

    def _visit_choice(self, node: Choice, state: _MessageState) -> ChoiceForm:
        construct = str(node.kind)
        location = node.location

        keyed: list[tuple[str | int, ChoiceField]] = []
        for choice_field in node.fields:
            if choice_field.computed or choice_field.key is None:
                raise ComputedLabelNotAllowedError(
                    ErrorTemplate.computed_label(choice_field.location or location)
                )
            keyed.append((choice_field.key, choice_field))

        variable: str | None = None
        offset: str | int | float | None = None
        raw_cases: dict[str, ChoiceField] = {}

        for key, choice_field in keyed:
            if key == _VALUE_FIELD:
                if not isinstance(choice_field.value, VariableRef):
                    raise InvalidValueTypeError(
                        ErrorTemplate.invalid_value_type(construct, location)
                    )
                variable = choice_field.value.name
                state.placeholders.setdefault(variable, choice_field.value)
            elif key == _OFFSET_FIELD and node.kind.uses_plural_rules:
                # offset is a static parameter; it must be a number or a string
                if not isinstance(choice_field.value, Literal):
                    raise InvalidOffsetError(ErrorTemplate.invalid_offset(location))
                offset = choice_field.value.value
            else:
                raw_cases[case_label(key)] = choice_field

        if variable is None:
            raise MissingValueError(ErrorTemplate.missing_value(construct, location))
        if not raw_cases:
            raise MissingCasesError(ErrorTemplate.missing_cases(construct, location))
        if OTHER_CASE not in raw_cases:
            raise MissingOtherCaseError(ErrorTemplate.missing_other_case(construct, location))
        if node.kind.uses_plural_rules:
            for label in raw_cases:
                if label not in PLURAL_CATEGORIES and not _EXACT_LABEL_RE.fullmatch(label):
                    raise InvalidCaseLabelError(ErrorTemplate.invalid_case_label(label, location))

        cases = {
            label: MessageDescriptor(
                segments=self._visit_content(_as_content(choice_field.value), state)
            )
            for label, choice_field in raw_cases.items()
        }
        return ChoiceForm(kind=node.kind, variable=variable, cases=cases, offset=offset)

    # ------------------------------------------------------------------
    # Format: date / number
    # ------------------------------------------------------------------

    def _visit_format(self, node: Format, state: _MessageState) -> FormatSpec:
        construct = str(node.kind)
        location = node.location

        if not node.arguments:
            raise MissingValueError(ErrorTemplate.missing_value(construct, location))
        value = node.arguments[0]
        if not isinstance(value, VariableRef):
            raise InvalidValueTypeError(ErrorTemplate.invalid_value_type(construct, location))

        spec = FormatSpec(variable=value.name, type=node.kind)
        if len(node.arguments) > 1:
            spec = self._apply_style(spec, node.arguments[1], state, location)

        state.placeholders.setdefault(value.name, value)
        return spec

    def _apply_style(
        self,
        spec: FormatSpec,
        style: SourceValue,
        state: _MessageState,
        location: SourceLocation | None,
    ) -> FormatSpec:
        match style:
            case Literal(value=str() as name):
                # Built-in style; an empty string means no style
                return replace(spec, style=name or None, style_name=name or None)
            case VariableRef(name=name):
                spec = replace(spec, style=style, style_name=name)
            case ObjectLiteral():
                name = state.next_format_name(spec.type)
                spec = replace(spec, style=style.as_dict(), style_name=name)
            case _:
                raise InvalidFormatArgumentError(ErrorTemplate.invalid_format_argument(location))

        state.custom_formats[name] = spec
        return spec


def _as_content(value: SourceValue | Content) -> Content:
    """Case values are nested messages; wrap bare values into content."""
    match value:
        case tuple():
            return value
        case Literal(value=literal):
            return (Text(str(literal)),)
        case VariableRef() | Expression():
            return (Argument(value),)
        case ObjectLiteral():
            return (Argument(Expression(repr(value.as_dict()))),)
    msg = f"Unsupported case value: {type(value).__name__}"
    raise TypeError(msg)
