"""Markup template adapter: ``<trans>`` elements to source messages.

Template shape::

    <trans id="inbox.summary">
      Hello <strong>{name}</strong>, you have
      <plural value="{count}" _0="no messages" one="# message" other="# messages"/>
      since <dateformat value="{since}" format="short"/>.
    </trans>

- ``<trans>`` is a top-level message; its optional ``id`` attribute is the
  explicit identifier
- ``<plural>``, ``<selectordinal>`` and ``<select>`` are choices: ``value``
  and ``offset`` attributes are parameters, every other attribute is a case.
  Outside ``<trans>`` a choice element is a message of its own
- ``<dateformat>`` and ``<numberformat>`` are formats with ``value`` and an
  optional ``format`` attribute (style name, ``{variable}``, or a JSON object)
- Any other element inside a message is inline markup
- ``{identifier}`` in text or attribute values refers to a variable, any other
  ``{expression}`` is an embedded expression

An attribute written as ``{name}="..."`` has a label computed at runtime.

Python 3.12+. Zero external dependencies.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser

from icuflow.diagnostics import SourceLocation
from icuflow.enums import ChoiceType, FormatType

from .nodes import (
    Choice,
    ChoiceField,
    Expression,
    Format,
    Literal,
    Markup,
    Node,
    ObjectLiteral,
    SourceMessage,
    SourceValue,
)
from .template import EMBEDDED_RE, expression_value, text_content

__all__ = ["MarkupAdapter", "parse_markup"]

logger = logging.getLogger(__name__)

_TRANS_TAG = "trans"

_CHOICE_TAGS: dict[str, ChoiceType] = {
    "plural": ChoiceType.PLURAL,
    "select": ChoiceType.SELECT,
    "selectordinal": ChoiceType.SELECT_ORDINAL,
}

_FORMAT_TAGS: dict[str, FormatType] = {
    "dateformat": FormatType.DATE,
    "numberformat": FormatType.NUMBER,
}

# HTML void elements never have an end tag
_VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})  # fmt: skip

_PARAMETER_ATTRIBUTES = frozenset({"value", "offset"})


def attribute_value(value: str | None) -> SourceValue:
    """Value shape of a parameter attribute.

    Example:
        >>> attribute_value("{count}")
        VariableRef(name='count')
        >>> attribute_value("2")
        Literal(value=2)
    """
    if value is None:
        return Literal("")
    embedded = EMBEDDED_RE.fullmatch(value.strip())
    if embedded:
        return expression_value(embedded.group(1))
    if re.fullmatch(r"-?\d+", value.strip()):
        return Literal(int(value))
    return Literal(value)


def _style_value(value: str | None) -> SourceValue:
    """Format style: name, ``{variable}`` or an inline JSON object."""
    if value is not None and value.lstrip().startswith('{"'):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            return Expression(value)
        if isinstance(decoded, dict):
            return ObjectLiteral(tuple((str(key), _json_value(item)) for key, item in decoded.items()))
        return Expression(value)
    return attribute_value(value)


def _json_value(item: object) -> Literal | Expression:
    if isinstance(item, str | int | float) and not isinstance(item, bool):
        return Literal(item)
    return Expression(json.dumps(item))


def _starts_message(tag: str, attrs: list[tuple[str, str | None]]) -> bool:
    """Top-level element that opens a message.

    A choice element needs a ``value`` attribute, so a plain HTML form
    ``<select>`` is left alone.
    """
    if tag == _TRANS_TAG:
        return True
    return tag in _CHOICE_TAGS and any(name == "value" for name, _ in attrs)


@dataclass(slots=True)
class _Element:
    """Open element inside a message."""

    tag: str
    attributes: list[tuple[str, str | None]]
    location: SourceLocation
    children: list[Node] = field(default_factory=list)


class MarkupAdapter(HTMLParser):
    """Collects source messages from an HTML/XML template.

    Args:
        filename: Path recorded in message locations

    Example:
        >>> adapter = MarkupAdapter("page.html")
        >>> adapter.feed("<p><trans>Hello <b>{name}</b></trans></p>")
        >>> adapter.close()
        >>> [type(node).__name__ for node in adapter.messages[0].content]
        ['Text', 'Markup']
    """

    def __init__(self, filename: str) -> None:
        super().__init__(convert_charrefs=True)
        self.filename = filename
        self.messages: list[SourceMessage] = []
        self._stack: list[_Element] = []

    def _location(self) -> SourceLocation:
        line, offset = self.getpos()
        return SourceLocation(self.filename, line, offset + 1)

    # ------------------------------------------------------------------
    # HTMLParser callbacks
    # ------------------------------------------------------------------

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if not self._stack and not _starts_message(tag, attrs):
            return
        if tag in _VOID_TAGS:
            self.handle_startendtag(tag, attrs)
            return
        self._stack.append(_Element(tag, list(attrs), self._location()))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if not self._stack and (tag == _TRANS_TAG or not _starts_message(tag, attrs)):
            return
        element = _Element(tag, list(attrs), self._location())
        self._finish(element, self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        if not any(element.tag == tag for element in self._stack):
            if self._stack:
                logger.debug("%s: unexpected </%s>", self._location(), tag)
            return
        # Elements left open inside the closed one end with it
        while self._stack:
            element = self._stack.pop()
            self._finish(element, self_closing=False)
            if element.tag == tag:
                return

    def handle_data(self, data: str) -> None:
        if self._stack:
            self._stack[-1].children.extend(text_content(data))

    def close(self) -> None:
        super().close()
        for element in self._stack:
            logger.warning("%s: <%s> is never closed", element.location, element.tag)
        self._stack.clear()

    # ------------------------------------------------------------------
    # Node construction
    # ------------------------------------------------------------------

    def _finish(self, element: _Element, *, self_closing: bool) -> None:
        node = self._node(element, self_closing=self_closing)
        if self._stack:
            self._stack[-1].children.append(node)
            return

        explicit_id = dict(element.attributes).get("id")
        content = tuple(element.children) if element.tag == _TRANS_TAG else (node,)
        self.messages.append(
            SourceMessage(content=content, location=element.location, explicit_id=explicit_id)
        )

    def _node(self, element: _Element, *, self_closing: bool) -> Node:
        if element.tag in _CHOICE_TAGS:
            return self._choice(element)
        if element.tag in _FORMAT_TAGS:
            return self._format(element)
        return Markup(
            tag=element.tag,
            attributes=tuple((name, value or "") for name, value in element.attributes),
            children=tuple(element.children),
            self_closing=self_closing,
            location=element.location,
        )

    def _choice(self, element: _Element) -> Choice:
        fields: list[ChoiceField] = []
        for name, value in element.attributes:
            if name == "id":
                continue
            if EMBEDDED_RE.fullmatch(name):
                fields.append(
                    ChoiceField(None, text_content(value or ""), computed=True, location=element.location)
                )
            elif name in _PARAMETER_ATTRIBUTES:
                fields.append(ChoiceField(name, attribute_value(value), location=element.location))
            else:
                fields.append(ChoiceField(name, text_content(value or ""), location=element.location))
        return Choice(kind=_CHOICE_TAGS[element.tag], fields=tuple(fields), location=element.location)

    def _format(self, element: _Element) -> Format:
        attributes = dict(element.attributes)
        arguments: list[SourceValue] = []
        if "value" in attributes:
            arguments.append(attribute_value(attributes["value"]))
            if "format" in attributes:
                arguments.append(_style_value(attributes["format"]))
        return Format(kind=_FORMAT_TAGS[element.tag], arguments=tuple(arguments), location=element.location)


def parse_markup(source: str, filename: str) -> list[SourceMessage]:
    """Find the messages of one template.

    Args:
        source: Template text
        filename: Path recorded in message locations

    Returns:
        Top-level messages in source order
    """
    adapter = MarkupAdapter(filename)
    adapter.feed(source)
    adapter.close()
    logger.debug("Found %d messages in %s", len(adapter.messages), filename)
    return adapter.messages
