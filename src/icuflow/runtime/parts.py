"""Message parts: results of the choice and format helpers.

``I18n.plural/select/select_ordinal/date/number`` return str subclasses.
The text is the rendered result, so a part can be used on its own. The part
also keeps the call arguments, so that ``t()`` can turn a part passed as a
keyword argument back into the choice or format it was written as::

    i18n.t("You have {count}", count=i18n.plural(n, one="# letter", other="# letters"))

is the message ``You have {count, plural, one {# letter} other {# letters}}``,
which is also the id the source extractor records for that call.

Python 3.12+. Zero external dependencies.
"""

from collections.abc import Mapping

from icuflow.constants import CHOICE_VALUE_NAME
from icuflow.enums import ChoiceType, FormatType
from icuflow.extraction.nodes import (
    Choice,
    ChoiceField,
    Expression,
    Format,
    Literal,
    Node,
    ObjectLiteral,
    SourceValue,
    VariableRef,
)
from icuflow.extraction.template import text_content

__all__ = ["ChoicePart", "FormatPart", "MessagePart", "Style", "choice_node", "format_node"]

type Style = str | Mapping[str, object] | None


class MessagePart(str):
    """Rendered helper result that remembers the value it was given."""

    value: object

    def node(self, name: str) -> Node:
        """Source node of this part, its value bound to the argument ``name``."""
        raise NotImplementedError


class ChoicePart(MessagePart):
    """Result of a plural, select or select_ordinal call.

    Attributes:
        kind: Choice type
        value: Value the form was chosen for
        forms: Case text by keyword (``one``, ``_0``, ...) in call order
        offset: Plural offset, None when not given
    """

    kind: ChoiceType
    forms: Mapping[str, str]
    offset: int | float | str | None

    def __new__(
        cls,
        text: str,
        kind: ChoiceType,
        value: object,
        forms: Mapping[str, str],
        offset: int | float | str | None = None,
    ) -> "ChoicePart":
        part = super().__new__(cls, text)
        part.kind = kind
        part.value = value
        part.forms = forms
        part.offset = offset
        return part

    def node(self, name: str) -> Choice:
        return choice_node(self.kind, self.forms, name=name, offset=self.offset)


class FormatPart(MessagePart):
    """Result of a date or number call.

    Attributes:
        kind: Format type
        value: Value that was formatted
        style: Style name or option mapping, None for the default style
    """

    kind: FormatType
    style: Style

    def __new__(
        cls, text: str, kind: FormatType, value: object, style: Style = None
    ) -> "FormatPart":
        part = super().__new__(cls, text)
        part.kind = kind
        part.value = value
        part.style = style
        return part

    def node(self, name: str) -> Format:
        return format_node(self.kind, name, self.style)


def choice_node(
    kind: ChoiceType,
    forms: Mapping[str, object],
    *,
    name: str = CHOICE_VALUE_NAME,
    offset: int | float | str | None = None,
) -> Choice:
    """Choice node of a helper call; case text is read as a template.

    Example:
        >>> choice_node(ChoiceType.SELECT, {"other": "them"}).fields[1]
        ChoiceField(key='other', value=(Text(value='them'),), computed=False, location=None)
    """
    fields = [ChoiceField("value", VariableRef(name))]
    if offset is not None and kind.uses_plural_rules:
        fields.append(ChoiceField("offset", Literal(offset)))
    fields.extend(ChoiceField(key, text_content(str(form))) for key, form in forms.items())
    return Choice(kind, tuple(fields))


def format_node(kind: FormatType, name: str, style: Style = None) -> Format:
    """Format node of a helper call."""
    arguments: list[SourceValue] = [VariableRef(name)]
    match style:
        case None:
            pass
        case str():
            arguments.append(Literal(style))
        case Mapping():
            arguments.append(
                ObjectLiteral(tuple((str(key), _style_entry(item)) for key, item in style.items()))
            )
    return Format(kind, tuple(arguments))


def _style_entry(item: object) -> Literal | Expression:
    if isinstance(item, str | int | float) and not isinstance(item, bool):
        return Literal(item)
    return Expression(repr(item))
