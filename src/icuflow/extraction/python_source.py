"""Python source adapter: ``ast`` call sites to source messages.

Recognized call shapes (receiver names are configurable, default ``i18n``)::

    i18n.t("Hello {name}", name=user.name)
    i18n.t("Hello {user.name}", id="greeting", user=user)
    i18n.t("You have {count}", count=i18n.plural(n, one="# letter", other="# letters"))
    i18n.t("Due {when}", when=i18n.date(due, "short"))
    i18n.t("Total {price}", price=i18n.number(total, {"minimum_fraction_digits": 2}))
    i18n.plural(count, offset=1, _0="Nobody", one="# book", other="# books")
    i18n.select(gender, male="he", female="she", other="they")
    i18n.select_ordinal(place, one="#st", two="#nd", few="#rd", other="#th")

The message of ``t()`` is a template: ``{identifier}`` refers to the keyword
argument of that name and any other ``{expression}`` is resolved against the
keyword arguments. A keyword argument whose value is a choice or format call
replaces the reference to it with that choice or format, named after the
keyword. Choice calls not passed to ``t()`` are messages of their own; their
value is named ``value``. ``date()``/``number()`` calls on their own carry no
translatable text and are not extracted.

Message text must be written literally. The template of ``t()`` and every
case of a choice call are string literals: an f-string is filled in before
the runtime sees it and can never match a catalog entry. Such messages are
recorded as NonLiteralMessageError in ``errors`` and skipped. A ``t()`` call
whose message is a plain variable looks up an id computed at runtime and is
skipped silently.

Keyword arguments unpacked from a dict literal (``**{"_0": "none"}``)
contribute their keys as fields; any other unpacking is a computed label.

Python 3.12+. Zero external dependencies.
"""

import ast
import logging
from collections.abc import Sequence

from icuflow.constants import CHOICE_VALUE_NAME, DEFAULT_RECEIVERS
from icuflow.diagnostics import (
    ErrorTemplate,
    ExtractionError,
    NonLiteralMessageError,
    SourceLocation,
)
from icuflow.enums import ChoiceType, FormatType

from .nodes import (
    Choice,
    ChoiceField,
    Content,
    Expression,
    Format,
    Literal,
    Node,
    ObjectLiteral,
    SourceMessage,
    SourceValue,
    VariableRef,
)
from .template import substitute, text_content

__all__ = ["PythonSourceAdapter", "parse_python"]

logger = logging.getLogger(__name__)

_TRANSLATE = "t"

_CHOICE_CALLS: dict[str, ChoiceType] = {
    "plural": ChoiceType.PLURAL,
    "select": ChoiceType.SELECT,
    "select_ordinal": ChoiceType.SELECT_ORDINAL,
}

_FORMAT_CALLS: dict[str, FormatType] = {
    "date": FormatType.DATE,
    "number": FormatType.NUMBER,
}

# Keyword arguments of t() that are not message parameters
_TRANSLATE_OPTIONS = frozenset({"id", "formats"})


def _receiver_name(node: ast.expr) -> str | None:
    """Name the call receiver is bound to: ``i18n`` and ``self.i18n`` both give i18n."""
    match node:
        case ast.Name(id=name):
            return name
        case ast.Attribute(attr=name):
            return name
    return None


class PythonSourceAdapter(ast.NodeVisitor):
    """Collects source messages from a Python module tree.

    Args:
        filename: Path recorded in message locations
        receivers: Names of the runtime instance at call sites

    Attributes:
        messages: Top-level messages in source order
        errors: Call sites rejected because their text is not literal

    Example:
        >>> adapter = PythonSourceAdapter("app.py")
        >>> adapter.visit(ast.parse('i18n.t("Hello")'))
        >>> adapter.messages[0].content
        (Text(value='Hello'),)
    """

    def __init__(self, filename: str, receivers: Sequence[str] = DEFAULT_RECEIVERS) -> None:
        self.filename = filename
        self.receivers = frozenset(receivers)
        self.messages: list[SourceMessage] = []
        self.errors: list[ExtractionError] = []

    # ------------------------------------------------------------------
    # Visitor
    # ------------------------------------------------------------------

    def visit_Call(self, node: ast.Call) -> None:  # noqa: N802 - ast.NodeVisitor API
        method = self._method(node)

        try:
            if method == _TRANSLATE:
                message = self._translate_call(node)
                if message is not None:
                    self.messages.append(message)
                    return
            elif method in _CHOICE_CALLS:
                choice = self._choice(node, method, CHOICE_VALUE_NAME)
                self.messages.append(SourceMessage((choice,), self._location(node)))
                return
        except NonLiteralMessageError as e:
            logger.warning("%s", e)
            self.errors.append(e)
            return

        self.generic_visit(node)

    def _method(self, node: ast.Call) -> str | None:
        func = node.func
        if not isinstance(func, ast.Attribute):
            return None
        if _receiver_name(func.value) not in self.receivers:
            return None
        return func.attr

    def _location(self, node: ast.AST) -> SourceLocation:
        return SourceLocation(self.filename, node.lineno, node.col_offset + 1)  # type: ignore[attr-defined]

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def _translate_call(self, node: ast.Call) -> SourceMessage | None:
        if not node.args:
            logger.debug("%s: t() without a message", self._location(node))
            return None

        match node.args[0]:
            case ast.Constant(value=str() as template):
                pass
            case ast.JoinedStr() as fstring:
                raise NonLiteralMessageError(
                    ErrorTemplate.non_literal_message("t()", self._location(fstring))
                )
            case _:
                logger.debug("%s: t() message is not a string literal", self._location(node))
                return None

        explicit_id = None
        parts: dict[str, Node] = {}
        for keyword in node.keywords:
            match keyword:
                case ast.keyword(arg="id", value=ast.Constant(value=str() as value)):
                    explicit_id = value
                case ast.keyword(arg="id"):
                    logger.debug("%s: ignoring non-literal id", self._location(keyword.value))
                case ast.keyword(arg=str() as name, value=ast.Call() as call) if (
                    name not in _TRANSLATE_OPTIONS
                ):
                    part = self._part(call, name)
                    if part is not None:
                        parts[name] = part

        content = substitute(text_content(template), parts)
        return SourceMessage(content, self._location(node), explicit_id=explicit_id)

    def _part(self, node: ast.Call, name: str) -> Node | None:
        """Choice or format passed to t() under the keyword ``name``."""
        method = self._method(node)
        if method in _CHOICE_CALLS:
            return self._choice(node, method, name)
        if method in _FORMAT_CALLS:
            return self._format(node, method, name)
        return None

    # ------------------------------------------------------------------
    # Choice and format calls
    # ------------------------------------------------------------------

    def _choice(self, node: ast.Call, method: str, name: str) -> Choice:
        kind = _CHOICE_CALLS[method]
        fields: list[ChoiceField] = []

        # The value argument is bound to the name the runtime passes it under
        if node.args:
            fields.append(
                ChoiceField("value", VariableRef(name), location=self._location(node.args[0]))
            )

        for keyword in node.keywords:
            if keyword.arg == "value":
                fields.append(
                    ChoiceField("value", VariableRef(name), location=self._location(keyword.value))
                )
            elif keyword.arg is not None:
                fields.append(self._field(kind, keyword.arg, keyword.value))
            elif isinstance(keyword.value, ast.Dict):
                fields.extend(self._unpacked_fields(kind, keyword.value))
            else:
                fields.append(self._computed_field(keyword.value))

        return Choice(kind=kind, fields=tuple(fields), location=self._location(node))

    def _unpacked_fields(self, kind: ChoiceType, node: ast.Dict) -> list[ChoiceField]:
        fields: list[ChoiceField] = []
        for key, value in zip(node.keys, node.values, strict=True):
            match key:
                case ast.Constant(value=str() as literal):
                    fields.append(self._field(kind, literal, value))
                case _:
                    # Nested ** unpacking (key None), a key computed at runtime,
                    # or a non-string key Python rejects as a keyword
                    fields.append(self._computed_field(value))
        return fields

    def _computed_field(self, node: ast.expr) -> ChoiceField:
        return ChoiceField(None, self._value(node), computed=True, location=self._location(node))

    def _field(self, kind: ChoiceType, key: str, node: ast.expr) -> ChoiceField:
        location = self._location(node)
        if key == "offset" and kind.uses_plural_rules:
            return ChoiceField(key, self._value(node), location=location)
        return ChoiceField(key, self._case(kind, node), location=location)

    def _case(self, kind: ChoiceType, node: ast.expr) -> Content:
        match node:
            case ast.Constant(value=str() as value):
                return text_content(value)
        raise NonLiteralMessageError(
            ErrorTemplate.non_literal_message(str(kind), self._location(node))
        )

    def _format(self, node: ast.Call, method: str, name: str) -> Format:
        has_value = bool(node.args) or any(keyword.arg == "value" for keyword in node.keywords)
        arguments: list[SourceValue] = [VariableRef(name)] if has_value else []
        styles = [*node.args[1:2], *(k.value for k in node.keywords if k.arg == "style")]
        arguments.extend(self._style(style) for style in styles)
        return Format(_FORMAT_CALLS[method], tuple(arguments), self._location(node))

    def _style(self, node: ast.expr) -> SourceValue:
        value = self._value(node)
        if isinstance(value, VariableRef):
            # Variables hold their style only at runtime
            return Expression(ast.unparse(node))
        return value

    def _value(self, node: ast.expr) -> SourceValue:
        match node:
            case ast.Name(id=name):
                return VariableRef(name)
            case ast.Constant(value=str() | int() | float() as value) if not isinstance(value, bool):
                return Literal(value)
            case ast.UnaryOp(op=ast.USub(), operand=ast.Constant(value=int() | float() as value)):
                return Literal(-value)
            case ast.Dict(keys=keys, values=values) if all(
                isinstance(key, ast.Constant) and isinstance(key.value, str) for key in keys
            ):
                return ObjectLiteral(
                    tuple(
                        (key.value, self._style_value(item))  # type: ignore[union-attr]
                        for key, item in zip(keys, values, strict=True)
                    )
                )
        return Expression(ast.unparse(node))

    def _style_value(self, node: ast.expr) -> Literal | Expression:
        value = self._value(node)
        return value if isinstance(value, Literal) else Expression(ast.unparse(node))


def parse_python(
    source: str,
    filename: str,
    *,
    receivers: Sequence[str] = DEFAULT_RECEIVERS,
) -> list[SourceMessage]:
    """Find the messages of one Python module.

    Call sites with non-literal message text are logged and left out; use
    PythonSourceAdapter directly to collect them as errors.

    Args:
        source: Module source text
        filename: Path recorded in message locations
        receivers: Names of the runtime instance at call sites

    Returns:
        Top-level messages in source order

    Raises:
        SyntaxError: If the source is not valid Python
    """
    tree = ast.parse(source, filename=filename)
    adapter = PythonSourceAdapter(filename, receivers)
    adapter.visit(tree)
    logger.debug("Found %d messages in %s", len(adapter.messages), filename)
    return adapter.messages
