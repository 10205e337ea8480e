"""ICU message compiler.

Compiles an ICU pattern (or a parsed token tree) into a callable that renders
the message for a parameter mapping.

Architecture:
    - Pure-text messages compile to a constant (no interpretation at call time)
    - Everything else is evaluated by a context-threaded interpreter: each
      nested choice body is rendered with the octothorpe value of the
      nearest plural/selectordinal and joined before returning to its parent
    - Plural rule categories come from a PluralRuleTable (Babel by default)
    - date/number arguments are delegated to Formatters; without formatters
      the raw value is rendered. Custom styles can be passed per call and
      reach the formatters alongside the value

Error Handling:
    Rendering never raises for missing parameters (they render as ""). A
    FormattingError from a formatter is logged and its fallback_value is
    rendered instead.

Python 3.12+.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Protocol

from icuflow.constants import MAX_DEPTH
from icuflow.core.depth_guard import DepthGuard
from icuflow.diagnostics import FormattingError
from icuflow.enums import ChoiceType, FormatType

from .parser import parse
from .tokens import Argument, Choice, Format, Octothorpe, Text, Token

if TYPE_CHECKING:
    from icuflow.runtime.plural_rules import PluralRuleTable

__all__ = ["CompiledMessage", "FormatStyles", "Formatters", "compile_message", "format_value"]

logger = logging.getLogger(__name__)

type Params = Mapping[str, object]
type FormatStyles = Mapping[str, Mapping[str, object]]


class Formatters(Protocol):
    """Locale-aware formatting of date and number arguments.

    ``formats`` holds custom styles supplied with one render call; they take
    precedence over the styles the formatter was configured with.
    """

    def number(
        self,
        value: object,
        style: str | None,
        *,
        language: str,
        formats: FormatStyles | None = None,
    ) -> str:
        """Format a number argument with an optional style name."""
        ...

    def date(
        self,
        value: object,
        style: str | None,
        *,
        language: str,
        formats: FormatStyles | None = None,
    ) -> str:
        """Format a date argument with an optional style name."""
        ...


def format_value(value: object) -> str:
    """Render a parameter value as plain text.

    Example:
        >>> format_value(None)
        ''
        >>> format_value(True)
        'true'
        >>> format_value(3)
        '3'
    """
    match value:
        case None:
            return ""
        case bool():
            return "true" if value else "false"
        case str():
            return value
        case _:
            return str(value)


def _to_number(value: object) -> int | float | Decimal | None:
    match value:
        case bool():
            return None
        case int() | float() | Decimal():
            return value
        case str():
            try:
                return int(value)
            except ValueError:
                pass
            try:
                return Decimal(value)
            except InvalidOperation:
                return None
    return None


def _plain_number(n: int | float | Decimal) -> str:
    """Number without grouping or exponent: 1.0 -> '1', Decimal('1E+2') -> '100'."""
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    if isinstance(n, Decimal):
        return format(n.normalize(), "f") if n == n.to_integral_value() else format(n, "f")
    return str(n)


class _Evaluator:
    """Interpreter over a token tree for one language."""

    __slots__ = ("_formatters", "_language", "_max_depth", "_plural_rules")

    def __init__(
        self,
        language: str,
        plural_rules: "PluralRuleTable",
        formatters: Formatters | None,
        max_depth: int,
    ) -> None:
        self._language = language
        self._plural_rules = plural_rules
        self._formatters = formatters
        self._max_depth = max_depth

    def render(
        self, tokens: Sequence[Token], params: Params, formats: FormatStyles | None = None
    ) -> str:
        guard = DepthGuard(max_depth=self._max_depth)
        return self._render(tokens, _Call(params, formats), None, guard)

    def _render(
        self,
        tokens: Sequence[Token],
        call: "_Call",
        octothorpe: str | None,
        guard: DepthGuard,
    ) -> str:
        parts: list[str] = []
        for token in tokens:
            match token:
                case Text(value=value):
                    parts.append(value)
                case Argument(name=name):
                    parts.append(format_value(call.params.get(name)))
                case Octothorpe():
                    parts.append("#" if octothorpe is None else octothorpe)
                case Format():
                    parts.append(self._format(token, call))
                case Choice():
                    with guard:
                        parts.append(self._choice(token, call, octothorpe, guard))
        return "".join(parts)

    def _choice(
        self, choice: Choice, call: "_Call", octothorpe: str | None, guard: DepthGuard
    ) -> str:
        value = call.params.get(choice.name)

        if choice.type is ChoiceType.SELECT:
            case = choice.get(format_value(value)) or choice.other
            return self._render(case.tokens, call, octothorpe, guard)

        number = _to_number(value)
        if number is None:
            # Non-numeric value: only the fallback case applies
            return self._render(choice.other.tokens, call, format_value(value), guard)

        n = number - choice.offset
        exact = choice.get(f"={_plain_number(n)}")
        case = exact or choice.get(self.plural_category(n, choice.type)) or choice.other
        return self._render(case.tokens, call, _plain_number(n), guard)

    def plural_category(self, n: int | float | Decimal, kind: ChoiceType) -> str:
        return self._plural_rules.category(
            self._language, n, ordinal=kind is ChoiceType.SELECT_ORDINAL
        )

    def _format(self, token: Format, call: "_Call") -> str:
        value = call.params.get(token.name)
        if self._formatters is None or value is None:
            return format_value(value)

        language, formats = self._language, call.formats
        try:
            match token.type:
                case FormatType.NUMBER:
                    return self._formatters.number(
                        value, token.style, language=language, formats=formats
                    )
                case FormatType.DATE:
                    return self._formatters.date(
                        value, token.style, language=language, formats=formats
                    )
                case _:
                    logger.debug("No formatter for argument type '%s'", token.type)
                    return format_value(value)
        except FormattingError as e:
            logger.warning("%s", e)
            return e.fallback_value


@dataclass(frozen=True, slots=True)
class _Call:
    """Arguments of one render call."""

    params: Params
    formats: FormatStyles | None


class CompiledMessage:
    """Callable rendering one message: ``compiled(params, formats) -> str``

    Attributes:
        tokens: Parsed token tree
        language: Language the message was compiled for
        is_constant: True when the message has no arguments
    """

    __slots__ = ("_constant", "_evaluator", "language", "tokens")

    def __init__(
        self,
        tokens: tuple[Token, ...],
        language: str,
        evaluator: _Evaluator | None,
    ) -> None:
        self.tokens = tokens
        self.language = language
        self._evaluator = evaluator
        self._constant = ""
        if evaluator is None:
            self._constant = "".join(t.value for t in tokens if isinstance(t, Text)).strip()

    @property
    def is_constant(self) -> bool:
        return self._evaluator is None

    def __call__(self, params: Params | None = None, formats: FormatStyles | None = None) -> str:
        if self._evaluator is None:
            return self._constant
        return self._evaluator.render(self.tokens, params or {}, formats).strip()

    def __repr__(self) -> str:
        return f"CompiledMessage(language={self.language!r}, tokens={self.tokens!r})"


def compile_message(
    message: str | Sequence[Token],
    language: str,
    *,
    plural_rules: "PluralRuleTable | None" = None,
    formatters: Formatters | None = None,
    max_depth: int = MAX_DEPTH,
) -> CompiledMessage:
    """Compile an ICU message for one language.

    Args:
        message: ICU pattern or already parsed tokens
        language: Language whose plural rules apply
        plural_rules: Plural rule table (default: Babel CLDR rules)
        formatters: date/number formatters (default: render raw values)
        max_depth: Maximum nesting of choice arguments

    Returns:
        CompiledMessage callable

    Raises:
        PatternSyntaxError: If the pattern is malformed

    Example:
        >>> render = compile_message("{count, plural, one {# book} other {# books}}", "en")
        >>> render({"count": 1})
        '1 book'
        >>> render({"count": 3})
        '3 books'
    """
    tokens = parse(message, max_depth=max_depth) if isinstance(message, str) else tuple(message)

    if all(isinstance(token, Text) for token in tokens):
        return CompiledMessage(tokens, language, None)

    if plural_rules is None:
        from icuflow.runtime.plural_rules import BabelPluralRules  # noqa: PLC0415 - circular

        plural_rules = BabelPluralRules()

    evaluator = _Evaluator(language, plural_rules, formatters, max_depth)
    return CompiledMessage(tokens, language, evaluator)
