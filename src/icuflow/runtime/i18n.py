"""I18n - runtime API for translating and formatting messages.

Holds the active language and the resolved translation catalogs
(``{locale: {message_id: translation}}``), and renders messages through the
ICU compiler.

There is no global instance: construct one at process start and pass it by
reference. ``use()`` derives views that share catalogs, caches and
formatters but own their language.

The helpers ``t/plural/select/select_ordinal/date/number`` are the call
shapes the Python source extractor reads. At runtime they rebuild the same
source nodes from their arguments and run them through the same
PatternExtractor, so a call looks up exactly the id extracted for it.

Python 3.12+. External dependency: Babel (CLDR locale data).
"""

import logging
from collections.abc import Mapping
from decimal import Decimal
from functools import lru_cache
from types import MappingProxyType

from icuflow.constants import CHOICE_VALUE_NAME, DEFAULT_COMPILE_CACHE_SIZE
from icuflow.diagnostics import FormattingError, PatternSyntaxError, SourceLocation
from icuflow.enums import ChoiceType, FormatType, PluralRuleType
from icuflow.extraction.extractor import PatternExtractor
from icuflow.extraction.nodes import Content, Expression, SourceMessage, SourceValue, VariableRef
from icuflow.extraction.template import substitute, text_content
from icuflow.icu.compiler import CompiledMessage, Formatters, FormatStyles, compile_message
from icuflow.icu.tokens import Text

from .cache import CompileCache
from .locale_context import BabelFormatters
from .parts import ChoicePart, FormatPart, MessagePart, Style, choice_node
from .plural_rules import BabelPluralRules, PluralRuleTable

__all__ = ["I18n"]

logger = logging.getLogger(__name__)

type Catalogs = Mapping[str, Mapping[str, str] | None]
type Number = int | float | Decimal

# Log truncation for message text in warnings
_LOG_TRUNCATE: int = 100

# Location of messages built from helper call arguments
_CALL_SITE = SourceLocation("<call>", 1)

# Style name of an option mapping passed to date()/number() directly
_INLINE_STYLE = "inline"

_EXTRACTOR = PatternExtractor()


class I18n:
    """Translation runtime for one active language.

    Args:
        language: Initially active language ("" for none)
        catalogs: Initial catalogs, merged with load()
        plural_rules: Plural rule table (default: Babel CLDR rules)
        formatters: date/number formatters (default: BabelFormatters)
        format_styles: Custom styles for the default formatters
        cache_size: Maximum cached compiled messages

    Example:
        >>> i18n = I18n("cs", {"cs": {"Hello {name}": "Ahoj {name}"}})
        >>> i18n.translate("Hello {name}", params={"name": "Jana"})
        'Ahoj Jana'
        >>> i18n.use("en").translate("Hello {name}", params={"name": "Jana"})
        'Hello Jana'
    """

    __slots__ = ("_cache", "_catalogs", "_formatters", "_language", "_plural_rules")

    def __init__(
        self,
        language: str = "",
        catalogs: Catalogs | None = None,
        *,
        plural_rules: PluralRuleTable | None = None,
        formatters: Formatters | None = None,
        format_styles: Mapping[str, Mapping[str, object]] | None = None,
        cache_size: int = DEFAULT_COMPILE_CACHE_SIZE,
    ) -> None:
        self._catalogs: dict[str, dict[str, str]] = {}
        self._language = ""
        self._plural_rules: PluralRuleTable = plural_rules or BabelPluralRules()
        self._formatters: Formatters = formatters or BabelFormatters(format_styles)
        self._cache = CompileCache(cache_size)

        self.load(catalogs)
        self.activate(language)

    def __repr__(self) -> str:
        return f"I18n(language={self._language!r}, locales={sorted(self._catalogs)!r})"

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def language(self) -> str:
        """Active language ("" when none was activated)."""
        return self._language

    @property
    def languages(self) -> tuple[str, ...]:
        """Locales with loaded catalogs."""
        return tuple(self._catalogs)

    @property
    def messages(self) -> Mapping[str, str]:
        """Read-only view of the active language's translations."""
        return MappingProxyType(self._catalogs.get(self._language, {}))

    def load(self, catalogs: Catalogs | None) -> None:
        """Merge catalogs into the loaded ones.

        Additive: per locale, new ids are added and existing ids updated;
        nothing is removed and the per-locale dicts are updated in place, so
        views created by use() see the new translations.

        Args:
            catalogs: ``{locale: {id: translation}}``; None is a no-op
        """
        if catalogs is None:
            return

        for locale, messages in catalogs.items():
            target = self._catalogs.setdefault(locale, {})
            if messages:
                target.update(messages)
            logger.debug("Loaded %d messages for %s", len(messages or {}), locale)

    def activate(self, language: str) -> None:
        """Switch the active language; an empty language is ignored."""
        if not language:
            return
        if language not in self._catalogs:
            logger.debug("Activating %s without a loaded catalog", language)
        self._language = language

    def use(self, language: str) -> "I18n":
        """New view with its own active language and shared catalogs.

        The original instance is not modified.
        """
        view = object.__new__(I18n)
        view._catalogs = self._catalogs
        view._plural_rules = self._plural_rules
        view._formatters = self._formatters
        view._cache = self._cache
        view._language = self._language
        view.activate(language)
        return view

    # ------------------------------------------------------------------
    # Translation
    # ------------------------------------------------------------------

    def translate(
        self,
        id: str,  # noqa: A002 - message id is the established name
        defaults: str | None = None,
        params: Mapping[str, object] | None = None,
        formats: FormatStyles | None = None,
    ) -> str:
        """Translate a message into the active language.

        Resolution order: catalog translation, then defaults, then the id
        itself. Never raises for missing entries or parameters.

        Args:
            id: Message identifier
            defaults: Source-language pattern for custom identifiers
            params: Values for the message arguments
            formats: Custom number/date styles by name, e.g. the inline
                ``number0`` styles of an extracted message. They take
                precedence over the configured ``format_styles``

        Returns:
            Rendered message
        """
        fallback = defaults if defaults is not None else id
        translation = self._catalogs.get(self._language, {}).get(id) or fallback
        return self.compile(translation)(params, formats)

    def compile(self, message: str) -> CompiledMessage:
        """Compile a message for the active language (cached).

        A message that is not a valid ICU pattern is logged and compiled
        to its verbatim text. The result is called with the parameters and,
        optionally, per-call custom styles: ``compiled(params, formats)``.
        """
        compiled = self._cache.get(self._language, message)
        if compiled is not None:
            return compiled

        try:
            compiled = compile_message(
                message,
                self._language,
                plural_rules=self._plural_rules,
                formatters=self._formatters,
            )
        except PatternSyntaxError as e:
            logger.warning(
                "Cannot parse message %r: %s", message[:_LOG_TRUNCATE], e
            )
            compiled = CompiledMessage((Text(message),), self._language, None)

        self._cache.put(self._language, message, compiled)
        return compiled

    def plural_form(self, n: Number, kind: PluralRuleType | str = PluralRuleType.CARDINAL) -> str:
        """CLDR plural category of n in the active language.

        Falls back to "other" when the language has no rules.
        """
        ordinal = PluralRuleType(kind) is PluralRuleType.ORDINAL
        return self._plural_rules.category(self._language, n, ordinal=ordinal)

    def clear_cache(self) -> None:
        """Drop compiled messages (shared with derived views)."""
        self._cache.clear()

    def get_cache_stats(self) -> dict[str, int | float]:
        return self._cache.get_stats()

    # ------------------------------------------------------------------
    # Message helpers (the call shapes the Python source extractor reads)
    # ------------------------------------------------------------------

    def t(
        self,
        message: str,
        /,
        *,
        id: str | None = None,  # noqa: A002 - message id is the established name
        formats: FormatStyles | None = None,
        **params: object,
    ) -> str:
        """Translate a message template.

        ``{name}`` in the template refers to the keyword argument ``name``;
        any other ``{expression}`` (``{user.name}``) is looked up on the
        keyword arguments. A keyword argument holding a plural, select or
        format result is rendered as that choice or format inside the
        message, so translators see and translate it whole.

        The catalog id is the ICU pattern of the template, the same id the
        source extractor records for this call.

        Args:
            message: Template, written as a string literal at the call site
            id: Explicit catalog id; the template is then its default text
            formats: Custom number/date styles for this call, by style name
            **params: Message arguments

        Returns:
            Rendered message

        Raises:
            ExtractionError: If a choice argument is invalid (no ``other``
                case, unknown plural label)

        Example:
            >>> i18n = I18n("en")
            >>> i18n.t("Hello {name}", name="World")
            'Hello World'
            >>> i18n.t("{n} left", n=i18n.plural(1, one="one", other="#"))
            'one left'
        """
        parts = {
            name: value.node(name)
            for name, value in params.items()
            if isinstance(value, MessagePart)
        }
        content = substitute(_template(message), parts)
        return self._render(content, id, params, formats)

    def plural(
        self,
        value: object = None,
        /,
        *,
        offset: int | float | str | None = None,
        **forms: str,
    ) -> ChoicePart:
        """Pick a cardinal plural form in the active language.

        Forms are keyed by CLDR category or by exact value (``_0``) and need
        an ``other`` form. ``#`` is replaced with ``value - offset``. The
        forms are translated as the message ``{value, plural, ...}``.

        Example:
            >>> I18n("en").plural(3, one="# book", other="# books")
            '3 books'
        """
        return self._choice(ChoiceType.PLURAL, value, forms, offset)

    def select_ordinal(
        self,
        value: object = None,
        /,
        *,
        offset: int | float | str | None = None,
        **forms: str,
    ) -> ChoicePart:
        """Pick an ordinal plural form in the active language.

        Example:
            >>> I18n("en").select_ordinal(2, one="#st", two="#nd", few="#rd", other="#th")
            '2nd'
        """
        return self._choice(ChoiceType.SELECT_ORDINAL, value, forms, offset)

    def select(self, value: object = None, /, **forms: str) -> ChoicePart:
        """Pick the form matching value exactly, else other.

        Example:
            >>> I18n("en").select("female", female="she", male="he", other="they")
            'she'
        """
        return self._choice(ChoiceType.SELECT, value, forms)

    def date(self, value: object, style: Style = None) -> FormatPart:
        """Format a date in the active language."""
        return FormatPart(
            self._format(FormatType.DATE, value, style), FormatType.DATE, value, style
        )

    def number(self, value: object, style: Style = None) -> FormatPart:
        """Format a number in the active language.

        Example:
            >>> I18n("en").number(3, {"minimum_fraction_digits": 2})
            '3.00'
        """
        return FormatPart(
            self._format(FormatType.NUMBER, value, style), FormatType.NUMBER, value, style
        )

    # ------------------------------------------------------------------
    # Helper internals
    # ------------------------------------------------------------------

    def _render(
        self,
        content: Content,
        explicit_id: str | None,
        params: Mapping[str, object],
        formats: FormatStyles | None,
    ) -> str:
        """Extract a message from call arguments, then translate it."""
        extracted = _EXTRACTOR.extract(SourceMessage(content, _CALL_SITE, explicit_id))
        if extracted is None:
            return ""

        descriptor = extracted.descriptor
        values = {name: _resolve(ref, params) for name, ref in descriptor.placeholders.items()}
        styles = dict(formats or {})
        for name, spec in descriptor.custom_formats.items():
            part = params.get(spec.variable)
            if isinstance(part, FormatPart) and isinstance(part.style, Mapping):
                styles[name] = part.style

        return self.translate(extracted.id, extracted.defaults, values, styles)

    def _choice(
        self,
        kind: ChoiceType,
        value: object,
        forms: dict[str, str],
        offset: int | float | str | None = None,
    ) -> ChoicePart:
        if "value" in forms:
            value = forms.pop("value")
        node = choice_node(kind, forms, offset=offset)
        text = self._render((node,), None, {CHOICE_VALUE_NAME: value}, None)
        return ChoicePart(text, kind, value, forms, offset)

    def _format(self, kind: FormatType, value: object, style: Style) -> str:
        formats: FormatStyles | None = None
        if isinstance(style, Mapping):
            style, formats = _INLINE_STYLE, {_INLINE_STYLE: style}
        try:
            if kind is FormatType.DATE:
                return self._formatters.date(
                    value, style, language=self._language, formats=formats
                )
            return self._formatters.number(
                value, style, language=self._language, formats=formats
            )
        except FormattingError as e:
            logger.warning("%s", e)
            return e.fallback_value


@lru_cache(maxsize=DEFAULT_COMPILE_CACHE_SIZE)
def _template(message: str) -> Content:
    return text_content(message)


def _resolve(ref: SourceValue, params: Mapping[str, object]) -> object:
    """Value of a message argument: a keyword argument or a dotted path into one."""
    match ref:
        case VariableRef(name=name):
            value = params.get(name)
        case Expression(source=source):
            value = _lookup(source, params)
        case _:
            value = None
    return value.value if isinstance(value, MessagePart) else value


def _lookup(path: str, params: Mapping[str, object]) -> object:
    head, *attributes = (segment.strip() for segment in path.split("."))
    if not all(segment.isidentifier() for segment in (head, *attributes)):
        logger.debug("Cannot resolve %r from keyword arguments", path)
        return None

    value = params.get(head)
    for attribute in attributes:
        if isinstance(value, Mapping):
            value = value.get(attribute)
        else:
            value = getattr(value, attribute, None)
    return value
