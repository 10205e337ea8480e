"""ICU MessageFormat token tree.

Output of :func:`icuflow.icu.parser.parse` and input of the compiler and
serializer. All tokens are immutable.

Python 3.12+. Zero external dependencies.
"""

from dataclasses import dataclass

from icuflow.constants import OTHER_CASE
from icuflow.enums import ChoiceType

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "Text",
    "Argument",
    "Format",
    "ChoiceCase",
    "Choice",
    "Octothorpe",
    "Token",
]


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text (quotes already resolved)."""

    value: str


@dataclass(frozen=True, slots=True)
class Argument:
    """Simple argument: ``{name}``"""

    name: str


@dataclass(frozen=True, slots=True)
class Format:
    """Formatted argument: ``{name,type[,style]}``

    Attributes:
        name: Argument name
        type: Format type keyword (``number``, ``date``, ...)
        style: Style name, or None when omitted
    """

    name: str
    type: str
    style: str | None = None


@dataclass(frozen=True, slots=True)
class ChoiceCase:
    """One ``label {tokens}`` case of a choice argument."""

    label: str
    tokens: "tuple[Token, ...]"


@dataclass(frozen=True, slots=True)
class Choice:
    """Choice argument: ``{name, plural|selectordinal|select, [offset:N] cases}``

    Cases keep the order they were written in. The ``other`` case is always
    present.
    """

    name: str
    type: ChoiceType
    cases: tuple[ChoiceCase, ...]
    offset: int = 0

    def __post_init__(self) -> None:
        if self.get(OTHER_CASE) is None:
            msg = f"Choice argument '{self.name}' requires an 'other' case"
            raise ValueError(msg)

    def get(self, label: str) -> ChoiceCase | None:
        """Case with the given label, or None."""
        for case in self.cases:
            if case.label == label:
                return case
        return None

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(case.label for case in self.cases)

    @property
    def other(self) -> ChoiceCase:
        """The fallback case."""
        return next(case for case in self.cases if case.label == OTHER_CASE)


@dataclass(frozen=True, slots=True)
class Octothorpe:
    """``#`` inside a plural/selectordinal case body."""


type Token = Text | Argument | Format | Choice | Octothorpe
