"""Immutable cursor for ICU pattern parsing.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor (prevents infinite loops)
    - Line:column computed on-demand (only for errors)

Python 3.12+. Zero external dependencies.
"""

from dataclasses import dataclass

from icuflow.diagnostics import ErrorTemplate

__all__ = ["Cursor", "ParseResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("{n}", 0)
        >>> cursor.current
        '{'
        >>> cursor.advance().current
        'n'
        >>> cursor.current  # Original unchanged
        '{'
        >>> Cursor("hi", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """True if position >= source length."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Current character.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            diagnostic = ErrorTemplate.unexpected_eof(self.pos)
            raise EOFError(diagnostic.message)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Character at position + offset, or None beyond EOF."""
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions (clamped at EOF)."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_to(self, end_pos: int) -> str:
        """Source slice from current position to end_pos (exclusive)."""
        return self.source[self.pos : end_pos]

    def skip_whitespace(self) -> "Cursor":
        """Skip any Unicode whitespace (ICU Pattern_White_Space superset).

        Example:
            >>> Cursor("  \\n one", 0).skip_whitespace().pos
            4
        """
        c = self
        while not c.is_eof and c.current.isspace():
            c = c.advance()
        return c

    def expect(self, char: str) -> "Cursor | None":
        """Consume char if it is current, return None otherwise."""
        if not self.is_eof and self.current == char:
            return self.advance()
        return None

    def compute_line_col(self) -> tuple[int, int]:
        """Line and column for current position (1-indexed).

        Example:
            >>> Cursor("ab\\ncd", 4).compute_line_col()
            (2, 2)
        """
        line = self.source.count("\n", 0, self.pos) + 1
        last_newline = self.source.rfind("\n", 0, self.pos)
        col = self.pos - last_newline if last_newline >= 0 else self.pos + 1
        return (line, col)


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parsed value together with the cursor after it.

    Example:
        >>> cursor = Cursor("ab", 0)
        >>> result = ParseResult("a", cursor.advance())
        >>> result.value, result.cursor.pos
        ('a', 1)
    """

    value: T
    cursor: Cursor
