"""
Error types for SNBT tokenizing and parsing.

Two failure phases exist and never overlap: a lex failure aborts before
any grammar work starts, and a grammar failure is only possible after the
whole input tokenized cleanly. Callers can tell them apart by exception
type (``TokenizeError`` vs ``ParseFailure``) and read the structured
records from ``.errors``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lexer import Token


class SnbtError(Exception):
    """Base exception for all snbtkit errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConversionError(SnbtError):
    """
    Raised when literal text cannot become an exact-width number.

    Examples:
    - ``200b`` does not fit a signed byte
    - a 40-digit ``f`` literal overflows a 32-bit float
    - digit text that is not a decimal number at all
    """

    pass


@dataclass(frozen=True)
class SourceLocation:
    """
    A position in the source text.

    Attributes:
        offset: Character offset (0-indexed)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    offset: int
    line: int
    column: int

    @classmethod
    def from_offset(cls, text: str, offset: int) -> SourceLocation:
        """Compute line/column for a character offset into ``text``."""
        line = text.count("\n", 0, offset) + 1
        line_start = text.rfind("\n", 0, offset) + 1
        return cls(offset=offset, line=line, column=offset - line_start + 1)

    def format(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class LexError:
    """Unrecognized or malformed token text."""

    position: int
    message: str
    location: SourceLocation | None = None

    def format(self) -> str:
        """Format as ``line:column: message`` (offset when no location)."""
        where = self.location.format() if self.location else f"offset {self.position}"
        return f"{where}: {self.message}"


@dataclass(frozen=True)
class GrammarError:
    """
    A structural mismatch between the token stream and the grammar.

    Attributes:
        found: Offending token, or None at end of input
        expected: Labels of the tokens that would have been accepted
        position: Character offset of the offending token (or input length)
        message: Human readable summary, including conversion failures
    """

    found: Token | None
    expected: tuple[str, ...] = field(default_factory=tuple)
    position: int = 0
    message: str = ""

    def format(self) -> str:
        found = self.found.describe() if self.found is not None else "end of input"
        text = f"offset {self.position}: unexpected {found}"
        if self.expected:
            text += f", expected one of: {', '.join(self.expected)}"
        if self.message:
            text += f" ({self.message})"
        return text


class ParseError(SnbtError):
    """
    Raised when SNBT text cannot be turned into a tag tree.

    Always one of the two concrete phases below.
    """

    pass


class TokenizeError(ParseError):
    """Raised when the lexer finds invalid characters or malformed literals."""

    def __init__(self, errors: list[LexError]):
        self.errors = list(errors)
        super().__init__(_summarize("Found invalid token(s)", [e.format() for e in self.errors]))


class ParseFailure(ParseError):
    """Raised when a valid token stream does not form an SNBT value."""

    def __init__(self, errors: list[GrammarError]):
        self.errors = list(errors)
        super().__init__(_summarize("Failed to parse SNBT", [e.format() for e in self.errors]))


def _summarize(headline: str, details: list[str]) -> str:
    if not details:
        return headline
    return headline + ":\n" + "\n".join(f"  {d}" for d in details)
