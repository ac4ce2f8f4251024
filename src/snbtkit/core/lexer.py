"""
Lexer/Tokenizer for SNBT.

Converts raw SNBT text into a flat list of typed tokens. At every
position the token kinds are tried in a fixed priority order and the
first one that fully matches wins:

    1. ``,`` ``:``
    2. array start ``[B;`` ``[I;`` ``[L;`` (case-insensitive letter)
    3. ``[`` ``]`` ``{`` ``}``
    4. ``true`` / ``false``
    5. integer   ``-?int`` with optional ``b``/``s``/``l`` suffix
    6. decimal   ``-?int.digits`` or ``-?int`` followed by ``d``/``f``,
                 with optional ``d``/``f`` suffix
    7. identifier ``[A-Za-z0-9_+\\-.]+``
    8. quoted string ``"..."`` or ``'...'``

Numbers only match when the character after them cannot continue an
identifier, so ``123.5`` is not the integer ``123`` and ``12ab`` is a
bare word rather than a number followed by junk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum, auto

from .errors import LexError, SourceLocation, TokenizeError

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types in SNBT."""

    # Structure
    COMMA = auto()
    COLON = auto()
    ARRAY_START = auto()
    OPEN_BRACKET = auto()
    CLOSE_BRACKET = auto()
    OPEN_BRACE = auto()
    CLOSE_BRACE = auto()

    # Literals
    BOOLEAN = auto()
    INTEGER = auto()
    DECIMAL = auto()
    IDENTIFIER = auto()
    STRING_LITERAL = auto()


class ArrayType(StrEnum):
    """Element type announced by an array start token."""

    BYTE = "B"
    INT = "I"
    LONG = "L"


class IntegerWidth(StrEnum):
    """Declared width of an integer literal."""

    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"


class DecimalWidth(StrEnum):
    """Declared precision of a decimal literal."""

    FLOAT = "float"
    DOUBLE = "double"


@dataclass(frozen=True)
class Token:
    """
    A single SNBT token.

    Attributes:
        kind: Type of token
        value: Source text payload (digits, identifier, unescaped string)
        width: Array type or numeric width, where the kind has one
        start: Character offset where the token starts
        end: Character offset just past the token
    """

    kind: TokenKind
    value: str = ""
    width: ArrayType | IntegerWidth | DecimalWidth | None = None
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    def describe(self) -> str:
        """Short human readable form, used in error messages."""
        if self.kind in _PUNCTUATION_TEXT:
            return repr(_PUNCTUATION_TEXT[self.kind])
        if self.kind == TokenKind.ARRAY_START:
            return f"'[{self.width};'"
        if self.kind in (TokenKind.INTEGER, TokenKind.DECIMAL):
            return f"{self.width} {self.value}"
        if self.kind == TokenKind.BOOLEAN:
            return self.value
        return f"{self.kind} {self.value!r}"

    def __repr__(self) -> str:
        extra = f", {self.width}" if self.width is not None else ""
        return f"Token({self.kind}, {self.value!r}{extra}, {self.start}:{self.end})"


_PUNCTUATION_TEXT: dict[TokenKind, str] = {
    TokenKind.COMMA: ",",
    TokenKind.COLON: ":",
    TokenKind.OPEN_BRACKET: "[",
    TokenKind.CLOSE_BRACKET: "]",
    TokenKind.OPEN_BRACE: "{",
    TokenKind.CLOSE_BRACE: "}",
}

_SEPARATORS: dict[str, TokenKind] = {",": TokenKind.COMMA, ":": TokenKind.COLON}
_DELIMITERS: dict[str, TokenKind] = {
    "[": TokenKind.OPEN_BRACKET,
    "]": TokenKind.CLOSE_BRACKET,
    "{": TokenKind.OPEN_BRACE,
    "}": TokenKind.CLOSE_BRACE,
}


def _no_case(table: dict[str, object]) -> dict[str, object]:
    """Extend a lowercase letter table with the uppercase letters."""
    result = dict(table)
    result.update({letter.upper(): value for letter, value in table.items()})
    return result


_ARRAY_TYPES = _no_case({"b": ArrayType.BYTE, "i": ArrayType.INT, "l": ArrayType.LONG})
_INTEGER_SUFFIXES = _no_case(
    {"b": IntegerWidth.BYTE, "s": IntegerWidth.SHORT, "l": IntegerWidth.LONG}
)
_DECIMAL_SUFFIXES = _no_case({"d": DecimalWidth.DOUBLE, "f": DecimalWidth.FLOAT})

_DIGITS = frozenset("0123456789")
_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_IDENT_CHARS = _ASCII_LETTERS | _DIGITS | frozenset("_-+.")
_WORD_START = _ASCII_LETTERS | {"_"}
_WORD_CHARS = _WORD_START | _DIGITS
_NUMBER_STOPPERS = frozenset("_+-.")
_BOOLEANS = {"true", "false"}

_ESCAPES: dict[str, str] = {
    "\\": "\\",
    "/": "/",
    '"': '"',
    "'": "'",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class Lexer:
    """
    Lexer for SNBT.

    Every ``_lex_*`` method takes a start offset and returns a token (whose
    ``end`` is where scanning resumes) or None. They never move the lexer,
    so a failed alternative leaves nothing behind.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.tokens: list[Token] = []
        self.errors: list[LexError] = []

    # -- Character helpers --

    def _char(self, pos: int) -> str | None:
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def _run_end(self, pos: int, chars: frozenset[str]) -> int:
        """Offset just past the run of ``chars`` starting at ``pos``."""
        end = pos
        while end < len(self.text) and self.text[end] in chars:
            end += 1
        return end

    def _int_end(self, pos: int) -> int | None:
        """Decimal integer without leading zeros (``0`` on its own is fine)."""
        ch = self._char(pos)
        if ch == "0":
            return pos + 1
        if ch is None or ch not in _DIGITS:
            return None
        return self._run_end(pos, _DIGITS)

    def _suffix(self, pos: int, table: dict[str, object]) -> object | None:
        """
        One-letter keyword at ``pos``.

        The letter must make up the whole identifier run starting there, so
        ``5bx`` has no ``b`` suffix.
        """
        ch = self._char(pos)
        if ch is None or ch not in table:
            return None
        if self._run_end(pos, _IDENT_CHARS) != pos + 1:
            return None
        return table[ch]

    def _number_ends_at(self, pos: int) -> bool:
        ch = self._char(pos)
        return ch is None or not (ch.isalnum() or ch in _NUMBER_STOPPERS)

    # -- Token alternatives, in priority order --

    def _lex_separator(self, pos: int) -> Token | None:
        kind = _SEPARATORS.get(self.text[pos])
        if kind is None:
            return None
        return Token(kind, self.text[pos], start=pos, end=pos + 1)

    def _lex_array_start(self, pos: int) -> Token | None:
        if self.text[pos] != "[":
            return None
        array_type = self._suffix(pos + 1, _ARRAY_TYPES)
        if array_type is None or self._char(pos + 2) != ";":
            return None
        return Token(TokenKind.ARRAY_START, self.text[pos : pos + 3], array_type, pos, pos + 3)

    def _lex_delimiter(self, pos: int) -> Token | None:
        kind = _DELIMITERS.get(self.text[pos])
        if kind is None:
            return None
        return Token(kind, self.text[pos], start=pos, end=pos + 1)

    def _lex_boolean(self, pos: int) -> Token | None:
        if self.text[pos] not in _WORD_START:
            return None
        end = self._run_end(pos, _WORD_CHARS)
        word = self.text[pos:end]
        if word not in _BOOLEANS:
            return None
        return Token(TokenKind.BOOLEAN, word, start=pos, end=end)

    def _lex_integer(self, pos: int) -> Token | None:
        digits_start = pos + 1 if self.text[pos] == "-" else pos
        digits_end = self._int_end(digits_start)
        if digits_end is None:
            return None

        end = digits_end
        width = self._suffix(digits_end, _INTEGER_SUFFIXES)
        if width is None:
            width = IntegerWidth.INT
        else:
            end += 1

        if not self._number_ends_at(end):
            return None
        return Token(TokenKind.INTEGER, self.text[pos:digits_end], width, pos, end)

    def _lex_decimal(self, pos: int) -> Token | None:
        digits_start = pos + 1 if self.text[pos] == "-" else pos
        int_end = self._int_end(digits_start)
        if int_end is None:
            return None

        if self._char(int_end) == "." and self._char(int_end + 1) in _DIGITS:
            digits_end = self._run_end(int_end + 1, _DIGITS)
        elif self._suffix(int_end, _DECIMAL_SUFFIXES) is not None:
            digits_end = int_end
        else:
            return None

        end = digits_end
        width = self._suffix(digits_end, _DECIMAL_SUFFIXES)
        if width is None:
            width = DecimalWidth.DOUBLE
        else:
            end += 1

        if not self._number_ends_at(end):
            return None
        return Token(TokenKind.DECIMAL, self.text[pos:digits_end], width, pos, end)

    def _lex_identifier(self, pos: int) -> Token | None:
        end = self._run_end(pos, _IDENT_CHARS)
        if end == pos:
            return None
        return Token(TokenKind.IDENTIFIER, self.text[pos:end], start=pos, end=end)

    def _lex_string(self, pos: int) -> Token | None:
        quote = self.text[pos]
        if quote not in ('"', "'"):
            return None

        chars: list[str] = []
        i = pos + 1
        while i < len(self.text):
            ch = self.text[i]
            if ch == quote:
                return Token(TokenKind.STRING_LITERAL, "".join(chars), start=pos, end=i + 1)
            if ch == "\\":
                escaped = _ESCAPES.get(self._char(i + 1) or "")
                if escaped is None:
                    return None
                chars.append(escaped)
                i += 2
                continue
            chars.append(ch)
            i += 1
        return None

    def _string_end(self, pos: int) -> int:
        """Offset past the closing quote of the string at ``pos``, or end of input."""
        quote = self.text[pos]
        i = pos + 1
        while i < len(self.text):
            if self.text[i] == quote:
                return i + 1
            i += 2 if self.text[i] == "\\" else 1
        return len(self.text)

    def next_token(self, pos: int) -> Token | None:
        """Try every token kind at ``pos`` in priority order."""
        for alternative in (
            self._lex_separator,
            self._lex_array_start,
            self._lex_delimiter,
            self._lex_boolean,
            self._lex_integer,
            self._lex_decimal,
            self._lex_identifier,
            self._lex_string,
        ):
            token = alternative(pos)
            if token is not None:
                return token
        return None

    # -- Driver --

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _record_error(self, start: int, end: int) -> None:
        bad = self.text[start:end]
        if bad[0] in ('"', "'"):
            message = f"Unterminated string literal or invalid escape starting with {bad!r}"
        else:
            message = f"Unexpected character(s): {bad!r}"
        location = SourceLocation.from_offset(self.text, start)
        self.errors.append(LexError(position=start, message=message, location=location))

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Characters that start no token are grouped into one error per
        contiguous run, and a rejected quoted string is skipped up to its
        closing quote. Lexing resumes after each bad region, so every one
        is reported in one pass.

        Returns:
            List of tokens (at least one)

        Raises:
            TokenizeError: If any part of the input is not a valid token
        """
        bad_start: int | None = None

        while True:
            before = self.pos
            self.skip_whitespace()
            if bad_start is not None and self.pos != before:
                self._record_error(bad_start, before)
                bad_start = None
            if self.pos >= len(self.text):
                break

            token = self.next_token(self.pos)
            if token is None and self.text[self.pos] in ('"', "'"):
                # A rejected string is one bad region, up to its closing quote
                if bad_start is not None:
                    self._record_error(bad_start, self.pos)
                    bad_start = None
                end = self._string_end(self.pos)
                self._record_error(self.pos, end)
                self.pos = end
                continue
            if token is None:
                if bad_start is None:
                    bad_start = self.pos
                self.pos += 1
                continue

            if bad_start is not None:
                self._record_error(bad_start, self.pos)
                bad_start = None
            self.tokens.append(token)
            self.pos = token.end

        if bad_start is not None:
            self._record_error(bad_start, self.pos)

        if not self.tokens and not self.errors:
            location = SourceLocation.from_offset(self.text, len(self.text))
            self.errors.append(
                LexError(position=len(self.text), message="Expected a value", location=location)
            )

        if self.errors:
            logger.debug("Rejected SNBT input with %d lex error(s)", len(self.errors))
            raise TokenizeError(self.errors)

        logger.debug("Tokenized %d characters into %d tokens", len(self.text), len(self.tokens))
        return self.tokens


def tokenize(text: str) -> list[Token]:
    """
    Convenience function to tokenize SNBT text.

    Args:
        text: Source text

    Returns:
        List of tokens
    """
    lexer = Lexer(text)
    return lexer.tokenize()
