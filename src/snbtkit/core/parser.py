"""
Recursive descent parser for SNBT.

Grammar (alternatives are tried in the order written, first match wins):
    value       → compound | list | byte | short | int | long | float
                | double | byte_array | int_array | long_array | string
    compound    → "{" (member ("," member)* ","?)? "}"
    member      → string ":" value
    list        → "[" (elem ("," elem)* ","?)? "]"      for elem in, in order:
                  byte, short, int, long, float, double, byte_array,
                  string, list, compound, int_array, long_array
    byte_array  → "[B;" (byte ("," byte)*)? "]"
    int_array   → "[I;" (int ("," int)*)? "]"
    long_array  → "[L;" (long ("," long)*)? "]"
    byte        → INTEGER(byte) | BOOLEAN
    short       → INTEGER(short)
    int         → INTEGER(int)
    long        → INTEGER(long)
    float       → DECIMAL(float)
    double      → DECIMAL(double)
    string      → STRING_LITERAL | IDENTIFIER

A list's kind is NOT the kind of its first element. Each element kind is
tried against the whole bracketed group, and the first kind that accepts
every element wins. So ``[true, 1b]`` is a byte list, ``[1, 2b]`` is an
error, and ``[]`` is an empty byte list.

Every production either succeeds or leaves ``pos`` exactly where it
found it. On final failure the error is reported at the furthest token
any alternative reached, with everything that would have been accepted
there.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .environment import ParserSettings, get_parser_settings
from .errors import ConversionError, GrammarError, ParseError, ParseFailure
from .ir import (
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    FloatTag,
    IntArrayTag,
    IntTag,
    ListTag,
    LongArrayTag,
    LongTag,
    ShortTag,
    StringTag,
    Tag,
    TagKind,
)
from .lexer import ArrayType, DecimalWidth, IntegerWidth, Token, TokenKind, tokenize
from .numbers import convert

logger = logging.getLogger(__name__)

VALUE_PRIORITY: tuple[TagKind, ...] = (
    TagKind.COMPOUND,
    TagKind.LIST,
    TagKind.BYTE,
    TagKind.SHORT,
    TagKind.INT,
    TagKind.LONG,
    TagKind.FLOAT,
    TagKind.DOUBLE,
    TagKind.BYTE_ARRAY,
    TagKind.INT_ARRAY,
    TagKind.LONG_ARRAY,
    TagKind.STRING,
)

LIST_PRIORITY: tuple[TagKind, ...] = (
    TagKind.BYTE,
    TagKind.SHORT,
    TagKind.INT,
    TagKind.LONG,
    TagKind.FLOAT,
    TagKind.DOUBLE,
    TagKind.BYTE_ARRAY,
    TagKind.STRING,
    TagKind.LIST,
    TagKind.COMPOUND,
    TagKind.INT_ARRAY,
    TagKind.LONG_ARRAY,
)

_LABELS: dict[TokenKind, str] = {
    TokenKind.COMMA: "','",
    TokenKind.COLON: "':'",
    TokenKind.OPEN_BRACKET: "'['",
    TokenKind.CLOSE_BRACKET: "']'",
    TokenKind.OPEN_BRACE: "'{'",
    TokenKind.CLOSE_BRACE: "'}'",
    TokenKind.BOOLEAN: "boolean",
}

END_OF_INPUT = "end of input"


class _NestingTooDeep(Exception):
    """Aborts the whole parse; never caught by an alternative."""

    def __init__(self, index: int) -> None:
        super().__init__(index)
        self.index = index


class _Parser:
    """Backtracking recursive descent parser over a token list."""

    def __init__(self, tokens: list[Token], max_depth: int, source_length: int | None = None):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth
        self.source_length = source_length

        # Furthest failure seen so far
        self.furthest = -1
        self.expected: set[str] = set()
        self.message = ""

        self.productions: dict[TagKind, Callable[[], Tag | None]] = {
            TagKind.BYTE: self.parse_byte_tag,
            TagKind.SHORT: self.parse_short_tag,
            TagKind.INT: self.parse_int_tag,
            TagKind.LONG: self.parse_long_tag,
            TagKind.FLOAT: self.parse_float_tag,
            TagKind.DOUBLE: self.parse_double_tag,
            TagKind.BYTE_ARRAY: self.parse_byte_array,
            TagKind.STRING: self.parse_string_tag,
            TagKind.LIST: self.parse_list,
            TagKind.COMPOUND: self.parse_compound,
            TagKind.INT_ARRAY: self.parse_int_array,
            TagKind.LONG_ARRAY: self.parse_long_array,
        }

    @property
    def current(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def note_failure(self, label: str, message: str = "") -> None:
        """Remember what would have been accepted at the current token."""
        if self.pos > self.furthest:
            self.furthest = self.pos
            self.expected = set()
            self.message = ""
        if self.pos == self.furthest:
            self.expected.add(label)
            if message and not self.message:
                self.message = message

    def match(self, kind: TokenKind, width: object = None, label: str | None = None) -> Token | None:
        tok = self.current
        if tok is not None and tok.kind == kind and (width is None or tok.width == width):
            self.pos += 1
            return tok
        self.note_failure(label or _LABELS[kind])
        return None

    # -- Leaves --

    def parse_number(self, width: IntegerWidth | DecimalWidth) -> int | float | None:
        kind = TokenKind.INTEGER if isinstance(width, IntegerWidth) else TokenKind.DECIMAL
        tok = self.current
        if tok is None or tok.kind != kind or tok.width != width:
            self.note_failure(str(width))
            return None
        try:
            value = convert(tok.value, width)
        except ConversionError as e:
            self.note_failure(str(width), e.message)
            return None
        self.pos += 1
        return value

    def parse_byte(self) -> int | None:
        """INTEGER(byte) | BOOLEAN"""
        value = self.parse_number(IntegerWidth.BYTE)
        if value is not None:
            return value
        tok = self.match(TokenKind.BOOLEAN)
        if tok is None:
            return None
        return 1 if tok.value == "true" else 0

    def parse_string(self) -> str | None:
        """STRING_LITERAL | IDENTIFIER"""
        tok = self.current
        if tok is not None and tok.kind in (TokenKind.STRING_LITERAL, TokenKind.IDENTIFIER):
            self.pos += 1
            return tok.value
        self.note_failure("string")
        return None

    def parse_byte_tag(self) -> ByteTag | None:
        value = self.parse_byte()
        return None if value is None else ByteTag(value=value)

    def parse_short_tag(self) -> ShortTag | None:
        value = self.parse_number(IntegerWidth.SHORT)
        return None if value is None else ShortTag(value=value)

    def parse_int_tag(self) -> IntTag | None:
        value = self.parse_number(IntegerWidth.INT)
        return None if value is None else IntTag(value=value)

    def parse_long_tag(self) -> LongTag | None:
        value = self.parse_number(IntegerWidth.LONG)
        return None if value is None else LongTag(value=value)

    def parse_float_tag(self) -> FloatTag | None:
        value = self.parse_number(DecimalWidth.FLOAT)
        return None if value is None else FloatTag(value=value)

    def parse_double_tag(self) -> DoubleTag | None:
        value = self.parse_number(DecimalWidth.DOUBLE)
        return None if value is None else DoubleTag(value=value)

    def parse_string_tag(self) -> StringTag | None:
        value = self.parse_string()
        return None if value is None else StringTag(value=value)

    # -- Sequences --

    def parse_delimited(
        self,
        opener: Token | None,
        item: Callable[[], object | None],
        closer: TokenKind,
        *,
        allow_trailing: bool,
    ) -> list | None:
        """
        Comma separated items up to ``closer``; the opener is already matched.

        Restores ``pos`` to before the opener on failure.
        """
        if opener is None:
            return None
        start = self.pos - 1

        items: list = []
        first = item()
        if first is not None:
            items.append(first)
            while True:
                before_comma = self.pos
                if self.match(TokenKind.COMMA) is None:
                    break
                following = item()
                if following is None:
                    if not allow_trailing:
                        self.pos = before_comma
                    break
                items.append(following)

        if self.match(closer) is None:
            self.pos = start
            return None
        return items

    def enter(self) -> None:
        if self.depth >= self.max_depth:
            raise _NestingTooDeep(self.pos - 1)
        self.depth += 1

    def parse_array(self, array_type: ArrayType, item: Callable[[], int | None]) -> list[int] | None:
        """'[X;' (item (',' item)*)? ']' with no trailing comma"""
        opener = self.match(TokenKind.ARRAY_START, array_type, f"'[{array_type};'")
        return self.parse_delimited(opener, item, TokenKind.CLOSE_BRACKET, allow_trailing=False)

    def parse_byte_array(self) -> ByteArrayTag | None:
        values = self.parse_array(ArrayType.BYTE, self.parse_byte)
        return None if values is None else ByteArrayTag(values=values)

    def parse_int_array(self) -> IntArrayTag | None:
        values = self.parse_array(ArrayType.INT, lambda: self.parse_number(IntegerWidth.INT))
        return None if values is None else IntArrayTag(values=values)

    def parse_long_array(self) -> LongArrayTag | None:
        values = self.parse_array(ArrayType.LONG, lambda: self.parse_number(IntegerWidth.LONG))
        return None if values is None else LongArrayTag(values=values)

    # -- Containers --

    def parse_list(self) -> ListTag | None:
        """'[' elements ']' under the first element kind that accepts them all"""
        for kind in LIST_PRIORITY:
            opener = self.match(TokenKind.OPEN_BRACKET)
            if opener is None:
                return None
            self.enter()
            try:
                items = self.parse_delimited(
                    opener, self.productions[kind], TokenKind.CLOSE_BRACKET, allow_trailing=True
                )
            finally:
                self.depth -= 1
            if items is not None:
                return ListTag(element_kind=kind, items=items)
        return None

    def parse_member(self) -> tuple[str, Tag] | None:
        """string ':' value"""
        start = self.pos
        key = self.parse_string()
        if key is None:
            return None
        if self.match(TokenKind.COLON) is None:
            self.pos = start
            return None
        value = self.parse_value()
        if value is None:
            self.pos = start
            return None
        return key, value

    def parse_compound(self) -> CompoundTag | None:
        """'{' (member (',' member)* ','?)? '}'"""
        opener = self.match(TokenKind.OPEN_BRACE)
        if opener is None:
            return None
        self.enter()
        try:
            entries = self.parse_delimited(
                opener, self.parse_member, TokenKind.CLOSE_BRACE, allow_trailing=True
            )
        finally:
            self.depth -= 1
        return None if entries is None else CompoundTag(entries=entries)

    def parse_value(self) -> Tag | None:
        for kind in VALUE_PRIORITY:
            tag = self.productions[kind]()
            if tag is not None:
                return tag
        return None

    # -- Entry point --

    def error_at(self, index: int, expected: set[str], message: str) -> GrammarError:
        if index < len(self.tokens):
            found: Token | None = self.tokens[index]
            position = self.tokens[index].start
        else:
            found = None
            if self.source_length is not None:
                position = self.source_length
            else:
                position = self.tokens[-1].end if self.tokens else 0
        return GrammarError(
            found=found, expected=tuple(sorted(expected)), position=position, message=message
        )

    def parse(self) -> Tag:
        try:
            tag = self.parse_value()
        except _NestingTooDeep as e:
            raise ParseFailure(
                [self.error_at(e.index, set(), f"nesting deeper than {self.max_depth} levels")]
            ) from None

        if tag is not None:
            if self.pos == len(self.tokens):
                return tag
            self.note_failure(END_OF_INPUT)

        error = self.error_at(self.furthest, self.expected, self.message)
        logger.debug("Rejected SNBT token stream: %s", error.format())
        raise ParseFailure([error])


def build(
    tokens: list[Token],
    settings: ParserSettings | None = None,
    *,
    source_length: int | None = None,
) -> Tag:
    """
    Build a tag tree from a token list.

    Args:
        tokens: Tokens from ``tokenize``
        settings: Parser limits (defaults come from the environment)
        source_length: Length of the source text, used as the error
            position when the tokens run out

    Returns:
        The parsed tag.

    Raises:
        ParseFailure: If the tokens do not form exactly one SNBT value.
    """
    settings = settings or get_parser_settings()
    parser = _Parser(list(tokens), settings.max_depth, source_length)
    return parser.parse()


def parse(text: str, settings: ParserSettings | None = None) -> Tag:
    """Parse SNBT text into a tag tree.

    Args:
        text: SNBT source (e.g., '{name: "Steve", pos: [0.5d, 64d, 0.5d]}')
        settings: Parser limits (defaults come from the environment)

    Returns:
        Parsed tag tree.

    Raises:
        TokenizeError: If the text contains invalid characters or literals.
        ParseFailure: If the tokens are not a single valid SNBT value.
    """
    tokens = tokenize(text)
    return build(tokens, settings, source_length=len(text))


def try_parse(text: str, settings: ParserSettings | None = None) -> Tag | ParseError:
    """Like ``parse`` but returns the ``TokenizeError``/``ParseFailure`` instead of raising."""
    try:
        return parse(text, settings)
    except ParseError as e:
        return e
