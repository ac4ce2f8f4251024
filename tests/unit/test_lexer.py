"""Tests for the SNBT lexer.

Covers:
- Punctuation and array starts
- Number disambiguation (suffixes, boundary rule, leading zeros)
- Booleans, identifiers, quoted strings and escapes
- Error batching and source locations
"""

from __future__ import annotations

import pytest

from snbtkit.core.errors import TokenizeError
from snbtkit.core.lexer import (
    ArrayType,
    DecimalWidth,
    IntegerWidth,
    Token,
    TokenKind,
    tokenize,
)


def only(source: str) -> Token:
    tokens = tokenize(source)
    assert len(tokens) == 1, tokens
    return tokens[0]


# ============================================================================
# Structure
# ============================================================================


class TestPunctuation:
    """Single characters and array starts."""

    def test_punctuation(self) -> None:
        tokens = tokenize(",:[]{}")
        assert [t.kind for t in tokens] == [
            TokenKind.COMMA,
            TokenKind.COLON,
            TokenKind.OPEN_BRACKET,
            TokenKind.CLOSE_BRACKET,
            TokenKind.OPEN_BRACE,
            TokenKind.CLOSE_BRACE,
        ]

    @pytest.mark.parametrize(
        "source,array_type",
        [
            ("[B;", ArrayType.BYTE),
            ("[b;", ArrayType.BYTE),
            ("[I;", ArrayType.INT),
            ("[i;", ArrayType.INT),
            ("[L;", ArrayType.LONG),
            ("[l;", ArrayType.LONG),
        ],
    )
    def test_array_start(self, source: str, array_type: ArrayType) -> None:
        tok = only(source)
        assert tok.kind == TokenKind.ARRAY_START
        assert tok.width == array_type

    def test_array_start_wins_over_open_bracket(self) -> None:
        tokens = tokenize("[I; 1]")
        assert [t.kind for t in tokens] == [
            TokenKind.ARRAY_START,
            TokenKind.INTEGER,
            TokenKind.CLOSE_BRACKET,
        ]

    def test_list_of_bare_word_is_not_array_start(self) -> None:
        tokens = tokenize("[b,1]")
        assert [t.kind for t in tokens] == [
            TokenKind.OPEN_BRACKET,
            TokenKind.IDENTIFIER,
            TokenKind.COMMA,
            TokenKind.INTEGER,
            TokenKind.CLOSE_BRACKET,
        ]

    def test_array_start_allows_no_inner_whitespace(self) -> None:
        # "[B ;" is "[", "B" and then a stray ";"
        with pytest.raises(TokenizeError):
            tokenize("[B ; 1b]")

    def test_whitespace_handling(self) -> None:
        tokens = tokenize("  {\n\ta : 1 }\r\n ")
        assert [t.kind for t in tokens] == [
            TokenKind.OPEN_BRACE,
            TokenKind.IDENTIFIER,
            TokenKind.COLON,
            TokenKind.INTEGER,
            TokenKind.CLOSE_BRACE,
        ]

    def test_offsets(self) -> None:
        tokens = tokenize("{a: 12b}")
        assert [(t.start, t.end) for t in tokens] == [(0, 1), (1, 2), (2, 3), (4, 7), (7, 8)]


# ============================================================================
# Numbers
# ============================================================================


class TestIntegers:
    """Integer literals and their width suffixes."""

    @pytest.mark.parametrize(
        "source,value,width",
        [
            ("42", "42", IntegerWidth.INT),
            ("-42", "-42", IntegerWidth.INT),
            ("0", "0", IntegerWidth.INT),
            ("-0", "-0", IntegerWidth.INT),
            ("5b", "5", IntegerWidth.BYTE),
            ("5B", "5", IntegerWidth.BYTE),
            ("-5s", "-5", IntegerWidth.SHORT),
            ("5S", "5", IntegerWidth.SHORT),
            ("5l", "5", IntegerWidth.LONG),
            ("5L", "5", IntegerWidth.LONG),
            ("300b", "300", IntegerWidth.BYTE),
        ],
    )
    def test_integer(self, source: str, value: str, width: IntegerWidth) -> None:
        assert only(source) == Token(TokenKind.INTEGER, value, width)

    def test_fraction_is_not_an_integer(self) -> None:
        assert only("123.5") == Token(TokenKind.DECIMAL, "123.5", DecimalWidth.DOUBLE)

    @pytest.mark.parametrize("source", ["12ab", "1b2", "5bs", "5-3", "1_000", "007", "01"])
    def test_integer_prefix_of_word_is_identifier(self, source: str) -> None:
        assert only(source) == Token(TokenKind.IDENTIFIER, source)

    def test_integer_before_punctuation(self) -> None:
        tokens = tokenize("[1b,-2b]")
        assert tokens[1] == Token(TokenKind.INTEGER, "1", IntegerWidth.BYTE)
        assert tokens[3] == Token(TokenKind.INTEGER, "-2", IntegerWidth.BYTE)


class TestDecimals:
    """Decimal literals and their precision suffixes."""

    @pytest.mark.parametrize(
        "source,value,width",
        [
            ("1.5", "1.5", DecimalWidth.DOUBLE),
            ("-1.5", "-1.5", DecimalWidth.DOUBLE),
            ("1.5d", "1.5", DecimalWidth.DOUBLE),
            ("1.5D", "1.5", DecimalWidth.DOUBLE),
            ("3.14f", "3.14", DecimalWidth.FLOAT),
            ("3.14F", "3.14", DecimalWidth.FLOAT),
            ("3f", "3", DecimalWidth.FLOAT),
            ("4d", "4", DecimalWidth.DOUBLE),
            ("-4D", "-4", DecimalWidth.DOUBLE),
            ("0.000", "0.000", DecimalWidth.DOUBLE),
        ],
    )
    def test_decimal(self, source: str, value: str, width: DecimalWidth) -> None:
        assert only(source) == Token(TokenKind.DECIMAL, value, width)

    @pytest.mark.parametrize("source", ["1.0.0", "1.5e3", "1.", ".5", "1.5fx", "4dd"])
    def test_malformed_decimal_is_identifier(self, source: str) -> None:
        assert only(source) == Token(TokenKind.IDENTIFIER, source)


# ============================================================================
# Words and strings
# ============================================================================


class TestWords:
    """Booleans and bare identifiers."""

    def test_booleans(self) -> None:
        assert tokenize("true false") == [
            Token(TokenKind.BOOLEAN, "true"),
            Token(TokenKind.BOOLEAN, "false"),
        ]

    @pytest.mark.parametrize("source", ["True", "FALSE", "trueish", "false_1"])
    def test_boolean_lookalikes(self, source: str) -> None:
        assert only(source) == Token(TokenKind.IDENTIFIER, source)

    @pytest.mark.parametrize(
        "source", ["minecraft", "a.b+c", "-", "_x_", "Count", "snake-case", "1a"]
    )
    def test_identifier(self, source: str) -> None:
        assert only(source) == Token(TokenKind.IDENTIFIER, source)

    def test_namespaced_id_splits_on_colon(self) -> None:
        assert tokenize("minecraft:stone") == [
            Token(TokenKind.IDENTIFIER, "minecraft"),
            Token(TokenKind.COLON, ":"),
            Token(TokenKind.IDENTIFIER, "stone"),
        ]


class TestStrings:
    """Quoted strings and escape sequences."""

    def test_double_quotes(self) -> None:
        assert only('"hello world"') == Token(TokenKind.STRING_LITERAL, "hello world")

    def test_single_quotes(self) -> None:
        assert only("'hello world'") == Token(TokenKind.STRING_LITERAL, "hello world")

    def test_empty(self) -> None:
        assert only('""') == Token(TokenKind.STRING_LITERAL, "")

    @pytest.mark.parametrize(
        "source,expected",
        [
            (r'"a\\b"', "a\\b"),
            (r'"a\/b"', "a/b"),
            (r'"say \"hi\""', 'say "hi"'),
            (r"'it\'s'", "it's"),
            (r'"\b\f\n\r\t"', "\b\f\n\r\t"),
            ("\"it's\"", "it's"),
            ("'say \"hi\"'", 'say "hi"'),
        ],
    )
    def test_escapes(self, source: str, expected: str) -> None:
        assert only(source) == Token(TokenKind.STRING_LITERAL, expected)

    def test_unknown_escape(self) -> None:
        with pytest.raises(TokenizeError, match="Unterminated string literal or invalid escape"):
            tokenize(r'"bad \x escape"')

    def test_unterminated_string(self) -> None:
        with pytest.raises(TokenizeError, match="Unterminated"):
            tokenize('"hello')


# ============================================================================
# Errors
# ============================================================================


class TestLexErrors:
    """Invalid input is reported with positions."""

    def test_unexpected_character(self) -> None:
        with pytest.raises(TokenizeError, match="Unexpected"):
            tokenize("@")

    @pytest.mark.parametrize("source", ["", "   ", "\n\t"])
    def test_empty_input(self, source: str) -> None:
        with pytest.raises(TokenizeError) as excinfo:
            tokenize(source)
        [error] = excinfo.value.errors
        assert error.position == len(source)

    def test_errors_are_batched_per_run(self) -> None:
        with pytest.raises(TokenizeError) as excinfo:
            tokenize("{a: 1} @@ #")
        assert [e.position for e in excinfo.value.errors] == [7, 10]
        assert "'@@'" in excinfo.value.errors[0].message

    def test_error_location(self) -> None:
        with pytest.raises(TokenizeError) as excinfo:
            tokenize("{\n  a: @}")
        [error] = excinfo.value.errors
        assert error.position == 7
        assert error.location is not None
        assert (error.location.line, error.location.column) == (2, 6)
        assert error.format().startswith("2:6: ")

    def test_bad_escape_reports_the_whole_string_once(self) -> None:
        with pytest.raises(TokenizeError) as excinfo:
            tokenize(r'{a: "x\qy"}')
        [error] = excinfo.value.errors
        assert error.position == 4
        assert error.format().startswith("1:5: Unterminated string literal or invalid escape")

    def test_lexing_resumes_after_a_rejected_string(self) -> None:
        with pytest.raises(TokenizeError) as excinfo:
            tokenize(r'{a: "x\qy", b: @}')
        assert [e.position for e in excinfo.value.errors] == [4, 15]

    def test_unterminated_string_runs_to_end_of_input(self) -> None:
        with pytest.raises(TokenizeError) as excinfo:
            tokenize('{a: @ "open')
        assert [e.position for e in excinfo.value.errors] == [4, 6]
