"""
snbtkit - parse SNBT (stringified NBT) text into a tag tree.

    >>> from snbtkit import parse
    >>> parse("[1b, 2b, 3b]").element_kind
    <TagKind.BYTE: 'byte'>
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

from .core import ir
from .core.environment import ParserSettings, get_parser_settings
from .core.errors import (
    ConversionError,
    GrammarError,
    LexError,
    ParseError,
    ParseFailure,
    SnbtError,
    SourceLocation,
    TokenizeError,
)
from .core.ir import Tag, TagKind
from .core.lexer import Token, TokenKind, tokenize
from .core.parser import build, parse, try_parse


def _get_version() -> str:
    try:
        return _metadata_version("snbtkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "ir",
    "ConversionError",
    "GrammarError",
    "LexError",
    "ParseError",
    "ParseFailure",
    "ParserSettings",
    "SnbtError",
    "SourceLocation",
    "Tag",
    "TagKind",
    "Token",
    "TokenKind",
    "TokenizeError",
    "build",
    "get_parser_settings",
    "parse",
    "tokenize",
    "try_parse",
]
