"""
Exact-width numeric conversion for SNBT literals.

Literal text is converted to the width its suffix declares. Values that
do not fit are rejected with ``ConversionError``; nothing is clamped or
wrapped.
"""

from __future__ import annotations

import math
import re
import struct
from decimal import Decimal
from fractions import Fraction

from .errors import ConversionError
from .lexer import DecimalWidth, IntegerWidth

_INTEGER_RE = re.compile(r"-?[0-9]+")
_DECIMAL_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")

INTEGER_RANGES: dict[IntegerWidth, tuple[int, int]] = {
    IntegerWidth.BYTE: (-(2**7), 2**7 - 1),
    IntegerWidth.SHORT: (-(2**15), 2**15 - 1),
    IntegerWidth.INT: (-(2**31), 2**31 - 1),
    IntegerWidth.LONG: (-(2**63), 2**63 - 1),
}

# Digits in 2**63. Longer digit runs, ignoring sign and leading zeros, fit no integer width.
_MAX_INTEGER_DIGITS = 19

# Bit pattern of +inf as an f32; every finite magnitude sorts below it.
_F32_INF_BITS = 0x7F800000


def to_integer(text: str, width: IntegerWidth) -> int:
    """
    Convert decimal digit text to an integer of the given width.

    Raises:
        ConversionError: If the text is malformed or out of range.
    """
    if not _INTEGER_RE.fullmatch(text):
        raise ConversionError(f"malformed integer literal {text!r}")
    low, high = INTEGER_RANGES[width]
    if len(text.lstrip("-").lstrip("0")) > _MAX_INTEGER_DIGITS:
        raise ConversionError(f"{_abbreviate(text)} is out of range for {width} ({low} to {high})")
    value = int(text)
    if not low <= value <= high:
        raise ConversionError(f"{text} is out of range for {width} ({low} to {high})")
    return value


def to_double(text: str) -> float:
    """Convert decimal text to the nearest 64-bit float."""
    if not _DECIMAL_RE.fullmatch(text):
        raise ConversionError(f"malformed decimal literal {text!r}")
    value = float(text)
    if math.isinf(value):
        raise ConversionError(f"{_abbreviate(text)} is out of range for double")
    return value


def to_float(text: str) -> float:
    """
    Convert decimal text to the nearest 32-bit float.

    Rounding the correctly rounded double again to f32 can be off by one
    ulp when the double lands exactly between two floats, so the
    neighbours of that first guess are compared against the exact value.
    """
    if not _DECIMAL_RE.fullmatch(text):
        raise ConversionError(f"malformed decimal literal {text!r}")
    exact = Fraction(Decimal(text))
    negative = text.startswith("-")
    magnitude = abs(exact)
    try:
        guess = struct.unpack("<I", struct.pack("<f", float(magnitude)))[0]
    except OverflowError as e:
        raise ConversionError(f"{_abbreviate(text)} is out of range for float") from e

    candidates = [bits for bits in (guess - 1, guess, guess + 1) if 0 <= bits < _F32_INF_BITS]
    best = min(candidates, key=lambda bits: (abs(_f32_exact(bits) - magnitude), bits & 1))
    result = struct.unpack("<f", struct.pack("<I", best))[0]
    return -result if negative else result


def convert(text: str, width: IntegerWidth | DecimalWidth) -> int | float:
    """Convert literal text according to its declared width."""
    if isinstance(width, IntegerWidth):
        return to_integer(text, width)
    if width is DecimalWidth.FLOAT:
        return to_float(text)
    return to_double(text)


def _abbreviate(text: str) -> str:
    if len(text) <= 40:
        return text
    return f"{text[:20]}...{text[-10:]} ({len(text)} characters)"


def _f32_exact(bits: int) -> Fraction:
    return Fraction(struct.unpack("<f", struct.pack("<I", bits))[0])
