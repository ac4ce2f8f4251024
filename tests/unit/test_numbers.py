"""Tests for exact-width numeric conversion."""

from __future__ import annotations

import math
import struct
from decimal import Decimal, localcontext

import pytest

from snbtkit.core.errors import ConversionError
from snbtkit.core.lexer import DecimalWidth, IntegerWidth
from snbtkit.core.numbers import INTEGER_RANGES, convert, to_double, to_float, to_integer


class TestToInteger:
    """Integer conversion never wraps."""

    @pytest.mark.parametrize("width", list(IntegerWidth))
    def test_bounds(self, width: IntegerWidth) -> None:
        low, high = INTEGER_RANGES[width]
        assert to_integer(str(low), width) == low
        assert to_integer(str(high), width) == high
        with pytest.raises(ConversionError, match="out of range"):
            to_integer(str(low - 1), width)
        with pytest.raises(ConversionError, match="out of range"):
            to_integer(str(high + 1), width)

    @pytest.mark.parametrize("text", ["", "-", "+5", "1.5", "12a", " 1"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(ConversionError, match="malformed"):
            to_integer(text, IntegerWidth.INT)

    def test_leading_zeros_do_not_count_towards_length(self) -> None:
        assert to_integer("0" * 30 + "5", IntegerWidth.BYTE) == 5

    def test_huge_literal_is_out_of_range(self) -> None:
        with pytest.raises(ConversionError, match="5001 characters"):
            to_integer("-" + "9" * 5000, IntegerWidth.LONG)


class TestToFloat:
    """Float conversion rounds once, to nearest, ties to even."""

    def test_nearest_single(self) -> None:
        assert to_float("0.1") == struct.unpack("<f", struct.pack("<f", 0.1))[0]

    def test_avoids_double_rounding(self) -> None:
        # Just above the midpoint between 1 and the next float. Rounding
        # through a double first lands exactly on the midpoint and then
        # ties down to 1.0.
        with localcontext() as ctx:
            ctx.prec = 100
            exact = Decimal(1) + Decimal(2) ** -24 + Decimal(2) ** -60
        text = format(exact, "f")
        naive = struct.unpack("<f", struct.pack("<f", float(text)))[0]
        assert naive == 1.0
        assert to_float(text) == 1 + 2**-23

    def test_negative_zero(self) -> None:
        assert math.copysign(1.0, to_float("-0.0")) == -1.0

    def test_largest_float(self) -> None:
        assert to_float("340282346638528859811704183484516925440") == 3.4028234663852886e38

    def test_overflow(self) -> None:
        with pytest.raises(ConversionError, match="out of range for float"):
            to_float("1" + "0" * 39)


class TestToDouble:
    def test_value(self) -> None:
        assert to_double("5.1") == 5.1

    def test_overflow(self) -> None:
        with pytest.raises(ConversionError, match="out of range for double"):
            to_double("9" * 400)

    def test_malformed(self) -> None:
        with pytest.raises(ConversionError, match="malformed"):
            to_double("1e5")


def test_convert_dispatches_on_width() -> None:
    assert convert("7", IntegerWidth.SHORT) == 7
    assert convert("2.5", DecimalWidth.FLOAT) == 2.5
    assert convert("2.5", DecimalWidth.DOUBLE) == 2.5
