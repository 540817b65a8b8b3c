"""Tests for size unit conversion."""

from decimal import Decimal

import pytest

from discarchive.core.exceptions import FormatError, ValidationError
from discarchive.models.sizes import SizeQuantity, SizeUnit
from discarchive.services.size_units import (
    MAX_KIB,
    format_size,
    parse_size,
    parse_size_string,
    to_kib,
)


def test_parse_size_units():
    """One of each unit converts to its KiB multiplier."""
    assert parse_size(1, "GiB") == 1048576
    assert parse_size(1, "MiB") == 1024
    assert parse_size(1, "KiB") == 1
    assert parse_size(Decimal("0"), SizeUnit.GIB) == 0


def test_parse_size_rounds_half_away_from_zero():
    """Fractional KiB results round half up."""
    assert parse_size("0.5", "KiB") == 1
    assert parse_size("0.49", "KiB") == 0
    assert parse_size("1.5", "MiB") == 1536
    assert parse_size("0.0001", "MiB") == 0


@pytest.mark.parametrize("value", ["0", "0.1", "3.14159", "512", "1024.999"])
@pytest.mark.parametrize("unit", ["KiB", "MiB", "GiB"])
def test_parse_size_is_non_negative_integer(value, unit):
    """Any non-negative value yields a non-negative integer."""
    kib = parse_size(value, unit)
    assert isinstance(kib, int)
    assert kib >= 0


def test_parse_size_unit_is_case_insensitive():
    """Unit names match regardless of case."""
    assert parse_size(2, "gib") == 2 * 1048576
    assert parse_size(2, "MIB") == 2048


def test_parse_size_rejects_bad_input():
    """Negative values, junk values and unknown units are validation errors."""
    with pytest.raises(ValidationError):
        parse_size(-1, "MiB")
    with pytest.raises(ValidationError):
        parse_size("abc", "MiB")
    with pytest.raises(ValidationError):
        parse_size("NaN", "MiB")
    with pytest.raises(ValidationError):
        parse_size(1, "TiB")


@pytest.mark.parametrize("text", ["99999999999999999999999999GiB", "9999999999999GiB"])
def test_parse_size_string_rejects_oversized(text):
    """Sizes beyond the storable range are validation errors, not crashes."""
    with pytest.raises(ValidationError, match="Size too large"):
        parse_size_string(text)


def test_parse_size_upper_bound():
    """The largest storable size still parses."""
    assert parse_size(MAX_KIB, "KiB") == MAX_KIB
    with pytest.raises(ValidationError):
        parse_size(MAX_KIB + 1, "KiB")



def test_parse_size_string():
    """Composed strings parse with or without surrounding whitespace."""
    assert parse_size_string("1GiB") == 1048576
    assert parse_size_string("1.5GiB") == 1572864
    assert parse_size_string("512mib") == 524288
    assert parse_size_string("  700KiB ") == 700


@pytest.mark.parametrize("text", ["", "GiB", "1 GiB", "1GB", "-1GiB", "1.5", "one GiB"])
def test_parse_size_string_rejects_malformed(text):
    """Anything but <number><unit> is a format error."""
    with pytest.raises(FormatError):
        parse_size_string(text)


def test_format_size_boundaries():
    """Units switch only at exact boundaries and decimals are truncated."""
    assert format_size(1048576) == "1.00 GiB"
    assert format_size(1048575) == "1023.99 MiB"
    assert format_size(1024) == "1.00 MiB"
    assert format_size(1023) == "1023 KiB"
    assert format_size(1572864) == "1.50 GiB"
    assert format_size(0) == "0 KiB"
    assert format_size(None) == "-"


def test_to_kib_accepts_both_shapes():
    """Quantities, strings and None all convert."""
    assert to_kib(SizeQuantity(value=Decimal("1.5"), unit=SizeUnit.GIB)) == 1572864
    assert to_kib("256MiB") == 262144
    assert to_kib(None) is None
