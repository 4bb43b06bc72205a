import pytest

from aemt.errors import InvalidNumberError
from aemt.hexnum import parse_hex_u16, parse_hex_u32


@pytest.mark.parametrize("value", [0, 1, 224, 127, 2048, 0xFFFFF, 2**32 - 1])
def test_u32_hex_round_trip(value):
    assert parse_hex_u32(hex(value)) == value
    assert parse_hex_u32("0X" + format(value, "X")) == value


@pytest.mark.parametrize("value", [0, 9, 4095, 2**16 - 1])
def test_u16_decimal_round_trip(value):
    assert parse_hex_u16(str(value)) == value
    assert parse_hex_u16(hex(value)) == value


def test_plus_sign_accepted():
    assert parse_hex_u32("+42") == parse_hex_u32("42")


def test_u16_overflow():
    with pytest.raises(InvalidNumberError, match="too large"):
        parse_hex_u16(str(2**16))


def test_u32_overflow_hex():
    with pytest.raises(InvalidNumberError, match="too large"):
        parse_hex_u32(hex(2**32))


@pytest.mark.parametrize("text", ["", "0x", "0X"])
def test_empty_rejected(text):
    with pytest.raises(InvalidNumberError, match="empty string"):
        parse_hex_u32(text)


@pytest.mark.parametrize("text", ["-1", "abc", " 1", "1_0", "0xZZ", "+", "12a"])
def test_invalid_digits_rejected(text):
    with pytest.raises(InvalidNumberError, match="invalid digit"):
        parse_hex_u16(text)