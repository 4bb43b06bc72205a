"""Parsing of unsigned numbers written in decimal or with a 0x prefix."""

import string

from aemt.errors import InvalidNumberError

_EMPTY = "cannot parse integer from empty string"
_INVALID = "invalid digit found in string"
_TOO_LARGE = "number too large to fit in target type"


def _parse_unsigned(text: str, bits: int) -> int:
    if text[:2] in ("0x", "0X"):
        digits, base, allowed = text[2:], 16, string.hexdigits
    else:
        digits, base, allowed = text, 10, string.digits

    if not digits:
        raise InvalidNumberError(_EMPTY)

    body = digits[1:] if digits.startswith("+") else digits
    if not body or any(ch not in allowed for ch in body):
        raise InvalidNumberError(_INVALID)

    value = int(body, base)
    if value >= 1 << bits:
        raise InvalidNumberError(_TOO_LARGE)
    return value


def parse_hex_u16(s: str) -> int:
    """Parse a 16-bit unsigned number, hexadecimal when prefixed by 0x."""
    return _parse_unsigned(s, 16)


def parse_hex_u32(s: str) -> int:
    """Parse a 32-bit unsigned number, hexadecimal when prefixed by 0x."""
    return _parse_unsigned(s, 32)