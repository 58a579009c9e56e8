"""Radix-aware number parsing.

`int()` and `float()` are lenient about their input: they accept
surrounding whitespace, underscores between digits and, for base 16,
a `0x` prefix. Tokens handed to these functions are checked against
the plain digit alphabet of the radix first, so only a sign followed
by digits is accepted.
"""

from __future__ import annotations

import math
import re
import string

from fractions import Fraction
from typing import Optional

from bufscan.errors import Errors, NumberFormatError

MIN_RADIX = 2
MAX_RADIX = 36

DIGITS = string.digits + string.ascii_lowercase

MAX_EXPONENT = 4096

_DECIMAL_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE | re.ASCII)
_EXPONENT = re.compile(r"[+-]?\d+", re.ASCII)


def valid_radix(radix: int) -> bool:
    return MIN_RADIX <= radix <= MAX_RADIX


def strip_commas(token: str) -> str:
    """Remove digit group separators: `2,147,483,647` -> `2147483647`."""
    return token.replace(',', '')


def int_range(width: int) -> tuple[int, int]:
    """Return the inclusive bounds of a signed integer `width` bits wide."""
    bound = 1 << (width - 1)
    return -bound, bound - 1


def _split_sign(token: str) -> tuple[str, str]:
    if token and token[0] in '+-':
        return token[0], token[1:]
    return '', token


def _check_digits(digits: str, radix: int, token: str) -> None:
    alphabet = DIGITS[:radix] + DIGITS[:radix].upper()
    if not digits or any(c not in alphabet for c in digits):
        raise NumberFormatError(Errors.INVALID_DIGIT, token)


def _check_token(token: str, radix: int) -> None:
    if not valid_radix(radix):
        raise NumberFormatError(Errors.INVALID_RADIX, token)
    if not token:
        raise NumberFormatError(Errors.EMPTY, token)


def parse_int(token: str,
              radix: int = 10,
              width: Optional[int] = 32) -> int:
    """Parse a signed integer written in `radix`.

    Args:
        token: Optional sign followed by one or more digits.
        radix: Base in the range [2, 36]. Letters are case-insensitive.
        width: Bit width of the signed result. If None, the value is
            not range-checked.

    Raises:
        NumberFormatError
    """
    _check_token(token, radix)
    sign, digits = _split_sign(token)
    _check_digits(digits, radix, token)

    value = int(sign + digits, radix)
    if width is not None:
        low, high = int_range(width)
        if not low <= value <= high:
            raise NumberFormatError(Errors.OVERFLOW, token)
    return value


def parse_float(token: str, radix: int = 10) -> float:
    """Parse a floating point number written in `radix`.

    The radix selects the digit alphabet of the integer and fractional
    parts. The exponent is always decimal and scales by a power of the
    radix: `1.1e2` in base 2 is `1.5 * 2**2`. Its marker is `e` for radixes
    up to 14 and `^` for larger ones, where `e` is a digit.

    Decimal tokens additionally accept `inf`, `infinity` and `nan`.
    Values beyond the float range become infinities, as with `float()`.

    Raises:
        NumberFormatError
    """
    _check_token(token, radix)
    if radix == 10:
        if not _DECIMAL_FLOAT.fullmatch(token):
            raise NumberFormatError(Errors.INVALID_DIGIT, token)
        return float(token)

    sign, body = _split_sign(token)
    marker = 'e' if radix < 15 else '^'
    mantissa, has_exp, exponent = body.replace('E', 'e').partition(marker)
    whole, _, frac = mantissa.partition('.')
    _check_digits(whole + frac, radix, token)

    exp = 0
    if has_exp:
        if not _EXPONENT.fullmatch(exponent):
            raise NumberFormatError(Errors.INVALID_DIGIT, token)
        exp = int(exponent)

    value = Fraction(int(whole + frac, radix), radix ** len(frac))
    if exp > MAX_EXPONENT:
        result = math.inf if value else 0.0
    elif exp < -MAX_EXPONENT:
        result = 0.0
    else:
        try:
            result = float(value * Fraction(radix) ** exp)
        except OverflowError:
            result = math.inf
    return -result if sign == '-' else result
