"""
Numeric Literal Parsing
=======================

Operands in VM16 assembly are unsigned integers of limited width. This
module turns the text of a literal into its value and enforces the width
of the field the value is going into.

Number Formats
--------------
| Format      | Prefix | Example     | Value |
|-------------|--------|-------------|-------|
| Decimal     | (none) | 123         | 123   |
| Hexadecimal | $      | $7F         | 127   |
| Binary      | %      | %1010_1100  | 172   |

Underscores may be used to group digits and are ignored. C-style "0x"
prefixes are rejected rather than silently misread as decimal.

Example
-------
>>> parse_int("$FF")
255
>>> parse_int("%1010_1100", bits=8)
172
>>> parse_int("16", bits=4)
Traceback (most recent call last):
    ...
vm16.errors.ValueTooLargeError: error: Value must be less than 16: '16'
"""

import re

from vm16.errors import (
    MalformedIntegerError,
    NegativeNotAllowedError,
    ValueTooLargeError,
)


# Bit widths an operand field may have
VALID_BIT_LIMITS = (4, 8, 16)

# Radix prefix -> (base, digit pattern)
_RADIXES = {
    "%": (2, re.compile(r"[+-]?[01_]+")),
    "$": (16, re.compile(r"[+-]?[0-9A-Fa-f_]+")),
}
_DECIMAL = (10, re.compile(r"[+-]?[0-9_]+"))

# A digit followed by x/X: someone wrote 0x... instead of $...
_C_HEX_PREFIX = re.compile(r"\d[xX]")


def is_literal(text: str) -> bool:
    """Return True if text starts like a number rather than a symbol."""
    return bool(text) and (text[0] in "$%" or text[0].isdigit())


def parse_int(text: str, bits: int = 16) -> int:
    """
    Parse a literal into an unsigned integer below 2**bits.

    Args:
        text: Literal text including its radix prefix
        bits: Width of the destination field (4, 8 or 16)

    Returns:
        The parsed value

    Raises:
        MalformedIntegerError: Not a number in the selected radix
        NegativeNotAllowedError: Value is negative
        ValueTooLargeError: Value does not fit in ``bits`` bits
    """
    if bits not in VALID_BIT_LIMITS:
        raise ValueError(f"unsupported bit limit: {bits}")

    if _C_HEX_PREFIX.match(text[:2]):
        raise MalformedIntegerError(text)

    if text[:1] in _RADIXES:
        base, pattern = _RADIXES[text[0]]
        digits = text[1:]
    else:
        base, pattern = _DECIMAL
        digits = text

    if not pattern.fullmatch(digits):
        raise MalformedIntegerError(text)

    digits = digits.replace("_", "")
    if digits in ("", "+", "-"):
        raise MalformedIntegerError(text)

    value = int(digits, base)
    check_range(value, bits, text)
    return value


def check_range(value: int, bits: int, text: str | None = None) -> int:
    """
    Validate that value fits in an unsigned field of ``bits`` bits.

    Args:
        value: The value to check
        bits: Field width
        text: How the value was written, for the error message

    Returns:
        value, unchanged
    """
    shown = text if text is not None else str(value)
    if value < 0:
        raise NegativeNotAllowedError(shown)
    limit = 1 << bits
    if value >= limit:
        raise ValueTooLargeError(shown, limit)
    return value
