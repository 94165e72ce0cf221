# =============================================================================
# test_literals.py - Numeric Literal and Token Tests
# =============================================================================
# Tests for operand parsing in the VM16 assembler.
#
# Test coverage includes:
#   - Number formats: decimal, hexadecimal ($), binary (%)
#   - Underscore digit grouping
#   - Bit width limits (4, 8, 16) and negative numbers
#   - Rejection of C-style 0x prefixes
#   - Token parsing and deferred symbol resolution
# =============================================================================

import pytest

from vm16.assembler.literals import check_range, is_literal, parse_int
from vm16.assembler.symbols import SymbolTable
from vm16.assembler.tokens import Token, TokenType
from vm16.errors import (
    MalformedIntegerError,
    NegativeNotAllowedError,
    UndefinedSymbolError,
    ValueTooLargeError,
)


# =============================================================================
# Number Format Tests
# =============================================================================

class TestNumberFormats:
    """Test the three supported radixes."""

    @pytest.mark.parametrize("text,expected", [
        ("0", 0),
        ("42", 42),
        ("65535", 65535),
        ("1_000", 1000),
    ])
    def test_decimal(self, text, expected):
        """Plain digits are decimal."""
        assert parse_int(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("$0", 0),
        ("$FF", 255),
        ("$ff", 255),
        ("$D800", 0xD800),
        ("$FF_FF", 0xFFFF),
    ])
    def test_hexadecimal(self, text, expected):
        """$ prefix selects hexadecimal, either case."""
        assert parse_int(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("%0", 0),
        ("%1010", 10),
        ("%1010_1100", 0xAC),
        ("%0110_0000_1001_1111", 0b0110_0000_1001_1111),
    ])
    def test_binary(self, text, expected):
        """% prefix selects binary."""
        assert parse_int(text) == expected


# =============================================================================
# Malformed Literal Tests
# =============================================================================

class TestMalformedLiterals:
    """Test literals that are not numbers in their radix."""

    @pytest.mark.parametrize("text", ["0x12", "0X12", "0xFF"])
    def test_c_style_hex_rejected(self, text):
        """0x prefixes are an error, not a decimal zero."""
        with pytest.raises(MalformedIntegerError) as exc_info:
            parse_int(text)
        assert "Malformed integer" in str(exc_info.value)

    def test_c_style_hex_hint(self):
        """The error suggests the $ form."""
        with pytest.raises(MalformedIntegerError) as exc_info:
            parse_int("0x12")
        assert exc_info.value.hint == "write hexadecimal as '$12'"

    @pytest.mark.parametrize("text", ["%102", "$G1", "12a", "$", "%", "%__", "1.5"])
    def test_bad_digits(self, text):
        """Digits outside the radix are rejected."""
        with pytest.raises(MalformedIntegerError):
            parse_int(text)

    def test_negative_rejected(self):
        """Negative literals are never accepted."""
        with pytest.raises(NegativeNotAllowedError):
            parse_int("-1")

    def test_unsupported_bit_limit(self):
        """Only 4, 8 and 16 bit fields exist."""
        with pytest.raises(ValueError):
            parse_int("1", bits=12)


# =============================================================================
# Bit Limit Tests
# =============================================================================

class TestBitLimits:
    """Test that values are checked against their field width."""

    @pytest.mark.parametrize("text,bits", [
        ("15", 4),
        ("$F", 4),
        ("255", 8),
        ("%1111_1111", 8),
        ("$FFFF", 16),
    ])
    def test_largest_value_fits(self, text, bits):
        """2**bits - 1 is the largest accepted value."""
        assert parse_int(text, bits) == (1 << bits) - 1

    @pytest.mark.parametrize("text,bits", [
        ("16", 4),
        ("$10", 4),
        ("256", 8),
        ("65536", 16),
        ("$1_0000", 16),
    ])
    def test_value_too_large(self, text, bits):
        """2**bits does not fit."""
        with pytest.raises(ValueTooLargeError) as exc_info:
            parse_int(text, bits)
        assert exc_info.value.limit == 1 << bits
        assert f"Value must be less than {1 << bits}" in str(exc_info.value)

    def test_check_range_returns_value(self):
        """check_range passes valid values through."""
        assert check_range(7, 4) == 7

    def test_check_range_negative(self):
        with pytest.raises(NegativeNotAllowedError):
            check_range(-3, 16)


# =============================================================================
# Literal Detection Tests
# =============================================================================

class TestIsLiteral:
    """Test the literal/symbol split on the first character."""

    @pytest.mark.parametrize("text", ["0", "42", "$FF", "%1", "0x12"])
    def test_literals(self, text):
        assert is_literal(text)

    @pytest.mark.parametrize("text", ["sound", "R1", "loop", "net-in", ""])
    def test_symbols(self, text):
        assert not is_literal(text)


# =============================================================================
# Token Tests
# =============================================================================

class TestToken:
    """Test operand tokens."""

    def test_literal_token(self):
        """Literal tokens are parsed immediately."""
        token = Token.parse("$FF")
        assert token.type == TokenType.LITERAL
        assert token.value == 255
        assert token.is_literal

    def test_symbol_token(self):
        """Symbol tokens keep the name until resolved."""
        token = Token.parse("sound")
        assert token.type == TokenType.SYMBOL
        assert token.value == "sound"
        assert not token.is_literal

    def test_literal_checked_at_parse_time(self):
        """A too-large literal fails before any resolution."""
        with pytest.raises(ValueTooLargeError):
            Token.parse("16", bits=4)

    def test_resolve_literal(self):
        assert Token.parse("42").resolve({}) == 42

    def test_resolve_symbol_from_dict(self):
        """Any mapping works as a symbol table."""
        assert Token.parse("audio").resolve({"audio": 0xD800}) == 0xD800

    def test_resolve_symbol_from_table(self):
        assert Token.parse("R7", bits=4).resolve(SymbolTable()) == 7

    def test_symbol_value_checked_on_resolve(self):
        """A symbol's value must fit the field it is used in."""
        token = Token.parse("sound", bits=4)
        with pytest.raises(ValueTooLargeError):
            token.resolve(SymbolTable())

    def test_undefined_symbol_in_dict(self):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            Token.parse("missing").resolve({})
        assert exc_info.value.symbol == "missing"

    def test_undefined_symbol_in_table(self):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            Token.parse("R16", bits=4).resolve(SymbolTable())
        assert "undefined symbol 'R16'" in str(exc_info.value)
