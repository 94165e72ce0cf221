"""
Operand Tokens
==============

A Token is one parsed operand: either a literal integer, parsed as soon
as it is seen, or a reference to a symbol that is looked up later. Every
token remembers the bit width of the field it will be encoded into, and
checks it again when a symbol is resolved, since a symbol's value is not
known until then.

Example
-------
>>> from vm16.assembler.tokens import Token
>>> Token.parse("$FF").resolve({})
255
>>> Token.parse("sound").resolve({"sound": 0xD800})
55296
>>> Token.parse("R3", bits=4).resolve({"R3": 3})
3
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Mapping

from vm16.errors import UndefinedSymbolError
from vm16.assembler.literals import check_range, is_literal, parse_int


class TokenType(Enum):
    """The two kinds of operand."""
    LITERAL = auto()   # $FF, %1010, 42
    SYMBOL = auto()    # sound, R7, loop


@dataclass(frozen=True)
class Token:
    """
    A single operand.

    Attributes:
        type: LITERAL or SYMBOL
        value: The integer for literals, the symbol name for references
        bits: Width of the destination field
    """
    type: TokenType
    value: int | str
    bits: int = 16

    @classmethod
    def parse(cls, text: str, bits: int = 16) -> "Token":
        """
        Build a token from operand text.

        Literals are parsed (and range checked) immediately, so malformed
        numbers are reported during the first pass.
        """
        if is_literal(text):
            return cls(TokenType.LITERAL, parse_int(text, bits), bits)
        return cls(TokenType.SYMBOL, text, bits)

    @property
    def is_literal(self) -> bool:
        return self.type is TokenType.LITERAL

    def resolve(self, symbols: Mapping[str, int]) -> int:
        """
        Return the token's value.

        Args:
            symbols: A SymbolTable or any mapping of names to values

        Raises:
            UndefinedSymbolError: The symbol is not in ``symbols``
            ValueTooLargeError: The symbol's value does not fit ``bits``
        """
        if self.type is TokenType.LITERAL:
            return self.value
        try:
            value = symbols[self.value]
        except KeyError:
            raise UndefinedSymbolError(self.value) from None
        return check_range(value, self.bits, self.value)

    def __str__(self) -> str:
        return str(self.value)
