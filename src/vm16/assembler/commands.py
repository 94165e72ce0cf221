"""
Pending Commands
================

Instructions, pseudo-instructions and directives are all Commands. The
first pass creates each command from its line: at that point the command
must know how many words it will emit (word_length), but it may not yet
be able to compute them, because a symbol it refers to can be defined
further down the source. The second pass calls machine_code() with the
finished symbol table.

Directives that consume extra source lines, define symbols or read files
receive a PassContext holding the assembly's cursor, symbol table, file
loader and current word index.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

from vm16.errors import ArgumentCountError, SourceLocation
from vm16.assembler.source import SourceCursor, SourceLine, SourceLoader
from vm16.assembler.symbols import SymbolTable


@dataclass
class PassContext:
    """
    First-pass state handed to command constructors.

    Attributes:
        cursor: Remaining source lines
        symbols: Symbol table as defined so far
        word_index: Address of the next word to be emitted
        line: The line the command is on
        loader: Resolves and reads .include/.copy targets
    """
    cursor: SourceCursor
    symbols: SymbolTable
    word_index: int
    line: SourceLine
    loader: SourceLoader


class Command:
    """
    Base class for everything that emits words.

    Attributes:
        word_length: Number of words machine_code() will return
        location: Source location, for error attribution
        address: Word index of the first emitted word
        source_text: Significant text of the source line, for listings
    """

    word_length: int = 1

    def __init__(self) -> None:
        self.location: Optional[SourceLocation] = None
        self.address: int = 0
        self.source_text: str = ""

    def machine_code(self, symbols: Mapping[str, int]) -> list[int]:
        """Return exactly word_length words, resolving symbols."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.source_text!r} @ ${self.address:04X}>"


def split_args(
    name: str,
    args: str,
    counts: tuple[int, ...],
    expected: Optional[str] = None,
) -> list[str]:
    """
    Split whitespace-separated operands and check their number.

    Args:
        name: Mnemonic or directive, for the error message
        args: Operand text
        counts: Accepted operand counts
        expected: Description of the accepted counts

    Raises:
        ArgumentCountError: The count is not one of ``counts``
    """
    parts = args.split()
    if len(parts) not in counts:
        if expected is None:
            expected = " or ".join(str(n) for n in counts)
            expected += " argument" if counts == (1,) else " arguments"
        raise ArgumentCountError(name, expected, args)
    return parts
