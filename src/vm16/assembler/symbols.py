"""
Symbol Table
============

Every assembly starts from the same predefined symbols: the addresses of
the memory-mapped devices and the register aliases R0..RF. Labels and
.set directives add to this table during the first pass; the second pass
reads it to resolve forward references.

Predefined Symbols
------------------
| Symbol                 | Address |
|------------------------|---------|
| sound                  | $D800   |
| net-in                 | $DC00   |
| net-out                | $E000   |
| storage-in             | $E400   |
| storage-out            | $E800   |
| tiles                  | $EC00   |
| grid                   | $F400   |
| cell-x-y-flip          | $FD60   |
| sprites                | $FE8C   |
| cell-colors            | $FF8C   |
| sprite-colors          | $FFAC   |
| keyboard               | $FFFA   |
| net-status             | $FFFB   |
| enable-bits            | $FFFC   |
| storage-read-address   | $FFFD   |
| storage-write-address  | $FFFE   |
| frame-interrupt-vector | $FFFF   |

Registers R0..R9 are 0..9 and RA..RF are 10..15.

Redefinition
------------
Symbols are case-sensitive. Redefining a symbol replaces its value (the
last definition wins) and logs a warning, so that a label accidentally
shadowing a device address does not go unnoticed.
"""

from dataclasses import dataclass
from typing import Iterator, Optional
import logging

from vm16.errors import SourceLocation, UndefinedSymbolError
from vm16.assembler.literals import check_range

logger = logging.getLogger(__name__)


DEVICE_ADDRESSES: dict[str, int] = {
    "sound": 0xD800,
    "net-in": 0xDC00,
    "net-out": 0xE000,
    "storage-in": 0xE400,
    "storage-out": 0xE800,
    "tiles": 0xEC00,
    "grid": 0xF400,
    "cell-x-y-flip": 0xFD60,
    "sprites": 0xFE8C,
    "cell-colors": 0xFF8C,
    "sprite-colors": 0xFFAC,
    "keyboard": 0xFFFA,
    "net-status": 0xFFFB,
    "enable-bits": 0xFFFC,
    "storage-read-address": 0xFFFD,
    "storage-write-address": 0xFFFE,
    "frame-interrupt-vector": 0xFFFF,
}

PREDEFINED_LOCATION = SourceLocation("<predefined>", 0)


def register_aliases() -> dict[str, int]:
    """Return the register names R0..R9, RA..RF mapped to 0..15."""
    return {f"R{n:X}": n for n in range(16)}


def make_symbol_table() -> dict[str, int]:
    """
    Build the initial symbol mapping for one assembly.

    This is a pure function: every call returns a new dict, so no state
    leaks from one assembly into the next.
    """
    symbols = dict(DEVICE_ADDRESSES)
    symbols.update(register_aliases())
    return symbols


@dataclass
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Symbol name
        value: 16-bit value (address or constant)
        location: Where the symbol was defined
        is_predefined: True for device addresses and register aliases
    """
    name: str
    value: int
    location: SourceLocation
    is_predefined: bool = False


class SymbolTable:
    """
    Maps symbol names to 16-bit values.

    Lookup of a missing name raises UndefinedSymbolError (never a default),
    so a SymbolTable can be passed anywhere a mapping is expected by
    Token.resolve().

    Usage:
        symbols = SymbolTable()
        symbols.define("loop", 12, location)
        symbols["loop"]     # 12
        symbols["sound"]    # 0xD800
    """

    def __init__(self, predefined: bool = True):
        self._symbols: dict[str, Symbol] = {}
        if predefined:
            for name, value in make_symbol_table().items():
                self._symbols[name] = Symbol(name, value, PREDEFINED_LOCATION, is_predefined=True)

    # =========================================================================
    # Mapping Interface
    # =========================================================================

    def __getitem__(self, name: str) -> int:
        try:
            return self._symbols[name].value
        except KeyError:
            raise UndefinedSymbolError(
                name, similar_symbols=self._find_similar_symbols(name)
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def get(self, name: str) -> Optional[Symbol]:
        """Return the Symbol entry for name, or None."""
        return self._symbols.get(name)

    def items(self) -> Iterator[tuple[str, int]]:
        for name, sym in self._symbols.items():
            yield name, sym.value

    def as_dict(self) -> dict[str, int]:
        """Return a plain name -> value snapshot."""
        return dict(self.items())

    # =========================================================================
    # Definition
    # =========================================================================

    def define(
        self,
        name: str,
        value: int,
        location: Optional[SourceLocation] = None,
    ) -> None:
        """
        Define or redefine a symbol.

        Args:
            name: Symbol name (case-sensitive)
            value: Value, must fit in 16 bits
            location: Where the definition appears

        Raises:
            ValueTooLargeError / NegativeNotAllowedError: value out of range
        """
        check_range(value, 16, f"{name} = {value}")
        location = location or PREDEFINED_LOCATION

        existing = self._symbols.get(name)
        if existing is not None and existing.value != value:
            if existing.is_predefined:
                logger.warning(
                    f"{location}: predefined symbol '{name}' "
                    f"reassigned from ${existing.value:04X} to ${value:04X}"
                )
            else:
                logger.warning(
                    f"{location}: symbol '{name}' redefined "
                    f"(was ${existing.value:04X} at {existing.location})"
                )

        self._symbols[name] = Symbol(name, value, location)

    # =========================================================================
    # Suggestions
    # =========================================================================

    def _find_similar_symbols(self, name: str) -> list[str]:
        """
        Find symbols with similar names for error hints.

        Uses simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for sym in self._symbols:
            sym_lower = sym.lower()
            if (
                sym_lower == name_lower or
                abs(len(sym) - len(name)) <= 1 and
                _edit_distance(name_lower, sym_lower) <= 1
            ):
                similar.append(sym)

        return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = range(len(s2) + 1)
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min((
                    distances[j],
                    distances[j + 1],
                    new_distances[-1]
                )))
        distances = new_distances

    return distances[-1]
