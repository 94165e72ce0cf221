"""
VM16 Instruction Set Definition
===============================

Every VM16 instruction is exactly one 16-bit word made of four nibbles:

```
 15    12 11     8 7      4 3      0
+--------+--------+--------+--------+
| opcode |   a    |   b    |   c    |
+--------+--------+--------+--------+
```

The opcode selects one of sixteen instructions. How the a, b and c
fields are filled depends on the instruction's operand form.

Opcode Table
------------
| Mnemonic | Op | Operands              | a, b, c                    |
|----------|----|-----------------------|----------------------------|
| END      | 0  | -                     | 0, 0, 0                    |
| HBY      | 1  | byte reg              | byte>>4, byte&$F, reg      |
| LBY      | 2  | byte reg              | byte>>4, byte&$F, reg      |
| LOD      | 3  | src dst               | src, 0, dst                |
| STR      | 4  | addr reg              | addr, reg, 0               |
| ADD      | 5  | r1 r2 rd              | r1, r2, rd                 |
| SUB      | 6  | r1 r2 rd              | r1, r2, rd                 |
| ADI      | 7  | r1 imm rd             | r1, imm, rd                |
| SBI      | 8  | r1 imm rd             | r1, imm, rd                |
| AND      | 9  | r1 r2 rd              | r1, r2, rd                 |
| ORR      | A  | r1 r2 rd              | r1, r2, rd                 |
| XOR      | B  | r1 r2 rd              | r1, r2, rd                 |
| NOT      | C  | src dst               | src, 0, dst                |
| SHF      | D  | r1 L/R amount rd      | r1, amount-1 (+8 if R), rd |
| BRN      | E  | rv NZP ra / CV ra     | rv, ra, condition          |
| SPC      | F  | rd                    | 0, 0, rd                   |

HBY and LBY load one byte into the high or low half of a register. The
WRD pseudo-instruction combines them to load a full 16-bit value.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Operand Forms
# =============================================================================

class OperandForm(Enum):
    """
    The operand shapes of the instruction set.

    Instructions with the same form share an encoder and differ only
    by opcode.
    """
    NONE = auto()           # END
    BYTE_REGISTER = auto()  # HBY, LBY
    SOURCE_DEST = auto()    # LOD, NOT
    ADDRESS_REG = auto()    # STR
    THREE_FIELD = auto()    # ADD, SUB, ADI, SBI, AND, ORR, XOR
    SHIFT = auto()          # SHF
    BRANCH = auto()         # BRN
    SINGLE_REG = auto()     # SPC

    def __str__(self) -> str:
        return {
            OperandForm.NONE: "no operands",
            OperandForm.BYTE_REGISTER: "2 operands (byte register)",
            OperandForm.SOURCE_DEST: "2 operands (source destination)",
            OperandForm.ADDRESS_REG: "2 operands (address register)",
            OperandForm.THREE_FIELD: "3 operands",
            OperandForm.SHIFT: "4 operands (register L|R amount register)",
            OperandForm.BRANCH: "2 or 3 operands",
            OperandForm.SINGLE_REG: "1 operand (register)",
        }[self]


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Opcode table entry.

    Attributes:
        mnemonic: Instruction name (uppercase)
        opcode: Value of the high nibble
        form: Operand shape, which selects the encoder
    """
    mnemonic: str
    opcode: int
    form: OperandForm

    def __repr__(self) -> str:
        return f"InstructionInfo({self.mnemonic}, ${self.opcode:X}, {self.form.name})"


OPCODE_TABLE: dict[str, InstructionInfo] = {
    info.mnemonic: info
    for info in (
        InstructionInfo("END", 0x0, OperandForm.NONE),
        InstructionInfo("HBY", 0x1, OperandForm.BYTE_REGISTER),
        InstructionInfo("LBY", 0x2, OperandForm.BYTE_REGISTER),
        InstructionInfo("LOD", 0x3, OperandForm.SOURCE_DEST),
        InstructionInfo("STR", 0x4, OperandForm.ADDRESS_REG),
        InstructionInfo("ADD", 0x5, OperandForm.THREE_FIELD),
        InstructionInfo("SUB", 0x6, OperandForm.THREE_FIELD),
        InstructionInfo("ADI", 0x7, OperandForm.THREE_FIELD),
        InstructionInfo("SBI", 0x8, OperandForm.THREE_FIELD),
        InstructionInfo("AND", 0x9, OperandForm.THREE_FIELD),
        InstructionInfo("ORR", 0xA, OperandForm.THREE_FIELD),
        InstructionInfo("XOR", 0xB, OperandForm.THREE_FIELD),
        InstructionInfo("NOT", 0xC, OperandForm.SOURCE_DEST),
        InstructionInfo("SHF", 0xD, OperandForm.SHIFT),
        InstructionInfo("BRN", 0xE, OperandForm.BRANCH),
        InstructionInfo("SPC", 0xF, OperandForm.SINGLE_REG),
    )
}

MNEMONICS = frozenset(OPCODE_TABLE)

# Branch condition nibble: flag tests set the high bit
BRANCH_VALUE_BITS = {"N": 4, "Z": 2, "P": 1}
BRANCH_FLAG_CODES = {"V": 2, "C": 1, "-": 0}
BRANCH_FLAG_TEST = 0x8


def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """Look up a mnemonic (case-insensitive)."""
    return OPCODE_TABLE.get(mnemonic.upper())


def make_word(opcode: int, a: int, b: int, c: int) -> int:
    """
    Pack four nibbles into an instruction word.

    Raises:
        ValueError: A field is outside 0..15 (operand tokens are range
                    checked before encoding, so this indicates a bug)
    """
    for nibble in (opcode, a, b, c):
        if not 0 <= nibble <= 0xF:
            raise ValueError(f"nibble out of range: {nibble}")
    return opcode << 12 | a << 8 | b << 4 | c


def split_byte(value: int) -> tuple[int, int]:
    """Split a byte into its (high, low) nibbles for the a and b fields."""
    return value >> 4, value & 0xF
