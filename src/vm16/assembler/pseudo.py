"""
Pseudo-Instructions
===================

Mnemonics that the assembler rewrites into real instructions.

| Pseudo        | Expansion           | Words |
|---------------|---------------------|-------|
| CPY src dst   | ADI src 0 dst       | 1     |
| NOP           | ADI R0 0 R0         | 1     |
| INC r         | ADI r 1 r           | 1     |
| DEC r         | SBI r 1 r           | 1     |
| JMP addr      | BRN 0 NZP addr      | 1     |
| WRD value r   | HBY hi r, LBY lo r  | 2     |

JMP branches on "value 0 is negative, zero or positive", which always
holds. WRD resolves one 16-bit value and splits it over an HBY and an LBY
word, so it cannot be a single rewrite.
"""

from dataclasses import dataclass
from typing import Mapping

from vm16.errors import UnknownInstructionError
from vm16.assembler.commands import Command, split_args
from vm16.assembler.instructions import REGISTER_BITS, Instruction, make_instruction
from vm16.assembler.opcodes import OPCODE_TABLE, make_word, split_byte
from vm16.assembler.tokens import Token


@dataclass(frozen=True)
class Rewrite:
    """
    A pseudo-instruction that expands to one real instruction.

    Attributes:
        target: Mnemonic of the real instruction
        template: Operand template; {0}, {1} are the pseudo's operands
        operand_count: Operands the pseudo-instruction takes
    """
    target: str
    template: str
    operand_count: int

    def expand(self, mnemonic: str, args: str) -> Instruction:
        operands = split_args(mnemonic, args, (self.operand_count,))
        return make_instruction(self.target, self.template.format(*operands))


REWRITES: dict[str, Rewrite] = {
    "CPY": Rewrite("ADI", "{0} 0 {1}", 2),
    "NOP": Rewrite("ADI", "R0 0 R0", 0),
    "INC": Rewrite("ADI", "{0} 1 {0}", 1),
    "DEC": Rewrite("SBI", "{0} 1 {0}", 1),
    "JMP": Rewrite("BRN", "0 NZP {0}", 1),
}


class WordLoad(Command):
    """WRD value reg: load a 16-bit value with HBY + LBY."""

    word_length = 2

    def __init__(self, args: str):
        super().__init__()
        value, register = split_args("WRD", args, (2,))
        self.value = Token.parse(value)
        self.register = Token.parse(register, REGISTER_BITS)

    def machine_code(self, symbols: Mapping[str, int]) -> list[int]:
        value = self.value.resolve(symbols)
        register = self.register.resolve(symbols)
        return [
            make_word(OPCODE_TABLE["HBY"].opcode, *split_byte(value >> 8), register),
            make_word(OPCODE_TABLE["LBY"].opcode, *split_byte(value & 0xFF), register),
        ]


PSEUDO_INSTRUCTIONS = frozenset(REWRITES) | {"WRD"}


def is_pseudo_instruction(mnemonic: str) -> bool:
    return mnemonic.upper() in PSEUDO_INSTRUCTIONS


def make_pseudo_instruction(mnemonic: str, args: str = "") -> Command:
    """
    Expand a pseudo-instruction.

    Raises:
        UnknownInstructionError: ``mnemonic`` is not a pseudo-instruction
    """
    name = mnemonic.upper()
    if name == "WRD":
        return WordLoad(args)
    if name not in REWRITES:
        raise UnknownInstructionError(mnemonic)
    return REWRITES[name].expand(name, args)
