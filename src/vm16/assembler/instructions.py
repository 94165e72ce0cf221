"""
Instruction Encoders
====================

One Instruction subclass per operand form (see opcodes.OperandForm).
Constructors split and tokenize the operands, reporting malformed
literals, bad operand counts and invalid condition strings during the
first pass. nibbles() resolves symbols during the second pass and returns
the a, b and c fields; Instruction.machine_code() packs them with the
opcode.

Register operands and the ADI/SBI immediate are 4-bit fields; the HBY/LBY
byte is an 8-bit field split across a and b.

Example
-------
>>> inst = make_instruction("ADD", "R1 R2 R3")
>>> [f"{w:04X}" for w in inst.machine_code(SymbolTable())]
['5123']
"""

from typing import Mapping
import re

from vm16.errors import (
    AmountOutOfRangeError,
    InvalidDirectionError,
    InvalidFlagConditionError,
    InvalidValueConditionError,
    UnknownInstructionError,
)
from vm16.assembler.commands import Command, split_args
from vm16.assembler.opcodes import (
    BRANCH_FLAG_CODES,
    BRANCH_FLAG_TEST,
    BRANCH_VALUE_BITS,
    InstructionInfo,
    OperandForm,
    get_instruction_info,
    make_word,
    split_byte,
)
from vm16.assembler.symbols import SymbolTable
from vm16.assembler.tokens import Token


REGISTER_BITS = 4
BYTE_BITS = 8

_NZP_PATTERN = re.compile(r"^[NZP]+$")


class Instruction(Command):
    """
    A real machine instruction: always exactly one word.

    Subclasses set ``operand_counts`` and implement nibbles().
    """

    word_length = 1
    operand_counts: tuple[int, ...] = ()

    def __init__(self, info: InstructionInfo, args: str = ""):
        super().__init__()
        self.info = info
        self.operands = split_args(info.mnemonic, args, self.operand_counts, str(info.form))

    @property
    def mnemonic(self) -> str:
        return self.info.mnemonic

    def nibbles(self, symbols: Mapping[str, int]) -> tuple[int, int, int]:
        raise NotImplementedError

    def machine_code(self, symbols: Mapping[str, int]) -> list[int]:
        return [make_word(self.info.opcode, *self.nibbles(symbols))]


class NoOperandInstruction(Instruction):
    """END: halt."""

    operand_counts = (0,)

    def nibbles(self, symbols):
        return 0, 0, 0


class ByteRegisterInstruction(Instruction):
    """HBY / LBY: load a byte into one half of a register."""

    operand_counts = (2,)

    def __init__(self, info: InstructionInfo, args: str = ""):
        super().__init__(info, args)
        self.value = Token.parse(self.operands[0], BYTE_BITS)
        self.register = Token.parse(self.operands[1], REGISTER_BITS)

    def nibbles(self, symbols):
        high, low = split_byte(self.value.resolve(symbols))
        return high, low, self.register.resolve(symbols)


class SourceDestInstruction(Instruction):
    """LOD / NOT: source register in a, destination in c."""

    operand_counts = (2,)

    def __init__(self, info: InstructionInfo, args: str = ""):
        super().__init__(info, args)
        self.source = Token.parse(self.operands[0], REGISTER_BITS)
        self.destination = Token.parse(self.operands[1], REGISTER_BITS)

    def nibbles(self, symbols):
        return self.source.resolve(symbols), 0, self.destination.resolve(symbols)


class AddressRegInstruction(Instruction):
    """STR: store register b to the address held in register a."""

    operand_counts = (2,)

    def __init__(self, info: InstructionInfo, args: str = ""):
        super().__init__(info, args)
        self.address_register = Token.parse(self.operands[0], REGISTER_BITS)
        self.register = Token.parse(self.operands[1], REGISTER_BITS)

    def nibbles(self, symbols):
        return self.address_register.resolve(symbols), self.register.resolve(symbols), 0


class ThreeFieldInstruction(Instruction):
    """ALU operations: every operand is a 4-bit field, in order."""

    operand_counts = (3,)

    def __init__(self, info: InstructionInfo, args: str = ""):
        super().__init__(info, args)
        self.fields = [Token.parse(op, REGISTER_BITS) for op in self.operands]

    def nibbles(self, symbols):
        a, b, c = (token.resolve(symbols) for token in self.fields)
        return a, b, c


class ShiftInstruction(Instruction):
    """
    SHF r1 L|R amount rd

    The amount (1..8) is stored as amount-1 in b, with 8 added for a
    right shift.
    """

    operand_counts = (4,)

    def __init__(self, info: InstructionInfo, args: str = ""):
        super().__init__(info, args)
        source, self.direction, amount, destination = self.operands
        if self.direction not in ("L", "R"):
            raise InvalidDirectionError(self.direction)
        self.source = Token.parse(source, REGISTER_BITS)
        self.amount = Token.parse(amount)
        self.destination = Token.parse(destination, REGISTER_BITS)
        if self.amount.is_literal:
            self._check_amount(self.amount.value)

    @staticmethod
    def _check_amount(amount: int) -> int:
        if not 1 <= amount <= 8:
            raise AmountOutOfRangeError(amount)
        return amount

    def nibbles(self, symbols):
        amount = self._check_amount(self.amount.resolve(symbols)) - 1
        if self.direction == "R":
            amount += 8
        return self.source.resolve(symbols), amount, self.destination.resolve(symbols)


class BranchInstruction(Instruction):
    """
    BRN value_reg NZP addr_reg   branch if the value is negative/zero/positive
    BRN C|V|- addr_reg           branch on carry/overflow flag (- = never)

    The condition nibble is 4N + 2Z + 1P for value tests, and 8 | flag
    code for flag tests, whose value register field is 0.
    """

    operand_counts = (2, 3)

    def __init__(self, info: InstructionInfo, args: str = ""):
        super().__init__(info, args)
        if len(self.operands) == 3:
            value, flags, address = self.operands
            if not _NZP_PATTERN.match(flags):
                raise InvalidValueConditionError(flags)
            self.condition = sum(bit for flag, bit in BRANCH_VALUE_BITS.items() if flag in flags)
        else:
            flag, address = self.operands
            if flag not in BRANCH_FLAG_CODES:
                raise InvalidFlagConditionError(flag)
            self.condition = BRANCH_FLAG_TEST | BRANCH_FLAG_CODES[flag]
            value = "0"
        self.value_register = Token.parse(value, REGISTER_BITS)
        self.address_register = Token.parse(address, REGISTER_BITS)

    def nibbles(self, symbols):
        return (
            self.value_register.resolve(symbols),
            self.address_register.resolve(symbols),
            self.condition,
        )


class SingleRegInstruction(Instruction):
    """SPC rd: save the program counter into rd."""

    operand_counts = (1,)

    def __init__(self, info: InstructionInfo, args: str = ""):
        super().__init__(info, args)
        self.register = Token.parse(self.operands[0], REGISTER_BITS)

    def nibbles(self, symbols):
        return 0, 0, self.register.resolve(symbols)


INSTRUCTION_CLASSES: dict[OperandForm, type[Instruction]] = {
    OperandForm.NONE: NoOperandInstruction,
    OperandForm.BYTE_REGISTER: ByteRegisterInstruction,
    OperandForm.SOURCE_DEST: SourceDestInstruction,
    OperandForm.ADDRESS_REG: AddressRegInstruction,
    OperandForm.THREE_FIELD: ThreeFieldInstruction,
    OperandForm.SHIFT: ShiftInstruction,
    OperandForm.BRANCH: BranchInstruction,
    OperandForm.SINGLE_REG: SingleRegInstruction,
}


def is_instruction(mnemonic: str) -> bool:
    return get_instruction_info(mnemonic) is not None


def make_instruction(mnemonic: str, args: str = "") -> Instruction:
    """
    Create the encoder for a real instruction.

    Raises:
        UnknownInstructionError: ``mnemonic`` is not in the opcode table
    """
    info = get_instruction_info(mnemonic)
    if info is None:
        raise UnknownInstructionError(mnemonic)
    return INSTRUCTION_CLASSES[info.form](info, args)


def encode(mnemonic: str, args: str = "", symbols: Mapping[str, int] | None = None) -> int:
    """
    Encode a single instruction to its word.

    Convenience for tests and tools; symbols default to the predefined
    table.
    """
    if symbols is None:
        symbols = SymbolTable()
    return make_instruction(mnemonic, args).machine_code(symbols)[0]
