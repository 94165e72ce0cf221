"""
VM16 Assembler
==============

This package assembles VM16 assembly source into 16-bit machine words.

Main Components
---------------
- **Assembler**: runs the two passes and produces a Program
- **SourceCursor / SourceLine**: the lines still to be assembled
- **SymbolTable**: device addresses, registers, labels and constants
- **Token**: a parsed operand (literal or symbol reference)
- **Instructions / pseudo-instructions / directives**: pending commands
  that know their size in pass 1 and emit words in pass 2

Source Syntax
-------------
```
# comment
(loop)                  # label: loop = current word index
    .set  count 10      # constant
    WRD   sound R1      # pseudo-instruction: load 16-bit value
    ADI   R2 1 R2       # instruction: R2 + 1 -> R2
    BRN   R2 NZP R3     # branch to address in R3
    .array [1 2 3]      # data
```

Example Usage
-------------
>>> from vm16.assembler import assemble
>>> program = assemble("ADD R1 R2 R3")
>>> program.words
[20771]
"""

from vm16.assembler.assembler import Assembler, assemble, assemble_file
from vm16.assembler.commands import Command, PassContext
from vm16.assembler.directives import DIRECTIVES, Directive, directive_handler_name, make_directive
from vm16.assembler.image import pack_words, read_image, unpack_words, write_image
from vm16.assembler.instructions import Instruction, encode, make_instruction
from vm16.assembler.literals import parse_int
from vm16.assembler.opcodes import MNEMONICS, OPCODE_TABLE, InstructionInfo, OperandForm, make_word
from vm16.assembler.program import AssembledCommand, Program
from vm16.assembler.pseudo import PSEUDO_INSTRUCTIONS, WordLoad, make_pseudo_instruction
from vm16.assembler.source import SourceCursor, SourceLine, SourceLoader, strip_line
from vm16.assembler.symbols import DEVICE_ADDRESSES, SymbolTable, make_symbol_table
from vm16.assembler.tokens import Token, TokenType

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    "Program",
    "AssembledCommand",
    # Source
    "SourceCursor",
    "SourceLine",
    "SourceLoader",
    "strip_line",
    # Symbols and operands
    "SymbolTable",
    "make_symbol_table",
    "DEVICE_ADDRESSES",
    "Token",
    "TokenType",
    "parse_int",
    # Commands
    "Command",
    "PassContext",
    "Instruction",
    "make_instruction",
    "encode",
    "WordLoad",
    "make_pseudo_instruction",
    "PSEUDO_INSTRUCTIONS",
    "Directive",
    "DIRECTIVES",
    "directive_handler_name",
    "make_directive",
    # Opcodes
    "OPCODE_TABLE",
    "MNEMONICS",
    "InstructionInfo",
    "OperandForm",
    "make_word",
    # Machine images
    "pack_words",
    "unpack_words",
    "read_image",
    "write_image",
]
