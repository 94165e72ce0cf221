"""
VM16 SDK - Assembler Toolchain for the VM16 Virtual Machine
===========================================================

VM16 is a 16-bit virtual machine with sixteen one-word instructions and
memory-mapped devices for sound, networking, storage, tile and sprite
graphics and the keyboard. This package assembles VM16 assembly source
into machine images.

Main Components
---------------
- **assembler**: two-pass VM16 assembler
    Converts assembly source files (.asm) to machine images (.bin)

- **cli**: command-line tools
    ``vm16asm`` wraps the assembler for use from the terminal

Quick Start
-----------
Assemble a program:
    >>> from vm16.assembler import Assembler
    >>> asm = Assembler()
    >>> program = asm.assemble_file("hello.asm")
    >>> program.write_binary("hello.bin")

Or use the command-line tool:
    $ vm16asm hello.asm -o hello.bin -s hello.sym

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from vm16.assembler import Assembler, Program, assemble, assemble_file
from vm16.errors import (
    Vm16Error,
    AssemblerError,
    AssemblySyntaxError,
    SourceLocation,
    MalformedIntegerError,
    ValueTooLargeError,
    NegativeNotAllowedError,
    UndefinedSymbolError,
    ArgumentCountError,
    InvalidDirectionError,
    AmountOutOfRangeError,
    InvalidValueConditionError,
    InvalidFlagConditionError,
    InvalidLabelError,
    InvalidLongStringModeError,
    UnknownDirectiveError,
    UnknownInstructionError,
    MissingFileError,
    CircularIncludeError,
    FileReadError,
    ImageFormatError,
    TargetBehindCurrentAddressError,
    AddressSpaceError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "Program",
    "assemble",
    "assemble_file",
    # Exception hierarchy
    "Vm16Error",
    "AssemblerError",
    "AssemblySyntaxError",
    "SourceLocation",
    "MalformedIntegerError",
    "ValueTooLargeError",
    "NegativeNotAllowedError",
    "UndefinedSymbolError",
    "ArgumentCountError",
    "InvalidDirectionError",
    "AmountOutOfRangeError",
    "InvalidValueConditionError",
    "InvalidFlagConditionError",
    "InvalidLabelError",
    "InvalidLongStringModeError",
    "UnknownDirectiveError",
    "UnknownInstructionError",
    "MissingFileError",
    "CircularIncludeError",
    "FileReadError",
    "ImageFormatError",
    "TargetBehindCurrentAddressError",
    "AddressSpaceError",
]
