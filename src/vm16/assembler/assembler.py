"""
VM16 Assembler - Main Interface
===============================

This module provides the Assembler class, which runs the two assembly
passes over a source file and produces a Program.

Pass 1 (Symbols and Sizes)
--------------------------
- Pop each line from the source cursor
- Labels "(name)" bind name to the current word index
- Instructions, pseudo-instructions and directives become pending
  commands; each knows its word length, which advances the word index
- Directives may consume further lines (.array, .long-string) or splice
  in files (.include)

Pass 2 (Code Generation)
------------------------
- Ask every pending command for its machine code, resolving symbols
  against the now-complete table

Every run builds its own symbol table, cursor and command list, so one
Assembler can be reused for several files.

Example Usage
-------------
>>> from vm16.assembler import Assembler
>>> asm = Assembler()
>>> program = asm.assemble_string('''
...     WRD message R1
...     SPC R2
... (message)
...     .string Hi
... ''')
>>> [f"{w:04X}" for w in program.words]
['1001', '2031', 'F002', '0002', '0048', '0069']
>>> program.symbols["message"]
3
"""

from pathlib import Path
from typing import Iterable, Optional
import logging
import re

from vm16.errors import (
    AddressSpaceError,
    AssemblerError,
    InvalidLabelError,
    SourceLocation,
    UnknownInstructionError,
)
from vm16.assembler.commands import Command, PassContext
from vm16.assembler.directives import make_directive
from vm16.assembler.instructions import is_instruction, make_instruction
from vm16.assembler.literals import is_literal
from vm16.assembler.program import AssembledCommand, Program
from vm16.assembler.pseudo import is_pseudo_instruction, make_pseudo_instruction
from vm16.assembler.source import SourceCursor, SourceLine, SourceLoader
from vm16.assembler.symbols import SymbolTable

logger = logging.getLogger(__name__)


# Words addressable by the machine
ADDRESS_SPACE = 0x10000

LABEL_PATTERN = re.compile(r"\(([^()\s]+)\)")

DEFINE_LOCATION = SourceLocation("<define>", 0)


class Assembler:
    """
    Two-pass VM16 assembler.

    Attributes:
        include_paths: Directories searched for .include/.copy targets
    """

    def __init__(
        self,
        include_paths: Optional[Iterable[str | Path]] = None,
        defines: Optional[dict[str, int]] = None,
        loader: Optional[SourceLoader] = None,
    ):
        """
        Initialize the assembler.

        Args:
            include_paths: Directories to search for included files
            defines: Symbols to define before assembly starts
            loader: File loader; defaults to a SourceLoader over include_paths
        """
        self._loader = loader or SourceLoader(include_paths)
        self._defines: dict[str, int] = {}
        self._program: Optional[Program] = None

        if defines:
            for name, value in defines.items():
                self.define_symbol(name, value)

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def include_paths(self) -> list[Path]:
        return self._loader.include_paths

    def add_include_path(self, path: str | Path) -> None:
        """Add a directory to search for included files."""
        path = Path(path)
        if path.is_dir():
            self._loader.include_paths.append(path)
        else:
            logger.warning(f"include path '{path}' is not a directory")

    def define_symbol(self, name: str, value: int) -> None:
        """Pre-define a symbol (like -D on the command line)."""
        self._defines[name] = value

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> Program:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Name used in error messages

        Raises:
            AssemblerError: If assembly fails
        """
        return self.assemble_lines(source.splitlines(), filename)

    def assemble_file(self, filepath: str | Path) -> Program:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileReadError: If the source file cannot be read
        """
        filepath = Path(filepath)
        logger.debug(f"assembling {filepath}")
        return self.assemble_lines(self._loader.read_lines(filepath), str(filepath))

    def assemble_lines(self, lines: Iterable[str], filename: str = "<input>") -> Program:
        """
        Assemble a sequence of source lines.

        Raises:
            AssemblerError: On the first error, located at its source line
        """
        cursor = SourceCursor().include_lines(filename, list(lines))
        symbols = self._make_symbol_table()

        commands = self._pass1(cursor, symbols)
        self._program = self._pass2(commands, symbols)
        return self._program

    def _make_symbol_table(self) -> SymbolTable:
        symbols = SymbolTable()
        for name, value in self._defines.items():
            symbols.define(name, value, DEFINE_LOCATION)
        return symbols

    # =========================================================================
    # Pass 1: Symbols and Sizes
    # =========================================================================

    def _pass1(self, cursor: SourceCursor, symbols: SymbolTable) -> list[Command]:
        """Build the symbol table and the list of pending commands."""
        commands: list[Command] = []
        word_index = 0

        while not cursor.is_empty():
            line = cursor.pop_line()
            content = line.content
            if not content:
                continue

            try:
                command = self._pass1_line(line, content, cursor, symbols, word_index)
                if command is None:
                    continue
                command.location = line.location
                command.address = word_index
                command.source_text = content
                word_index += command.word_length
                if word_index > ADDRESS_SPACE:
                    raise AddressSpaceError(
                        f"program needs {word_index} words, only {ADDRESS_SPACE} are addressable"
                    )
            except AssemblerError as e:
                raise e.locate(line.location, line.text)

            commands.append(command)

        logger.debug(
            f"pass 1: {cursor.line_number} lines, {len(commands)} commands, "
            f"{word_index} words, {len(symbols)} symbols"
        )
        return commands

    def _pass1_line(
        self,
        line: SourceLine,
        content: str,
        cursor: SourceCursor,
        symbols: SymbolTable,
        word_index: int,
    ) -> Optional[Command]:
        """Dispatch one significant line; labels return None."""
        parts = content.split(maxsplit=1)
        first_word = parts[0]
        args = parts[1] if len(parts) > 1 else ""

        if first_word.startswith("("):
            self._define_label(content, line, symbols, word_index)
            return None

        if first_word.startswith("."):
            ctx = PassContext(cursor, symbols, word_index, line, self._loader)
            return make_directive(first_word, args, ctx)

        if is_instruction(first_word):
            return make_instruction(first_word, args)

        if is_pseudo_instruction(first_word):
            return make_pseudo_instruction(first_word, args)

        raise UnknownInstructionError(first_word)

    def _define_label(
        self,
        content: str,
        line: SourceLine,
        symbols: SymbolTable,
        word_index: int,
    ) -> None:
        """Bind "(name)" to the current word index."""
        match = LABEL_PATTERN.fullmatch(content)
        if match is None or is_literal(match.group(1)):
            raise InvalidLabelError(content)
        if word_index >= ADDRESS_SPACE:
            raise AddressSpaceError(
                f"label '{match.group(1)}' at word {word_index} is outside the "
                f"{ADDRESS_SPACE}-word address space"
            )
        symbols.define(match.group(1), word_index, line.location)

    # =========================================================================
    # Pass 2: Code Generation
    # =========================================================================

    def _pass2(self, commands: list[Command], symbols: SymbolTable) -> Program:
        """Generate machine code for every pending command."""
        program = Program(symbols=symbols.as_dict())

        for command in commands:
            try:
                words = command.machine_code(symbols)
            except AssemblerError as e:
                raise e.locate(command.location, command.source_text)

            if len(words) != command.word_length:
                raise AssemblerError(
                    f"internal error: {command!r} emitted {len(words)} words, "
                    f"expected {command.word_length}",
                    location=command.location,
                )

            program.words.extend(words)
            program.commands.append(
                AssembledCommand(command.address, tuple(words), command.location, command.source_text)
            )

        logger.debug(f"pass 2: {len(program.words)} words generated")
        return program

    # =========================================================================
    # Output Methods
    # =========================================================================

    @property
    def program(self) -> Program:
        """The last assembled program."""
        if self._program is None:
            raise AssemblerError("nothing has been assembled yet")
        return self._program

    def get_words(self) -> list[int]:
        return list(self.program.words)

    def get_symbols(self) -> dict[str, int]:
        return dict(self.program.symbols)

    def get_listing(self) -> str:
        return self.program.get_listing()

    def write_binary(self, filepath: str | Path) -> None:
        """Write the machine image (big-endian 16-bit words)."""
        self.program.write_binary(filepath)
        logger.debug(f"wrote {len(self.program)} words to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        self.program.write_listing(filepath)

    def write_symbols(self, filepath: str | Path) -> None:
        self.program.write_symbols(filepath)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> Program:
    """
    Convenience function to assemble source code.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> Program:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_file(filepath)
