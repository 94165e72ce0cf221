"""
VM16 SDK Error Hierarchy
========================

This module defines the exception hierarchy for the VM16 toolchain.
All exceptions inherit from Vm16Error, allowing callers to catch all
toolchain errors with a single except clause if desired.

Exception Hierarchy
-------------------
Vm16Error (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - malformed source structure
    ├── MalformedIntegerError - literal is not a number in its radix
    ├── ValueTooLargeError - value does not fit its bit width
    ├── NegativeNotAllowedError - negative literal
    ├── UndefinedSymbolError - reference to undefined label/symbol
    ├── ArgumentCountError - wrong number of operands
    ├── InvalidDirectionError - SHF direction other than L/R
    ├── AmountOutOfRangeError - SHF amount outside 1..8
    ├── InvalidValueConditionError - BRN value condition not NZP
    ├── InvalidFlagConditionError - BRN flag condition not C/V/-
    ├── InvalidLabelError - malformed (label)
    ├── InvalidLongStringModeError - unknown .long-string mode
    ├── UnknownDirectiveError - unknown .directive
    ├── UnknownInstructionError - unknown mnemonic
    ├── MissingFileError - .include/.copy target not found
    ├── CircularIncludeError - file includes itself
    ├── FileReadError - .include/.copy target cannot be read
    ├── ImageFormatError - .copy target is not a word image
    ├── TargetBehindCurrentAddressError - .move backwards
    └── AddressSpaceError - program larger than 64K words

Every assembly error is fatal. The assembler attaches the source location
of the offending line before the error leaves the driver, so the message
always reads:

    filename:line: error: description
        source_line_text
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Vm16Error(Exception):
    """
    Base exception for all VM16 toolchain errors.

        try:
            Assembler().assemble_file("program.asm")
        except Vm16Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number within that file (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Vm16Error):
    """
    Base exception for all assembler-related errors.

    Errors raised deep inside operand parsing do not know where they
    happened; the driver calls locate() with the current line before
    re-raising, and the formatted message is rebuilt.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def locate(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> "AssemblerError":
        """
        Attach a source location unless one is already set.

        The innermost caller that knows the line wins, so a continuation
        line of a multi-line directive keeps its own location.

        Returns:
            self, so callers can write ``raise error.locate(...)``
        """
        if self.location is None:
            self.location = location
            if source_line is not None:
                self.source_line = source_line
            self.args = (self._format_message(),)
        return self

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.asm:15: error: undefined symbol 'R16'
                ADD R1 R2 R16
            hint: did you mean 'R1'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Structural error in assembly source code.

    Examples:
        - .array without an opening '[' or a closing ']'
        - .long-string without .end-long-string
        - .end-long-string with no open .long-string
    """
    pass


class MalformedIntegerError(AssemblerError):
    """
    Literal is not a valid number in its radix.

    Also raised for C-style hex ("0x1F"), which is not a supported prefix;
    hexadecimal literals are written "$1F".
    """

    def __init__(self, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        hint = None
        if text[:2].lower() == "0x":
            hint = f"write hexadecimal as '${text[2:]}'"
        super().__init__(f"Malformed integer: '{text}'", location=location, hint=hint)


class ValueTooLargeError(AssemblerError):
    """Value does not fit in the bit width of its operand field."""

    def __init__(self, text: str, limit: int, location: Optional[SourceLocation] = None):
        self.text = text
        self.limit = limit
        super().__init__(f"Value must be less than {limit}: '{text}'", location=location)


class NegativeNotAllowedError(AssemblerError):
    """Negative numbers are never accepted as literals."""

    def __init__(self, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        super().__init__(f"Negative numbers not allowed: '{text}'", location=location)


class UndefinedSymbolError(AssemblerError):
    """
    Reference to an undefined symbol (label or constant).

    Raised during the second pass for forward references, or during the
    first pass by directives that resolve immediately (.set, .move,
    .fill-array count).

    The symbol table suggests similarly-named symbols when this error
    occurs, helping to catch typos.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ArgumentCountError(AssemblerError):
    """
    Wrong number of operands for an instruction or directive.

    Example:
        BRN R1 NZP R2 R3  ; Error: BRN takes 2 or 3 operands
    """

    def __init__(
        self,
        name: str,
        expected: str,
        received: str,
        location: Optional[SourceLocation] = None,
    ):
        self.name = name
        self.expected = expected
        self.received = received
        super().__init__(
            f"'{name}' expected {expected}, received: '{received}'",
            location=location,
        )


class InvalidDirectionError(AssemblerError):
    """SHF direction must be exactly L or R."""

    def __init__(self, direction: str, location: Optional[SourceLocation] = None):
        self.direction = direction
        super().__init__(
            f"Direction must be L or R, received: '{direction}'",
            location=location,
        )


class AmountOutOfRangeError(AssemblerError):
    """SHF amount must be between 1 and 8."""

    def __init__(self, amount: int, location: Optional[SourceLocation] = None):
        self.amount = amount
        super().__init__(
            f"Shift amount must be between 1 and 8, received: '{amount}'",
            location=location,
        )


class InvalidValueConditionError(AssemblerError):
    """BRN value condition must be a combination of N, Z and P."""

    def __init__(self, condition: str, location: Optional[SourceLocation] = None):
        self.condition = condition
        super().__init__(
            f"Invalid value condition, must be combination of NZP, received: '{condition}'",
            location=location,
        )


class InvalidFlagConditionError(AssemblerError):
    """BRN flag condition must be C, V or -."""

    def __init__(self, condition: str, location: Optional[SourceLocation] = None):
        self.condition = condition
        super().__init__(
            f"Invalid flag condition, must be C V or -, received: '{condition}'",
            location=location,
        )


class InvalidLabelError(AssemblerError):
    """
    Malformed label definition.

    Labels are written alone on a line as "(name)".
    """

    def __init__(self, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        super().__init__(
            f"Invalid label: '{text}'",
            location=location,
            hint="labels are written as '(name)' on a line of their own",
        )


class InvalidLongStringModeError(AssemblerError):
    """.long-string mode must be keep-newlines or strip-newlines."""

    def __init__(self, mode: str, location: Optional[SourceLocation] = None):
        self.mode = mode
        super().__init__(
            f"Invalid .long-string mode: '{mode}'",
            location=location,
            hint="use 'keep-newlines' or 'strip-newlines'",
        )


class UnknownDirectiveError(AssemblerError):
    """Directive name has no handler."""

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        self.name = name
        super().__init__(f"Unknown directive: '{name}'", location=location)


class UnknownInstructionError(AssemblerError):
    """First word of a line is not an instruction or pseudo-instruction."""

    def __init__(self, mnemonic: str, location: Optional[SourceLocation] = None):
        self.mnemonic = mnemonic
        super().__init__(f"Unknown instruction: '{mnemonic}'", location=location)


class MissingFileError(AssemblerError):
    """
    File named by .include or .copy does not exist.

    Attributes:
        filename: The name as written in the source
        search_paths: Directories that were searched
    """

    def __init__(
        self,
        filename: str,
        location: Optional[SourceLocation] = None,
        search_paths: Optional[list[str]] = None,
    ):
        self.filename = filename
        self.search_paths = search_paths or []

        hint = None
        if self.search_paths:
            hint = f"searched in: {', '.join(self.search_paths)}"

        super().__init__(f"File not found: '{filename}'", location=location, hint=hint)


class CircularIncludeError(AssemblerError):
    """A file includes itself, directly or through other includes."""

    def __init__(self, filename: str, location: Optional[SourceLocation] = None):
        self.filename = filename
        super().__init__(f"Circular include of '{filename}'", location=location)


class FileReadError(AssemblerError):
    """
    File named by .include or .copy exists but cannot be read.

    Raised for permission problems, other I/O failures and source files
    that are not valid UTF-8.
    """

    def __init__(
        self,
        filename: str,
        reason: str,
        location: Optional[SourceLocation] = None,
    ):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Cannot read '{filename}': {reason}", location=location)


class ImageFormatError(AssemblerError):
    """A machine image does not hold a whole number of 16-bit words."""
    pass


class TargetBehindCurrentAddressError(AssemblerError):
    """.move target lies before the current word index."""

    def __init__(self, target: int, current: int, location: Optional[SourceLocation] = None):
        self.target = target
        self.current = current
        super().__init__(
            f"Target address ${target:04X} is behind current address ${current:04X}",
            location=location,
        )


class AddressSpaceError(AssemblerError):
    """Program does not fit in the 64K-word address space."""
    pass
