"""
Assembler Directives
====================

Directives start with a dot. They emit data, pad the image, splice in
other files and define symbols.

| Directive                  | Words                | Resolved   |
|----------------------------|----------------------|------------|
| .set name value            | 0                    | pass 1     |
| .word value                | 1                    | pass 2     |
| .array [ v1 v2 ... ]       | element count        | pass 2     |
| .fill-array count value    | count                | count: 1, value: 2 |
| .move address              | address - word index | pass 1     |
| .string text  (.str)       | 1 + len(text)        | pass 1     |
| .long-string mode          | 1 + len(body)        | pass 1     |
| .include file              | 0 (splices source)   | pass 1     |
| .copy file                 | words in the image   | pass 1     |

Values resolved in pass 1 must use literals or symbols defined earlier in
the source. In particular .move cannot target a label defined further
down.

Strings are stored length-first, one character per word:

    .string Hi!    ->    3, 'H', 'i', '!'

.array and .long-string continue over several lines:

    .array [ 1 2 3
             4 5 6 ]

    .long-string keep-newlines
    Hello,
      World
    .end-long-string

Dispatch
--------
A directive name maps to its handler class by capitalizing its
hyphen-separated words: ``.fill-array`` is handled by FillArrayDirective.
Handlers are looked up in the closed DIRECTIVES table.
"""

from pathlib import Path
from typing import Mapping
import logging
import re

from vm16.errors import (
    AssemblerError,
    AssemblySyntaxError,
    CircularIncludeError,
    InvalidLongStringModeError,
    TargetBehindCurrentAddressError,
    UnknownDirectiveError,
)
from vm16.assembler.commands import Command, PassContext, split_args
from vm16.assembler.literals import check_range, is_literal
from vm16.assembler.tokens import Token

logger = logging.getLogger(__name__)


END_LONG_STRING = ".end-long-string"

LONG_STRING_SEPARATORS = {
    "keep-newlines": "\n",
    "strip-newlines": "",
}


def directive_handler_name(directive: str) -> str:
    """
    Return the handler class name for a directive.

    >>> directive_handler_name(".fill-array")
    'FillArrayDirective'
    """
    words = directive.lstrip(".").split("-")
    return "".join(word.capitalize() for word in words) + "Directive"


def encode_string(text: str) -> list[int]:
    """Encode text as [length, ord(c0), ord(c1), ...]."""
    words = [check_range(ord(char), 16, repr(char)) for char in text]
    return [check_range(len(words), 16, f"string of {len(words)} characters")] + words


def _unquote(name: str) -> str:
    if len(name) >= 2 and name[0] == name[-1] == '"':
        return name[1:-1]
    return name


class Directive(Command):
    """Base class for directives; constructed in pass 1 with a PassContext."""

    word_length = 0
    name = ""

    def __init__(self, args: str, ctx: PassContext):
        super().__init__()
        self.args = args

    def machine_code(self, symbols: Mapping[str, int]) -> list[int]:
        return []


# =============================================================================
# Symbols
# =============================================================================

class SetDirective(Directive):
    """.set name value: define a constant from a literal or earlier symbol."""

    name = ".set"

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        symbol, value = split_args(self.name, args, (2,))
        if is_literal(symbol) or symbol.startswith("("):
            raise AssemblySyntaxError(f"cannot use '{symbol}' as a symbol name")
        self.symbol = symbol
        self.value = Token.parse(value).resolve(ctx.symbols)
        ctx.symbols.define(symbol, self.value, ctx.line.location)


# =============================================================================
# Data
# =============================================================================

class WordDirective(Directive):
    """.word value"""

    name = ".word"
    word_length = 1

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        (value,) = split_args(self.name, args, (1,))
        self.value = Token.parse(value)

    def machine_code(self, symbols):
        return [self.value.resolve(symbols)]


class ArrayDirective(Directive):
    """
    .array [ v1 v2 ... ]

    Pulls continuation lines from the cursor until one contains ']'.
    Elements are parsed as each line is read, so an error is reported on
    the line where the bad element is.
    """

    name = ".array"

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        if not args.startswith("["):
            raise AssemblySyntaxError("Array must start with '['")

        self.elements: list[Token] = []
        text = args[1:]
        line = ctx.line
        while True:
            body, closed, rest = text.partition("]")
            try:
                self.elements.extend(Token.parse(element) for element in body.split())
                if closed and rest.strip():
                    raise AssemblySyntaxError(f"unexpected text after ']': '{rest.strip()}'")
            except AssemblerError as e:
                raise e.locate(line.location, line.text)
            if closed:
                break
            line = ctx.cursor.pop_line()
            if line is None:
                raise AssemblySyntaxError("Array is missing its closing ']'")
            text = line.content

        self.word_length = len(self.elements)

    def machine_code(self, symbols):
        return [element.resolve(symbols) for element in self.elements]


class FillArrayDirective(Directive):
    """.fill-array count value: ``count`` copies of ``value``."""

    name = ".fill-array"

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        count, value = split_args(self.name, args, (2,))
        self.word_length = Token.parse(count).resolve(ctx.symbols)
        self.value = Token.parse(value)

    def machine_code(self, symbols):
        return [self.value.resolve(symbols)] * self.word_length


class MoveDirective(Directive):
    """.move address: pad with zeros up to ``address``."""

    name = ".move"

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        (address,) = split_args(self.name, args, (1,))
        self.target = Token.parse(address).resolve(ctx.symbols)
        if self.target < ctx.word_index:
            raise TargetBehindCurrentAddressError(self.target, ctx.word_index)
        self.word_length = self.target - ctx.word_index

    def machine_code(self, symbols):
        return [0] * self.word_length


# =============================================================================
# Strings
# =============================================================================

class StringDirective(Directive):
    """
    .string text

    The text is everything after the directive name and the whitespace
    that follows it, taken from the raw line: '#' and quotes are literal,
    trailing whitespace is kept.
    """

    name = ".string"

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        parts = re.split(r"\s+", ctx.line.text.lstrip(), maxsplit=1)
        self.text = parts[1] if len(parts) > 1 else ""
        self.words = encode_string(self.text)
        self.word_length = len(self.words)

    def machine_code(self, symbols):
        return list(self.words)


class StrDirective(StringDirective):
    """.str: short form of .string."""

    name = ".str"


class LongStringDirective(Directive):
    """
    .long-string keep-newlines|strip-newlines

    Body lines are taken verbatim up to a .end-long-string line and joined
    with newlines (keep-newlines) or nothing (strip-newlines).
    """

    name = ".long-string"

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        (mode,) = split_args(self.name, args, (1,))
        if mode not in LONG_STRING_SEPARATORS:
            raise InvalidLongStringModeError(mode)

        body = []
        while True:
            line = ctx.cursor.pop_line()
            if line is None:
                raise AssemblySyntaxError(f".long-string is missing '{END_LONG_STRING}'")
            if line.content == END_LONG_STRING:
                break
            body.append(line.text)

        self.text = LONG_STRING_SEPARATORS[mode].join(body)
        self.words = encode_string(self.text)
        self.word_length = len(self.words)

    def machine_code(self, symbols):
        return list(self.words)


class EndLongStringDirective(Directive):
    """Only valid as the terminator consumed by LongStringDirective."""

    name = END_LONG_STRING

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        raise AssemblySyntaxError(f"'{END_LONG_STRING}' without '.long-string'")


# =============================================================================
# Files
# =============================================================================

class IncludeDirective(Directive):
    """.include file: splice another source file in at this point."""

    name = ".include"

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        (filename,) = split_args(self.name, args, (1,))
        filename = _unquote(filename)
        path = ctx.loader.resolve(filename, ctx.line.location)

        including = {
            Path(name).resolve() for name in ctx.line.includes if not name.startswith("<")
        }
        if path.resolve() in including:
            raise CircularIncludeError(filename)

        lines = ctx.loader.read_lines(path, ctx.line.location)
        ctx.cursor.include_lines(str(path), lines, parent=ctx.line)
        self.path = path
        logger.debug(f"{ctx.line.location}: included {path} ({len(lines)} lines)")


class CopyDirective(Directive):
    """.copy file: splice the words of a machine image in at this point."""

    name = ".copy"

    def __init__(self, args: str, ctx: PassContext):
        super().__init__(args, ctx)
        (filename,) = split_args(self.name, args, (1,))
        self.path = ctx.loader.resolve(_unquote(filename), ctx.line.location)
        self.words = ctx.loader.read_words(self.path, ctx.line.location)
        self.word_length = len(self.words)
        logger.debug(f"{ctx.line.location}: copied {self.word_length} words from {self.path}")

    def machine_code(self, symbols):
        return list(self.words)


DIRECTIVES: dict[str, type[Directive]] = {
    cls.__name__: cls
    for cls in (
        SetDirective,
        WordDirective,
        ArrayDirective,
        FillArrayDirective,
        MoveDirective,
        StringDirective,
        StrDirective,
        LongStringDirective,
        EndLongStringDirective,
        IncludeDirective,
        CopyDirective,
    )
}


def make_directive(directive: str, args: str, ctx: PassContext) -> Directive:
    """
    Create the handler for a directive line.

    Raises:
        UnknownDirectiveError: No handler for ``directive``
    """
    handler = DIRECTIVES.get(directive_handler_name(directive))
    if handler is None or handler.name != directive:
        raise UnknownDirectiveError(directive)
    return handler(args, ctx)
