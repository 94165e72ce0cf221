# =============================================================================
# test_directives.py - Directive Tests
# =============================================================================
# Tests for the assembler directives, constructed the way the first pass
# constructs them: from a source line, with the cursor and symbol table of
# the current assembly.
#
# Test coverage includes:
#   - .move padding and backwards targets
#   - .word, .array (single and multi-line), .fill-array
#   - .string/.str and .long-string in both modes
#   - .set, .include and .copy
#   - Directive name dispatch
# =============================================================================

import tempfile
from pathlib import Path

import pytest

from vm16.assembler.commands import PassContext
from vm16.assembler.directives import (
    DIRECTIVES,
    directive_handler_name,
    encode_string,
    make_directive,
)
from vm16.assembler.image import write_image
from vm16.assembler.source import SourceCursor, SourceLine, SourceLoader
from vm16.assembler.symbols import SymbolTable
from vm16.errors import (
    ArgumentCountError,
    AssemblySyntaxError,
    CircularIncludeError,
    ImageFormatError,
    InvalidLongStringModeError,
    MalformedIntegerError,
    MissingFileError,
    TargetBehindCurrentAddressError,
    UndefinedSymbolError,
    UnknownDirectiveError,
)


# =============================================================================
# Helper Functions
# =============================================================================

def handle(
    directive: str,
    args: str,
    word_index: int = 0,
    lines=(),
    symbols: SymbolTable | None = None,
    filename: str = "f.asm",
    include_paths=(),
    cursor: SourceCursor | None = None,
):
    """
    Build a directive from a "<directive>\\t<args>" line at line 5.

    Continuation lines come from ``lines`` (or an explicit cursor).
    """
    line = SourceLine(filename, 5, f"{directive}\t{args}", (filename,))
    if cursor is None:
        cursor = SourceCursor().include_lines(filename, list(lines))
    if symbols is None:
        symbols = SymbolTable()
    ctx = PassContext(cursor, symbols, word_index, line, SourceLoader(include_paths))
    parts = line.content.split(maxsplit=1)
    return make_directive(parts[0], parts[1] if len(parts) > 1 else "", ctx)


def check(command, expected, symbols: SymbolTable | None = None):
    """Assert that word_length and machine_code agree with expected."""
    if symbols is None:
        symbols = SymbolTable()
    words = command.machine_code(symbols)
    assert command.word_length == len(expected)
    assert len(words) == len(expected)
    assert words == expected


def string_words(text: str) -> list[int]:
    return [len(text)] + [ord(c) for c in text]


# =============================================================================
# Dispatch Tests
# =============================================================================

class TestDispatch:
    """Test mapping directive names to handlers."""

    @pytest.mark.parametrize("directive,class_name", [
        (".set", "SetDirective"),
        (".word", "WordDirective"),
        (".array", "ArrayDirective"),
        (".fill-array", "FillArrayDirective"),
        (".string", "StringDirective"),
        (".str", "StrDirective"),
        (".long-string", "LongStringDirective"),
        (".end-long-string", "EndLongStringDirective"),
        (".move", "MoveDirective"),
        (".include", "IncludeDirective"),
        (".copy", "CopyDirective"),
    ])
    def test_handler_name(self, directive, class_name):
        assert directive_handler_name(directive) == class_name
        assert class_name in DIRECTIVES

    @pytest.mark.parametrize("directive", [".org", ".bogus", ".Word", ".WORD", ".fill_array"])
    def test_unknown_directive(self, directive):
        with pytest.raises(UnknownDirectiveError) as exc_info:
            handle(directive, "1")
        assert directive in str(exc_info.value)


# =============================================================================
# .move Tests
# =============================================================================

class TestMove:
    """Test zero padding up to an address."""

    def test_move_literal(self):
        """From word index $10 to $FF is 239 words."""
        check(handle(".move", "$00FF", 0x10), [0] * 239)

    def test_move_device_symbol(self):
        check(handle(".move", "sound", 5), [0] * (0xD800 - 5))

    def test_move_to_current(self):
        check(handle(".move", "7", 7), [])

    def test_move_backwards(self):
        with pytest.raises(TargetBehindCurrentAddressError) as exc_info:
            handle(".move", "4", 10)
        assert exc_info.value.target == 4
        assert exc_info.value.current == 10

    def test_move_needs_defined_symbol(self):
        """.move resolves immediately, so forward references fail."""
        with pytest.raises(UndefinedSymbolError):
            handle(".move", "later", 0)


# =============================================================================
# .word Tests
# =============================================================================

class TestWord:
    """Test single data words."""

    def test_literal(self):
        check(handle(".word", "42"), [42])

    def test_symbol(self):
        check(handle(".word", "sound"), [0xD800])

    def test_forward_reference(self):
        command = handle(".word", "later")
        symbols = SymbolTable()
        symbols.define("later", 99)
        check(command, [99], symbols)

    def test_needs_one_argument(self):
        with pytest.raises(ArgumentCountError):
            handle(".word", "1 2")


# =============================================================================
# .array Tests
# =============================================================================

class TestArray:
    """Test bracketed word lists."""

    @pytest.mark.parametrize("args,lines,words", [
        ("[1 2 3]", [], [1, 2, 3]),
        ("[ 1 2 3", ["  4 5 6", "  7 8 9]"], [1, 2, 3, 4, 5, 6, 7, 8, 9]),
        ("[", ["\t1", " 2", "]\t"], [1, 2]),
        ("[$FFFF %0110_0000_1001_1111 64]", [], [0xFFFF, 0b0110_0000_1001_1111, 64]),
        ("[]", [], []),
        ("[ 1 # one", ["# nothing here", "2 ] # two"], [1, 2]),
    ])
    def test_array(self, args, lines, words):
        cursor = SourceCursor().include_lines("f.asm", lines)
        check(handle(".array", args, cursor=cursor), words)
        assert cursor.is_empty()

    def test_does_not_consume_past_close(self):
        cursor = SourceCursor().include_lines("f.asm", ["2]", "END"])
        check(handle(".array", "[1", cursor=cursor), [1, 2])
        assert cursor.pop_line().text == "END"

    def test_symbols(self):
        check(handle(".array", "[sound keyboard R3]"), [0xD800, 0xFFFA, 3])

    def test_missing_open_bracket(self):
        with pytest.raises(AssemblySyntaxError):
            handle(".array", "1 2 3]")

    def test_missing_close_bracket(self):
        with pytest.raises(AssemblySyntaxError):
            handle(".array", "[1 2", lines=["3 4"])

    def test_text_after_close(self):
        with pytest.raises(AssemblySyntaxError):
            handle(".array", "[1 2] 3")

    def test_error_on_continuation_line(self):
        """A bad element is reported on the line it is written on."""
        with pytest.raises(MalformedIntegerError) as exc_info:
            handle(".array", "[1 2", lines=["3 0x4]"])
        assert exc_info.value.location.filename == "f.asm"
        assert exc_info.value.location.line == 1


# =============================================================================
# .fill-array Tests
# =============================================================================

class TestFillArray:
    """Test repeated words."""

    @pytest.mark.parametrize("args,words", [
        ("1 0", [0]),
        ("3 42", [42, 42, 42]),
        ("4 $FF", [0xFF] * 4),
        ("2 %1010_1100", [0xAC, 0xAC]),
        ("3 sound", [0xD800] * 3),
        ("0 7", []),
    ])
    def test_fill_array(self, args, words):
        check(handle(".fill-array", args), words)

    def test_count_from_earlier_symbol(self):
        symbols = SymbolTable()
        symbols.define("size", 2)
        check(handle(".fill-array", "size 9", symbols=symbols), [9, 9])

    def test_needs_two_arguments(self):
        with pytest.raises(ArgumentCountError):
            handle(".fill-array", "3")


# =============================================================================
# String Tests
# =============================================================================

class TestString:
    """Test length-prefixed strings."""

    @pytest.mark.parametrize("text", [
        "", "a", "a ", "a \t", "abc", "a b c", 'a "b" c', "Hellow World",
        'She said "hi" ', "Item #1",
    ])
    @pytest.mark.parametrize("directive", [".str", ".string"])
    def test_string(self, directive, text):
        """Everything after the directive and one separator is literal."""
        check(handle(directive, text), string_words(text))

    def test_quotes_are_characters(self):
        check(handle(".str", '"abc"'), string_words('"abc"'))

    def test_encode_string(self):
        assert encode_string("Hi") == [2, 72, 105]


class TestLongString:
    """Test multi-line strings."""

    BODIES = [
        [".end-long-string"],
        [" a b ", ".end-long-string  # end"],
        [" a", "b ", ".end-long-string\t# end"],
        ["a", '\t"b"  \t', "c d", ".end-long-string"],
    ]

    @pytest.mark.parametrize("lines", BODIES)
    @pytest.mark.parametrize("mode,separator", [
        ("keep-newlines", "\n"),
        ("strip-newlines", ""),
    ])
    def test_long_string(self, mode, separator, lines):
        cursor = SourceCursor().include_lines("f.asm", lines)
        expected = string_words(separator.join(lines[:-1]))
        check(handle(".long-string", mode, cursor=cursor), expected)
        assert cursor.is_empty()

    def test_invalid_mode(self):
        with pytest.raises(InvalidLongStringModeError):
            handle(".long-string", "keep", lines=[".end-long-string"])

    def test_missing_end(self):
        with pytest.raises(AssemblySyntaxError):
            handle(".long-string", "keep-newlines", lines=["text"])

    def test_end_without_start(self):
        with pytest.raises(AssemblySyntaxError):
            handle(".end-long-string", "")


# =============================================================================
# .set Tests
# =============================================================================

class TestSet:
    """Test constant definitions."""

    def test_set_literal(self):
        symbols = SymbolTable()
        command = handle(".set", "count $10", symbols=symbols)
        assert symbols["count"] == 16
        check(command, [])

    def test_set_from_symbol(self):
        symbols = SymbolTable()
        handle(".set", "speaker sound", symbols=symbols)
        assert symbols["speaker"] == 0xD800

    def test_set_forward_reference_fails(self):
        with pytest.raises(UndefinedSymbolError):
            handle(".set", "x later")

    def test_literal_name_rejected(self):
        with pytest.raises(AssemblySyntaxError):
            handle(".set", "5 6")

    def test_needs_two_arguments(self):
        with pytest.raises(ArgumentCountError):
            handle(".set", "x")


# =============================================================================
# File Directive Tests
# =============================================================================

class TestInclude:
    """Test splicing source files."""

    def test_include_splices_lines(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            lib = Path(tmpdir) / "lib.asm"
            lib.write_text("ADD R1 R2 R3\nEND\n")
            main = str(Path(tmpdir) / "main.asm")

            cursor = SourceCursor().include_lines(main, ["NOP"])
            command = handle(".include", "lib.asm", filename=main, cursor=cursor)
            check(command, [])

            lines = [cursor.pop_line() for _ in range(3)]
            assert [line.text for line in lines] == ["ADD R1 R2 R3", "END", "NOP"]
            assert lines[0].filename == str(lib)

    def test_include_quoted_name(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "lib.asm").write_text("END\n")
            cursor = SourceCursor()
            handle(".include", '"lib.asm"', include_paths=[tmpdir], cursor=cursor)
            assert cursor.pop_line().text == "END"

    def test_include_missing(self):
        with pytest.raises(MissingFileError):
            handle(".include", "does-not-exist.asm")

    def test_include_self(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            main = Path(tmpdir) / "main.asm"
            main.write_text(".include main.asm\n")
            with pytest.raises(CircularIncludeError):
                handle(".include", "main.asm", filename=str(main))


class TestCopy:
    """Test splicing machine images."""

    def test_copy_words(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            write_image(Path(tmpdir) / "lib.bin", [0x5123, 0xD800, 0])
            command = handle(".copy", "lib.bin", include_paths=[tmpdir])
            check(command, [0x5123, 0xD800, 0])

    def test_copy_missing(self):
        with pytest.raises(MissingFileError):
            handle(".copy", "does-not-exist.bin")

    def test_copy_odd_length(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "odd.bin").write_bytes(b"\x01\x02\x03")
            with pytest.raises(ImageFormatError):
                handle(".copy", "odd.bin", include_paths=[tmpdir])

    def test_copy_needs_one_argument(self):
        with pytest.raises(ArgumentCountError):
            handle(".copy", "a.bin b.bin")
