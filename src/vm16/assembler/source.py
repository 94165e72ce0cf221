"""
Source Lines and the Source Cursor
==================================

The assembler reads its input one line at a time. Most lines are consumed
by the driver, but some directives (.array, .long-string) keep pulling
lines until they see their terminator, and .include splices a whole file
in front of the remaining input. All of this goes through one
SourceCursor per assembly.

Every SourceLine remembers the file and line number it came from, so
lines spliced in by .include still report their own location.

Comments and Whitespace
-----------------------
``#`` starts a comment that runs to the end of the line. SourceLine.content
is the line with comments removed and outer whitespace trimmed. A
``.string`` line keeps its ``#`` characters, and .long-string bodies are
read from SourceLine.text, which is never altered.

Example
-------
>>> cursor = SourceCursor()
>>> _ = cursor.include_lines("main.asm", ["ADD R1 R2 R3   # sum", "", "END"])
>>> cursor.pop_line().content
'ADD R1 R2 R3'
>>> cursor.line_number
1
"""

from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence
import logging

from vm16.errors import FileReadError, MissingFileError, SourceLocation
from vm16.assembler.image import read_image

logger = logging.getLogger(__name__)


# Directives whose operand text is taken literally, comments included
RAW_DIRECTIVES = frozenset({".string", ".str"})


def strip_line(text: str) -> str:
    """
    Remove comments and outer whitespace from a source line.

    Returns:
        The significant text, or "" for blank and comment-only lines
    """
    stripped = text.strip()
    if not stripped or stripped.startswith("#"):
        return ""
    first_word = stripped.split(maxsplit=1)[0]
    if first_word in RAW_DIRECTIVES:
        return stripped
    return stripped.split("#", 1)[0].strip()


# =============================================================================
# Source Line
# =============================================================================

@dataclass(frozen=True)
class SourceLine:
    """
    One line of assembly source.

    Attributes:
        filename: File the line was read from
        line: Line number within that file (1-indexed)
        text: Raw text, without the line terminator
        includes: Resolved names of the files that led to this line,
                  outermost first, ending with this line's own file
    """
    filename: str
    line: int
    text: str
    includes: tuple[str, ...] = ()

    @property
    def content(self) -> str:
        """Text with comments and outer whitespace removed."""
        return strip_line(self.text)

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line)


# =============================================================================
# Source Cursor
# =============================================================================

class SourceCursor:
    """
    Ordered view over the lines still to be assembled.

    The cursor only moves forward: popped lines are never revisited, and
    line_number counts every line popped so far, including lines from
    included files.
    """

    def __init__(self, lines: Iterable[SourceLine] = ()):
        self._lines: deque[SourceLine] = deque(lines)
        self.line_number = 0

    def __len__(self) -> int:
        return len(self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def peek_line(self) -> Optional[SourceLine]:
        """Return the next line without consuming it, or None at the end."""
        return self._lines[0] if self._lines else None

    def pop_line(self) -> Optional[SourceLine]:
        """Consume and return the next line, or None at the end."""
        if not self._lines:
            return None
        self.line_number += 1
        return self._lines.popleft()

    def include_lines(
        self,
        filename: str,
        lines: Sequence[str],
        parent: Optional[SourceLine] = None,
    ) -> "SourceCursor":
        """
        Splice a file's lines in front of the remaining input.

        Args:
            filename: Name reported in diagnostics for these lines
            lines: Raw line texts; trailing newlines are removed
            parent: The line that included them, for include tracking

        Returns:
            self, so a cursor can be built in one expression
        """
        chain = (parent.includes if parent else ()) + (filename,)
        new_lines = [
            SourceLine(filename, number, text.rstrip("\r\n"), chain)
            for number, text in enumerate(lines, start=1)
        ]
        self._lines.extendleft(reversed(new_lines))
        return self


# =============================================================================
# File Loading
# =============================================================================

class SourceLoader:
    """
    Finds and reads the files named by .include and .copy.

    A name is resolved relative to the directory of the file containing
    the directive, then against each include path, then against the
    current directory.
    """

    def __init__(self, include_paths: Optional[Iterable[str | Path]] = None):
        self.include_paths: list[Path] = [Path(p) for p in include_paths or ()]

    def resolve(self, name: str, location: Optional[SourceLocation] = None) -> Path:
        """
        Resolve a file name written in the source to an existing path.

        Raises:
            MissingFileError: No candidate exists
        """
        candidates = []
        if location is not None and not location.filename.startswith("<"):
            candidates.append(Path(location.filename).parent / name)
        candidates.extend(path / name for path in self.include_paths)
        candidates.append(Path(name))

        for candidate in candidates:
            if candidate.is_file():
                logger.debug(f"resolved '{name}' to {candidate}")
                return candidate

        raise MissingFileError(
            name,
            location=location,
            search_paths=[str(p) for p in self.include_paths],
        )

    def read_lines(self, path: Path, location: Optional[SourceLocation] = None) -> list[str]:
        """
        Read an assembly source file as a list of lines.

        Raises:
            FileReadError: The file cannot be read or is not valid UTF-8
        """
        try:
            return path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(str(path), str(e), location=location) from e

    def read_words(self, path: Path, location: Optional[SourceLocation] = None) -> list[int]:
        """
        Read a machine image as a list of 16-bit words.

        Raises:
            FileReadError: The file cannot be read
            ImageFormatError: The file holds an odd number of bytes
        """
        try:
            return read_image(path)
        except OSError as e:
            raise FileReadError(str(path), str(e), location=location) from e
