"""
Assembled Programs
==================

The result of the second pass: every pending command turned into its
words, plus the final symbol table. A Program can render itself as a
listing, a word dump or a symbol listing, and write its machine image.

Listing Format
--------------
```
Addr  Words                    Source
----  -----------------------  ------------------------------
0000  1127 2347                WRD $1234 R7
0002  0000 0000 0000 0000 ...  .move $00FF   (253 words)
00FF  0000                     END
```
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from vm16.errors import SourceLocation
from vm16.assembler.image import write_image


# Words shown per listing row before eliding the rest
LISTING_WORDS = 4

# Words per row of the word dump
DUMP_WORDS = 8


@dataclass(frozen=True)
class AssembledCommand:
    """
    A command after pass 2.

    Attributes:
        address: Word index of the first word
        words: The emitted words
        location: Source location of the command
        source_text: Significant source text
    """
    address: int
    words: tuple[int, ...]
    location: Optional[SourceLocation] = None
    source_text: str = ""


@dataclass
class Program:
    """
    An assembled program.

    Attributes:
        words: The machine image, in address order
        symbols: Final symbol table (name -> value)
        commands: Per-command breakdown, in source order
    """
    words: list[int] = field(default_factory=list)
    symbols: dict[str, int] = field(default_factory=dict)
    commands: list[AssembledCommand] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.words)

    # =========================================================================
    # Formatting
    # =========================================================================

    def get_listing(self) -> str:
        """Return the annotated source listing."""
        lines = [
            "Addr  Words                    Source",
            "----  -----------------------  " + "-" * 30,
        ]
        for cmd in self.commands:
            shown = " ".join(f"{w:04X}" for w in cmd.words[:LISTING_WORDS])
            source = cmd.source_text
            if len(cmd.words) > LISTING_WORDS:
                shown += " ..."
                source += f"   ({len(cmd.words)} words)"
            lines.append(f"{cmd.address:04X}  {shown:23s}  {source}".rstrip())
        return "\n".join(lines)

    def get_word_dump(self) -> str:
        """Return the machine image as rows of hex words."""
        rows = []
        for start in range(0, len(self.words), DUMP_WORDS):
            chunk = self.words[start:start + DUMP_WORDS]
            rows.append(f"{start:04X}: " + " ".join(f"{w:04X}" for w in chunk))
        return "\n".join(rows)

    def get_symbol_listing(self) -> str:
        """Return the symbol table, one 'name => value' per line."""
        width = max((len(name) for name in self.symbols), default=0)
        return "\n".join(
            f"  {name.rjust(width)} => {value} (${value:04X})"
            for name, value in sorted(self.symbols.items())
        )

    # =========================================================================
    # Output
    # =========================================================================

    def write_binary(self, filepath: str | Path) -> None:
        """Write the machine image (big-endian 16-bit words)."""
        write_image(filepath, self.words)

    def write_listing(self, filepath: str | Path) -> None:
        Path(filepath).write_text(self.get_listing() + "\n", encoding="utf-8")

    def write_symbols(self, filepath: str | Path) -> None:
        with open(filepath, "w", encoding="utf-8") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by vm16asm\n")
            for name, value in sorted(self.symbols.items()):
                f.write(f"{name} ${value:04X}\n")
