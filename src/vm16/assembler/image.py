"""
Machine Image Format
====================

An assembled program is stored as a flat sequence of 16-bit words,
big-endian (most significant byte first), with no header. The same format
is read back by the .copy directive, so a previously assembled image can
be spliced verbatim into a new program.

```
Offset  Size  Description
------  ----  -----------
0       2     Word at address 0 (big-endian)
2       2     Word at address 1
...
2n      2     Word at address n
```
"""

from pathlib import Path
from typing import Iterable
import struct

from vm16.errors import ImageFormatError


def pack_words(words: Iterable[int]) -> bytes:
    """Encode words as big-endian 16-bit values."""
    words = list(words)
    return struct.pack(f">{len(words)}H", *words)


def unpack_words(data: bytes, name: str = "<image>") -> list[int]:
    """
    Decode big-endian 16-bit words.

    Raises:
        ImageFormatError: ``data`` has an odd number of bytes
    """
    if len(data) % 2:
        raise ImageFormatError(
            f"'{name}' is not a word image: {len(data)} bytes is not a whole number of words"
        )
    return list(struct.unpack(f">{len(data) // 2}H", data))


def read_image(filepath: str | Path) -> list[int]:
    """Read a machine image file."""
    filepath = Path(filepath)
    return unpack_words(filepath.read_bytes(), str(filepath))


def write_image(filepath: str | Path, words: Iterable[int]) -> None:
    """Write words to a machine image file."""
    Path(filepath).write_bytes(pack_words(words))
