"""
Conversion of str indices to UTF-8 byte offsets.
"""

from itertools import accumulate
from typing import List, Optional

from .types import ByteRange


def utf8Length(char: str) -> int:
    codePoint = ord(char)
    if codePoint < 0x80:
        return 1
    if codePoint < 0x800:
        return 2
    if codePoint < 0x10000:
        return 3
    return 4


class ByteOffsetMap:
    """
    Maps character indices of one string to byte offsets of its UTF-8 encoding.

    ASCII input maps every index to itself without building a table.
    """

    def __init__(self, text: str):
        self.length = len(text)
        self._offsets: Optional[List[int]] = None
        if not text.isascii():
            self._offsets = [0, *accumulate(utf8Length(char) for char in text)]

    @property
    def byteLength(self) -> int:
        return self.toByte(self.length)

    def toByte(self, index: int) -> int:
        if not 0 <= index <= self.length:
            raise IndexError(f"Index {index} outside of text of length {self.length}")
        if self._offsets is None:
            return index
        return self._offsets[index]

    def toByteRange(self, start: int, end: int) -> ByteRange:
        return ByteRange(self.toByte(start), self.toByte(end))
