"""
Tests for str index to UTF-8 byte offset conversion
"""

import pytest

from .offsets import ByteOffsetMap, utf8Length
from .types import ByteRange


class TestByteOffsetMap:
    """Test ByteOffsetMap"""

    def test_utf8_length(self):
        assert [utf8Length(char) for char in "aé►😀"] == [1, 2, 3, 4]

    def test_ascii_is_identity(self):
        offsets = ByteOffsetMap("hello")
        assert offsets.toByte(0) == 0
        assert offsets.toByte(5) == 5
        assert offsets.byteLength == 5

    def test_multibyte(self):
        text = "aé►😀b"
        offsets = ByteOffsetMap(text)
        assert [offsets.toByte(i) for i in range(len(text) + 1)] == [0, 1, 3, 6, 10, 11]
        assert offsets.byteLength == len(text.encode("utf-8"))
        assert offsets.toByteRange(1, 3) == ByteRange(1, 6)

    def test_empty_text(self):
        offsets = ByteOffsetMap("")
        assert offsets.byteLength == 0
        assert offsets.toByteRange(0, 0) == ByteRange(0, 0)

    def test_out_of_range(self):
        offsets = ByteOffsetMap("abc")
        with pytest.raises(IndexError):
            offsets.toByte(4)
        with pytest.raises(IndexError):
            offsets.toByte(-1)

    def test_byte_range_slice(self):
        text = "héllo"
        assert ByteRange(1, 3).sliceOf(text) == "é"
        assert ByteRange(0, 1).sliceOf("abc") == "a"
        assert ByteRange(2, 2).isEmpty()
        assert repr(ByteRange(3, 7)) == "3..7"
