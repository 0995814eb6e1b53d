"""
retrogfx - Byte Reader

Bounds-checked access to an in-memory byte span. Every read that would
fall outside the span raises InvalidInput instead of returning garbage,
so decoders can trust header-declared offsets only as far as the data
actually goes.
"""

from .errors import InvalidInput


class ByteReader:
    """
    Reads little- and big-endian integers from a byte span.

    Offsets are absolute; the reader keeps no cursor. Decoders that walk
    the data track their own position.
    """

    def __init__(self, data: bytes, name: str = "data"):
        """
        Args:
            data: Byte span to read from
            name: Label used in error messages (usually the format name)
        """
        self.data = bytes(data)
        self.name = name

    def __len__(self) -> int:
        return len(self.data)

    def require(self, offset: int, length: int) -> None:
        """
        Check that [length] bytes are available at [offset].

        Raises:
            InvalidInput: If the range is outside the span
        """
        if offset < 0 or length < 0 or offset + length > len(self.data):
            raise InvalidInput(
                f"{self.name}: read of {length} bytes at offset 0x{offset:X} "
                f"exceeds size {len(self.data)}"
            )

    def read(self, offset: int, length: int) -> bytes:
        """Read [length] raw bytes at [offset]."""
        self.require(offset, length)
        return self.data[offset : offset + length]

    def u8(self, offset: int) -> int:
        self.require(offset, 1)
        return self.data[offset]

    def s8(self, offset: int) -> int:
        value = self.u8(offset)
        return value - 0x100 if value & 0x80 else value

    def u16le(self, offset: int) -> int:
        """Read 16-bit little-endian word."""
        self.require(offset, 2)
        return self.data[offset] | (self.data[offset + 1] << 8)

    def u16be(self, offset: int) -> int:
        """Read 16-bit big-endian word."""
        self.require(offset, 2)
        return (self.data[offset] << 8) | self.data[offset + 1]

    def s16be(self, offset: int) -> int:
        value = self.u16be(offset)
        return value - 0x10000 if value & 0x8000 else value

    def u24be(self, offset: int) -> int:
        self.require(offset, 3)
        d = self.data
        return (d[offset] << 16) | (d[offset + 1] << 8) | d[offset + 2]

    def u32be(self, offset: int) -> int:
        self.require(offset, 4)
        return int.from_bytes(self.data[offset : offset + 4], "big")

    def uint_be(self, offset: int, size: int) -> int:
        """Read a big-endian unsigned integer of [size] bytes (1-4)."""
        self.require(offset, size)
        return int.from_bytes(self.data[offset : offset + size], "big")
