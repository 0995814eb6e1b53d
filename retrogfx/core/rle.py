"""
retrogfx - Run-Length Decoding

The control-byte RLE scheme shared by ZDoom FON1, FON2 and IMGZ data:

- code < 0x80: copy the next (code + 1) bytes literally
- code > 0x80: repeat the next byte (0x101 - code) times
- code == 0x80: no operation
"""

from .errors import InvalidInput


def decode_stream(data: bytes, start: int, end: int, output_size: int) -> bytearray:
    """
    Lenient decode used by FON1.

    Reads control codes while the read position is before [end] and the
    output is not full. Runs that would overflow the output are clipped
    and literal runs that go past the input are cut short.

    Args:
        data: Source bytes
        start: Offset of the first control byte
        end: Offset at which reading stops (exclusive)
        output_size: Number of output bytes wanted

    Returns:
        Decoded bytes, zero-padded to [output_size]
    """
    out = bytearray(output_size)
    read = start
    dest = 0
    end = min(end, len(data))

    while read < end and dest < output_size:
        code = data[read]
        read += 1

        if code < 0x80:
            length = code + 1
            chunk = data[read : read + length]
            chunk = chunk[: output_size - dest]
            out[dest : dest + len(chunk)] = chunk
            dest += length
            read += length
        elif code > 0x80:
            length = 0x101 - code
            if read >= len(data):
                break
            value = data[read]
            read += 1
            length = min(length, output_size - dest)
            out[dest : dest + length] = bytes([value]) * length
            dest += length

    return out


def decode_exact(data: bytes, pos: int, num_pixels: int, name: str = "RLE") -> tuple[bytes, int]:
    """
    Strict decode used by FON2.

    Decodes exactly [num_pixels] bytes. A run longer than what is left, or
    running out of input, is an error.

    Args:
        data: Source bytes
        pos: Offset of the first control byte
        num_pixels: Exact number of output bytes
        name: Label for error messages

    Returns:
        Tuple of (decoded bytes, offset just after the consumed input)

    Raises:
        InvalidInput: On overflow or truncated input
    """
    out = bytearray()
    remaining = num_pixels

    while remaining:
        if pos >= len(data):
            raise InvalidInput(f"{name}: data ends with {remaining} pixels left to decode")
        code = data[pos]
        pos += 1

        if code < 0x80:
            length = code + 1
            if length > remaining:
                raise InvalidInput(f"{name}: literal run of {length} overflows {remaining} pixels")
            if pos + length > len(data):
                raise InvalidInput(f"{name}: literal run past end of data")
            out.extend(data[pos : pos + length])
            pos += length
            remaining -= length
        elif code > 0x80:
            length = 0x101 - code
            if length > remaining:
                raise InvalidInput(f"{name}: repeat run of {length} overflows {remaining} pixels")
            if pos >= len(data):
                raise InvalidInput(f"{name}: repeat run past end of data")
            out.extend(bytes([data[pos]]) * length)
            pos += 1
            remaining -= length

    return bytes(out), pos
