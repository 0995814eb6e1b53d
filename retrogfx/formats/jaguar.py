"""
retrogfx - Jaguar Doom Graphics

Decoders for the Atari Jaguar port of Doom. Unlike the PC data, every
multi-byte value here is big-endian.

Sprites are split over two lumps: a header lump with dimensions, offsets
and column posts, and a separate lump with the raw pixel indices the
posts point into. Textures carry no header at all; their dimensions come
from the TEXTURE1 definitions.
"""

import logging

from ..core.byte_reader import ByteReader
from ..core.errors import InvalidInput
from ..core.geometry import column_to_row_major
from ..core.image import Image

logger = logging.getLogger(__name__)

SPRITE_HEADER_MIN_SIZE = 16
SPRITE_COLUMN_TABLE = 8
POST_END = 0xFFFF
POST_SIZE = 4

# Texture lumps are followed by padding the decoder does not use
TEXTURE_TRAILER_SIZE = 320


def load_jaguar_sprite(header: bytes, data: bytes) -> Image:
    """
    Decode a Jaguar Doom sprite.

    Header lump layout (big-endian):
        0  u16  width
        2  u16  height
        4  s16  x offset
        6  s16  y offset
        8  width x u16  column offsets into the header lump

    Each column is a list of posts {u8 top row, u8 length, u16 pixel
    offset} ending with 0xFFFF. Post pixels are read from [data].
    Pixels not covered by any post are transparent.

    Args:
        header: Sprite header lump
        data: Sprite pixel lump

    Raises:
        InvalidInput: If either lump is too small for what the header
            declares
    """
    hdr = ByteReader(header, "Jaguar sprite header")
    body = ByteReader(data, "Jaguar sprite data")

    if len(hdr) < SPRITE_HEADER_MIN_SIZE or len(body) == 0:
        raise InvalidInput(
            f"Jaguar sprite: header of {len(hdr)} bytes / data of {len(body)} bytes is too small"
        )

    width = hdr.u16be(0)
    height = hdr.u16be(2)
    offset_x = hdr.s16be(4)
    offset_y = hdr.s16be(6)
    if width == 0 or height == 0:
        raise InvalidInput(f"Jaguar sprite: invalid dimensions {width}x{height}")

    if len(hdr) < SPRITE_COLUMN_TABLE + width * 6:
        raise InvalidInput(
            f"Jaguar sprite: header too small ({len(hdr)}) for column offsets "
            f"({SPRITE_COLUMN_TABLE + width * 6})"
        )
    col_offsets = [hdr.u16be(SPRITE_COLUMN_TABLE + 2 * x) for x in range(width)]
    if len(hdr) < POST_SIZE + col_offsets[-1]:
        raise InvalidInput(
            f"Jaguar sprite: header too small ({len(hdr)}) for post offsets "
            f"({POST_SIZE + col_offsets[-1]})"
        )

    num_pixels = width * height
    pixels = bytearray(num_pixels)
    mask = bytearray(num_pixels)

    for x, post in enumerate(col_offsets):
        while hdr.u16be(post) != POST_END:
            top = hdr.u8(post)
            length = hdr.u8(post + 1)
            pixel_ofs = hdr.u16be(post + 2)
            if pixel_ofs + length > len(body):
                raise InvalidInput(
                    f"Jaguar sprite: data too small ({len(body)}) for pixel data "
                    f"({pixel_ofs + length})"
                )
            if top + length > height:
                raise InvalidInput(
                    f"Jaguar sprite: post at row {top} of length {length} "
                    f"exceeds height {height}"
                )

            run = body.read(pixel_ofs, length)
            for p, value in enumerate(run):
                pos = x + width * (top + p)
                pixels[pos] = value
                mask[pos] = 0xFF
            post += POST_SIZE

    image = Image.from_indexed(width, height, pixels, mask)
    image.offset_x = offset_x
    image.offset_y = offset_y

    logger.debug(
        "Decoded Jaguar sprite: %dx%d offset (%d, %d)", width, height, offset_x, offset_y
    )
    return image


def load_jaguar_texture(data: bytes, width: int, height: int) -> Image:
    """
    Decode a Jaguar Doom texture.

    The lump holds width x height column-major indices followed by a
    320 byte trailer. Every pixel is opaque.

    Args:
        data: Texture lump
        width: Texture width from the texture definitions
        height: Texture height from the texture definitions

    Raises:
        InvalidInput: If the dimensions are empty or the lump is smaller
            than width * height + 320
    """
    expected = width * height + TEXTURE_TRAILER_SIZE
    if width <= 0 or height <= 0 or len(data) < expected:
        raise InvalidInput(f"Jaguar texture: size is {len(data)}, expected {expected}")

    size = width * height
    image = Image.from_indexed(width, height, bytes(data[:size]), bytes([0xFF]) * size)
    column_to_row_major(image)

    logger.debug("Decoded Jaguar texture: %dx%d", image.width, image.height)
    return image
