"""
retrogfx - Legacy Font Decoders

Decoders for the bitmap font lumps of 1990s games. Each font is decoded
into a single flat paletted image holding every glyph, with palette
index 0 transparent unless the format says otherwise.

All decoders take the raw bytes and return a new Image, raising
InvalidInput when the header fields do not fit the data.
"""

import logging

from ..core import rle
from ..core.byte_reader import ByteReader
from ..core.colour import RGBA, expand_6bit
from ..core.errors import InvalidInput
from ..core.geometry import column_to_row_major, rotate
from ..core.image import Image
from ..core.palette import Palette

logger = logging.getLogger(__name__)

# Doom alpha HUFONT / Wolf3D fonts share a 0x302 byte header
FIXED_FONT_HEADER_SIZE = 0x302
WOLF_OFFSETS = 0x002  # 256 x u16
WOLF_WIDTHS = 0x202  # 256 x u8

# ZDoom FON1
FON1_WIDTH = 4
FON1_HEIGHT = 6
FON1_DATA = 8

# ZDoom FON2 header fields
FON2_HEADER_SIZE = 12
FON2_HEIGHT = 4
FON2_FIRST_CHAR = 6
FON2_LAST_CHAR = 7
FON2_CONSTANT_WIDTH = 8
FON2_PALETTE_SIZE = 10
FON2_KERNING = 11

# BMF byte map font
BMF_MIN_SIZE = 24
BMF_ADD_SPACE = 8
BMF_PALETTE_SIZE = 16
BMF_PALETTE = 17
BMF_GLYPH_HEADER_SIZE = 6

# Jedi Engine (Dark Forces) fonts
JEDI_FNT_MIN_SIZE = 36
JEDI_FNT_HEIGHT = 4
JEDI_FNT_FIRST_CHAR = 8
JEDI_FNT_LAST_CHAR = 9
JEDI_FNT_GLYPHS = 32
JEDI_FONT_MIN_SIZE = 16
JEDI_FONT_HEADER_SIZE = 12


def _zero_size(name: str, width: int, height: int) -> InvalidInput:
    return InvalidInput(f"{name}: invalid dimensions {width}x{height}")


def load_font0(data: bytes) -> Image:
    """
    Decode a Doom alpha HUFONT lump.

    Layout:
        0x000  u16       glyph height (shared by all glyphs)
        0x002  256 x u8  glyph widths
        0x102  256 x u16 glyph offsets
        0x302  ...       pixel indices, column-major

    The width/offset tables are not needed to show the font: the pixel
    data is one column-major strip of (size - 0x302) / height columns.

    Raises:
        InvalidInput: If the data is too short, the height is zero or the
            pixel data is not a whole number of columns
    """
    reader = ByteReader(data, "Doom alpha font")
    if len(reader) <= FIXED_FONT_HEADER_SIZE:
        raise InvalidInput(f"Doom alpha font: {len(reader)} bytes is too small")

    height = reader.u16le(0)
    datasize = len(reader) - FIXED_FONT_HEADER_SIZE
    if height == 0 or datasize % height:
        raise InvalidInput(
            f"Doom alpha font: {datasize} bytes of pixel data do not divide into height {height}"
        )
    width = datasize // height

    # Stored column by column
    pixels = reader.read(FIXED_FONT_HEADER_SIZE, datasize)
    image = Image.from_indexed(width, height, pixels)
    column_to_row_major(image)

    logger.debug("Decoded Doom alpha font: %dx%d", image.width, image.height)
    return image


def load_font1(data: bytes) -> Image:
    """
    Decode a ZDoom FON1 lump.

    The font is a single column of 256 glyphs of char_width x char_height,
    RLE compressed from offset 8. Decoding stops at the last input byte or
    when the canvas is full; anything not covered stays index 0.
    """
    reader = ByteReader(data, "FON1")
    reader.require(0, FON1_DATA)

    width = reader.u16le(FON1_WIDTH)
    height = reader.u16le(FON1_HEIGHT) << 8
    if width == 0 or height == 0:
        raise _zero_size("FON1", width, height)

    pixels = rle.decode_stream(reader.data, FON1_DATA, len(reader) - 1, width * height)
    image = Image.from_indexed(width, height, pixels)

    logger.debug("Decoded FON1 font: %dx%d", width, height)
    return image


def load_font2(data: bytes) -> Image:
    """
    Decode a ZDoom FON2 lump.

    Glyphs are laid out left to right, each followed by a one pixel
    gutter painted with the last palette entry. The font's palette
    becomes the image's own palette, index 0 transparent.

    Raises:
        InvalidInput: On a zero height, a bad glyph range, RLE runs that
            overflow a glyph or data that ends early
    """
    reader = ByteReader(data, "FON2")
    reader.require(0, FON2_HEADER_SIZE)

    height = reader.u16le(FON2_HEIGHT)
    if height == 0:
        raise InvalidInput("FON2: glyph height is zero")

    first = reader.u8(FON2_FIRST_CHAR)
    last = reader.u8(FON2_LAST_CHAR)
    constant_width = reader.u8(FON2_CONSTANT_WIDTH)
    pal_size = reader.u8(FON2_PALETTE_SIZE)
    kerning = reader.u8(FON2_KERNING)

    num_chars = last - first + 1
    if num_chars <= 0:
        raise InvalidInput(f"FON2: invalid character range {first}-{last}")

    pos = FON2_HEADER_SIZE
    if kerning:
        pos += 2

    # Width table, a single shared entry for constant width fonts
    widths = []
    for i in range(num_chars):
        widths.append(reader.u16le(pos))
        if not constant_width or i == num_chars - 1:
            pos += 2

    palette = Palette()
    for i in range(pal_size + 1):
        r, g, b = reader.read(pos, 3)
        palette.set_colour(i, RGBA(r, g, b))
        pos += 3
    palette.transparent_index = 0

    glyphs = []
    for i, glyph_width in enumerate(widths):
        if glyph_width == 0:
            # Characters missing from the font
            glyphs.append(b"")
            continue
        glyph, pos = rle.decode_exact(reader.data, pos, glyph_width * height, f"FON2 glyph {i}")
        glyphs.append(glyph)

    width = sum(w + 1 for w in widths)
    if width == 0:
        raise InvalidInput("FON2: total width is zero")

    canvas = bytearray([pal_size]) * (width * height)
    for y in range(height):
        dest = y * width
        for glyph_width, glyph in zip(widths, glyphs):
            if not glyph_width:
                continue
            canvas[dest : dest + glyph_width] = glyph[y * glyph_width : (y + 1) * glyph_width]
            dest += glyph_width + 1

    image = Image.from_indexed(width, height, canvas, palette=palette)

    logger.debug("Decoded FON2 font: %d glyphs, %dx%d", num_chars, width, height)
    return image


def load_bmf(data: bytes) -> Image:
    """
    Decode a BMF byte map font.

    The palette is stored as pal_size six-bit triples that fill palette
    entries 1 and up; entry 0 is transparent. Glyphs are painted side by
    side using their signed x/y offsets and advance (shift) values.

    Some fonts in circulation declare more glyphs than they contain. When
    the data runs out before the declared count, decoding stops at the
    glyph whose data reaches the end: its size and advance still count
    towards the canvas, but it is not painted. Empty (0x0) glyphs are
    skipped.

    The x offset is read signed for every glyph, including the first one,
    which also sets the starting pen position.

    Raises:
        InvalidInput: If the data is too short, has no palette, or declares
            no glyphs
    """
    reader = ByteReader(data, "BMF")
    if len(reader) < BMF_MIN_SIZE:
        raise InvalidInput(f"BMF: {len(reader)} bytes is too small")

    add_space = reader.s8(BMF_ADD_SPACE)
    pal_size = reader.u8(BMF_PALETTE_SIZE)
    if pal_size == 0:
        raise InvalidInput("BMF: no visible colours")

    palette = Palette()
    palette.set_colour(0, RGBA(0, 0, 0, 0))
    palette.transparent_index = 0
    for i in range(pal_size):
        r, g, b = reader.read(BMF_PALETTE + i * 3, 3)
        palette.set_colour(i + 1, RGBA(expand_6bit(r), expand_6bit(g), expand_6bit(b)))

    pos = BMF_PALETTE + pal_size * 3
    if pos >= len(reader):
        raise InvalidInput("BMF: no data after palette")

    info_size = reader.u8(pos)
    pos += info_size + 1
    num_chars = reader.u16le(pos)
    if num_chars == 0:
        raise InvalidInput("BMF: no characters")
    pos += 2
    if pos >= len(reader):
        raise InvalidInput("BMF: no data after character count")

    end = len(reader)
    first_offset_x = reader.s8(pos + 3)
    min_y = reader.s8(pos + 4)
    max_y = reader.u8(pos + 2)
    width = reader.u8(pos + 5) + first_offset_x

    # Glyph records: (width, height, offset x, offset y, shift, data offset)
    glyphs = []
    read = 0
    while read < num_chars:
        reader.require(pos, BMF_GLYPH_HEADER_SIZE)
        glyph_w = reader.u8(pos + 1)
        glyph_h = reader.u8(pos + 2)
        offset_x = reader.s8(pos + 3)
        offset_y = reader.s8(pos + 4)
        shift = reader.u8(pos + 5)
        cdata = pos + BMF_GLYPH_HEADER_SIZE
        pos = cdata + glyph_w * glyph_h
        read += 1

        empty = glyph_w == 0 and glyph_h == 0
        if not empty:
            min_y = min(min_y, offset_y)
            max_y = max(max_y, glyph_h)
            width += add_space + shift

        # The glyph reaching the end still sizes the canvas but is not painted
        if pos >= end and read < num_chars:
            logger.info(
                "BMF: font declares %d glyphs but data ends after %d", num_chars, len(glyphs)
            )
            break

        if not empty:
            glyphs.append((glyph_w, glyph_h, offset_x, offset_y, shift, cdata))

    height = max_y - min_y
    if width <= 0 or height <= 0:
        raise _zero_size("BMF", width, height)

    num_pixels = width * height
    pixels = bytearray(num_pixels)
    mask = bytearray(num_pixels)

    start_x = max(first_offset_x, 0)
    start_y = -min_y if min_y < 0 else 0
    for glyph_w, glyph_h, offset_x, offset_y, shift, cdata in glyphs:
        for v in range(glyph_h):
            for u in range(glyph_w):
                src = cdata + v * glyph_w + u
                dest = (start_y + v + offset_y) * width + start_x + u + offset_x
                if src >= end or not 0 <= dest < num_pixels:
                    continue
                value = reader.data[src]
                if value:
                    pixels[dest] = value
                    mask[dest] = 0xFF
        start_x += add_space + shift

    image = Image.from_indexed(width, height, pixels, mask, palette)

    logger.debug("Decoded BMF font: %d glyphs, %dx%d", len(glyphs), width, height)
    return image


def load_font_mono(data: bytes) -> Image:
    """
    Decode a monochrome 8-pixel-wide font.

    The file holds 256 glyphs of (size / 256) rows, one byte per row,
    most significant bit leftmost. Set bits are opaque, clear bits
    transparent; every pixel uses index 0xFF.
    """
    size = len(data)
    if size == 0 or size % 256:
        raise InvalidInput(f"Monochrome font: size {size} is not a multiple of 256")

    width = 8
    height = (size >> 8) << 8

    mask = bytearray(width * height)
    for i, byte in enumerate(bytes(data)):
        for bit in range(8):
            mask[i * 8 + bit] = ((byte >> (7 - bit)) & 1) * 255

    image = Image.from_indexed(width, height, bytes([0xFF]) * (width * height), mask)

    logger.debug("Decoded monochrome font: %dx%d", width, height)
    return image


def load_wolf_font(data: bytes) -> Image:
    """
    Decode a Wolfenstein 3D font.

    Same idea as the Doom alpha font with the tables swapped:

        0x000  u16       glyph height
        0x002  256 x u16 glyph offsets
        0x202  256 x u8  glyph widths
        0x302  ...       pixel data

    Each glyph is a row-major width x height block at its offset, placed
    left to right on a canvas of (size - 0x302) / height columns.
    """
    reader = ByteReader(data, "Wolf font")
    if len(reader) <= FIXED_FONT_HEADER_SIZE:
        raise InvalidInput(f"Wolf font: {len(reader)} bytes is too small")

    height = reader.u16le(0)
    datasize = len(reader) - FIXED_FONT_HEADER_SIZE
    if height == 0 or datasize % height:
        raise InvalidInput(
            f"Wolf font: {datasize} bytes of pixel data do not divide into height {height}"
        )
    width = datasize // height

    pixels = bytearray(reader.read(FIXED_FONT_HEADER_SIZE, datasize))

    x = 0
    for c in range(256):
        glyph_w = reader.u8(WOLF_WIDTHS + c)
        if not glyph_w:
            continue
        if x + glyph_w > width:
            raise InvalidInput(f"Wolf font: glyph {c} ends at column {x + glyph_w}, width is {width}")

        offset = reader.u16le(WOLF_OFFSETS + c * 2)
        glyph = reader.read(offset, glyph_w * height)
        for row in range(height):
            dest = row * width + x
            pixels[dest : dest + glyph_w] = glyph[row * glyph_w : (row + 1) * glyph_w]
        x += glyph_w

    image = Image.from_indexed(width, height, pixels)

    logger.debug("Decoded Wolf font: %dx%d", width, height)
    return image


def load_jedi_fnt(data: bytes) -> Image:
    """
    Decode a Jedi Engine (Dark Forces) FNT font.

    Header byte 4 is the glyph height and bytes 8/9 the first and last
    character. From offset 32 each glyph is a u8 column count followed by
    that many columns of [height] pixels, stored bottom to top. The
    columns are assembled as rows and turned upright afterwards.
    """
    reader = ByteReader(data, "Jedi FNT")
    if len(reader) < JEDI_FNT_MIN_SIZE:
        raise InvalidInput(f"Jedi FNT: {len(reader)} bytes is too small")

    glyph_height = reader.u8(JEDI_FNT_HEIGHT)
    first = reader.u8(JEDI_FNT_FIRST_CHAR)
    last = reader.u8(JEDI_FNT_LAST_CHAR)
    num_chars = (1 + last - first) & 0xFF

    columns = bytearray()
    pos = JEDI_FNT_GLYPHS
    for _ in range(num_chars):
        num_cols = reader.u8(pos)
        pos += 1
        columns += reader.read(pos, num_cols * glyph_height)
        pos += num_cols * glyph_height

    total_cols = len(columns) // glyph_height if glyph_height else 0
    if glyph_height == 0 or total_cols == 0:
        raise _zero_size("Jedi FNT", total_cols, glyph_height)

    # One row per column for now
    image = Image.from_indexed(glyph_height, total_cols, bytes(columns))
    rotate(image, 270)

    logger.debug("Decoded Jedi FNT font: %d glyphs, %dx%d", num_chars, image.width, image.height)
    return image


def load_jedi_font(data: bytes) -> Image:
    """
    Decode a Jedi Engine monochrome FONT.

    Header (u16 little-endian): first character, character count, width,
    height. After a 12-byte header and one (unused) width byte per
    character, each glyph row is packed MSB-first into width // 8
    big-endian bytes (1 to 4).
    """
    reader = ByteReader(data, "Jedi FONT")
    if len(reader) < JEDI_FONT_MIN_SIZE:
        raise InvalidInput(f"Jedi FONT: {len(reader)} bytes is too small")

    num_chars = reader.u16le(2)
    width = reader.u16le(4)
    height = reader.u16le(6) * num_chars
    if width == 0 or height == 0:
        raise _zero_size("Jedi FONT", width, height)

    bytes_per_row = width // 8
    if bytes_per_row not in (1, 2, 3, 4):
        raise InvalidInput(f"Jedi FONT: unsupported row width of {bytes_per_row} bytes")

    bits = bytes_per_row * 8
    offset = JEDI_FONT_HEADER_SIZE + num_chars
    reader.require(offset, height * bytes_per_row)

    mask = bytearray(width * height)
    for y in range(height):
        row = reader.uint_be(offset + y * bytes_per_row, bytes_per_row)
        for x in range(min(width, bits)):
            mask[y * width + x] = ((row >> (bits - 1 - x)) & 1) * 255

    image = Image.from_indexed(width, height, bytes([0xFF]) * (width * height), mask)

    logger.debug("Decoded Jedi FONT: %d glyphs, %dx%d", num_chars, width, height)
    return image
