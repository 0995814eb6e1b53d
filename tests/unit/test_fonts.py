"""Unit tests for the legacy font decoders."""

import logging
import struct

import pytest

from retrogfx.core.colour import RGBA
from retrogfx.core.errors import InvalidInput
from retrogfx.formats.fonts import (
    FIXED_FONT_HEADER_SIZE,
    load_bmf,
    load_font0,
    load_font1,
    load_font2,
    load_font_mono,
    load_jedi_fnt,
    load_jedi_font,
    load_wolf_font,
)


def rows(image):
    """Pixel indices as a list of rows."""
    return [list(image.pixels[y * image.width : (y + 1) * image.width]) for y in range(image.height)]


def make_font0(height, widths, pixels):
    """Doom alpha font: height, width table, (unused) offsets, pixel data."""
    header = bytearray(FIXED_FONT_HEADER_SIZE)
    struct.pack_into("<H", header, 0, height)
    header[2 : 2 + len(widths)] = bytes(widths)
    return bytes(header) + bytes(pixels)


def make_fon2(height, first, last, widths, palette, glyph_data, constant_width=0):
    """FON2 lump with no kerning; palette is a list of RGB triples (pal_size + 1 entries)."""
    header = b"FON2" + struct.pack("<HBBBBBB", height, first, last, constant_width, 0, len(palette) - 1, 0)
    table = b"".join(struct.pack("<H", w) for w in widths)
    pal = b"".join(bytes(c) for c in palette)
    return header + table + pal + bytes(glyph_data)


def make_bmf(num_chars, glyphs, add_space=0, palette=((63, 0, 32),)):
    """BMF font; glyphs are (width, height, offset_x, offset_y, shift, data)."""
    data = bytearray(b"\xe1\xe6\xd5\x1a")
    data += bytes([0x11, 0, 0, 0])
    data += struct.pack("<b", add_space)
    data += bytes(7)
    data += bytes([len(palette)])
    for colour in palette:
        data += bytes(colour)
    data += bytes([0])  # no info text
    data += struct.pack("<H", num_chars)
    for i, (w, h, ox, oy, shift, pixels) in enumerate(glyphs):
        data += struct.pack("<BBBbbB", 65 + i, w, h, ox, oy, shift)
        data += bytes(pixels)
    return bytes(data)


def make_wolf_font(height, glyphs):
    """Wolf3D font; glyphs maps char -> (offset, width), data appended after the header."""
    header = bytearray(FIXED_FONT_HEADER_SIZE)
    struct.pack_into("<H", header, 0, height)
    for char, (offset, width) in glyphs.items():
        struct.pack_into("<H", header, 0x002 + char * 2, offset)
        header[0x202 + char] = width
    return header


class TestFont0:
    """Tests for the Doom alpha HUFONT decoder."""

    def test_blank_font(self):
        """All zero pixel data gives a fully transparent image."""
        image = load_font0(make_font0(2, [1, 1, 1, 1], bytes(8)))

        assert (image.width, image.height) == (4, 2)
        assert image.mask == bytearray(8)

    def test_columns_become_rows(self):
        """Pixel data is stored one column at a time."""
        image = load_font0(make_font0(2, [3], [1, 2, 3, 4, 5, 6]))
        assert rows(image) == [[1, 3, 5], [2, 4, 6]]

    def test_zero_height_raises(self):
        """A height of zero is rejected."""
        with pytest.raises(InvalidInput):
            load_font0(make_font0(0, [], bytes(4)))

    def test_uneven_data_raises(self):
        """Pixel data must be whole columns."""
        with pytest.raises(InvalidInput):
            load_font0(make_font0(2, [], bytes(5)))

    def test_header_only_raises(self):
        """A header with no pixels is not a font."""
        with pytest.raises(InvalidInput):
            load_font0(make_font0(2, [], b""))


class TestFont1:
    """Tests for the FON1 decoder."""

    def test_decode(self):
        """Runs and literals fill a 256 glyph column; the last byte is not read."""
        data = b"FON1" + struct.pack("<HH", 1, 1) + bytes([0x01, 7, 8, 0xFD, 3, 0x00])
        image = load_font1(data)

        assert (image.width, image.height) == (1, 256)
        assert list(image.pixels[:7]) == [7, 8, 3, 3, 3, 3, 0]

    def test_zero_width_raises(self):
        """Zero glyph dimensions are rejected."""
        with pytest.raises(InvalidInput):
            load_font1(b"FON1" + struct.pack("<HH", 0, 1) + b"\x00")

    def test_short_header_raises(self):
        """The header must be complete."""
        with pytest.raises(InvalidInput):
            load_font1(b"FON1\x01")


class TestFont2:
    """Tests for the FON2 decoder."""

    PALETTE = [(0, 0, 0), (255, 0, 0), (0, 255, 0)]

    def test_decode(self):
        """Glyphs are placed left to right with a gutter of the last colour."""
        data = make_fon2(2, 65, 66, [1, 2], self.PALETTE, [0x01, 1, 2, 0xFD, 1])
        image = load_font2(data)

        assert (image.width, image.height) == (5, 2)
        assert rows(image) == [[1, 2, 1, 1, 2], [2, 2, 1, 1, 2]]
        assert image.palette.colour(1) == RGBA(255, 0, 0)
        assert image.palette.transparent_index == 0

    def test_constant_width(self):
        """A constant width font stores a single width entry."""
        data = make_fon2(2, 65, 66, [1], self.PALETTE, [0x01, 1, 2, 0x01, 3, 4], constant_width=1)
        image = load_font2(data)

        assert rows(image) == [[1, 2, 3, 2], [2, 2, 4, 2]]

    def test_missing_glyph_has_no_data(self):
        """Zero width glyphs have no data; their gutter column stays blank."""
        data = make_fon2(1, 65, 66, [0, 1], self.PALETTE, [0x00, 1])
        image = load_font2(data)

        assert rows(image) == [[1, 2, 2]]

    def test_run_overflow_raises(self):
        """A run longer than the glyph is an error."""
        data = make_fon2(2, 65, 65, [1], self.PALETTE, [0x02, 1, 2, 3])
        with pytest.raises(InvalidInput):
            load_font2(data)

    def test_truncated_raises(self):
        """Data ending before the last glyph is an error."""
        data = make_fon2(2, 65, 66, [1, 2], self.PALETTE, [0x01, 1, 2])
        with pytest.raises(InvalidInput):
            load_font2(data)

    def test_zero_height_raises(self):
        """A zero glyph height is rejected."""
        data = make_fon2(0, 65, 65, [1], self.PALETTE, [])
        with pytest.raises(InvalidInput):
            load_font2(data)

    def test_short_header_raises(self):
        """The fixed header must be present."""
        with pytest.raises(InvalidInput):
            load_font2(b"FON2\x02\x00")


class TestBMF:
    """Tests for the BMF decoder."""

    GLYPHS = [
        (2, 1, 0, 0, 2, [1, 0]),
        (1, 2, 0, 0, 1, [1, 1]),
    ]

    def test_decode(self):
        """Glyphs are painted by offset and advance."""
        data = make_bmf(2, self.GLYPHS)
        assert len(data) == 39
        image = load_bmf(data)

        assert (image.width, image.height) == (5, 2)
        assert list(image.pixels) == [1, 0, 1, 0, 0, 0, 0, 1, 0, 0]
        assert [i for i, m in enumerate(image.mask) if m] == [0, 2, 7]

    def test_palette_expanded_from_6bit(self):
        """Palette entries start at 1 and are scaled to 8 bits."""
        image = load_bmf(make_bmf(2, self.GLYPHS))

        assert image.palette.colour(1) == RGBA(255, 0, 130)
        assert image.palette.colour(0).a == 0

    def test_overdeclared_glyph_count_truncates(self, caplog):
        """The glyph that hits the end sizes the canvas but is not painted."""
        data = make_bmf(3, self.GLYPHS)
        with caplog.at_level(logging.INFO, logger="retrogfx.formats.fonts"):
            image = load_bmf(data)

        assert (image.width, image.height) == (5, 2)
        assert list(image.pixels) == [1, 0, 0, 0, 0, 0, 0, 0, 0, 0]
        assert [i for i, m in enumerate(image.mask) if m] == [0]
        assert "declares 3 glyphs" in caplog.text

    def test_negative_first_offset_x(self):
        """The first glyph's x offset is signed and narrows the canvas."""
        image = load_bmf(make_bmf(1, [(1, 1, -1, 0, 2, [1])]))

        assert (image.width, image.height) == (3, 1)
        # The glyph lands left of the canvas and is clipped
        assert not any(image.mask)

    def test_no_palette_raises(self):
        """A font with no colours is rejected."""
        with pytest.raises(InvalidInput):
            load_bmf(make_bmf(2, self.GLYPHS, palette=()))

    def test_no_chars_raises(self):
        """A font with no glyphs is rejected."""
        with pytest.raises(InvalidInput):
            load_bmf(make_bmf(0, self.GLYPHS))


class TestMonoFont:
    """Tests for the 8-pixel monochrome font decoder."""

    def test_bits_become_mask(self):
        """Set bits are opaque; every pixel is index 255."""
        data = bytearray(256)
        data[0] = 0b10100000
        image = load_font_mono(bytes(data))

        assert (image.width, image.height) == (8, 256)
        assert list(image.mask[:8]) == [255, 0, 255, 0, 0, 0, 0, 0]
        assert set(image.pixels) == {0xFF}

    @pytest.mark.parametrize("size", [0, 255, 300])
    def test_bad_size_raises(self, size):
        """Sizes must be a positive multiple of 256."""
        with pytest.raises(InvalidInput):
            load_font_mono(bytes(size))


class TestWolfFont:
    """Tests for the Wolfenstein 3D font decoder."""

    def test_glyphs_placed_left_to_right(self):
        """Row-major glyph blocks are laid out side by side."""
        data = make_wolf_font(2, {65: (0x302, 2), 66: (0x306, 1)})
        image = load_wolf_font(bytes(data) + bytes([1, 2, 3, 4, 5, 6]))

        assert (image.width, image.height) == (3, 2)
        assert rows(image) == [[1, 2, 5], [3, 4, 6]]

    def test_overflowing_glyphs_raise(self):
        """Glyphs wider than the canvas are an error."""
        data = make_wolf_font(2, {65: (0x302, 2), 66: (0x306, 2)})
        with pytest.raises(InvalidInput):
            load_wolf_font(bytes(data) + bytes([1, 2, 3, 4, 5, 6]))


class TestJediFnt:
    """Tests for the Dark Forces FNT decoder."""

    def make(self, glyphs, height=2):
        header = bytearray(32)
        header[4] = height
        header[8] = 65
        header[9] = 65 + len(glyphs) - 1
        body = bytearray()
        for columns in glyphs:
            body.append(len(columns))
            for column in columns:
                body += bytes(column)
        return bytes(header + body)

    def test_columns_turned_upright(self):
        """Columns are stored bottom to top."""
        data = self.make([[[1, 2]], [[3, 4], [5, 6]]])
        assert len(data) == 40
        image = load_jedi_fnt(data)

        assert (image.width, image.height) == (3, 2)
        assert rows(image) == [[2, 4, 6], [1, 3, 5]]

    def test_truncated_raises(self):
        """Column data past the end is an error."""
        data = self.make([[[1, 2]], [[3, 4], [5, 6]]])
        with pytest.raises(InvalidInput):
            load_jedi_fnt(data[:-1])

    def test_zero_height_raises(self):
        """A zero glyph height gives no image."""
        with pytest.raises(InvalidInput):
            load_jedi_fnt(self.make([[[]], [[], []]], height=0) + bytes(4))


class TestJediFont:
    """Tests for the Dark Forces monochrome FONT decoder."""

    def make(self, count, width, height, rows_data):
        header = struct.pack("<HHHH", 32, count, width, height) + bytes(4)
        return header + bytes(count) + bytes(rows_data)

    def test_one_byte_rows(self):
        """Glyphs are stacked vertically, MSB is the leftmost pixel."""
        image = load_jedi_font(self.make(2, 8, 2, [0x80, 0x01, 0xFF, 0x00]))

        assert (image.width, image.height) == (8, 4)
        assert list(image.mask[0:8]) == [255, 0, 0, 0, 0, 0, 0, 0]
        assert list(image.mask[8:16]) == [0, 0, 0, 0, 0, 0, 0, 255]
        assert list(image.mask[16:24]) == [255] * 8
        assert list(image.mask[24:32]) == [0] * 8

    def test_two_byte_rows_are_big_endian(self):
        """Multi-byte rows are read high byte first."""
        image = load_jedi_font(self.make(1, 16, 1, [0x80, 0x01, 0x00]))

        assert image.mask[0] == 255
        assert image.mask[15] == 255
        assert sum(1 for m in image.mask if m) == 2

    def test_unsupported_width_raises(self):
        """Rows wider than 4 bytes are rejected."""
        with pytest.raises(InvalidInput):
            load_jedi_font(self.make(1, 40, 1, bytes(5)))

    def test_short_data_raises(self):
        """Too little row data is an error."""
        with pytest.raises(InvalidInput):
            load_jedi_font(self.make(2, 8, 4, [0xFF]))
