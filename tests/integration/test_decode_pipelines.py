"""
Integration tests for decode → transform → render pipelines.

Each test takes data through more than one layer: a decoder, the image
model, the conversions/geometry/drawing engine and the Pillow bridge.
"""

import io
import struct

import pytest
from PIL import Image as PILImage

from retrogfx.core import (
    RGBA,
    DrawProps,
    PaletteRange,
    Translation,
    apply_translation,
    autocrop,
    convert_paletted,
    convert_truecolor,
    crop,
    cutoff_mask,
    draw_image,
    draw_pixel,
    mask_from_colour,
    rotate,
)
from retrogfx.core.errors import InvalidInput
from retrogfx.core.image import ColourMode, Image
from retrogfx.formats import get_format, open_image
from retrogfx.formats.legacy import LegacyFormat, load_legacy
from retrogfx.rendering import to_pil_image


def fon2_lump():
    """Two glyph FON2 font: 'A' is 1x2, 'B' is 2x2, red and green palette."""
    header = b"FON2" + struct.pack("<HBBBBBB", 2, 65, 66, 0, 0, 2, 0)
    widths = struct.pack("<HH", 1, 2)
    palette = bytes([0, 0, 0, 255, 0, 0, 0, 255, 0])
    glyphs = bytes([0x01, 1, 2, 0xFD, 1])
    return header + widths + palette + glyphs


def wolf_lump():
    """Wolf3D font with glyphs 'A' (2 wide) and 'B' (1 wide), height 2."""
    header = bytearray(0x302)
    struct.pack_into("<H", header, 0, 2)
    struct.pack_into("<HH", header, 0x002 + 65 * 2, 0x302, 0x306)
    header[0x202 + 65] = 2
    header[0x202 + 66] = 1
    return bytes(header) + bytes([1, 2, 3, 4, 5, 6])


def bmf_lump():
    """BMF font with glyphs 'A' (2x1) and 'B' (1x2), one visible colour."""
    data = bytearray(b"\xe1\xe6\xd5\x1a\x11\x00\x00\x00")
    data += bytes(8)
    data += bytes([1, 63, 0, 32, 0])
    data += struct.pack("<H", 2)
    data += struct.pack("<BBBbbB", 65, 2, 1, 0, 0, 2) + bytes([1, 0])
    data += struct.pack("<BBBbbB", 66, 1, 2, 0, 0, 1) + bytes([1, 1])
    return bytes(data)


def test_blank_doom_alpha_font():
    """A Doom alpha font of zero pixels decodes fully transparent."""
    header = bytearray(0x302)
    struct.pack_into("<H", header, 0, 2)
    header[2:6] = bytes([1, 1, 1, 1])

    image = load_legacy(LegacyFormat.FONT_DOOM_ALPHA, bytes(header) + bytes(8))

    assert (image.width, image.height) == (4, 2)
    assert image.mask == bytearray(8)
    assert image.source_format == "font_doom_alpha"


def test_crop_zero_rect_is_noop(grid_image):
    """crop(0, 0, 0, 0) keeps every pixel."""
    before = grid_image.copy()
    crop(grid_image, 0, 0, 0, 0)

    assert grid_image.pixels == before.pixels
    assert grid_image.mask == before.mask


def test_opaque_draw_matches_direct_write(truecolor_image):
    """An opaque normal draw is the same as writing the bytes directly."""
    expected = bytearray(truecolor_image.pixels)
    expected[4:8] = bytes([1, 2, 3, 255])

    draw_pixel(truecolor_image, 1, 0, RGBA(1, 2, 3, 255), DrawProps())
    assert truecolor_image.pixels == expected


def test_unused_key_colour_gives_opaque_mask(grid_image):
    """Masking by a colour nobody uses leaves every pixel opaque."""
    grid_image.mask = bytearray(6)
    mask_from_colour(grid_image, RGBA(250, 3, 3))
    assert grid_image.mask == bytearray([255] * 6)


class TestRoundTrips:
    """Conversions and transforms that must undo each other."""

    def test_colour_mode_round_trip(self, grid_image, distinct_palette):
        """Distinct palette colours map back to their own indices."""
        grid_image.palette = distinct_palette
        grid_image.mask = bytearray([255, 0, 255, 255, 0, 255])

        convert_truecolor(grid_image)
        assert grid_image.mode is ColourMode.TRUECOLOR

        convert_paletted(grid_image, distinct_palette)
        assert grid_image.pixels == bytearray([1, 2, 3, 4, 5, 6])
        assert grid_image.mask == bytearray([255, 0, 255, 255, 0, 255])

    def test_four_rotations(self):
        """Four quarter turns restore a decoded image exactly."""
        image = load_legacy(LegacyFormat.FONT_WOLF, wolf_lump())
        before = image.copy()
        for _ in range(4):
            rotate(image, 90)

        assert (image.width, image.height) == (before.width, before.height)
        assert image.pixels == before.pixels
        assert image.mask == before.mask


class TestFontPipelines:
    """Decoded fonts going through the engine."""

    def test_fon2_to_truecolor(self):
        """FON2 glyphs take the font's own palette colours."""
        image = load_legacy(LegacyFormat.FONT_ZD_BIG, fon2_lump())
        convert_truecolor(image)

        assert image.get_pixel(0, 0) == RGBA(255, 0, 0, 255)
        # Gutter column uses the last palette entry
        assert image.get_pixel(1, 0) == RGBA(0, 255, 0, 255)

    def test_draw_font_on_canvas(self):
        """A decoded font blits onto a truecolour canvas."""
        font = load_legacy(LegacyFormat.FONT_WOLF, wolf_lump())
        canvas = Image(ColourMode.TRUECOLOR)
        canvas.create(4, 3, ColourMode.TRUECOLOR)

        draw_image(canvas, font, 1, 0, DrawProps())

        assert canvas.get_pixel(0, 0) == RGBA(0, 0, 0, 0)
        assert canvas.get_pixel(1, 0) == RGBA(1, 1, 1, 255)
        assert canvas.get_pixel(3, 1) == RGBA(6, 6, 6, 255)
        assert canvas.get_pixel(1, 2) == RGBA(0, 0, 0, 0)

    def test_bmf_autocrop(self):
        """Autocrop trims the unused advance space of a BMF font."""
        image = load_legacy(LegacyFormat.FONT_BMF, bmf_lump())
        assert autocrop(image) is True
        assert (image.width, image.height) == (3, 2)
        assert list(image.mask) == [255, 0, 255, 0, 0, 255]

    def test_translated_font_to_truecolor(self):
        """A translated font keeps its transparent pixels clear."""
        image = load_legacy(LegacyFormat.FONT_BMF, bmf_lump())
        translation = Translation([PaletteRange(1, 1, 2, 2)])

        assert apply_translation(image, translation, truecolor=True) is True
        assert image.mode is ColourMode.TRUECOLOR
        assert image.get_pixel(0, 0) == RGBA(2, 2, 2, 255)
        assert image.get_pixel(1, 0) == RGBA(0, 0, 0, 0)
        assert image.get_pixel(2, 1) == RGBA(2, 2, 2, 255)

    def test_cutoff_on_alpha_map(self, alphamap_image):
        """Binarizing keeps values above the threshold only."""
        cutoff_mask(alphamap_image, 128)
        assert alphamap_image.pixels == bytearray([0, 0, 255, 255])


class TestPillowPipelines:
    """Decoded images rendered and re-read through Pillow."""

    def test_jaguar_texture_preview(self):
        """Previews are scaled with nearest neighbour."""
        data = bytes([1, 4, 2, 5, 3, 6]) + bytes(320)
        image = load_legacy(LegacyFormat.IMG_JAGUAR_TEXTURE, data, width=3, height=2)

        preview = to_pil_image(image, scale=2)
        assert preview.size == (6, 4)
        assert preview.getpixel((0, 0)) == (1, 1, 1, 255)
        assert preview.getpixel((2, 0)) == (2, 2, 2, 255)
        assert preview.getpixel((5, 3)) == (6, 6, 6, 255)

    def test_png_to_flat_and_back(self, distinct_palette):
        """A PNG quantized to a palette can be saved and reloaded as a raw flat."""
        buf = io.BytesIO()
        PILImage.new("RGB", (64, 64), (10, 245, 5)).save(buf, "PNG")

        image = open_image(buf.getvalue())
        convert_paletted(image, distinct_palette)
        raw = get_format("raw").encode(image)
        assert raw == bytes([10]) * 4096

        reloaded = open_image(raw, type_hint="raw")
        assert reloaded.pixels == image.pixels


@pytest.mark.parametrize("fmt", list(LegacyFormat))
def test_short_input_rejected(fmt):
    """Every legacy decoder rejects a two byte span."""
    with pytest.raises(InvalidInput):
        load_legacy(fmt, b"\x00\x00", secondary=b"\x00\x00", width=1, height=1)
