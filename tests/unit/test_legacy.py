"""Unit tests for legacy decoder dispatch."""

import pytest

from retrogfx.core.errors import InvalidInput, UnsupportedOperation
from retrogfx.formats.legacy import FONT_DECODERS, LegacyFormat, load_legacy


class TestLoadLegacy:
    """Tests for load_legacy()."""

    def test_every_font_has_a_decoder(self):
        """All single-span identifiers are dispatchable."""
        jaguar = {LegacyFormat.IMG_JAGUAR_SPRITE, LegacyFormat.IMG_JAGUAR_TEXTURE}
        assert set(FONT_DECODERS) == set(LegacyFormat) - jaguar

    def test_string_identifier(self):
        """Identifiers may be given as strings."""
        data = bytearray(256)
        data[0] = 0x80
        image = load_legacy("font_mono", bytes(data))

        assert image.source_format == "font_mono"
        assert image.mask[0] == 255

    def test_enum_identifier(self):
        """Enum members work the same way."""
        image = load_legacy(LegacyFormat.FONT_MONO, bytes(256))
        assert image.source_format == LegacyFormat.FONT_MONO.value

    def test_unknown_identifier(self):
        """Unknown identifiers are unsupported."""
        with pytest.raises(UnsupportedOperation):
            load_legacy("font_comic_sans", bytes(256))

    def test_jaguar_texture_dimensions(self):
        """Texture dimensions are passed through."""
        image = load_legacy(
            LegacyFormat.IMG_JAGUAR_TEXTURE, bytes(4 + 320), width=2, height=2
        )
        assert (image.width, image.height) == (2, 2)
        assert image.source_format == "img_jaguar_texture"

    def test_jaguar_sprite_needs_pixels(self):
        """Sprites are split over two lumps."""
        with pytest.raises(InvalidInput):
            load_legacy(LegacyFormat.IMG_JAGUAR_SPRITE, bytes(32))

    @pytest.mark.parametrize("fmt", list(LegacyFormat))
    def test_short_input(self, fmt):
        """Two bytes are never enough."""
        with pytest.raises(InvalidInput):
            load_legacy(fmt, b"\x00\x00", secondary=b"\x00\x00", width=1, height=1)
