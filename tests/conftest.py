"""Shared pytest fixtures for image model and decoder tests."""

import io

import pytest
from PIL import Image as PILImage

from retrogfx.core.colour import RGBA
from retrogfx.core.image import ColourMode, Image
from retrogfx.core.palette import Palette


@pytest.fixture
def distinct_palette():
    """Palette with 256 different colours (red channel equals the index)."""
    return Palette(RGBA(i, 255 - i, i // 2) for i in range(256))


@pytest.fixture
def grid_image():
    """3x2 paletted image holding indices 1-6, fully opaque.

    Rows are [1, 2, 3] and [4, 5, 6].
    """
    return Image.from_indexed(3, 2, bytes([1, 2, 3, 4, 5, 6]), bytes([255] * 6))


@pytest.fixture
def truecolor_image():
    """2x2 truecolour image with one fully transparent pixel (bottom right)."""
    image = Image(ColourMode.TRUECOLOR)
    image.set_image_data(
        bytes(
            [
                10, 20, 30, 255,
                40, 50, 60, 255,
                70, 80, 90, 255,
                0, 0, 0, 0,
            ]
        ),
        2,
        2,
        ColourMode.TRUECOLOR,
    )
    return image


@pytest.fixture
def alphamap_image():
    """2x2 alpha map with values 0, 128, 129, 255."""
    image = Image(ColourMode.ALPHAMAP)
    image.set_image_data(bytes([0, 128, 129, 255]), 2, 2, ColourMode.ALPHAMAP)
    return image


@pytest.fixture
def png_bytes():
    """A 3x2 RGBA PNG, red on the top row and half transparent blue below."""
    img = PILImage.new("RGBA", (3, 2), (255, 0, 0, 255))
    for x in range(3):
        img.putpixel((x, 1), (0, 0, 255, 128))
    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()
