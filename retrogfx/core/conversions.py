"""
retrogfx - Colour Model Conversions

Conversions between the three pixel representations (paletted, truecolour,
alpha map) and the mask/alpha derivation helpers.

All functions operate on an Image in place (or return a new buffer) and
resolve palettes the same way: the image's own palette first, then the
palette passed by the caller, then a greyscale ramp.
"""

import logging
from enum import Enum

from .colour import RGBA, luma
from .errors import MissingDependency, UnsupportedOperation
from .image import ColourMode, Image
from .palette import Palette

logger = logging.getLogger(__name__)


class AlphaSource(Enum):
    """Where convert_alpha_map takes its values from."""

    BRIGHTNESS = "brightness"
    EXISTING_ALPHA = "alpha"


def to_rgba(image: Image, pal: Palette | None = None) -> bytes:
    """
    Get the image as 32-bit RGBA data.

    Args:
        image: Source image
        pal: Palette to use if the image is paletted and has none of its own

    Returns:
        width * height * 4 bytes

    Raises:
        InvalidInput: If the image is empty or has no valid buffer
    """
    image.require_valid()

    if image.mode is ColourMode.TRUECOLOR:
        return bytes(image.pixels)

    out = bytearray(image.num_pixels * 4)
    if image.mode is ColourMode.PALETTED:
        palette = image.resolve_palette(pal)
        lookup = [bytes(palette.colour(i).rgb) for i in range(256)]
        mask = image.mask
        for p, index in enumerate(image.pixels):
            q = p * 4
            out[q : q + 3] = lookup[index]
            out[q + 3] = mask[p] if mask is not None else 255
    else:
        # Alpha map: grey level doubles as alpha
        for p, value in enumerate(image.pixels):
            out[p * 4 : p * 4 + 4] = bytes((value, value, value, value))

    return bytes(out)


def to_rgb(image: Image, pal: Palette | None = None) -> bytes:
    """Get the image as 24-bit RGB data (alpha discarded)."""
    rgba = to_rgba(image, pal)
    out = bytearray(image.num_pixels * 3)
    out[0::3] = rgba[0::4]
    out[1::3] = rgba[1::4]
    out[2::3] = rgba[2::4]
    return bytes(out)


def to_indexed(image: Image) -> bytes:
    """
    Get the raw one-byte-per-pixel data of a paletted or alpha map image.

    Raises:
        InvalidInput: If the image is invalid
        UnsupportedOperation: If the image is truecolour
    """
    image.require_valid()
    if image.mode is ColourMode.TRUECOLOR:
        raise UnsupportedOperation("Truecolour images have no index data")
    return bytes(image.pixels)


def alpha_channel(image: Image) -> bytes:
    """Per-pixel alpha (mask, alpha byte or alpha-map value)."""
    image.require_valid()
    if image.mode is ColourMode.TRUECOLOR:
        return bytes(image.pixels[3::4])
    if image.mode is ColourMode.PALETTED:
        if image.mask is None:
            return bytes([255]) * image.num_pixels
        return bytes(image.mask)
    return bytes(image.pixels)


def convert_truecolor(image: Image, pal: Palette | None = None) -> bool:
    """
    Convert the image to 32-bit RGBA.

    Returns:
        False if the image was already truecolour, True otherwise
    """
    if image.mode is ColourMode.TRUECOLOR:
        return False

    rgba = to_rgba(image, pal)

    image.pixels = bytearray(rgba)
    image.mask = None
    image.mode = ColourMode.TRUECOLOR
    image.palette = None
    return True


def convert_paletted(
    image: Image, target_pal: Palette | None, current_pal: Palette | None = None
) -> bool:
    """
    Convert the image to paletted + mask.

    Every pixel becomes the index of its nearest colour in [target_pal],
    which also becomes the image's own palette. Converting from truecolour
    or an alpha map turns the alpha channel into the mask.

    Args:
        image: Image to convert
        target_pal: Palette to convert to
        current_pal: Palette to read the image with, if it has none of its own

    Raises:
        MissingDependency: If no target palette is given
        InvalidInput: If the image is invalid
    """
    if target_pal is None:
        raise MissingDependency("convert_paletted needs a target palette")

    rgba = to_rgba(image, current_pal)

    if image.mode in (ColourMode.TRUECOLOR, ColourMode.ALPHAMAP):
        image.mask = bytearray(rgba[3::4])

    image.palette = target_pal
    palette = image.palette

    cache: dict[bytes, int] = {}
    data = bytearray(image.num_pixels)
    for p in range(image.num_pixels):
        key = rgba[p * 4 : p * 4 + 3]
        index = cache.get(key)
        if index is None:
            index = palette.nearest_colour(RGBA(key[0], key[1], key[2]))
            cache[key] = index
        data[p] = index

    image.pixels = data
    image.mode = ColourMode.PALETTED
    return True


def convert_alpha_map(
    image: Image,
    source: AlphaSource = AlphaSource.BRIGHTNESS,
    pal: Palette | None = None,
) -> bool:
    """
    Convert the image to an alpha map.

    Args:
        image: Image to convert
        source: BRIGHTNESS derives each value from pixel luma,
            EXISTING_ALPHA copies the current alpha/mask
        pal: Palette for paletted images without their own
    """
    rgba = to_rgba(image, pal)

    data = bytearray(image.num_pixels)
    for p in range(image.num_pixels):
        q = p * 4
        if source is AlphaSource.BRIGHTNESS:
            data[p] = luma(rgba[q], rgba[q + 1], rgba[q + 2])
        else:
            data[p] = rgba[q + 3]

    image.pixels = data
    image.mask = None
    image.mode = ColourMode.ALPHAMAP
    image.palette = None
    return True


def mask_from_colour(image: Image, colour: RGBA, pal: Palette | None = None) -> bool:
    """
    Make pixels matching [colour] fully transparent and all others opaque.

    Only RGB is compared. Alpha maps are not supported.

    Returns:
        False for alpha map images, True otherwise
    """
    if image.mode is ColourMode.PALETTED:
        palette = image.resolve_palette(pal)
        matches = [palette.colour(i).equals_rgb(colour) for i in range(256)]
        image.mask = bytearray(0 if matches[i] else 255 for i in image.pixels)
    elif image.mode is ColourMode.TRUECOLOR:
        px = image.pixels
        for q in range(0, len(px), 4):
            if px[q] == colour[0] and px[q + 1] == colour[1] and px[q + 2] == colour[2]:
                px[q + 3] = 0
            else:
                px[q + 3] = 255
    else:
        return False

    return True


def mask_from_brightness(image: Image, pal: Palette | None = None) -> bool:
    """Set each pixel's transparency to its brightness (black is transparent)."""
    if image.mode is ColourMode.PALETTED:
        palette = image.resolve_palette(pal)
        levels = [luma(*palette.colour(i).rgb) for i in range(256)]
        image.mask = bytearray(levels[i] for i in image.pixels)
    elif image.mode is ColourMode.TRUECOLOR:
        px = image.pixels
        for q in range(0, len(px), 4):
            px[q + 3] = luma(px[q], px[q + 1], px[q + 2])
    # Alpha maps already are brightness masks

    return True


def cutoff_mask(image: Image, threshold: int) -> bool:
    """
    Binarize the mask/alpha channel.

    Values strictly greater than [threshold] become 255, everything else 0.
    """
    table = bytes(255 if v > threshold else 0 for v in range(256))

    if image.mode is ColourMode.PALETTED:
        if image.mask is not None:
            image.mask = bytearray(image.mask.translate(table))
        elif threshold >= 255:
            image.mask = bytearray(image.num_pixels)
    elif image.mode is ColourMode.TRUECOLOR:
        image.pixels[3::4] = bytes(image.pixels[3::4]).translate(table)
    elif image.mode is ColourMode.ALPHAMAP:
        image.pixels = bytearray(image.pixels.translate(table))
    else:
        return False

    logger.debug("Cut off mask at %d for %r", threshold, image)
    return True
