"""
retrogfx - Drawing

Pixel-level compositing: blending a colour onto a pixel, blitting one
image onto another, colourising/tinting and the checkerboard fill used
for "missing texture" previews.

Blending follows the classic integer/float mix: the source alpha is
truncated to a byte, components are blended in floating point and then
clamped and truncated back to bytes. Paletted destinations are
re-quantized to the nearest palette colour after every write.
"""

from dataclasses import dataclass
from enum import Enum

from .colour import RGBA, clamp
from .errors import UnsupportedOperation
from .image import ColourMode, Image
from .palette import Palette
from .settings import settings


class BlendMode(Enum):
    """How a source colour is combined with the destination pixel."""

    NORMAL = "normal"
    ADD = "add"
    SUBTRACT = "subtract"
    REVERSE_SUBTRACT = "reverse_subtract"
    MODULATE = "modulate"


@dataclass
class DrawProps:
    """
    Blending properties for draw_pixel / draw_image.

    Attributes:
        blend: Blend mode
        alpha: Overall opacity multiplier, 0.0 - 1.0
        src_alpha: If True the source colour's own alpha is multiplied by
            [alpha]; otherwise the source is treated as opaque
    """

    blend: BlendMode = BlendMode.NORMAL
    alpha: float = 1.0
    src_alpha: bool = True


def _ensure_mask(image: Image) -> bytearray:
    """Paletted images get an explicit opaque mask before it is written to."""
    if image.mask is None:
        image.mask = bytearray([255]) * image.num_pixels
    return image.mask


def _read_pixel(image: Image, p: int, pal: Palette) -> RGBA:
    if image.mode is ColourMode.TRUECOLOR:
        r, g, b, a = image.pixels[p * 4 : p * 4 + 4]
        return RGBA(r, g, b, a)
    if image.mode is ColourMode.PALETTED:
        alpha = image.mask[p] if image.mask is not None else 255
        return pal.colour(image.pixels[p]).with_alpha(alpha)
    value = image.pixels[p]
    return RGBA(value, value, value, value)


def _write_pixel(image: Image, p: int, colour: RGBA, pal: Palette) -> None:
    if image.mode is ColourMode.TRUECOLOR:
        image.pixels[p * 4 : p * 4 + 4] = bytes(colour)
    elif image.mode is ColourMode.PALETTED:
        image.pixels[p] = pal.nearest_colour(colour)
        _ensure_mask(image)[p] = colour.a
    elif image.mode is ColourMode.ALPHAMAP:
        image.pixels[p] = colour.a


def _blend(dest: RGBA, src: RGBA, mode: BlendMode) -> RGBA:
    """Combine [src] (with its effective alpha already applied) onto [dest]."""
    alpha = src.a / 255.0
    out_alpha = clamp(dest.a + src.a)

    if mode is BlendMode.ADD:
        return RGBA(
            clamp(dest.r + src.r * alpha),
            clamp(dest.g + src.g * alpha),
            clamp(dest.b + src.b * alpha),
            out_alpha,
        )
    if mode is BlendMode.SUBTRACT:
        return RGBA(
            clamp(dest.r - src.r * alpha),
            clamp(dest.g - src.g * alpha),
            clamp(dest.b - src.b * alpha),
            out_alpha,
        )
    if mode is BlendMode.REVERSE_SUBTRACT:
        return RGBA(
            clamp(-dest.r + src.r * alpha),
            clamp(-dest.g + src.g * alpha),
            clamp(-dest.b + src.b * alpha),
            out_alpha,
        )
    if mode is BlendMode.MODULATE:
        return RGBA(
            clamp(src.r * dest.r / 255),
            clamp(src.g * dest.g / 255),
            clamp(src.b * dest.b / 255),
            out_alpha,
        )

    inv_alpha = 1.0 - alpha
    return RGBA(
        clamp(dest.r * inv_alpha + src.r * alpha),
        clamp(dest.g * inv_alpha + src.g * alpha),
        clamp(dest.b * inv_alpha + src.b * alpha),
        out_alpha,
    )


def draw_pixel(
    image: Image,
    x: int,
    y: int,
    colour: RGBA,
    props: DrawProps,
    pal: Palette | None = None,
) -> bool:
    """
    Blend [colour] onto the pixel at [x],[y].

    Args:
        image: Destination image
        x: Column
        y: Row
        colour: Source colour
        props: Blend mode and alpha settings
        pal: Palette for a paletted destination without its own

    Returns:
        False if the position is outside the image, True otherwise (a
        source that ends up fully transparent leaves the pixel untouched)
    """
    if x < 0 or y < 0 or x >= image.width or y >= image.height:
        return False
    if image.mode is ColourMode.UNKNOWN:
        raise UnsupportedOperation("Cannot draw on an image of unknown mode")

    colour = RGBA(*colour)
    if props.src_alpha:
        alpha = int(colour.a * props.alpha)
    else:
        alpha = int(255 * props.alpha)
    alpha = clamp(alpha)
    if alpha == 0:
        return True
    colour = colour.with_alpha(alpha)

    palette = image.resolve_palette(pal)
    p = y * image.width + x

    if alpha == 255 and props.blend is BlendMode.NORMAL:
        _write_pixel(image, p, colour, palette)
        return True

    dest = _read_pixel(image, p, palette)
    _write_pixel(image, p, _blend(dest, colour, props.blend), palette)
    return True


def draw_image(
    dest: Image,
    src: Image,
    x: int,
    y: int,
    props: DrawProps,
    pal_src: Palette | None = None,
    pal_dest: Palette | None = None,
) -> bool:
    """
    Draw [src] onto [dest] with its top-left corner at [x],[y].

    Source pixels that fall outside [dest] or are fully transparent are
    skipped; everything else goes through draw_pixel.

    Raises:
        InvalidInput: If either image is invalid
    """
    dest.require_valid()
    src.require_valid()

    src_palette = src.resolve_palette(pal_src)
    dest_palette = dest.resolve_palette(pal_dest)

    for sy in range(src.height):
        dy = y + sy
        if dy < 0 or dy >= dest.height:
            continue
        for sx in range(src.width):
            dx = x + sx
            if dx < 0 or dx >= dest.width:
                continue

            colour = _read_pixel(src, sy * src.width + sx, src_palette)
            if colour.a == 0:
                continue
            draw_pixel(dest, dx, dy, colour, props, dest_palette)

    return True


def _recolour(image: Image, pal: Palette | None, start: int, stop: int, func) -> bool:
    """Apply [func] to the colour of every pixel (or every index in range)."""
    if image.mode is ColourMode.ALPHAMAP:
        raise UnsupportedOperation("Cannot recolour an alpha map")
    if image.mode is ColourMode.UNKNOWN:
        raise UnsupportedOperation("Cannot recolour an image of unknown mode")

    palette = image.resolve_palette(pal)
    use_range = image.mode is ColourMode.PALETTED and 0 <= start <= stop < 256

    for p in range(image.num_pixels):
        if image.mode is ColourMode.TRUECOLOR:
            r, g, b, a = image.pixels[p * 4 : p * 4 + 4]
            image.pixels[p * 4 : p * 4 + 4] = bytes(func(RGBA(r, g, b, a)))
        else:
            index = image.pixels[p]
            if use_range and not start <= index <= stop:
                continue
            image.pixels[p] = palette.nearest_colour(func(palette.colour(index)))

    return True


def colourise(
    image: Image,
    colour: RGBA,
    pal: Palette | None = None,
    start: int = -1,
    stop: int = -1,
) -> bool:
    """
    Recolour the image to shades of [colour].

    Each pixel's greyscale level (using settings.greyscale_weights) scales
    [colour]. Alpha is kept.

    Args:
        image: Image to colourise
        colour: Target colour
        pal: Palette for paletted images without their own
        start: First palette index to affect (paletted only, -1 for all)
        stop: Last palette index to affect, inclusive

    Raises:
        UnsupportedOperation: For alpha maps
    """
    wr, wg, wb = settings.greyscale_weights

    def apply(col: RGBA) -> RGBA:
        grey = min((col.r * wr + col.g * wg + col.b * wb) / 255.0, 1.0)
        return RGBA(int(colour[0] * grey), int(colour[1] * grey), int(colour[2] * grey), col.a)

    return _recolour(image, pal, start, stop, apply)


def tint(
    image: Image,
    colour: RGBA,
    amount: float,
    pal: Palette | None = None,
    start: int = -1,
    stop: int = -1,
) -> bool:
    """
    Blend every pixel towards [colour] by [amount] (0 = unchanged, 1 = replaced).

    Raises:
        UnsupportedOperation: For alpha maps
    """
    inv = 1.0 - amount

    def apply(col: RGBA) -> RGBA:
        return RGBA(
            clamp(col.r * inv + colour[0] * amount),
            clamp(col.g * inv + colour[1] * amount),
            clamp(col.b * inv + colour[2] * amount),
            col.a,
        )

    return _recolour(image, pal, start, stop, apply)


def generate_checkerboard(
    image: Image,
    square_size: int | None = None,
    colour1: RGBA | None = None,
    colour2: RGBA | None = None,
    pal: Palette | None = None,
) -> bool:
    """
    Fill the image with a checkerboard, colour1 in the top-left square.

    Unset arguments fall back to settings.checker_square_size and
    settings.checker_colours. Paletted images use the nearest palette
    colours and become fully opaque.

    Returns:
        False (nothing drawn) for alpha maps, empty images or a
        non-positive square size
    """
    if square_size is None:
        square_size = settings.checker_square_size
    if colour1 is None:
        colour1 = settings.checker_colours[0]
    if colour2 is None:
        colour2 = settings.checker_colours[1]

    if image.mode not in (ColourMode.PALETTED, ColourMode.TRUECOLOR):
        return False
    if square_size <= 0 or image.is_empty():
        return False

    if image.mode is ColourMode.TRUECOLOR:
        fills = (bytes(RGBA(*colour1)), bytes(RGBA(*colour2)))
    else:
        palette = image.resolve_palette(pal)
        fills = (
            bytes([palette.nearest_colour(colour1)]),
            bytes([palette.nearest_colour(colour2)]),
        )
        image.mask = bytearray([255]) * image.num_pixels

    bpp = image.bpp
    for y in range(image.height):
        row_parity = (y // square_size) & 1
        for x in range(image.width):
            which = ((x // square_size) & 1) ^ row_parity
            p = (y * image.width + x) * bpp
            image.pixels[p : p + bpp] = fills[which]

    return True
