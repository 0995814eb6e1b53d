"""
retrogfx - Palette Translations

A translation remaps the palette indices of a paletted image. It is an
ordered list of ranges, each covering a span of source indices and
mapping it onto one of:

* another span of palette indices
* a colour gradient (matched back to the nearest palette entry)
* a desaturated gradient driven by each colour's greyscale level
* a colourised or tinted version of the source colour

Every range is checked against the pixel's starting index, so ranges
are not chained; when several ranges cover an index the last one wins.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .colour import RGBA, clamp
from .errors import InvalidInput
from .image import ColourMode, Image
from .palette import Palette
from .settings import settings

logger = logging.getLogger(__name__)

# Desaturation weights (red, green, blue)
DESAT_WEIGHTS: tuple[float, float, float] = (0.3, 0.59, 0.11)


def _check_index(value: int, what: str) -> None:
    if not 0 <= value <= 255:
        raise InvalidInput(f"Translation {what} index {value} is not in 0-255")


@dataclass
class TranslationRange:
    """One translation entry covering source indices o_start..o_end inclusive."""
    o_start: int
    o_end: int

    def __post_init__(self):
        _check_index(self.o_start, "source start")
        _check_index(self.o_end, "source end")

    def covers(self, index: int) -> bool:
        return self.o_start <= index <= self.o_end

    def fraction(self, index: int) -> float:
        """How far along the source span [index] is, 0.0 - 1.0."""
        if self.o_start == self.o_end:
            return 0.0
        return (index - self.o_start) / (self.o_end - self.o_start)

    def translate(self, index: int, pal: Palette) -> tuple[int, RGBA]:
        """
        Map [index] through this range.

        Returns:
            The new palette index and the colour it stands for
        """
        raise NotImplementedError


@dataclass
class PaletteRange(TranslationRange):
    """Source span mapped linearly onto the index span d_start..d_end."""
    d_start: int
    d_end: int

    def __post_init__(self):
        super().__post_init__()
        _check_index(self.d_start, "destination start")
        _check_index(self.d_end, "destination end")

    def translate(self, index: int, pal: Palette) -> tuple[int, RGBA]:
        dest = int(self.d_start + self.fraction(index) * (self.d_end - self.d_start))
        return dest, pal.colour(dest)


@dataclass
class ColourRange(TranslationRange):
    """Source span mapped onto a gradient from start to end."""
    start: RGBA
    end: RGBA

    def translate(self, index: int, pal: Palette) -> tuple[int, RGBA]:
        frac = self.fraction(index)
        colour = RGBA(
            int(self.start[0] + frac * (self.end[0] - self.start[0])),
            int(self.start[1] + frac * (self.end[1] - self.start[1])),
            int(self.start[2] + frac * (self.end[2] - self.start[2])),
        )
        return pal.nearest_colour(colour), colour


@dataclass
class DesatRange(TranslationRange):
    """
    Source span desaturated onto a gradient.

    start and end are (r, g, b) multipliers in 0.0 - 2.0; the source
    colour's greyscale level picks the point between them.
    """
    start: tuple[float, float, float]
    end: tuple[float, float, float]

    def __post_init__(self):
        super().__post_init__()
        for value in (*self.start, *self.end):
            if not 0.0 <= value <= 2.0:
                raise InvalidInput(f"Desaturation value {value} is not in 0.0-2.0")

    def translate(self, index: int, pal: Palette) -> tuple[int, RGBA]:
        col = pal.colour(index)
        wr, wg, wb = DESAT_WEIGHTS
        grey = (col.r * wr + col.g * wg + col.b * wb) / 255.0
        colour = RGBA(
            *(
                min(255, int((s + grey * (e - s)) * 255.0))
                for s, e in zip(self.start, self.end)
            )
        )
        return pal.nearest_colour(colour), colour


@dataclass
class ColouriseRange(TranslationRange):
    """Source span recoloured to shades of colour."""
    colour: RGBA

    def translate(self, index: int, pal: Palette) -> tuple[int, RGBA]:
        col = pal.colour(index)
        wr, wg, wb = settings.greyscale_weights
        grey = min((col.r * wr + col.g * wg + col.b * wb) / 255.0, 1.0)
        colour = RGBA(
            int(self.colour[0] * grey), int(self.colour[1] * grey), int(self.colour[2] * grey)
        )
        return pal.nearest_colour(colour), colour


@dataclass
class TintRange(TranslationRange):
    """Source span blended towards colour by amount percent."""
    colour: RGBA
    amount: int  # 0 - 100

    def __post_init__(self):
        super().__post_init__()
        if not 0 <= self.amount <= 100:
            raise InvalidInput(f"Tint amount {self.amount} is not in 0-100")

    def translate(self, index: int, pal: Palette) -> tuple[int, RGBA]:
        col = pal.colour(index)
        amount = self.amount * 0.01
        inv = 1.0 - amount
        colour = RGBA(
            clamp(col.r * inv + self.colour[0] * amount),
            clamp(col.g * inv + self.colour[1] * amount),
            clamp(col.b * inv + self.colour[2] * amount),
        )
        return pal.nearest_colour(colour), colour


@dataclass
class Translation:
    """An ordered list of translation ranges."""
    ranges: list[TranslationRange] = field(default_factory=list)

    def add(self, entry: TranslationRange) -> None:
        self.ranges.append(entry)

    def extend(self, entries: Iterable[TranslationRange]) -> None:
        self.ranges.extend(entries)

    def clear(self) -> None:
        self.ranges.clear()

    def is_empty(self) -> bool:
        return not self.ranges

    def __len__(self) -> int:
        return len(self.ranges)

    def __iter__(self) -> Iterator[TranslationRange]:
        return iter(self.ranges)


def apply_translation(
    image: Image,
    translation: Translation,
    pal: Palette | None = None,
    truecolor: bool = False,
) -> bool:
    """
    Remap the indices of a paletted image through [translation].

    Fully transparent pixels (mask 0) are left alone. Every range is
    tested against the pixel's starting index.

    Args:
        image: Paletted image to translate
        translation: Ranges to apply, in order
        pal: Palette for an image without its own
        truecolor: If True the image is converted to truecolour, keeping
            the exact colours the ranges produced instead of their nearest
            palette matches. Transparent pixels become (0, 0, 0, 0).

    Returns:
        False if the image has no pixels or is not paletted, True otherwise
    """
    if image.is_empty() or not image.pixels:
        return False
    if image.mode is not ColourMode.PALETTED:
        logger.debug("Not translating %r: %s images have no indices", image, image.mode.value)
        return False

    palette = image.resolve_palette(pal)
    mask = image.mask
    out = bytearray(image.num_pixels * 4) if truecolor else None

    for p in range(image.num_pixels):
        if mask is not None and mask[p] == 0:
            continue
        index = image.pixels[p]

        if out is not None:
            colour = palette.colour(index)
            alpha = mask[p] if mask is not None else colour.a
            out[p * 4 : p * 4 + 4] = bytes(colour.with_alpha(alpha))

        for entry in translation:
            if not entry.covers(index):
                continue
            new_index, colour = entry.translate(index, palette)
            image.pixels[p] = new_index
            if out is not None:
                alpha = mask[p] if mask is not None else colour.a
                out[p * 4 : p * 4 + 4] = bytes(colour.with_alpha(alpha))

    if out is not None:
        image.set_image_data(bytes(out), image.width, image.height, ColourMode.TRUECOLOR)

    logger.debug("Applied %d translation ranges to %r", len(translation), image)
    return True
