"""
retrogfx - Image Model

The canonical in-memory image: a pixel buffer in one of three colour
modes, an optional mask, an optional owned palette and metadata
(offsets, sub-image index/count, source format).

Conversions, geometry and drawing live in their own modules and operate
on Image instances in place.
"""

import copy
from dataclasses import dataclass
from enum import Enum

from .colour import RGBA, TRANSPARENT
from .errors import InvalidInput, UnsupportedOperation
from .palette import Palette, resolve_palette


class ColourMode(Enum):
    """Pixel representation of an Image."""

    UNKNOWN = "unknown"
    PALETTED = "paletted"  # 1 byte index + optional 1 byte mask
    TRUECOLOR = "truecolor"  # 4 bytes RGBA
    ALPHAMAP = "alphamap"  # 1 byte, grey and alpha at once

    @property
    def bpp(self) -> int:
        """Bytes per pixel."""
        if self is ColourMode.TRUECOLOR:
            return 4
        return 1


@dataclass
class ImageInfo:
    """Snapshot of an image's properties."""

    width: int = 0
    height: int = 0
    mode: ColourMode = ColourMode.UNKNOWN
    format: str | None = None
    sub_image_count: int = 1
    sub_image_index: int = 0
    offset_x: int = 0
    offset_y: int = 0
    has_palette: bool = False


class Image:
    """
    A paletted, truecolour or alpha-map raster image.

    Buffers are always consistent with the dimensions: ``pixels`` holds
    ``width * height * bpp`` bytes and ``mask`` (when present) holds
    ``width * height`` bytes. A missing mask means fully opaque.

    A new image is empty and paletted unless given another mode. An image
    constructed with ``ColourMode.UNKNOWN`` is never valid.
    """

    def __init__(self, mode: ColourMode = ColourMode.PALETTED):
        self.width: int = 0
        self.height: int = 0
        self.mode: ColourMode = mode
        self.pixels: bytearray = bytearray()
        self.mask: bytearray | None = None
        self._palette: Palette | None = None
        self.offset_x: int = 0
        self.offset_y: int = 0
        self.sub_image_index: int = 0
        self.sub_image_count: int = 1
        self.source_format: str | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def palette(self) -> Palette | None:
        """The image's own palette, if it has one."""
        return self._palette

    @palette.setter
    def palette(self, pal: Palette | None) -> None:
        # Always store a private copy, never the caller's object
        self._palette = pal.copy() if pal is not None else None

    @property
    def has_palette(self) -> bool:
        return self._palette is not None

    @property
    def bpp(self) -> int:
        return self.mode.bpp

    @property
    def stride(self) -> int:
        """Bytes per image row."""
        return self.width * self.bpp

    @property
    def num_pixels(self) -> int:
        return self.width * self.height

    def is_empty(self) -> bool:
        return self.width * self.height == 0

    def is_valid(self) -> bool:
        """True if the image has non-zero size and a correctly sized buffer."""
        return (
            self.width > 0
            and self.height > 0
            and self.mode is not ColourMode.UNKNOWN
            and len(self.pixels) == self.width * self.height * self.bpp
        )

    def require_valid(self) -> None:
        """
        Raises:
            InvalidInput: If the image is empty or its buffer is missing
        """
        if not self.is_valid():
            raise InvalidInput(
                f"Invalid image ({self.width}x{self.height}, {self.mode.value})"
            )

    def resolve_palette(self, pal: Palette | None = None) -> Palette:
        """Own palette, else [pal], else greyscale."""
        return resolve_palette(self._palette, pal)

    # ------------------------------------------------------------------
    # Creation / lifecycle
    # ------------------------------------------------------------------

    def create(
        self,
        width: int,
        height: int,
        mode: ColourMode,
        palette: Palette | None = None,
        index: int = 0,
        count: int = 1,
    ) -> None:
        """
        Replace the image with a blank one.

        Paletted images get a zeroed (fully transparent) mask.

        Raises:
            UnsupportedOperation: If either dimension is negative
        """
        if width < 0 or height < 0:
            raise UnsupportedOperation(f"Cannot create image of size {width}x{height}")

        size = width * height
        if mode is ColourMode.PALETTED:
            pixels = bytearray(size)
            mask: bytearray | None = bytearray(size)
        elif mode is ColourMode.TRUECOLOR:
            pixels = bytearray(size * 4)
            mask = None
        elif mode is ColourMode.ALPHAMAP:
            pixels = bytearray(size)
            mask = None
        else:
            raise UnsupportedOperation(f"Cannot create image in mode {mode.value}")

        self.pixels = pixels
        self.mask = mask
        self.width = width
        self.height = height
        self.mode = mode
        self.offset_x = 0
        self.offset_y = 0
        self.sub_image_index = index
        self.sub_image_count = count
        self.source_format = None
        self.palette = palette

    @classmethod
    def from_indexed(
        cls,
        width: int,
        height: int,
        pixels: bytes,
        mask: bytes | None = None,
        palette: Palette | None = None,
    ) -> "Image":
        """
        Build a paletted image from index data.

        Args:
            width: Image width
            height: Image height
            pixels: width * height palette indices
            mask: Optional width * height mask; when None, index 0 is
                transparent and every other index opaque
            palette: Optional palette for the image to own

        Raises:
            InvalidInput: If a buffer does not match the dimensions
        """
        size = width * height
        if len(pixels) != size or (mask is not None and len(mask) != size):
            raise InvalidInput(f"Index data does not match {width}x{height}")

        image = cls(ColourMode.PALETTED)
        image.width = width
        image.height = height
        image.pixels = bytearray(pixels)
        if mask is None:
            image.mask = bytearray(0 if i == 0 else 255 for i in pixels)
        else:
            image.mask = bytearray(mask)
        image.palette = palette
        return image

    def create_from_info(self, info: ImageInfo, palette: Palette | None = None) -> None:
        """Create a blank image with the properties in [info]."""
        self.create(
            info.width,
            info.height,
            info.mode,
            palette,
            info.sub_image_index,
            info.sub_image_count,
        )
        self.offset_x = info.offset_x
        self.offset_y = info.offset_y
        self.source_format = info.format

    def clear(self) -> None:
        """Reset to an empty image (mode is kept)."""
        self.pixels = bytearray()
        self.mask = None
        self.width = 0
        self.height = 0
        self.offset_x = 0
        self.offset_y = 0

    def set_image_data(
        self, pixels: bytes, width: int, height: int, mode: ColourMode
    ) -> None:
        """
        Replace the pixel buffer, dimensions and mode at once.

        The mask is dropped; the palette and offsets are kept.

        Raises:
            InvalidInput: If the buffer size does not match
        """
        expected = width * height * mode.bpp
        if len(pixels) != expected:
            raise InvalidInput(
                f"Pixel buffer is {len(pixels)} bytes, expected {expected} "
                f"for {width}x{height} {mode.value}"
            )
        self.pixels = bytearray(pixels)
        self.mask = None
        self.width = width
        self.height = height
        self.mode = mode

    def copy(self) -> "Image":
        """Deep copy (buffers and palette duplicated)."""
        return copy.deepcopy(self)

    def info(self) -> ImageInfo:
        return ImageInfo(
            width=self.width,
            height=self.height,
            mode=self.mode,
            format=self.source_format,
            sub_image_count=self.sub_image_count,
            sub_image_index=self.sub_image_index,
            offset_x=self.offset_x,
            offset_y=self.offset_y,
            has_palette=self.has_palette,
        )

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: int, y: int, pal: Palette | None = None) -> RGBA:
        """
        Colour of the pixel at [x],[y].

        Returns transparent black if the position is out of range. For
        paletted images the alpha comes from the mask.
        """
        if not self._in_bounds(x, y) or not self.is_valid():
            return TRANSPARENT

        p = y * self.width + x
        if self.mode is ColourMode.TRUECOLOR:
            r, g, b, a = self.pixels[p * 4 : p * 4 + 4]
            return RGBA(r, g, b, a)
        if self.mode is ColourMode.PALETTED:
            colour = self.resolve_palette(pal).colour(self.pixels[p])
            alpha = self.mask[p] if self.mask is not None else 255
            return colour.with_alpha(alpha)
        value = self.pixels[p]
        return RGBA(value, value, value, value)

    def get_pixel_index(self, x: int, y: int) -> int:
        """Palette index at [x],[y], or 0 if out of range or truecolour."""
        if not self._in_bounds(x, y) or self.mode is ColourMode.TRUECOLOR:
            return 0
        return self.pixels[y * self.width + x]

    def set_pixel(self, x: int, y: int, colour: RGBA, pal: Palette | None = None) -> bool:
        """
        Set the pixel at [x],[y] to [colour].

        Paletted images store the nearest palette index (mask untouched),
        alpha maps store the colour's alpha.

        Returns:
            False if the position is out of range
        """
        if not self._in_bounds(x, y):
            return False

        p = y * self.width + x
        if self.mode is ColourMode.TRUECOLOR:
            self.pixels[p * 4 : p * 4 + 4] = bytes(RGBA(*colour))
        elif self.mode is ColourMode.PALETTED:
            self.pixels[p] = self.resolve_palette(pal).nearest_colour(colour)
        elif self.mode is ColourMode.ALPHAMAP:
            self.pixels[p] = colour[3]
        return True

    def set_pixel_index(self, x: int, y: int, index: int, alpha: int = 255) -> bool:
        """
        Set the pixel at [x],[y] to palette entry [index] with [alpha].

        Returns:
            False if the position is out of range
        """
        if not self._in_bounds(x, y):
            return False

        p = y * self.width + x
        if self.mode is ColourMode.TRUECOLOR:
            colour = self.resolve_palette().colour(index).with_alpha(alpha)
            self.pixels[p * 4 : p * 4 + 4] = bytes(colour)
        elif self.mode is ColourMode.PALETTED:
            self.pixels[p] = index
            if self.mask is not None:
                self.mask[p] = alpha
        elif self.mode is ColourMode.ALPHAMAP:
            self.pixels[p] = alpha
        else:
            return False
        return True

    def fill_alpha(self, alpha: int) -> None:
        """Set every pixel's mask/alpha value to [alpha]."""
        if not self.is_valid():
            return

        if self.mode is ColourMode.TRUECOLOR:
            self.pixels[3::4] = bytes([alpha]) * self.num_pixels
        elif self.mode is ColourMode.PALETTED:
            self.mask = bytearray([alpha]) * self.num_pixels
        elif self.mode is ColourMode.ALPHAMAP:
            self.pixels = bytearray([alpha]) * self.num_pixels

    # ------------------------------------------------------------------
    # Palette usage
    # ------------------------------------------------------------------

    def find_unused_colour(self) -> int:
        """First palette index not used by any pixel, or -1."""
        if self.mode is not ColourMode.PALETTED:
            return -1
        used = set(self.pixels)
        for index in range(256):
            if index not in used:
                return index
        return -1

    def count_colours(self) -> int:
        """Number of distinct palette indices used (0 if not paletted)."""
        if self.mode is not ColourMode.PALETTED:
            return 0
        return len(set(self.pixels))

    def shrink_palette(self, pal: Palette | None = None) -> None:
        """
        Move all used colours to the start of the palette.

        Pixels are remapped to the compacted indices and the resulting
        palette becomes the image's own.
        """
        if self.mode is not ColourMode.PALETTED:
            return

        source = self.resolve_palette(pal)
        used = sorted(set(self.pixels))
        remap = [0] * 256
        new_pal = Palette()
        for new_index, old_index in enumerate(used):
            new_pal.set_colour(new_index, source.colour(old_index))
            remap[old_index] = new_index

        self.pixels = bytearray(remap[i] for i in self.pixels)
        self.palette = new_pal

    # ------------------------------------------------------------------
    # Reinterpretation
    # ------------------------------------------------------------------

    def set_width(self, width: int) -> bool:
        """Reinterpret the buffer with a new width (height derived)."""
        total = self.num_pixels
        if width > 0 and total > width and total % width == 0:
            self.width = width
            self.height = total // width
            return True
        return False

    def set_height(self, height: int) -> bool:
        """Reinterpret the buffer with a new height (width derived)."""
        total = self.num_pixels
        if height > 0 and total > height and total % height == 0:
            self.height = height
            self.width = total // height
            return True
        return False

    def __repr__(self) -> str:
        return (
            f"Image({self.width}x{self.height}, mode={self.mode.value}, "
            f"offset=({self.offset_x}, {self.offset_y}), "
            f"format={self.source_format!r})"
        )
