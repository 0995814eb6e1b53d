"""
retrogfx - Raw Flat Format

Headerless paletted images whose only signature is their size (Doom
flats, fullscreen pictures, colormaps). The size alone is too weak to
sniff, so the format is never picked by automatic detection and is only
used when the caller asks for it.
"""

from ..core.errors import InvalidInput, UnsupportedOperation
from ..core.image import ColourMode, Image, ImageInfo
from ..core.palette import Palette
from ..core.settings import VALID_FLAT_SIZES
from .base import ImageFormat


def flat_size(length: int) -> tuple[int, int] | None:
    """Dimensions of the first known flat size holding [length] bytes."""
    for width, height, _ in VALID_FLAT_SIZES:
        if width * height == length:
            return width, height
    return None


class RawFormat(ImageFormat):
    """Raw 8-bit paletted data of a known size."""

    id = "raw"
    name = "Raw"
    extension = "lmp"
    reliability = 0

    def detect(self, data: bytes) -> bool:
        return flat_size(len(data)) is not None

    def read_image(self, data: bytes, index: int = 0) -> Image:
        size = flat_size(len(data))
        if size is None:
            raise InvalidInput(f"{self.name}: {len(data)} bytes is not a known flat size")

        width, height = size
        return Image.from_indexed(width, height, bytes(data), bytes([255]) * len(data))

    def can_encode(self, image: Image) -> bool:
        if image.mode is not ColourMode.PALETTED:
            return False
        return (image.width, image.height, True) in VALID_FLAT_SIZES

    def encode(self, image: Image, pal: Palette | None = None) -> bytes:
        """
        Write the raw index data.

        Raises:
            UnsupportedOperation: If the image is not paletted or not a
                writable flat size
        """
        if not self.can_encode(image):
            raise UnsupportedOperation(
                f"{self.name}: cannot write {image.width}x{image.height} {image.mode.value} image"
            )
        return bytes(image.pixels)

    def info(self, data: bytes, index: int = 0) -> ImageInfo:
        size = flat_size(len(data))
        if size is None:
            raise InvalidInput(f"{self.name}: {len(data)} bytes is not a known flat size")
        return ImageInfo(width=size[0], height=size[1], mode=ColourMode.PALETTED, format=self.id)
