"""
retrogfx - General Image Format

Mainstream image formats (PNG, BMP, GIF, ...) handled through Pillow.
Everything is decoded to truecolour and written back out as PNG.
"""

import io
import logging

try:
    from PIL import Image as PILImage
    from PIL import UnidentifiedImageError
except ImportError:
    raise ImportError("Pillow library required. Install with: pip install Pillow")

from ..core.errors import InvalidInput
from ..core.image import ColourMode, Image, ImageInfo
from ..core.palette import Palette
from ..rendering.pil_image import from_pil_image, to_pil_image
from .base import ImageFormat

logger = logging.getLogger(__name__)

# Pillow plugins with real signatures; weakly identified formats such as
# TGA are left out so they cannot claim arbitrary data
PILLOW_FORMATS = ("PNG", "BMP", "GIF", "JPEG", "TIFF", "PCX")


def _open(data: bytes) -> PILImage.Image:
    return PILImage.open(io.BytesIO(data), formats=PILLOW_FORMATS)


class GeneralImageFormat(ImageFormat):
    """Any image Pillow can read; always written as PNG."""

    id = "image"
    name = "Image"
    extension = "png"
    reliability = 200

    def detect(self, data: bytes) -> bool:
        try:
            with _open(data):
                return True
        except (UnidentifiedImageError, OSError):
            return False

    def read_image(self, data: bytes, index: int = 0) -> Image:
        try:
            with _open(data) as pil_image:
                count = getattr(pil_image, "n_frames", 1)
                if not 0 <= index < count:
                    raise InvalidInput(f"{self.name}: no sub-image {index} (of {count})")
                if index:
                    pil_image.seek(index)
                image = from_pil_image(pil_image)
        except (UnidentifiedImageError, OSError) as e:
            raise InvalidInput(f"{self.name}: cannot decode data: {e}") from e

        image.sub_image_index = index
        image.sub_image_count = count
        logger.debug("Decoded %s image: %dx%d", self.name, image.width, image.height)
        return image

    def can_encode(self, image: Image) -> bool:
        return image.is_valid()

    def encode(self, image: Image, pal: Palette | None = None) -> bytes:
        """
        Write [image] as PNG.

        Raises:
            InvalidInput: If the image is invalid
        """
        buf = io.BytesIO()
        to_pil_image(image, pal).save(buf, "PNG")
        return buf.getvalue()

    def info(self, data: bytes, index: int = 0) -> ImageInfo:
        """Read the dimensions from the header without decoding pixels."""
        try:
            with _open(data) as pil_image:
                width, height = pil_image.size
                count = getattr(pil_image, "n_frames", 1)
        except (UnidentifiedImageError, OSError) as e:
            raise InvalidInput(f"{self.name}: cannot read header: {e}") from e

        return ImageInfo(
            width=width,
            height=height,
            mode=ColourMode.TRUECOLOR,
            format=self.id,
            sub_image_count=count,
            sub_image_index=index,
        )
