"""
Image format base classes.

Provides the foundation for image format plugins: detection, decoding and
(optionally) encoding of a byte-level image format.
"""

from abc import ABC, abstractmethod

from ..core.errors import UnsupportedOperation
from ..core.image import Image, ImageInfo
from ..core.palette import Palette


class ImageFormat(ABC):
    """
    Base class for image format plugins.

    Attributes:
        id: Unique identifier, also written to Image.source_format
        name: Human readable name
        extension: Usual file extension, without the dot
        reliability: How trustworthy detect() is, 0-255. 255 means a
            positive detection is certain; 0 means the format is never
            picked by automatic detection.
    """

    id: str
    name: str
    extension: str = "dat"
    reliability: int = 255

    @abstractmethod
    def detect(self, data: bytes) -> bool:
        """
        Check if [data] looks like this format.

        Must be cheap and have no side effects.

        Args:
            data: Raw bytes

        Returns:
            True if the data appears to be in this format
        """
        pass

    @abstractmethod
    def read_image(self, data: bytes, index: int = 0) -> Image:
        """
        Decode [data] into a new Image.

        Called by decode(), which takes care of tagging the result.

        Args:
            data: Raw bytes
            index: Sub-image to read for multi-image formats

        Returns:
            Decoded Image

        Raises:
            InvalidInput: If the data is malformed
        """
        pass

    def decode(self, data: bytes, index: int = 0) -> Image:
        """
        Decode [data] and mark the result as coming from this format.

        Raises:
            InvalidInput: If the data is malformed
        """
        image = self.read_image(data, index)
        image.source_format = self.id
        return image

    def can_encode(self, image: Image) -> bool:
        """Check if [image] can be written in this format as it is."""
        return False

    def encode(self, image: Image, pal: Palette | None = None) -> bytes:
        """
        Encode [image] in this format.

        Raises:
            UnsupportedOperation: If the format is read-only or cannot
                hold the image
        """
        raise UnsupportedOperation(f"{self.name} images cannot be written")

    def info(self, data: bytes, index: int = 0) -> ImageInfo:
        """
        Get the properties of the image in [data].

        The default implementation decodes the whole image; formats with
        a cheap header override this.
        """
        return self.decode(data, index).info()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id!r}>"


class UnknownFormat(ImageFormat):
    """Sentinel returned when no registered format recognises the data."""

    id = "unknown"
    name = "Unknown"
    extension = "dat"
    reliability = 0

    def detect(self, data: bytes) -> bool:
        return False

    def read_image(self, data: bytes, index: int = 0) -> Image:
        raise UnsupportedOperation("Cannot decode data of unknown format")
