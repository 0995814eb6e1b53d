"""
retrogfx - Errors

Exception types raised by the image model, converters and decoders.
"""


class ImageError(Exception):
    """Base class for all retrogfx failures."""

    pass


class InvalidInput(ImageError, ValueError):
    """
    Raised when a byte span or image is malformed.

    Typically the header fields of a legacy format imply a size the input
    cannot satisfy, or an operation was given an empty/invalid image.
    """

    pass


class UnsupportedOperation(ImageError):
    """Raised when an operation does not apply (bad angle, wrong colour mode, ...)."""

    pass


class MissingDependency(ImageError):
    """Raised when an operation needs a collaborator (palette, rasterizer) that is absent."""

    pass
