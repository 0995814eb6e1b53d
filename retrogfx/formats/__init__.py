"""
Image Format System.

This package provides the legacy decoders and a registry of image format
plugins that can detect and decode byte-level image formats.

Usage:
    from retrogfx.formats import determine_format, open_image

    fmt = determine_format(data)
    if fmt is not UNKNOWN_FORMAT:
        image = fmt.decode(data)

    # Or in one go, trying a known format first
    image = open_image(data, type_hint="raw")
"""

import logging

from ..core.errors import InvalidInput
from ..core.image import Image
from .base import ImageFormat, UnknownFormat
from .general import GeneralImageFormat
from .legacy import LegacyFormat, load_legacy
from .raw import RawFormat

logger = logging.getLogger(__name__)

UNKNOWN_FORMAT = UnknownFormat()

# Registry of all available formats by id, in detection priority order
AVAILABLE_FORMATS: dict[str, ImageFormat] = {}


def register_format(fmt: ImageFormat) -> None:
    """
    Add [fmt] to the registry.

    Formats are tried by determine_format in registration order.
    Registering a second format with the same id replaces the first but
    keeps its position.

    Raises:
        ValueError: If the format's reliability is outside 0-255
    """
    if not 0 <= fmt.reliability <= 255:
        raise ValueError(f"Format {fmt.id!r} has invalid reliability {fmt.reliability}")
    AVAILABLE_FORMATS[fmt.id] = fmt


def get_format(format_id: str) -> ImageFormat:
    """Get the registered format [format_id], or UNKNOWN_FORMAT."""
    return AVAILABLE_FORMATS.get(format_id, UNKNOWN_FORMAT)


def all_formats() -> list[ImageFormat]:
    """All registered formats in registration order."""
    return list(AVAILABLE_FORMATS.values())


def determine_format(data: bytes) -> ImageFormat:
    """
    Find the format of [data].

    Formats are checked in registration order. Once a format has matched,
    only formats that are strictly more reliable can replace it, and the
    search stops at a match with reliability 255. Formats with
    reliability 0 are never auto-detected.

    Returns:
        The detected format, or UNKNOWN_FORMAT
    """
    found = UNKNOWN_FORMAT
    for fmt in AVAILABLE_FORMATS.values():
        if fmt.reliability == 0:
            continue
        if found is not UNKNOWN_FORMAT and fmt.reliability <= found.reliability:
            continue

        if fmt.detect(data):
            found = fmt
            if found.reliability == 255:
                break

    logger.debug("Detected format %r for %d bytes", found.id, len(data))
    return found


def open_image(data: bytes, type_hint: str | None = None, index: int = 0) -> Image:
    """
    Decode [data] with whatever format it is in.

    Args:
        data: Raw bytes
        type_hint: Id of a format to try first
        index: Sub-image to read

    Returns:
        Decoded Image with source_format set

    Raises:
        InvalidInput: If no format recognises the data, or it is malformed
    """
    if type_hint:
        hinted = get_format(type_hint)
        if hinted is not UNKNOWN_FORMAT and hinted.detect(data):
            return hinted.decode(data, index)

    fmt = determine_format(data)
    if fmt is UNKNOWN_FORMAT:
        raise InvalidInput(f"Unknown image format ({len(data)} bytes)")
    return fmt.decode(data, index)


register_format(GeneralImageFormat())
register_format(RawFormat())

__all__ = [
    "ImageFormat",
    "UnknownFormat",
    "GeneralImageFormat",
    "RawFormat",
    "LegacyFormat",
    "load_legacy",
    "UNKNOWN_FORMAT",
    "AVAILABLE_FORMATS",
    "register_format",
    "get_format",
    "all_formats",
    "determine_format",
    "open_image",
]
