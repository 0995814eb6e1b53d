"""
retrogfx - Geometry

In-place geometric transforms: rotate, mirror, crop, resize, autocrop and
mirror padding.

Every transform builds new pixel (and mask) buffers and swaps them into
the image in one step, so an Image is never seen with buffers that do not
match its dimensions. Remaps go through numpy views of shape
(height, width, bpp) for pixels and (height, width) for the mask.
"""

import logging

import numpy as np

from .errors import UnsupportedOperation
from .image import ColourMode, Image

logger = logging.getLogger(__name__)


def _pixel_array(image: Image) -> np.ndarray:
    """View the pixel buffer as a (height, width, bpp) array."""
    return np.frombuffer(bytes(image.pixels), dtype=np.uint8).reshape(
        image.height, image.width, image.bpp
    )


def _mask_array(image: Image) -> np.ndarray | None:
    if image.mask is None:
        return None
    return np.frombuffer(bytes(image.mask), dtype=np.uint8).reshape(image.height, image.width)


def _commit(image: Image, pixels: np.ndarray, mask: np.ndarray | None) -> None:
    """Store remapped buffers and take the new dimensions from them."""
    height, width = pixels.shape[0], pixels.shape[1]
    image.pixels = bytearray(np.ascontiguousarray(pixels).tobytes())
    image.mask = bytearray(np.ascontiguousarray(mask).tobytes()) if mask is not None else None
    image.width = width
    image.height = height


def _require_pixels(image: Image, operation: str) -> None:
    if image.mode is ColourMode.UNKNOWN:
        raise UnsupportedOperation(f"Cannot {operation} an image of unknown mode")


def rotate(image: Image, angle: int) -> bool:
    """
    Rotate the image by a multiple of 90 degrees.

    Positive angles turn clockwise, so rotating by 90 moves the top-left
    pixel to the top-right corner. Width and height swap for 90 and 270.

    Args:
        image: Image to rotate
        angle: Angle in degrees, any multiple of 90 (negative allowed)

    Returns:
        True on success (including the no-op angle 0)

    Raises:
        UnsupportedOperation: If the angle is not a multiple of 90
    """
    if angle == 0:
        return True
    if angle % 90:
        raise UnsupportedOperation(f"Cannot rotate by {angle} degrees, only multiples of 90")

    angle %= 360
    if angle == 0 or image.is_empty():
        return True
    _require_pixels(image, "rotate")

    # np.rot90 turns counter-clockwise for positive k
    k = -(angle // 90)
    pixels = np.rot90(_pixel_array(image), k)
    mask = _mask_array(image)
    if mask is not None:
        mask = np.rot90(mask, k)

    _commit(image, pixels, mask)
    return True


def mirror(image: Image, vertical: bool) -> bool:
    """
    Flip the image.

    Args:
        image: Image to flip
        vertical: True flips top to bottom, False flips left to right
    """
    if image.is_empty():
        return True
    _require_pixels(image, "mirror")

    axis = 0 if vertical else 1
    pixels = np.flip(_pixel_array(image), axis)
    mask = _mask_array(image)
    if mask is not None:
        mask = np.flip(mask, axis)

    _commit(image, pixels, mask)
    return True


def crop(image: Image, x1: int, y1: int, x2: int, y2: int) -> bool:
    """
    Crop the image to the rectangle [x1],[y1] - [x2],[y2] (exclusive end).

    An [x2] or [y2] of 0, or beyond the image edge, means the full extent,
    so crop(0, 0, 0, 0) keeps the whole image.

    Raises:
        UnsupportedOperation: If the resulting rectangle is empty or
            inverted, or starts outside the image
    """
    if x2 == 0 or x2 > image.width:
        x2 = image.width
    if y2 == 0 or y2 > image.height:
        y2 = image.height

    if x1 < 0 or y1 < 0 or x2 <= x1 or y2 <= y1 or x1 > image.width or y1 > image.height:
        raise UnsupportedOperation(
            f"Invalid crop rectangle ({x1}, {y1}) - ({x2}, {y2}) "
            f"for {image.width}x{image.height} image"
        )
    _require_pixels(image, "crop")

    pixels = _pixel_array(image)[y1:y2, x1:x2]
    mask = _mask_array(image)
    if mask is not None:
        mask = mask[y1:y2, x1:x2]

    _commit(image, pixels, mask)
    return True


def resize(image: Image, width: int, height: int) -> bool:
    """
    Resize the canvas, keeping the content anchored at the top-left.

    New area is zero filled (transparent for paletted images), shrinking
    truncates. A paletted image always ends up with a mask: the old mask
    is carried over, or an opaque one is assumed if there was none.

    Returns:
        True; a zero width or height clears the image

    Raises:
        UnsupportedOperation: If either dimension is negative
    """
    if width < 0 or height < 0:
        raise UnsupportedOperation(f"Cannot resize to {width}x{height}")

    if width == 0 or height == 0:
        image.clear()
        return True
    _require_pixels(image, "resize")

    keep_w = min(image.width, width)
    keep_h = min(image.height, height)

    pixels = np.zeros((height, width, image.bpp), dtype=np.uint8)
    mask = None
    if image.mode is ColourMode.PALETTED:
        mask = np.zeros((height, width), dtype=np.uint8)

    if keep_w and keep_h:
        pixels[:keep_h, :keep_w] = _pixel_array(image)[:keep_h, :keep_w]
        if mask is not None:
            old_mask = _mask_array(image)
            if old_mask is None:
                mask[:keep_h, :keep_w] = 255
            else:
                mask[:keep_h, :keep_w] = old_mask[:keep_h, :keep_w]

    _commit(image, pixels, mask)
    return True


def _visibility(image: Image) -> np.ndarray:
    """Boolean (height, width) array of pixels that are not fully transparent."""
    if image.mode is ColourMode.PALETTED:
        mask = _mask_array(image)
        if mask is None:
            return np.ones((image.height, image.width), dtype=bool)
        return mask != 0
    if image.mode is ColourMode.TRUECOLOR:
        return _pixel_array(image)[:, :, 3] != 0
    return _pixel_array(image)[:, :, 0] != 0


def autocrop(image: Image) -> bool:
    """
    Crop away fully transparent rows and columns on all four sides.

    A completely transparent image is cropped to its top-left pixel.

    Returns:
        True if the image was cropped, False if it was already tight
    """
    if image.is_empty():
        return False
    _require_pixels(image, "autocrop")

    visible = _visibility(image)
    cols = np.flatnonzero(visible.any(axis=0))
    if cols.size == 0:
        if image.width == 1 and image.height == 1:
            return False
        return crop(image, 0, 0, 1, 1)

    rows = np.flatnonzero(visible.any(axis=1))
    x1, x2 = int(cols[0]), int(cols[-1]) + 1
    y1, y2 = int(rows[0]), int(rows[-1]) + 1

    if x1 == 0 and y1 == 0 and x2 == image.width and y2 == image.height:
        return False

    logger.debug("Autocrop %r to (%d, %d) - (%d, %d)", image, x1, y1, x2, y2)
    return crop(image, x1, y1, x2, y2)


def mirror_pad(image: Image) -> bool:
    """
    Pad the image horizontally so its x offset sits at the centre.

    Used to normalise off-centre sprite hotspots. Padding to the right is a
    plain resize; padding to the left flips the image around the resize
    and moves the offset by the added width.

    Returns:
        False if the image has no offset or is already centred
    """
    if image.offset_x == 0 and image.offset_y == 0:
        return False

    width = image.width
    if image.offset_x == width // 2 or (width % 2 == 1 and image.offset_x == width // 2 + 1):
        return False

    need_flip = image.offset_x < width // 2
    extra = abs(image.offset_x * 2 - width)

    if need_flip:
        mirror(image, False)
    resize(image, width + extra, image.height)
    if need_flip:
        mirror(image, False)
        image.offset_x += extra

    return True


def column_to_row_major(image: Image) -> bool:
    """
    Reinterpret column-major pixel data as row-major.

    The buffer is taken to hold [width] columns of [height] pixels each;
    afterwards it holds the same picture in rows.
    """
    if image.is_empty():
        return True
    _require_pixels(image, "convert")

    image.width, image.height = image.height, image.width
    rotate(image, 90)
    return mirror(image, False)
