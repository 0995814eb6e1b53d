"""
retrogfx - Vector Image Decoder

SVG markup is rasterized by an external collaborator: any callable taking
(svg_text, width, height) and returning a PIL image. The result is turned
into a truecolour Image.
"""

import logging
from typing import Callable

try:
    from PIL import Image as PILImage
except ImportError:
    raise ImportError("Pillow library required. Install with: pip install Pillow")

from ..core.errors import InvalidInput, MissingDependency
from ..core.image import Image
from ..rendering.pil_image import from_pil_image

logger = logging.getLogger(__name__)

# (svg_text, width, height) -> PIL image; width/height of 0 mean "natural size"
Rasterizer = Callable[[str, int, int], PILImage.Image]


def load_svg(
    svg_text: str | bytes,
    width: int = 0,
    height: int = 0,
    rasterizer: Rasterizer | None = None,
) -> Image:
    """
    Rasterize SVG markup into a truecolour image.

    Args:
        svg_text: SVG document (bytes are decoded as UTF-8)
        width: Requested width, 0 to let the rasterizer decide
        height: Requested height, 0 to let the rasterizer decide
        rasterizer: Callable doing the actual rendering

    Returns:
        TRUECOLOR Image

    Raises:
        MissingDependency: If no rasterizer is given
        InvalidInput: If the markup is not valid UTF-8 or the rasterizer
            fails or produces an empty image
    """
    if rasterizer is None:
        raise MissingDependency("SVG decoding needs a rasterizer")
    if width < 0 or height < 0:
        raise InvalidInput(f"SVG: invalid size {width}x{height}")

    if isinstance(svg_text, bytes):
        try:
            svg_text = svg_text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidInput(f"SVG: markup is not valid UTF-8: {e}") from e

    try:
        rendered = rasterizer(svg_text, width, height)
    except Exception as e:
        raise InvalidInput(f"SVG: rasterizer failed: {e}") from e

    if rendered is None or rendered.width == 0 or rendered.height == 0:
        raise InvalidInput("SVG: rasterizer produced an empty image")

    image = from_pil_image(rendered)
    image.source_format = "svg"

    logger.debug("Rasterized SVG: %dx%d", image.width, image.height)
    return image
