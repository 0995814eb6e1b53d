"""
retrogfx - Pillow Bridge

Conversion between retrogfx Images and PIL images. Used by the general
image format plugin, the vector decoder and anything that wants a quick
PNG preview of a decoded font or sprite.
"""

try:
    from PIL import Image as PILImage
except ImportError:
    raise ImportError("Pillow library required. Install with: pip install Pillow")

from ..core.conversions import to_rgba
from ..core.image import ColourMode, Image
from ..core.palette import Palette


def to_pil_image(image: Image, pal: Palette | None = None, scale: int = 1) -> PILImage.Image:
    """
    Render an image to a PIL RGBA image.

    Args:
        image: Image to render (any colour mode)
        pal: Palette for paletted images without their own
        scale: Integer upscale factor (nearest neighbour)

    Returns:
        PIL Image in RGBA mode

    Raises:
        InvalidInput: If the image is invalid
    """
    rgba = to_rgba(image, pal)
    img = PILImage.frombytes("RGBA", (image.width, image.height), rgba)
    if scale > 1:
        img = img.resize((image.width * scale, image.height * scale), PILImage.Resampling.NEAREST)
    return img


def from_pil_image(pil_image: PILImage.Image) -> Image:
    """
    Build a truecolour Image from any PIL image.

    Args:
        pil_image: Source image, converted to RGBA if needed

    Returns:
        New TRUECOLOR Image with the same dimensions
    """
    if pil_image.mode != "RGBA":
        pil_image = pil_image.convert("RGBA")

    width, height = pil_image.size
    image = Image(ColourMode.TRUECOLOR)
    image.set_image_data(pil_image.tobytes(), width, height, ColourMode.TRUECOLOR)
    return image
