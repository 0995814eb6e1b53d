"""
Rendering helpers.

Bridges retrogfx images to Pillow for previews and saving.
"""

from .pil_image import from_pil_image, to_pil_image

__all__ = ["from_pil_image", "to_pil_image"]
