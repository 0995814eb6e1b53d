"""
retrogfx - raster image engine for legacy game graphics.

Subpackages:
    core: image model, palette, conversions, geometry and drawing
    formats: legacy decoders and the image format plugin registry
    rendering: Pillow bridge
"""

__version__ = "0.1.0"
