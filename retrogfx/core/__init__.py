"""
Core image functionality.

This package contains the in-memory image model, palettes, colour model
conversions, geometric transforms, palette translations and the
compositing engine.
"""

from .colour import RGBA, TRANSPARENT, luma
from .conversions import (
    AlphaSource,
    convert_alpha_map,
    convert_paletted,
    convert_truecolor,
    cutoff_mask,
    mask_from_brightness,
    mask_from_colour,
    to_rgb,
    to_rgba,
)
from .drawing import (
    BlendMode,
    DrawProps,
    colourise,
    draw_image,
    draw_pixel,
    generate_checkerboard,
    tint,
)
from .errors import ImageError, InvalidInput, MissingDependency, UnsupportedOperation
from .geometry import autocrop, crop, mirror, mirror_pad, resize, rotate
from .image import ColourMode, Image, ImageInfo
from .palette import Palette
from .translation import (
    ColouriseRange,
    ColourRange,
    DesatRange,
    PaletteRange,
    TintRange,
    Translation,
    TranslationRange,
    apply_translation,
)

__all__ = [
    "RGBA",
    "TRANSPARENT",
    "luma",
    "AlphaSource",
    "convert_alpha_map",
    "convert_paletted",
    "convert_truecolor",
    "cutoff_mask",
    "mask_from_brightness",
    "mask_from_colour",
    "to_rgb",
    "to_rgba",
    "BlendMode",
    "DrawProps",
    "draw_image",
    "draw_pixel",
    "colourise",
    "tint",
    "generate_checkerboard",
    "ImageError",
    "InvalidInput",
    "MissingDependency",
    "UnsupportedOperation",
    "autocrop",
    "crop",
    "mirror",
    "mirror_pad",
    "resize",
    "rotate",
    "ColourMode",
    "Image",
    "ImageInfo",
    "Palette",
    "Translation",
    "TranslationRange",
    "PaletteRange",
    "ColourRange",
    "DesatRange",
    "ColouriseRange",
    "TintRange",
    "apply_translation",
]
