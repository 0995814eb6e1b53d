"""
retrogfx - Settings

Shared defaults used by the drawing and conversion code. Callers may
adjust the module-level ``settings`` instance.
"""

from dataclasses import dataclass, field

from .colour import RGBA

# Greyscale weights used by colourise (red, green, blue)
GREYSCALE_WEIGHTS: tuple[float, float, float] = (0.3, 0.59, 0.11)

# "Missing texture" preview pattern
CHECKER_SQUARE_SIZE = 8
CHECKER_COLOURS: tuple[RGBA, RGBA] = (RGBA(64, 64, 80), RGBA(80, 80, 96))

# Raw (headerless) image sizes known to be valid: (width, height, writable)
VALID_FLAT_SIZES: list[tuple[int, int, bool]] = [
    (2, 2, False),  # Heretic F_SKY1
    (10, 12, False),  # gnum format
    (16, 16, False),
    (32, 32, False),
    (32, 64, False),  # Strife startup sprite
    (48, 48, False),
    (64, 64, True),  # standard flat size
    (64, 65, False),  # Heretic flat size variant
    (64, 128, False),  # Hexen flat size variant
    (80, 50, False),  # SRB2 fade mask size 1
    (128, 128, True),
    (160, 100, False),  # SRB2 fade mask size 2
    (256, 34, False),  # SRB2 colormap
    (256, 66, False),  # Blake Stone colormap
    (256, 200, False),  # Rise of the Triad sky
    (256, 256, True),  # hires flat size
    (320, 200, False),  # full screen format
    (512, 512, True),
    (640, 400, False),  # SRB2 fade mask size 4
    (1024, 1024, True),
    (2048, 2048, True),  # SRB2
    (4096, 4096, True),
]


@dataclass
class Settings:
    """Mutable runtime options."""

    greyscale_weights: tuple[float, float, float] = GREYSCALE_WEIGHTS
    checker_colours: tuple[RGBA, RGBA] = field(default=CHECKER_COLOURS)
    checker_square_size: int = CHECKER_SQUARE_SIZE


settings = Settings()
