"""
retrogfx - Colour Values

RGBA colour tuple and the brightness helpers shared by the converters
and the compositing engine.
"""

from typing import NamedTuple


class RGBA(NamedTuple):
    """8-bit RGBA colour."""

    r: int
    g: int
    b: int
    a: int = 255

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def equals_rgb(self, other: "RGBA") -> bool:
        """Compare colour components only, ignoring alpha."""
        return self.r == other.r and self.g == other.g and self.b == other.b

    def with_alpha(self, alpha: int) -> "RGBA":
        return RGBA(self.r, self.g, self.b, alpha)


TRANSPARENT = RGBA(0, 0, 0, 0)


def luma(r: int, g: int, b: int) -> int:
    """
    Brightness of an RGB colour using the NTSC weights.

    The result is truncated, not rounded, matching the old tools.

    Example:
        >>> luma(100, 200, 50)
        153
    """
    return int(r * 0.3 + g * 0.59 + b * 0.11)


def expand_6bit(value: int) -> int:
    """Expand a 6-bit VGA colour component (0-63) to 8 bits."""
    return ((value << 2) | (value >> 4)) & 0xFF


def clamp(value: float, low: int = 0, high: int = 255) -> int:
    """Clamp a float to [low, high] and truncate to int."""
    if value < low:
        return low
    if value > high:
        return high
    return int(value)
