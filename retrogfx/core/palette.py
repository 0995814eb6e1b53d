"""
retrogfx - Palette

256-entry colour palette with nearest-colour search.

The image engine only needs to read colours, write colours and find the
nearest entry for an arbitrary colour. This module supplies a concrete
palette doing exactly that, plus loading from the usual 768-byte
PLAYPAL-style dumps (including the six-bit VGA variant).
"""

from typing import Iterable

from .colour import RGBA, expand_6bit
from .errors import InvalidInput

PALETTE_SIZE = 256
PALETTE_BYTES = PALETTE_SIZE * 3


class Palette:
    """
    An ordered collection of 256 colours.

    Entries that were never set keep their greyscale default, so any
    index 0-255 always resolves to a colour.
    """

    def __init__(self, colours: Iterable[RGBA] | None = None):
        self.colours: list[RGBA] = [RGBA(i, i, i, 255) for i in range(PALETTE_SIZE)]
        self.transparent_index: int = -1

        if colours is not None:
            for index, colour in enumerate(colours):
                if index >= PALETTE_SIZE:
                    break
                self.colours[index] = RGBA(*colour)

    @classmethod
    def greyscale(cls) -> "Palette":
        """Return the default greyscale ramp (index i is (i, i, i))."""
        return cls()

    @classmethod
    def from_bytes(cls, data: bytes, sixbit: bool | None = None) -> "Palette":
        """
        Load a palette from 256 packed RGB triples.

        Args:
            data: At least 768 bytes of RGB data
            sixbit: Force six-bit expansion on/off. When None, the palette is
                treated as six-bit if no component reaches 64.

        Returns:
            New Palette

        Raises:
            InvalidInput: If fewer than 768 bytes are supplied
        """
        if len(data) < PALETTE_BYTES:
            raise InvalidInput(
                f"Palette data too small: {len(data)} bytes, expected {PALETTE_BYTES}"
            )

        if sixbit is None:
            sixbit = max(data[:PALETTE_BYTES]) < 64

        pal = cls()
        for index in range(PALETTE_SIZE):
            r, g, b = data[index * 3 : index * 3 + 3]
            if sixbit:
                r, g, b = expand_6bit(r), expand_6bit(g), expand_6bit(b)
            pal.colours[index] = RGBA(r, g, b, 255)
        return pal

    def to_bytes(self) -> bytes:
        """Serialize to 768 bytes of RGB triples."""
        out = bytearray()
        for colour in self.colours:
            out.extend(colour.rgb)
        return bytes(out)

    def colour(self, index: int) -> RGBA:
        """Get the colour at [index]."""
        return self.colours[index & 0xFF]

    def set_colour(self, index: int, colour: RGBA) -> None:
        """Set the colour at [index]."""
        if 0 <= index < PALETTE_SIZE:
            self.colours[index] = RGBA(*colour)

    def find_colour(self, colour: RGBA) -> int:
        """Return the index of an exact RGB match, or -1."""
        for index, entry in enumerate(self.colours):
            if entry.equals_rgb(colour):
                return index
        return -1

    def nearest_colour(self, colour: RGBA) -> int:
        """
        Find the palette index closest to [colour].

        Uses squared distance on integer RGB values. An exact match returns
        immediately; otherwise the first entry with the smallest distance
        wins.
        """
        best_index = 0
        best_delta = None
        r, g, b = colour[0], colour[1], colour[2]

        for index, entry in enumerate(self.colours):
            dr = r - entry.r
            dg = g - entry.g
            db = b - entry.b
            delta = dr * dr + dg * dg + db * db
            if delta == 0:
                return index
            if best_delta is None or delta < best_delta:
                best_delta = delta
                best_index = index

        return best_index

    def copy(self) -> "Palette":
        pal = Palette(self.colours)
        pal.transparent_index = self.transparent_index
        return pal

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self.colours == other.colours

    def __repr__(self) -> str:
        return f"Palette(first={self.colours[0]}, last={self.colours[-1]})"


def resolve_palette(own: Palette | None, given: Palette | None) -> Palette:
    """
    Pick the palette an operation should use.

    The image's own palette wins, then the caller's, then a fresh
    greyscale ramp.
    """
    if own is not None:
        return own
    if given is not None:
        return given
    return Palette.greyscale()
