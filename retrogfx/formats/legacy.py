"""
retrogfx - Legacy Decoder Dispatch

The legacy font and sprite formats have no usable signatures, so they are
never sniffed. Callers that already know what a lump is (from its name,
its namespace or a texture definition) pick the decoder by identifier.

Usage:
    from retrogfx.formats.legacy import LegacyFormat, load_legacy

    image = load_legacy(LegacyFormat.FONT_ZD_BIG, data)
    sprite = load_legacy("img_jaguar_sprite", header, secondary=pixels)
"""

import logging
from enum import Enum

from ..core.errors import InvalidInput, UnsupportedOperation
from ..core.image import Image
from .fonts import (
    load_bmf,
    load_font0,
    load_font1,
    load_font2,
    load_font_mono,
    load_jedi_fnt,
    load_jedi_font,
    load_wolf_font,
)
from .jaguar import load_jaguar_sprite, load_jaguar_texture

logger = logging.getLogger(__name__)


class LegacyFormat(Enum):
    """Identifiers of the legacy decoders."""

    FONT_DOOM_ALPHA = "font_doom_alpha"
    FONT_ZD_CONSOLE = "font_zd_console"
    FONT_ZD_BIG = "font_zd_big"
    FONT_BMF = "font_bmf"
    FONT_MONO = "font_mono"
    FONT_WOLF = "font_wolf"
    FONT_JEDI_FNT = "font_jedi_fnt"
    FONT_JEDI_FONT = "font_jedi_font"
    IMG_JAGUAR_SPRITE = "img_jaguar_sprite"
    IMG_JAGUAR_TEXTURE = "img_jaguar_texture"


# Single-span decoders by identifier
FONT_DECODERS = {
    LegacyFormat.FONT_DOOM_ALPHA: load_font0,
    LegacyFormat.FONT_ZD_CONSOLE: load_font1,
    LegacyFormat.FONT_ZD_BIG: load_font2,
    LegacyFormat.FONT_BMF: load_bmf,
    LegacyFormat.FONT_MONO: load_font_mono,
    LegacyFormat.FONT_WOLF: load_wolf_font,
    LegacyFormat.FONT_JEDI_FNT: load_jedi_fnt,
    LegacyFormat.FONT_JEDI_FONT: load_jedi_font,
}


def load_legacy(
    format_id: LegacyFormat | str,
    data: bytes,
    secondary: bytes | None = None,
    width: int = 0,
    height: int = 0,
) -> Image:
    """
    Decode [data] with the legacy decoder named by [format_id].

    Args:
        format_id: LegacyFormat member or its string value
        data: Main byte span (the header lump for Jaguar sprites)
        secondary: Pixel lump, Jaguar sprites only
        width: Texture width, Jaguar textures only
        height: Texture height, Jaguar textures only

    Returns:
        Decoded Image with source_format set to the identifier

    Raises:
        UnsupportedOperation: If the identifier is unknown
        InvalidInput: If the data is malformed, or a Jaguar sprite is
            missing its pixel lump
    """
    try:
        fmt = LegacyFormat(format_id)
    except ValueError:
        raise UnsupportedOperation(f"Unknown legacy format: {format_id!r}") from None

    if fmt is LegacyFormat.IMG_JAGUAR_SPRITE:
        if secondary is None:
            raise InvalidInput("Jaguar sprite: pixel data lump is missing")
        image = load_jaguar_sprite(data, secondary)
    elif fmt is LegacyFormat.IMG_JAGUAR_TEXTURE:
        image = load_jaguar_texture(data, width, height)
    else:
        image = FONT_DECODERS[fmt](data)

    image.source_format = fmt.value
    logger.debug("Loaded %s: %r", fmt.value, image)
    return image
