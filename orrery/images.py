#!/usr/bin/env python3
"""
Image decoding for textures, independent of any GL context.

Pixels are always returned as tightly packed RGBA bytes with the origin at the
bottom-left (OpenGL order) unless flip_y is False.
"""
import logging
from typing import Optional, Sequence, Tuple

from PIL import Image

logger = logging.getLogger(__name__)

Pixels = Tuple[int, int, bytes]


def decode_image(path: str, flip_y: bool = True) -> Optional[Pixels]:
    """Read an image file as RGBA. Returns (width, height, data) or None."""
    try:
        with Image.open(path) as img:
            img = img.convert("RGBA")
            if flip_y:
                img = img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
            return img.width, img.height, img.tobytes()
    except OSError as e:
        logger.warning("Texture %s could not be loaded: %s", path, e)
        return None


def solid_pixels(color: Sequence[int], size: int = 2) -> Pixels:
    """A size x size opaque image in one colour, used when a texture is missing."""
    r, g, b = (int(c) for c in color[:3])
    return size, size, bytes((r, g, b, 255)) * (size * size)
