#!/usr/bin/env python3
"""
GL texture uploads for the viewport.

Images are decoded by orrery.images and uploaded here. Every function in this
module must be called on the thread that owns the GL context.

A texture that cannot be read is replaced by a flat texture in the material's
colour. A sky box with any missing face is skipped and the plain background
colour shows instead.
"""
import logging
import os
from typing import Dict, Optional, Sequence, Tuple

from OpenGL.GL import (
    GL_CLAMP_TO_EDGE, GL_LINEAR, GL_LINEAR_MIPMAP_LINEAR, GL_RGBA, GL_REPEAT,
    GL_TEXTURE_2D, GL_TEXTURE_CUBE_MAP, GL_TEXTURE_CUBE_MAP_POSITIVE_X,
    GL_TEXTURE_MAG_FILTER, GL_TEXTURE_MIN_FILTER, GL_TEXTURE_WRAP_R,
    GL_TEXTURE_WRAP_S, GL_TEXTURE_WRAP_T, GL_UNSIGNED_BYTE,
    glBindTexture, glDeleteTextures, glGenTextures, glTexImage2D, glTexParameteri,
)
from OpenGL.GLU import gluBuild2DMipmaps

from .constants import CUBEMAP_DIR, CUBEMAP_FACES, TEXTURES_DIR
from .data_models import Material
from .images import Pixels, decode_image, solid_pixels

logger = logging.getLogger(__name__)


def upload_texture(pixels: Pixels) -> int:
    width, height, data = pixels
    tex_id = int(glGenTextures(1))
    glBindTexture(GL_TEXTURE_2D, tex_id)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_REPEAT)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_REPEAT)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR_MIPMAP_LINEAR)
    glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
    gluBuild2DMipmaps(GL_TEXTURE_2D, GL_RGBA, width, height, GL_RGBA, GL_UNSIGNED_BYTE, data)
    glBindTexture(GL_TEXTURE_2D, 0)
    return tex_id


def upload_cubemap(faces: Sequence[Pixels]) -> int:
    tex_id = int(glGenTextures(1))
    glBindTexture(GL_TEXTURE_CUBE_MAP, tex_id)
    for i, (width, height, data) in enumerate(faces):
        glTexImage2D(GL_TEXTURE_CUBE_MAP_POSITIVE_X + i, 0, GL_RGBA, width, height, 0,
                     GL_RGBA, GL_UNSIGNED_BYTE, data)
    glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
    glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
    glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
    glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
    glTexParameteri(GL_TEXTURE_CUBE_MAP, GL_TEXTURE_WRAP_R, GL_CLAMP_TO_EDGE)
    glBindTexture(GL_TEXTURE_CUBE_MAP, 0)
    return tex_id


class TextureCache:
    """
    Lazily uploads one GL texture per material and keeps it for reuse.

    Lives on the viewport thread; textures are created the first time a
    material is drawn.
    """
    def __init__(self, textures_dir: str = TEXTURES_DIR):
        self.textures_dir = textures_dir
        self.textures: Dict[Tuple[Optional[str], Tuple[int, int, int]], int] = {}

    def get(self, material: Material) -> int:
        key = (material.texture, material.color)
        tex_id = self.textures.get(key)
        if tex_id is None:
            pixels = None
            if material.texture:
                pixels = decode_image(os.path.join(self.textures_dir, material.texture))
            if pixels is None:
                pixels = solid_pixels(material.color)
            tex_id = upload_texture(pixels)
            self.textures[key] = tex_id
            logger.debug("Uploaded texture %s as id %d", material.texture or material.color, tex_id)
        return tex_id

    def clear(self) -> None:
        if self.textures:
            glDeleteTextures(list(self.textures.values()))
        self.textures.clear()


def load_cubemap(cubemap_dir: str = CUBEMAP_DIR, faces: Sequence[str] = CUBEMAP_FACES) -> int:
    """Upload the six sky box faces (+x, -x, +y, -y, +z, -z). Returns 0 if any is missing."""
    decoded = []
    for fn in faces:
        pixels = decode_image(os.path.join(cubemap_dir, fn), flip_y=False)
        if pixels is None:
            logger.warning("Sky box disabled: face %s is unavailable", fn)
            return 0
        decoded.append(pixels)
    tex_id = upload_cubemap(decoded)
    logger.info("Sky box loaded from %s", cubemap_dir)
    return tex_id
