# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Text Banner Renderer
Renders the overlay text on a fixed-height dark strip and appends it
below the composed image:

    ┌──────────────────────┐  top = 0
    │    composed image    │
    ├──────────────────────┤  top = composed height
    │        "text"        │  banner_height (100px)
    └──────────────────────┘

Text is centred on both axes in a single font and size. It is never
wrapped or truncated; strings wider than the image are clipped at the
canvas edges.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from quickshare.models.composition import ComposedImage
from quickshare.utils.image_utils import pil_to_bgr
from quickshare.utils.logger import get_logger

log = get_logger(__name__)

BANNER_HEIGHT = 100
FONT_SIZE = 40

# RGB, drawn through PIL
_BANNER_BG = (0, 0, 0)
_TEXT_FILL = (255, 255, 255)


@lru_cache(maxsize=8)
def _load_font(font_path: Optional[Path], size: int) -> ImageFont.ImageFont:
    if font_path is not None:
        return ImageFont.truetype(str(font_path), size)
    return ImageFont.load_default(size=size)


def render_banner(
    text: str,
    width: int,
    height: int = BANNER_HEIGHT,
    font_size: int = FONT_SIZE,
    font_path: Optional[Path] = None,
) -> np.ndarray:
    """Render text centred on a width×height dark strip. Returns BGR uint8."""
    strip = Image.new("RGB", (width, height), _BANNER_BG)
    draw = ImageDraw.Draw(strip)
    font = _load_font(font_path, font_size)

    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = (width - (right - left)) / 2 - left
    y = (height - (bottom - top)) / 2 - top
    draw.text((x, y), text, font=font, fill=_TEXT_FILL)

    return pil_to_bgr(strip)


def append_banner(
    image: ComposedImage,
    text: str,
    banner_height: int = BANNER_HEIGHT,
    font_size: int = FONT_SIZE,
    font_path: Optional[Path] = None,
) -> ComposedImage:
    """
    Return a new image with the banner stacked under `image`.
    Blank text leaves the image untouched.
    """
    text = text.strip()
    if not text:
        return image

    banner = render_banner(
        text,
        image.width,
        height=banner_height,
        font_size=font_size,
        font_path=font_path,
    )
    stacked = np.vstack([image.pixels, banner])

    log.debug(
        "banner_appended",
        text_length=len(text),
        composed_height=image.height,
        total_height=stacked.shape[0],
    )
    return ComposedImage(pixels=stacked)
