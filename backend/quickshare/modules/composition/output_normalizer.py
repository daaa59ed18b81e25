# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Output Normalizer
Final, unconditional stage: scale the composed image down to the Open
Graph preview height and encode it as JPEG.

  1. Resize   height → TARGET_HEIGHT (630px), aspect ratio preserved,
              never enlarged
  2. Encode   JPEG at JPEG_QUALITY (80)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from quickshare.api.middleware.error_handler import EncodeFailureError
from quickshare.models.composition import ComposedImage
from quickshare.utils.image_utils import bgr_to_jpeg_bytes, resize_to_height
from quickshare.utils.logger import get_logger

log = get_logger(__name__)

TARGET_HEIGHT = 630
JPEG_QUALITY = 80


@dataclass
class NormalisedOutput:
    """Encoded preview plus the geometry it was encoded at."""
    data: bytes
    width: int
    height: int
    scale: float                 # ≤ 1.0
    composed_shape: tuple        # (H, W) before resize


def resize_for_preview(img: np.ndarray, target_height: int = TARGET_HEIGHT) -> tuple[np.ndarray, float]:
    return resize_to_height(img, target_height)


def normalize_output(
    image: ComposedImage,
    target_height: int = TARGET_HEIGHT,
    quality: int = JPEG_QUALITY,
) -> NormalisedOutput:
    """
    Resize and encode the composed image.

    Raises EncodeFailureError if the buffer is empty or encoding fails.
    """
    if image.height == 0 or image.width == 0:
        raise EncodeFailureError("Composed image is empty.")

    try:
        resized, scale = resize_for_preview(image.pixels, target_height)
        data = bgr_to_jpeg_bytes(resized, quality=quality)
    except Exception as exc:
        raise EncodeFailureError(f"Failed to normalise preview: {exc}") from exc

    log.debug(
        "output_normalised",
        composed=(image.height, image.width),
        output=resized.shape[:2],
        scale=round(scale, 4),
        size_bytes=len(data),
    )

    return NormalisedOutput(
        data=data,
        width=int(resized.shape[1]),
        height=int(resized.shape[0]),
        scale=scale,
        composed_shape=(image.height, image.width),
    )
