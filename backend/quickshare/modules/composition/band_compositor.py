# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Band Compositor
Stacks extracted bands top to bottom on a fresh dark canvas.

Bands collapse upward: the k-th selected band lands at k * slice_height
regardless of its original position, so mask "101" places band 2
directly under band 0.
"""

from __future__ import annotations

import numpy as np

from quickshare.api.middleware.error_handler import GeometryError
from quickshare.models.composition import ComposedImage
from quickshare.utils.image_utils import solid_canvas
from quickshare.utils.logger import get_logger

log = get_logger(__name__)

CANVAS_BG = (0, 0, 0)


def composite_bands(
    bands: list[np.ndarray],
    width: int,
    slice_height: int,
) -> ComposedImage:
    """
    Place each band at top = index * slice_height, left = 0.

    Args:
        bands:        BGR uint8 arrays in display order, each slice_height rows
        width:        Canvas width (the source image width)
        slice_height: Height of every band

    Returns:
        ComposedImage of height slice_height * len(bands).
    """
    if not bands:
        raise GeometryError("No bands selected; nothing to composite.")

    canvas = solid_canvas(slice_height * len(bands), width, CANVAS_BG)
    for i, band in enumerate(bands):
        bh, bw = band.shape[:2]
        if bh > slice_height or bw > width:
            raise GeometryError(
                f"Band {i} is {bw}x{bh}, larger than its {width}x{slice_height} slot."
            )
        top = i * slice_height
        canvas[top:top + bh, :bw] = band

    log.debug(
        "bands_composited",
        bands=len(bands),
        canvas_height=canvas.shape[0],
        canvas_width=width,
    )
    return ComposedImage(pixels=canvas)
