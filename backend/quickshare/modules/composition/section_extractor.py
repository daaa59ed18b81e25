# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Section Extractor
Splits the source image into len(mask) equal horizontal bands and cuts
out the ones flagged with '1':

    mask "101" on a 900px image  →  slice_height = 300
        band 0: rows [0, 300)     kept
        band 1: rows [300, 600)   skipped
        band 2: rows [600, 900)   kept

slice_height is floored, so top + height never exceeds the image height.
When the height is not divisible by len(mask), the remaining bottom rows
belong to no band and are dropped. Rectangles are still clamped to the
image bounds before cutting.

Every band is cut from the original source array, never from a
previously cropped buffer, so bands can be extracted concurrently.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from quickshare.api.middleware.error_handler import GeometryError
from quickshare.models.composition import BandRect, SectionMask
from quickshare.utils.image_utils import crop_region
from quickshare.utils.logger import get_logger

log = get_logger(__name__)

MAX_SECTIONS = 3


def parse_mask(raw: Optional[str], max_sections: int = MAX_SECTIONS) -> Optional[SectionMask]:
    """
    Parse the `s` query value into a SectionMask.

    Only the first max_sections characters are considered. A position is
    selected only when its character is '1'; anything else counts as
    unselected. None or "" means no mask at all.
    """
    if not raw:
        return None
    chars = raw[:max_sections]
    return SectionMask(flags=tuple(c == "1" for c in chars))


def slice_height(full_height: int, mask: SectionMask) -> int:
    """Height of every band: floor(full_height / len(mask))."""
    return full_height // mask.num_flags


def band_rects(full_width: int, full_height: int, mask: SectionMask) -> list[BandRect]:
    """
    Rectangles of the selected bands, in mask order.

    Raises GeometryError if the image is too short to give each band at
    least one row.
    """
    band_h = slice_height(full_height, mask)
    if band_h <= 0:
        raise GeometryError(
            f"Image height {full_height}px cannot be split into "
            f"{mask.num_flags} bands."
        )

    rects: list[BandRect] = []
    for index, selected in enumerate(mask.flags):
        if not selected:
            continue
        top = index * band_h
        height = min(band_h, full_height - top)
        rects.append(BandRect(left=0, top=top, width=full_width, height=height))
    return rects


def extract_band(source: np.ndarray, rect: BandRect) -> np.ndarray:
    """Copy one band out of the source array."""
    band = crop_region(source, rect.left, rect.top, rect.width, rect.height)
    if band.shape[0] != rect.height or band.shape[1] != rect.width:
        raise GeometryError(
            f"Band {rect} exceeds source bounds "
            f"{source.shape[1]}x{source.shape[0]}."
        )
    return band


def extract_bands(source: np.ndarray, mask: SectionMask) -> tuple[list[np.ndarray], int]:
    """
    Sequentially extract all selected bands.
    Returns (bands in mask order, slice_height).
    """
    h, w = source.shape[:2]
    rects = band_rects(w, h, mask)
    bands = [extract_band(source, r) for r in rects]

    log.debug(
        "bands_extracted",
        mask=str(mask),
        slice_height=slice_height(h, mask),
        selected=len(bands),
    )
    return bands, slice_height(h, mask)
