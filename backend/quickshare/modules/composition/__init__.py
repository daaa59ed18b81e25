# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Composition Module
Public API for building the preview image.
"""

from quickshare.modules.composition.band_compositor import composite_bands
from quickshare.modules.composition.output_normalizer import (
    NormalisedOutput,
    normalize_output,
)
from quickshare.modules.composition.section_extractor import (
    band_rects,
    extract_band,
    extract_bands,
    parse_mask,
    slice_height,
)
from quickshare.modules.composition.source_loader import load_source_image
from quickshare.modules.composition.text_banner import append_banner, render_banner

__all__ = [
    # Source
    "load_source_image",
    # Section extractor
    "parse_mask",
    "slice_height",
    "band_rects",
    "extract_band",
    "extract_bands",
    # Compositor
    "composite_bands",
    # Banner
    "render_banner",
    "append_banner",
    # Normalizer
    "NormalisedOutput",
    "normalize_output",
]
