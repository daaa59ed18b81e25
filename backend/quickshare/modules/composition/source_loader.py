# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Source Image Loader
Resolves a post's image reference under image_root, reads it, and
decodes it to a BGR array. Any failure along the way is a
DecodeFailureError: missing file, unreadable file, path outside the
root, or bytes that are not an image.
"""

from __future__ import annotations

from quickshare.api.middleware.error_handler import DecodeFailureError
from quickshare.models.composition import SourceImage
from quickshare.utils.image_utils import bytes_to_bgr, read_image_bytes
from quickshare.utils.logger import get_logger
from quickshare.utils.storage import resolve_image_path

log = get_logger(__name__)


def load_source_image(image_ref: str) -> SourceImage:
    if not image_ref:
        raise DecodeFailureError("Post has no image reference.")

    try:
        path = resolve_image_path(image_ref)
        data = read_image_bytes(path)
        pixels = bytes_to_bgr(data)
    except (OSError, ValueError) as exc:
        raise DecodeFailureError(f"Cannot load image {image_ref!r}: {exc}") from exc

    source = SourceImage(data=data, pixels=pixels)
    log.debug(
        "source_loaded",
        image_ref=image_ref,
        width=source.width,
        height=source.height,
        size_bytes=len(data),
    )
    return source
