# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Image I/O and Conversion Utilities
Shared helpers used by the composition modules.
All internal processing uses BGR numpy arrays (OpenCV convention).
Conversion to/from PIL happens only around text rendering.
"""

from pathlib import Path

import cv2
import numpy as np
from PIL import Image


# ─── Load / Decode ───────────────────────────────────────────────────────────

def read_image_bytes(path: Path) -> bytes:
    """
    Read raw image bytes from disk.
    Raises FileNotFoundError if path does not exist.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")
    return path.read_bytes()


def bytes_to_bgr(data: bytes) -> np.ndarray:
    """Decode raw image bytes to a 3-channel BGR numpy array."""
    if not data:
        raise ValueError("Image data is empty.")
    arr = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError("Could not decode image bytes.")
    return img


# ─── Encode ──────────────────────────────────────────────────────────────────

def bgr_to_jpeg_bytes(img: np.ndarray, quality: int = 80) -> bytes:
    """Encode a BGR numpy array to JPEG bytes (lossy)."""
    success, buf = cv2.imencode(".jpg", img, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not success:
        raise RuntimeError("Failed to encode image to JPEG bytes.")
    return buf.tobytes()


# ─── Canvas ──────────────────────────────────────────────────────────────────

def solid_canvas(
    height: int,
    width: int,
    color: tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Allocate a height×width BGR canvas filled with color."""
    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:] = color
    return canvas


def crop_region(img: np.ndarray, x: int, y: int, w: int, h: int) -> np.ndarray:
    """
    Copy the (x, y, w, h) region of img.
    Clamps to image boundaries, so the result may be smaller than w×h.
    """
    ih, iw = img.shape[:2]
    x1 = max(0, x)
    y1 = max(0, y)
    x2 = min(iw, x + w)
    y2 = min(ih, y + h)
    return img[y1:y2, x1:x2].copy()


# ─── Resize ──────────────────────────────────────────────────────────────────

def resize_to_height(img: np.ndarray, max_height: int) -> tuple[np.ndarray, float]:
    """
    Resize image so its height equals max_height, preserving aspect ratio.
    Never enlarges: images already at or below max_height are returned
    as-is with scale=1.0. Returns (resized_image, scale_factor).
    """
    h, w = img.shape[:2]
    if h <= max_height:
        return img, 1.0
    scale = max_height / h
    new_w = max(1, int(round(w * scale)))
    resized = cv2.resize(img, (new_w, max_height), interpolation=cv2.INTER_AREA)
    return resized, scale


# ─── PIL Bridge ──────────────────────────────────────────────────────────────

def bgr_to_pil(img: np.ndarray) -> Image.Image:
    """Convert BGR numpy array to PIL Image (RGB mode)."""
    return Image.fromarray(cv2.cvtColor(img, cv2.COLOR_BGR2RGB))


def pil_to_bgr(pil_img: Image.Image) -> np.ndarray:
    """Convert PIL Image to BGR numpy array."""
    return cv2.cvtColor(np.array(pil_img.convert("RGB")), cv2.COLOR_RGB2BGR)
