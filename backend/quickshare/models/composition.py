# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Composition Data Models
Request-scoped values flowing through the preview pipeline:
source image → (bands) → composed image → published artifact.
All image buffers are BGR uint8 numpy arrays (OpenCV convention).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from pydantic import BaseModel, Field


@dataclass(frozen=True)
class SectionMask:
    """
    Which horizontal bands of the source to keep, top to bottom.
    Band height is derived from len(flags), so "1" and "100" cut
    different bands.
    """
    flags: tuple[bool, ...]

    @property
    def num_flags(self) -> int:
        return len(self.flags)

    @property
    def selected_count(self) -> int:
        return sum(self.flags)

    @property
    def selects_nothing(self) -> bool:
        return self.selected_count == 0

    def __str__(self) -> str:
        return "".join("1" if f else "0" for f in self.flags)


@dataclass(frozen=True)
class BandRect:
    """Rectangle of one band, in source image pixel coordinates."""
    left: int
    top: int
    width: int
    height: int

    @property
    def bottom(self) -> int:
        return self.top + self.height


@dataclass(frozen=True)
class SourceImage:
    """Raw bytes as read from storage plus the decoded BGR array."""
    data: bytes
    pixels: np.ndarray

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])


@dataclass(frozen=True)
class ComposedImage:
    """
    In-progress preview buffer. Each optional stage returns a new
    instance; none mutates the array it was given.
    """
    pixels: np.ndarray

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])


@dataclass(frozen=True)
class ComposeParams:
    """Per-request composition options parsed from the query string."""
    mask: Optional[SectionMask] = None
    overlay_text: str = ""

    @property
    def crops(self) -> bool:
        return self.mask is not None and not self.mask.selects_nothing

    @property
    def has_banner(self) -> bool:
        return bool(self.overlay_text)


class Artifact(BaseModel):
    """A published preview image. Created once per request, never reused."""
    artifact_id: str
    path: Path
    url: str
    size_bytes: int = Field(0, ge=0)
