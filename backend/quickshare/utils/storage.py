# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Filesystem Layout
Source images are read from image_root; published previews are written to
a flat, append-only artifact directory:

    {image_root}/{post.image.url}          source images (read-only)
    {artifact_dir}/{uuid}.jpg              published previews

Artifacts are never overwritten, indexed, or expired.
"""

from pathlib import Path

from quickshare.config import get_settings

ARTIFACT_EXTENSION = ".jpg"


# ─── Source Images ───────────────────────────────────────────────────────────

def image_root() -> Path:
    return get_settings().image_root


def resolve_image_path(image_ref: str) -> Path:
    """
    Resolve a post's recorded image path against image_root.
    Leading slashes are ignored, so "/uploads/a.jpg" and "uploads/a.jpg"
    name the same file. Raises ValueError if the result escapes the root.
    """
    root = image_root().resolve()
    requested = (root / image_ref.lstrip("/\\")).resolve()
    try:
        requested.relative_to(root)
    except ValueError:
        raise ValueError(f"Image path escapes image root: {image_ref!r}")
    return requested


# ─── Artifacts ───────────────────────────────────────────────────────────────

def artifact_dir() -> Path:
    return get_settings().artifact_dir


def init_artifact_dir() -> None:
    """Create the artifact directory. Safe to call multiple times."""
    artifact_dir().mkdir(parents=True, exist_ok=True)


def artifact_filename(artifact_id: str) -> str:
    return f"{artifact_id}{ARTIFACT_EXTENSION}"


def artifact_path(artifact_id: str) -> Path:
    return artifact_dir() / artifact_filename(artifact_id)


def artifact_url(artifact_id: str) -> str:
    """Build the public URL under which an artifact is served."""
    return f"{get_settings().artifact_base_url}/{artifact_filename(artifact_id)}"


def canonical_post_url(post_id: str) -> str:
    return f"{get_settings().canonical_base_url.rstrip('/')}/{post_id}"
