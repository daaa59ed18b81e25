# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: GET /quickshare/generated/{filename}
Serves published previews from the flat artifact directory. Deployments
with a static file layer in front can turn this off (SERVE_ARTIFACTS=false).
"""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

from quickshare.utils.logger import get_logger
from quickshare.utils.storage import ARTIFACT_EXTENSION, artifact_dir

router = APIRouter(tags=["artifacts"])
log = get_logger(__name__)


def _safe_resolve(filename: str) -> Path:
    """
    Resolve the requested file inside the artifact directory.
    Rejects path traversal and anything that is not a published .jpg.
    """
    out_dir = artifact_dir().resolve()
    requested = (out_dir / filename).resolve()

    try:
        requested.relative_to(out_dir)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Path traversal not allowed.",
        )

    if requested.suffix.lower() != ARTIFACT_EXTENSION:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"File type '{requested.suffix}' not servable.",
        )

    return requested


@router.get(
    "/quickshare/generated/{filename}",
    summary="Retrieve a published preview image",
)
async def get_artifact(filename: str) -> FileResponse:
    resolved = _safe_resolve(filename)

    if not resolved.is_file():
        log.warning("artifact_not_found", filename=filename)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Preview '{filename}' not found.",
        )

    log.debug("artifact_served", filename=filename)
    return FileResponse(
        path=str(resolved),
        media_type="image/jpeg",
        headers={"Cache-Control": "public, max-age=604800, immutable"},
    )
