# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: GET /quickshare/{post_id}
Builds a fresh preview image for the post and answers with the Open
Graph redirect page pointing at it.

Query parameters:
    s  section mask, up to 3 chars of '0'/'1' (optional)
    t  overlay text for the banner (optional)
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

from quickshare.config import get_settings
from quickshare.core.pipeline import build_params, run_preview
from quickshare.dependencies import PostStoreDep, PublisherDep
from quickshare.utils.logger import get_logger

router = APIRouter(tags=["quickshare"])
log = get_logger(__name__)


@router.get(
    "/quickshare/{post_id}",
    response_class=HTMLResponse,
    summary="Share preview for a post",
    description=(
        "Composes the selected bands of the post image plus an optional text "
        "banner, publishes it under /quickshare/generated/, and returns an HTML "
        "page whose og:image points at it and which redirects to the post."
    ),
)
async def quickshare_preview(
    post_id: str,
    store: PostStoreDep,
    publisher: PublisherDep,
    s: Optional[str] = Query(None, description="Section mask, e.g. '101'"),
    t: str = Query("", description="Overlay text"),
) -> HTMLResponse:
    settings = get_settings()
    params = build_params(s, t, max_sections=settings.max_sections)

    log.info("quickshare_request_received", post_id=post_id)

    result = await run_preview(post_id, params, store, publisher, settings)
    return HTMLResponse(content=result.html, status_code=200)
