# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Preview Pipeline Orchestrator
Runs one request end to end:

  1. Fetch post          record store lookup
  2. Decode source       read + decode post image
  3. Band composite      only when the mask selects at least one band
                         (bands extracted in PARALLEL, then stacked)
  4. Text banner         only when the trimmed overlay text is non-empty
  5. Normalize           resize to preview height + JPEG encode
  6. Publish             background write, never awaited here
  7. Render page         Open Graph redirect document

Optional stages are plain ComposedImage → ComposedImage transforms,
selected up front by build_stages(). Every blocking step runs in a
worker thread under stage_timeout_seconds. Failures in steps 1-5
propagate to the request; step 6 cannot fail the request.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from quickshare.api.middleware.error_handler import (
    EncodeFailureError,
    PostNotFoundError,
    QuickShareError,
    StageTimeoutError,
)
from quickshare.config import Settings, get_settings
from quickshare.core.post_store import PostStore
from quickshare.core.publisher import ArtifactPublisher
from quickshare.models.composition import (
    Artifact,
    ComposedImage,
    ComposeParams,
    SourceImage,
)
from quickshare.models.post import Post, is_valid_post_id
from quickshare.modules.composition import (
    append_banner,
    band_rects,
    composite_bands,
    extract_band,
    load_source_image,
    normalize_output,
    parse_mask,
    slice_height,
)
from quickshare.modules.preview import render_preview_page
from quickshare.utils.logger import get_logger, request_context
from quickshare.utils.storage import canonical_post_url

log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Stage:
    """One optional transform in the composition chain."""
    name: str
    run: Callable[[ComposedImage], Awaitable[ComposedImage]]


@dataclass
class PreviewResult:
    post_id: str
    artifact: Artifact
    canonical_url: str
    html: str
    stages: list[str]
    composed_height: int
    output_height: int


def build_params(s: Optional[str], t: Optional[str], max_sections: int = 3) -> ComposeParams:
    """Turn the raw `s` / `t` query values into ComposeParams."""
    return ComposeParams(
        mask=parse_mask(s, max_sections=max_sections),
        overlay_text=(t or "").strip(),
    )


# ─── Stage Builders ───────────────────────────────────────────────────────────

def _band_composite_stage(source: SourceImage, params: ComposeParams) -> Stage:
    mask = params.mask

    async def run(image: ComposedImage) -> ComposedImage:
        # Bands are cut from the source, not from `image`
        rects = band_rects(source.width, source.height, mask)
        bands = await asyncio.gather(*(
            asyncio.to_thread(extract_band, source.pixels, rect) for rect in rects
        ))
        return await asyncio.to_thread(
            composite_bands,
            list(bands),
            source.width,
            slice_height(source.height, mask),
        )

    return Stage(name="band_composite", run=run)


def _text_banner_stage(params: ComposeParams, settings: Settings) -> Stage:
    async def run(image: ComposedImage) -> ComposedImage:
        return await asyncio.to_thread(
            append_banner,
            image,
            params.overlay_text,
            settings.banner_height,
            settings.banner_font_size,
            settings.banner_font_path,
        )

    return Stage(name="text_banner", run=run)


def build_stages(
    source: SourceImage,
    params: ComposeParams,
    settings: Settings,
) -> list[Stage]:
    """
    Select the optional stages for this request, in execution order.
    A mask that selects no band is treated like no mask at all.
    """
    stages: list[Stage] = []
    if params.crops:
        stages.append(_band_composite_stage(source, params))
    if params.has_banner:
        stages.append(_text_banner_stage(params, settings))
    return stages


# ─── Execution ────────────────────────────────────────────────────────────────

async def _bounded(name: str, awaitable: Awaitable[T], timeout: float) -> T:
    """
    Await one step under the stage timeout. Domain errors pass through;
    anything else is reported as an encode failure of that step.
    """
    log.debug("stage_start", stage=name)
    try:
        result = await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise StageTimeoutError(f"Stage '{name}' exceeded {timeout}s") from exc
    except QuickShareError:
        raise
    except Exception as exc:
        raise EncodeFailureError(f"Stage '{name}' failed: {exc}") from exc
    log.debug("stage_complete", stage=name)
    return result


async def _fetch_post(post_id: str, store: PostStore, timeout: float) -> Post:
    if not is_valid_post_id(post_id):
        raise PostNotFoundError(f"Malformed post id: {post_id!r}")
    post = await _bounded("fetch_post", asyncio.to_thread(store.get_post, post_id), timeout)
    if post is None:
        raise PostNotFoundError(f"No post with id {post_id}")
    return post


async def run_preview(
    post_id: str,
    params: ComposeParams,
    store: PostStore,
    publisher: ArtifactPublisher,
    settings: Optional[Settings] = None,
) -> PreviewResult:
    """
    Build and publish the preview for one post and render its redirect
    page. Raises a QuickShareError subclass on any failure before publish.
    """
    settings = settings or get_settings()
    timeout = settings.stage_timeout_seconds

    with request_context(post_id=post_id):
        log.info(
            "pipeline_start",
            mask=str(params.mask) if params.mask else None,
            text_length=len(params.overlay_text),
        )

        post = await _fetch_post(post_id, store, timeout)

        source = await _bounded(
            "decode_source",
            asyncio.to_thread(load_source_image, post.image_ref(settings.source_variant)),
            timeout,
        )
        image = ComposedImage(pixels=source.pixels)

        stages = build_stages(source, params, settings)
        for stage in stages:
            image = await _bounded(stage.name, stage.run(image), timeout)

        output = await _bounded(
            "normalize",
            asyncio.to_thread(
                normalize_output, image, settings.target_height, settings.jpeg_quality
            ),
            timeout,
        )

        artifact = publisher.publish(output.data)
        canonical_url = canonical_post_url(post_id)
        html = render_preview_page(artifact.url, canonical_url)

        log.info(
            "pipeline_complete",
            artifact_id=artifact.artifact_id,
            stages=[s.name for s in stages],
            source=(source.height, source.width),
            composed_height=image.height,
            output=(output.height, output.width),
        )

        return PreviewResult(
            post_id=post_id,
            artifact=artifact,
            canonical_url=canonical_url,
            html=html,
            stages=[s.name for s in stages],
            composed_height=image.height,
            output_height=output.height,
        )
