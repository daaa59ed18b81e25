# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Preview pipeline tests.
Drives run_preview() end to end against a temp image root, an in-memory
post store and a real publisher. Source images are PNG so decoded
pixels are exact.
"""

from pathlib import Path

import cv2
import numpy as np
import pytest

POST_ID = "65a1f0c2e4b0a1b2c3d4e5f6"
MISSING_ID = "65a1f0c2e4b0a1b2c3d4e5ff"

_BAND_COLOURS = [(0, 0, 255), (0, 255, 0), (255, 0, 0)]


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _make_banded(h: int = 900, w: int = 1200) -> np.ndarray:
    img = np.zeros((h, w, 3), dtype=np.uint8)
    third = h // 3
    for i, colour in enumerate(_BAND_COLOURS):
        img[i * third:(i + 1) * third] = colour
    return img


def _write_source(image_root: Path, rel: str = "uploads/post.png", img=None) -> str:
    path = image_root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(path), _make_banded() if img is None else img)
    return "/" + rel


def _store_with_post(image_url: str):
    from quickshare.core.post_store import InMemoryPostStore
    from quickshare.models.post import Post, PostImage

    store = InMemoryPostStore()
    store.add_post(Post(
        post_id=POST_ID,
        image=PostImage(url=image_url, thumb=image_url),
        title="A post",
        movie="A movie",
    ))
    return store


async def _run(qs_env, s=None, t="", store=None, settings=None):
    from quickshare.core.pipeline import build_params, run_preview
    from quickshare.core.publisher import ArtifactPublisher

    if store is None:
        store = _store_with_post(_write_source(qs_env.image_root))
    publisher = ArtifactPublisher()
    params = build_params(s, t)
    result = await run_preview(POST_ID, params, store, publisher, settings or qs_env.settings)
    await publisher.drain()
    return result


def _decode(path: Path) -> np.ndarray:
    return cv2.imread(str(path), cv2.IMREAD_COLOR)


# ─── Stage selection ─────────────────────────────────────────────────────────

def test_build_params_trims_text():
    from quickshare.core.pipeline import build_params
    params = build_params("101", "  Hello  ")
    assert str(params.mask) == "101"
    assert params.overlay_text == "Hello"
    assert build_params(None, None).overlay_text == ""


@pytest.mark.parametrize(
    "s,t,expected",
    [
        (None, "", []),
        ("", "   ", []),
        ("000", "", []),
        ("1", "", ["band_composite"]),
        ("101", "Hi", ["band_composite", "text_banner"]),
        (None, "Hi", ["text_banner"]),
    ],
)
def test_build_stages_selection(qs_env, s, t, expected):
    from quickshare.core.pipeline import build_params, build_stages
    from quickshare.models.composition import SourceImage

    source = SourceImage(data=b"", pixels=_make_banded(30, 10))
    stages = build_stages(source, build_params(s, t), qs_env.settings)
    assert [st.name for st in stages] == expected


# ─── Scenarios ───────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_scenario_a_single_full_band(qs_env):
    result = await _run(qs_env, s="1")

    assert result.stages == ["band_composite"]
    assert result.composed_height == 900
    assert result.output_height == 630
    assert _decode(result.artifact.path).shape[:2] == (630, 840)


@pytest.mark.asyncio
async def test_scenario_b_outer_bands_collapse(qs_env):
    result = await _run(qs_env, s="101")

    assert result.composed_height == 600
    # Under the target height: stored at composed size
    out = _decode(result.artifact.path)
    assert out.shape[:2] == (600, 1200)
    # JPEG is lossy: compare band centres loosely
    top = out[150, 600].astype(int)
    bottom = out[450, 600].astype(int)
    assert np.abs(top - np.array(_BAND_COLOURS[0])).max() < 40
    assert np.abs(bottom - np.array(_BAND_COLOURS[2])).max() < 40


@pytest.mark.asyncio
async def test_scenario_c_banner_without_mask(qs_env):
    result = await _run(qs_env, s=None, t="Hello")

    assert result.stages == ["text_banner"]
    assert result.composed_height == 1000
    assert result.output_height == 630


@pytest.mark.asyncio
async def test_scenario_d_post_not_found(qs_env):
    from quickshare.api.middleware.error_handler import PostNotFoundError
    from quickshare.core.pipeline import build_params, run_preview
    from quickshare.core.post_store import InMemoryPostStore
    from quickshare.core.publisher import ArtifactPublisher

    publisher = ArtifactPublisher()
    with pytest.raises(PostNotFoundError):
        await run_preview(MISSING_ID, build_params(None, ""), InMemoryPostStore(), publisher)

    assert publisher.pending() == 0
    assert not qs_env.artifact_dir.exists() or not any(qs_env.artifact_dir.iterdir())


@pytest.mark.asyncio
async def test_scenario_e_all_zero_mask_is_full_image(qs_env):
    result = await _run(qs_env, s="000")

    assert result.stages == []
    assert result.composed_height == 900


@pytest.mark.asyncio
async def test_absent_mask_keeps_source_pixels(qs_env, monkeypatch):
    from quickshare.core import pipeline as pipeline_mod

    seen = {}
    real_normalize = pipeline_mod.normalize_output

    def spy(image, *args):
        seen["pixels"] = image.pixels
        return real_normalize(image, *args)

    monkeypatch.setattr(pipeline_mod, "normalize_output", spy)
    await _run(qs_env)

    np.testing.assert_array_equal(seen["pixels"], _make_banded())


@pytest.mark.asyncio
async def test_mask_and_banner_heights_add_up(qs_env):
    result = await _run(qs_env, s="110", t="Caption")
    assert result.composed_height == 600 + 100
    assert result.output_height == 630


@pytest.mark.asyncio
async def test_two_identical_requests_get_distinct_artifacts(qs_env):
    a = await _run(qs_env, s="1")
    b = await _run(qs_env, s="1")
    assert a.artifact.artifact_id != b.artifact.artifact_id
    assert a.artifact.path.exists() and b.artifact.path.exists()


@pytest.mark.asyncio
async def test_result_page_points_at_artifact(qs_env):
    result = await _run(qs_env, t="Hi")
    assert f'content="{result.artifact.url}"' in result.html
    assert result.canonical_url == f"https://hypermemia.link/post/{POST_ID}"
    assert f"url={result.canonical_url}" in result.html


# ─── Failure kinds ───────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_malformed_post_id_is_not_found(qs_env):
    from quickshare.api.middleware.error_handler import PostNotFoundError
    from quickshare.core.pipeline import build_params, run_preview
    from quickshare.core.post_store import InMemoryPostStore
    from quickshare.core.publisher import ArtifactPublisher

    with pytest.raises(PostNotFoundError):
        await run_preview("not-an-id", build_params(None, ""), InMemoryPostStore(), ArtifactPublisher())


@pytest.mark.asyncio
async def test_missing_image_file_is_decode_failure(qs_env):
    from quickshare.api.middleware.error_handler import DecodeFailureError

    with pytest.raises(DecodeFailureError):
        await _run(qs_env, store=_store_with_post("/uploads/missing.png"))


@pytest.mark.asyncio
async def test_corrupt_image_is_decode_failure(qs_env):
    from quickshare.api.middleware.error_handler import DecodeFailureError

    bad = qs_env.image_root / "bad.jpg"
    bad.write_bytes(b"definitely not an image")
    with pytest.raises(DecodeFailureError):
        await _run(qs_env, store=_store_with_post("/bad.jpg"))


@pytest.mark.asyncio
async def test_image_path_outside_root_is_decode_failure(qs_env):
    from quickshare.api.middleware.error_handler import DecodeFailureError

    with pytest.raises(DecodeFailureError):
        await _run(qs_env, store=_store_with_post("../../etc/passwd"))


@pytest.mark.asyncio
async def test_image_too_short_for_mask_is_geometry_error(qs_env):
    from quickshare.api.middleware.error_handler import GeometryError

    tiny = np.full((2, 50, 3), 200, dtype=np.uint8)
    store = _store_with_post(_write_source(qs_env.image_root, "tiny.png", tiny))
    with pytest.raises(GeometryError):
        await _run(qs_env, s="111", store=store)


@pytest.mark.asyncio
async def test_slow_stage_times_out(qs_env, monkeypatch):
    import time
    from quickshare.api.middleware.error_handler import StageTimeoutError
    from quickshare.core import pipeline as pipeline_mod

    real_load = pipeline_mod.load_source_image

    def slow_load(ref):
        time.sleep(0.5)
        return real_load(ref)

    monkeypatch.setattr(pipeline_mod, "load_source_image", slow_load)
    settings = qs_env.settings.model_copy(update={"stage_timeout_seconds": 0.05})

    with pytest.raises(StageTimeoutError):
        await _run(qs_env, settings=settings)


@pytest.mark.asyncio
async def test_unexpected_stage_error_is_encode_failure(qs_env, monkeypatch):
    from quickshare.api.middleware.error_handler import EncodeFailureError
    from quickshare.core import pipeline as pipeline_mod

    def broken(*args, **kwargs):
        raise MemoryError("out of memory")

    monkeypatch.setattr(pipeline_mod, "append_banner", broken)

    with pytest.raises(EncodeFailureError):
        await _run(qs_env, t="Hello")


@pytest.mark.asyncio
async def test_thumb_variant_reads_thumbnail(qs_env):
    from quickshare.core.post_store import InMemoryPostStore
    from quickshare.models.post import Post, PostImage

    small = _make_banded(h=90, w=120)
    full_ref = _write_source(qs_env.image_root, "full.png")
    thumb_ref = _write_source(qs_env.image_root, "thumb.png", small)

    store = InMemoryPostStore()
    store.add_post(Post(post_id=POST_ID, image=PostImage(url=full_ref, thumb=thumb_ref)))
    settings = qs_env.settings.model_copy(update={"source_variant": "thumb"})

    result = await _run(qs_env, store=store, settings=settings)
    assert result.composed_height == 90
