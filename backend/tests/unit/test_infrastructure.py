# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Infrastructure smoke tests.
Covers config loading, the PostStore backends that need no server,
post models, and the filesystem layout helpers.
"""

import json
from pathlib import Path

import pytest

POST_ID = "65a1f0c2e4b0a1b2c3d4e5f6"


# ─── Config ──────────────────────────────────────────────────────────────────

def test_settings_load_defaults():
    from quickshare.config import Settings
    s = Settings(_env_file=None, log_level="INFO", post_store_backend="memory")
    assert s.target_height == 630
    assert s.jpeg_quality == 80
    assert s.banner_height == 100
    assert s.max_sections == 3
    assert s.mongo_db_name == "trolls"
    assert s.mongo_collection == "posts"
    assert s.artifact_url_prefix == "/quickshare/generated"


def test_settings_env_override(monkeypatch):
    from quickshare.config import Settings
    monkeypatch.setenv("TARGET_HEIGHT", "400")
    monkeypatch.setenv("POST_STORE_BACKEND", "mongo")
    s = Settings(_env_file=None)
    assert s.target_height == 400
    assert s.post_store_backend == "mongo"


def test_settings_artifact_base_url():
    from quickshare.config import Settings
    assert Settings(_env_file=None, public_base_url="").artifact_base_url == "/quickshare/generated"
    s = Settings(_env_file=None, public_base_url="https://cdn.example.com/")
    assert s.artifact_base_url == "https://cdn.example.com/quickshare/generated"


# ─── Post model ──────────────────────────────────────────────────────────────

def test_post_id_validation():
    from quickshare.models.post import is_valid_post_id
    assert is_valid_post_id(POST_ID) is True
    assert is_valid_post_id(POST_ID.upper()) is True
    assert is_valid_post_id(POST_ID[:-1]) is False
    assert is_valid_post_id("zz" + POST_ID[2:]) is False
    assert is_valid_post_id("") is False


def test_post_image_ref_variants():
    from quickshare.models.post import Post, PostImage
    post = Post(post_id=POST_ID, image=PostImage(url="full.jpg", thumb="small.jpg"))
    assert post.image_ref("url") == "full.jpg"
    assert post.image_ref("thumb") == "small.jpg"

    no_thumb = Post(post_id=POST_ID, image=PostImage(url="full.jpg"))
    assert no_thumb.image_ref("thumb") == "full.jpg"


# ─── InMemoryPostStore ───────────────────────────────────────────────────────

def test_post_store_add_and_get():
    from quickshare.core.post_store import InMemoryPostStore
    from quickshare.models.post import Post, PostImage

    store = InMemoryPostStore()
    store.add_post(Post(post_id=POST_ID, image=PostImage(url="a.jpg"), title="T"))

    fetched = store.get_post(POST_ID)
    assert fetched is not None
    assert fetched.title == "T"
    assert store.get_post(POST_ID.upper()) is not None
    assert store.count() == 1


def test_post_store_get_nonexistent():
    from quickshare.core.post_store import InMemoryPostStore
    assert InMemoryPostStore().get_post(POST_ID) is None


def test_post_store_seed_from_json(tmp_path: Path):
    from quickshare.core.post_store import InMemoryPostStore

    seed = tmp_path / "posts.json"
    seed.write_text(json.dumps([
        {"_id": POST_ID, "image": {"url": "/img/a.jpg", "thumb": "/img/a_t.jpg"},
         "title": "Hello", "movie": "Film"},
        # No image reference: cannot be previewed, skipped
        {"_id": "65a1f0c2e4b0a1b2c3d4e5f7", "title": "Broken"},
    ]))

    store = InMemoryPostStore.from_json_file(seed)
    assert store.count() == 1
    post = store.get_post(POST_ID)
    assert post.image.url == "/img/a.jpg"
    assert post.movie == "Film"


def test_mongo_backend_requires_uri(qs_env, monkeypatch):
    from quickshare.config import get_settings
    from quickshare.dependencies import init_post_store

    monkeypatch.setenv("POST_STORE_BACKEND", "mongo")
    monkeypatch.delenv("MONGO_URI", raising=False)
    get_settings.cache_clear()

    with pytest.raises(RuntimeError, match="MONGO_URI"):
        init_post_store()


# ─── Storage layout ──────────────────────────────────────────────────────────

def test_artifact_paths(qs_env):
    from quickshare.utils.storage import artifact_path, artifact_url, canonical_post_url

    assert artifact_path("abc") == qs_env.artifact_dir / "abc.jpg"
    assert artifact_url("abc") == "/quickshare/generated/abc.jpg"
    assert canonical_post_url(POST_ID) == f"https://hypermemia.link/post/{POST_ID}"


def test_init_artifact_dir(qs_env):
    from quickshare.utils.storage import init_artifact_dir
    init_artifact_dir()
    init_artifact_dir()
    assert qs_env.artifact_dir.is_dir()


def test_resolve_image_path_inside_root(qs_env):
    from quickshare.utils.storage import resolve_image_path
    resolved = resolve_image_path("/uploads/a.jpg")
    assert resolved == (qs_env.image_root / "uploads" / "a.jpg").resolve()


def test_resolve_image_path_rejects_traversal(qs_env):
    from quickshare.utils.storage import resolve_image_path
    with pytest.raises(ValueError):
        resolve_image_path("../../etc/passwd")
