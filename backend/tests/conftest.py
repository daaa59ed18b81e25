# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
Shared fixtures: an isolated image root and artifact directory per test,
with the settings cache cleared around it so path helpers see them.
"""

from pathlib import Path
from types import SimpleNamespace

import pytest


@pytest.fixture
def qs_env(tmp_path: Path, monkeypatch):
    image_root = tmp_path / "media"
    artifact_dir = tmp_path / "generated"
    image_root.mkdir()

    monkeypatch.setenv("IMAGE_ROOT", str(image_root))
    monkeypatch.setenv("ARTIFACT_DIR", str(artifact_dir))
    monkeypatch.setenv("POST_STORE_BACKEND", "memory")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("CANONICAL_BASE_URL", "https://hypermemia.link/post")
    monkeypatch.delenv("POSTS_SEED_FILE", raising=False)
    monkeypatch.delenv("PUBLIC_BASE_URL", raising=False)

    from quickshare.config import get_settings
    get_settings.cache_clear()

    yield SimpleNamespace(
        image_root=image_root,
        artifact_dir=artifact_dir,
        settings=get_settings(),
    )

    get_settings.cache_clear()
