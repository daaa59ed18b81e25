# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: FastAPI Dependencies
Singleton providers for the PostStore and the ArtifactPublisher.
Both are created once in the lifespan startup in main.py, stored here
as module-level singletons, and injected into route handlers via
FastAPI's Depends().
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from quickshare.config import get_settings
from quickshare.core.post_store import InMemoryPostStore, MongoPostStore, PostStore
from quickshare.core.publisher import ArtifactPublisher
from quickshare.utils.logger import get_logger

log = get_logger(__name__)

# ─── PostStore Singleton ──────────────────────────────────────────────────────

_post_store: PostStore | None = None


def init_post_store() -> PostStore:
    """
    Initialise the PostStore singleton based on POST_STORE_BACKEND config.
    The mongo backend refuses to start without MONGO_URI.
    """
    global _post_store
    settings = get_settings()

    if settings.post_store_backend == "mongo":
        if not settings.mongo_uri:
            raise RuntimeError(
                "MONGO_URI environment variable is not set "
                "(required when POST_STORE_BACKEND=mongo)."
            )
        log.info("init_post_store", backend="mongo")
        _post_store = MongoPostStore(
            mongo_uri=settings.mongo_uri,
            db_name=settings.mongo_db_name,
            collection=settings.mongo_collection,
        )
    elif settings.posts_seed_file is not None:
        log.info("init_post_store", backend="memory", seed=str(settings.posts_seed_file))
        _post_store = InMemoryPostStore.from_json_file(settings.posts_seed_file)
    else:
        log.info("init_post_store", backend="memory")
        _post_store = InMemoryPostStore()

    return _post_store


def close_post_store() -> None:
    global _post_store
    if _post_store is not None:
        _post_store.close()
        _post_store = None


def get_post_store() -> PostStore:
    """FastAPI dependency: inject the PostStore singleton into route handlers."""
    if _post_store is None:
        raise RuntimeError(
            "PostStore has not been initialised. "
            "Ensure init_post_store() is called during app lifespan startup."
        )
    return _post_store


PostStoreDep = Annotated[PostStore, Depends(get_post_store)]


# ─── ArtifactPublisher Singleton ──────────────────────────────────────────────

_publisher: ArtifactPublisher | None = None


def init_publisher() -> ArtifactPublisher:
    global _publisher
    settings = get_settings()
    _publisher = ArtifactPublisher(
        timeout_seconds=settings.publish_timeout_seconds,
        max_attempts=settings.publish_max_attempts,
    )
    log.info(
        "init_publisher",
        artifact_dir=str(settings.artifact_dir),
        max_attempts=settings.publish_max_attempts,
    )
    return _publisher


async def shutdown_publisher(timeout: float | None = None) -> None:
    """Let in-flight artifact writes finish before the process exits."""
    global _publisher
    if _publisher is not None:
        await _publisher.drain(timeout=timeout)
        log.info("publisher_stopped", **_publisher.stats())
        _publisher = None


def get_publisher() -> ArtifactPublisher:
    """FastAPI dependency: inject the ArtifactPublisher singleton."""
    if _publisher is None:
        raise RuntimeError(
            "ArtifactPublisher has not been initialised. "
            "Ensure init_publisher() is called during app lifespan startup."
        )
    return _publisher


PublisherDep = Annotated[ArtifactPublisher, Depends(get_publisher)]
