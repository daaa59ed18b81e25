# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Abstract PostStore
Read-only lookup of post records by identifier.
Swap InMemoryPostStore for MongoPostStore with zero pipeline changes.

InMemoryPostStore  : development / tests, optionally seeded from JSON
MongoPostStore     : production, the shared posts collection
"""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from quickshare.models.post import Post, is_valid_post_id
from quickshare.utils.logger import get_logger

log = get_logger(__name__)


# ─── Abstract Interface ──────────────────────────────────────────────────────

class PostStore(ABC):
    """
    Abstract base class for all post record backends.
    All methods are synchronous; the pipeline calls them from a worker
    thread.
    """

    @abstractmethod
    def get_post(self, post_id: str) -> Optional[Post]:
        """Return Post by ID, or None if no usable record exists."""

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""


def _record_to_post(post_id: str, record: dict[str, Any]) -> Optional[Post]:
    """
    Build a Post from a raw record. Records without an image reference
    cannot be previewed and are treated as missing.
    """
    try:
        return Post.model_validate({
            "post_id": post_id,
            "image": record.get("image"),
            "title": record.get("title") or "",
            "movie": record.get("movie") or "",
        })
    except ValidationError as exc:
        log.warning("post_record_invalid", post_id=post_id, error=str(exc))
        return None


# ─── In-Memory Implementation ────────────────────────────────────────────────

class InMemoryPostStore(PostStore):
    """
    Thread-safe in-memory post store using a dict + RLock.
    Suitable for single-process development and testing.
    """

    def __init__(self) -> None:
        self._store: dict[str, Post] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryPostStore":
        """
        Seed a store from a JSON list of records shaped like the posts
        collection: {"_id": "...", "image": {"url": ..., "thumb": ...}, ...}
        """
        store = cls()
        records = json.loads(path.read_text(encoding="utf-8"))
        for record in records:
            post_id = str(record.get("_id") or record.get("post_id") or "")
            post = _record_to_post(post_id, record)
            if post is not None:
                store.add_post(post)
        log.info("post_store_seeded", path=str(path), count=store.count())
        return store

    def add_post(self, post: Post) -> None:
        with self._lock:
            self._store[post.post_id.lower()] = post

    def get_post(self, post_id: str) -> Optional[Post]:
        with self._lock:
            return self._store.get(post_id.lower())

    def count(self) -> int:
        with self._lock:
            return len(self._store)


# ─── MongoDB Implementation ──────────────────────────────────────────────────

class MongoPostStore(PostStore):
    """
    MongoDB-backed post store reading the shared posts collection.
    Requires pymongo and a reachable MongoDB instance.
    """

    def __init__(
        self,
        mongo_uri: str,
        db_name: str = "trolls",
        collection: str = "posts",
    ) -> None:
        try:
            from pymongo import MongoClient
        except ImportError as e:
            raise ImportError(
                "pymongo package required for MongoPostStore. "
                "Install with: pip install pymongo"
            ) from e

        self._client = MongoClient(mongo_uri)
        self._posts = self._client[db_name][collection]

        # Verify connection on init
        self._client.admin.command("ping")
        log.info("mongo_post_store_connected", db=db_name, collection=collection)

    def get_post(self, post_id: str) -> Optional[Post]:
        from bson import ObjectId

        if not is_valid_post_id(post_id):
            return None

        record = self._posts.find_one({"_id": ObjectId(post_id)})
        if record is None:
            return None
        return _record_to_post(post_id, record)

    def close(self) -> None:
        self._client.close()
        log.info("mongo_post_store_closed")
