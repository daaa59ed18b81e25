# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Application Configuration
All settings are loaded from environment variables with defaults that
match the production share-preview layout. Override via backend/.env or
environment.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Post Store ──────────────────────────────────────────────────────────
    post_store_backend: Literal["memory", "mongo"] = "memory"
    mongo_uri: Optional[str] = None
    mongo_db_name: str = "trolls"
    mongo_collection: str = "posts"
    # JSON list of posts loaded into the memory backend at startup
    posts_seed_file: Optional[Path] = None

    # ─── Source Images ───────────────────────────────────────────────────────
    # Post image references are relative to this directory
    image_root: Path = Path(".")
    source_variant: Literal["url", "thumb"] = "url"

    # ─── Published Artifacts ─────────────────────────────────────────────────
    artifact_dir: Path = Path("./generated")
    artifact_url_prefix: str = "/quickshare/generated"
    # Prepended to artifact URLs in og:image; empty keeps them site-relative
    public_base_url: str = ""
    canonical_base_url: str = "https://hypermemia.link/post"
    serve_artifacts: bool = True

    # ─── Composition ─────────────────────────────────────────────────────────
    max_sections: int = 3
    banner_height: int = 100
    banner_font_size: int = 40
    banner_font_path: Optional[Path] = None
    target_height: int = 630
    jpeg_quality: int = 80

    # ─── Timeouts / Publishing ───────────────────────────────────────────────
    stage_timeout_seconds: float = 15.0
    publish_timeout_seconds: float = 10.0
    publish_max_attempts: int = 2

    # ─── Logging ─────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # ─── Server ──────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 4006

    # ─── Derived helpers ─────────────────────────────────────────────────────
    @property
    def artifact_base_url(self) -> str:
        return f"{self.public_base_url.rstrip('/')}{self.artifact_url_prefix}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached singleton Settings instance."""
    return Settings()
