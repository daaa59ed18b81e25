# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: FastAPI Application Entry Point
Creates the app, registers lifespan events, routers,
and global error handlers.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from quickshare.api.middleware.error_handler import register_error_handlers
from quickshare.api.routes import artifacts, quickshare
from quickshare.config import get_settings
from quickshare.dependencies import (
    close_post_store,
    get_publisher,
    init_post_store,
    init_publisher,
    shutdown_publisher,
)
from quickshare.utils.logger import configure_logging, get_logger
from quickshare.utils.storage import init_artifact_dir

log = get_logger(__name__)

VERSION = "1.0.0"

# Seconds to wait for pending artifact writes on shutdown
_SHUTDOWN_DRAIN_SECONDS = 10.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: configure logging, create the artifact directory, initialise
    the PostStore and the ArtifactPublisher.
    Shutdown: drain pending artifact writes, close the PostStore.
    """
    # ── Startup ──────────────────────────────────────────────────────────────
    configure_logging()
    settings = get_settings()

    log.info(
        "quickshare_startup",
        version=VERSION,
        post_store=settings.post_store_backend,
        image_root=str(settings.image_root),
        artifact_dir=str(settings.artifact_dir),
        target_height=settings.target_height,
    )

    init_artifact_dir()
    init_post_store()
    init_publisher()

    log.info("quickshare_ready")
    yield

    # ── Shutdown ─────────────────────────────────────────────────────────────
    await shutdown_publisher(timeout=_SHUTDOWN_DRAIN_SECONDS)
    close_post_store()
    log.info("quickshare_shutdown")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="QuickShare",
        summary="Open Graph share previews for stored posts.",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── Error Handlers ───────────────────────────────────────────────────────
    register_error_handlers(app)

    # ── Routers ──────────────────────────────────────────────────────────────
    if settings.serve_artifacts:
        app.include_router(artifacts.router)
    app.include_router(quickshare.router)

    # ── Health Check ─────────────────────────────────────────────────────────
    @app.get("/health", tags=["health"], summary="Health check")
    async def health() -> dict:
        return {
            "status": "ok",
            "service": "quickshare",
            "version": VERSION,
            "post_store": settings.post_store_backend,
            "publisher": get_publisher().stats(),
        }

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "quickshare.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


# Module-level app instance for uvicorn
app = create_app()
