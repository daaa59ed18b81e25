# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Error Kinds and Global Error Handler
Every failure that reaches the request boundary is answered with the same
generic plain-text 500. The error kind is only visible in the logs.
Registered on the FastAPI app in main.py.
"""

from __future__ import annotations

import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from quickshare.utils.logger import get_logger

log = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Error processing image"


class QuickShareError(RuntimeError):
    """Base class for failures raised while building a preview."""

    kind = "internal"


class PostNotFoundError(QuickShareError):
    """No post record exists for the requested identifier."""

    kind = "not_found"


class DecodeFailureError(QuickShareError):
    """The source image is unreadable or cannot be decoded."""

    kind = "decode_failure"


class GeometryError(QuickShareError):
    """A requested band cannot be cut from the source image."""

    kind = "geometry_error"


class EncodeFailureError(QuickShareError):
    """Composition, resize or JPEG encoding failed."""

    kind = "encode_failure"


class StageTimeoutError(QuickShareError):
    """A pipeline stage exceeded stage_timeout_seconds."""

    kind = "timeout"


class PublishFailureError(QuickShareError):
    """
    Writing a published artifact failed. Never raised to the request:
    the publisher logs it and the preview page is still served.
    """

    kind = "publish_failure"


def _generic_error() -> PlainTextResponse:
    return PlainTextResponse(
        GENERIC_ERROR_MESSAGE,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_error_handlers(app: FastAPI) -> None:
    """
    Register all global exception handlers on the FastAPI application.
    Call this in main.py after creating the app instance.
    """

    @app.exception_handler(PostNotFoundError)
    async def post_not_found_handler(
        req: Request, exc: PostNotFoundError
    ) -> PlainTextResponse:
        log.warning("post_not_found", path=req.url.path, error=str(exc))
        return _generic_error()

    @app.exception_handler(QuickShareError)
    async def quickshare_error_handler(
        req: Request, exc: QuickShareError
    ) -> PlainTextResponse:
        log.error(
            "preview_failed",
            path=req.url.path,
            kind=exc.kind,
            error=str(exc),
        )
        return _generic_error()

    @app.exception_handler(Exception)
    async def generic_handler(req: Request, exc: Exception) -> PlainTextResponse:
        log.error(
            "unhandled_exception",
            path=req.url.path,
            error=str(exc),
            exc_type=type(exc).__name__,
            traceback=traceback.format_exc(),
        )
        return _generic_error()
