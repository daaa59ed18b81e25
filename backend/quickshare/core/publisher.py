# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
QuickShare: Artifact Publisher
Names each encoded preview with a fresh uuid4 and writes it to the
artifact directory in the background.

publish() returns as soon as the write is scheduled, so the preview page
can be served before the file exists. Writes run as asyncio tasks kept in
a registry until they finish; each gets a bounded number of attempts,
each attempt bounded by a timeout. A write that still fails is logged as
a PublishFailureError and dropped: the page already sent points at an
image that will never appear.
"""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path
from typing import Optional

from quickshare.api.middleware.error_handler import PublishFailureError
from quickshare.models.composition import Artifact
from quickshare.utils.logger import get_logger
from quickshare.utils.storage import artifact_path, artifact_url

log = get_logger(__name__)


def _write_file(path: Path, data: bytes) -> None:
    """Write via a temp file so a half-written artifact is never served."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".part")
    tmp.write_bytes(data)
    tmp.replace(path)


class ArtifactPublisher:
    """Schedules artifact writes and supervises them until completion."""

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        max_attempts: int = 2,
        retry_delay_seconds: float = 0.1,
    ) -> None:
        self._timeout = timeout_seconds
        self._max_attempts = max(1, max_attempts)
        self._retry_delay = retry_delay_seconds
        self._tasks: set[asyncio.Task] = set()
        self._written = 0
        self._failed = 0

    # ── Public API ───────────────────────────────────────────────────────────

    def publish(self, data: bytes) -> Artifact:
        """
        Assign a new identifier to `data` and schedule its write.
        Must be called from a running event loop. Never raises on I/O
        problems; those surface only in the logs.
        """
        artifact_id = str(uuid.uuid4())
        artifact = Artifact(
            artifact_id=artifact_id,
            path=artifact_path(artifact_id),
            url=artifact_url(artifact_id),
            size_bytes=len(data),
        )

        task = asyncio.create_task(
            self._write(artifact, data), name=f"publish-{artifact_id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        log.debug("artifact_publish_scheduled", artifact_id=artifact_id, pending=len(self._tasks))
        return artifact

    def pending(self) -> int:
        return len(self._tasks)

    def stats(self) -> dict:
        return {
            "pending": self.pending(),
            "written": self._written,
            "failed": self._failed,
        }

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight writes, e.g. at shutdown or in tests."""
        if not self._tasks:
            return
        done, still_pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        if still_pending:
            log.warning("artifact_drain_incomplete", pending=len(still_pending))

    # ── Background write ─────────────────────────────────────────────────────

    async def _write(self, artifact: Artifact, data: bytes) -> bool:
        last_error: Optional[BaseException] = None

        for attempt in range(1, self._max_attempts + 1):
            try:
                await asyncio.wait_for(
                    asyncio.to_thread(_write_file, artifact.path, data),
                    timeout=self._timeout,
                )
            except Exception as exc:
                last_error = exc
                log.warning(
                    "artifact_write_attempt_failed",
                    artifact_id=artifact.artifact_id,
                    attempt=attempt,
                    error=f"{type(exc).__name__}: {exc}",
                )
                if attempt < self._max_attempts:
                    await asyncio.sleep(self._retry_delay)
                continue

            self._written += 1
            log.info(
                "artifact_written",
                artifact_id=artifact.artifact_id,
                path=str(artifact.path),
                size_bytes=artifact.size_bytes,
                attempt=attempt,
            )
            return True

        failure = PublishFailureError(
            f"Giving up on {artifact.path} after {self._max_attempts} attempts: {last_error}"
        )
        self._failed += 1
        log.error(
            "artifact_publish_failed",
            artifact_id=artifact.artifact_id,
            kind=failure.kind,
            error=str(failure),
        )
        return False
