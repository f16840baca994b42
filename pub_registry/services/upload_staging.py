# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Upload Staging - Holds uploaded archives between upload and finalize.

Single responsibility: Transient, TTL-bounded storage of staged uploads.

Expiry is checked against a stored deadline on every take, so an expired
upload is never handed out even if the sweep task has not run yet. The
sweep only reclaims memory.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from pub_registry.core.errors import UploadNotFoundError
from pub_registry.core.logging import get_service_logger, log_event
from pub_registry.models.registry_models import Manifest

logger = get_service_logger("upload_staging")

DEFAULT_UPLOAD_TTL = 60.0


@dataclass(frozen=True)
class StagedUpload:
    """Archive and manifest waiting for finalize"""
    upload_id: str
    manifest: Manifest
    pubspec: Dict[str, Any]
    archive_bytes: bytes
    expires_at: float
    owner: Optional[str] = None


class UploadStaging:
    """
    In-memory map of staged uploads keyed by a random upload id.

    All mutation of the map happens under a single asyncio lock, so
    concurrent finalize attempts and the eviction sweep race safely:
    exactly one caller removes a given record.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_UPLOAD_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize UploadStaging.

        Args:
            ttl_seconds: How long a staged upload stays finalizable
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._uploads: Dict[str, StagedUpload] = {}
        self._lock = asyncio.Lock()
        self._sweep_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._uploads)

    async def stage(
        self,
        manifest: Manifest,
        pubspec: Dict[str, Any],
        archive_bytes: bytes,
        owner: Optional[str] = None,
    ) -> str:
        """
        Store an upload and return its freshly generated id.

        Args:
            manifest: Parsed manifest (name, version)
            pubspec: Manifest document as received
            archive_bytes: Raw archive content
            owner: Owner of the token that uploaded it

        Returns:
            Upload id to be used in the finalize URL
        """
        async with self._lock:
            upload_id = str(uuid.uuid4())
            while upload_id in self._uploads:
                upload_id = str(uuid.uuid4())

            self._uploads[upload_id] = StagedUpload(
                upload_id=upload_id,
                manifest=manifest,
                pubspec=pubspec,
                archive_bytes=archive_bytes,
                expires_at=self.clock() + self.ttl_seconds,
                owner=owner,
            )

        log_event(
            logger, "Upload staged",
            package=manifest.name, version=manifest.version,
            upload_id=upload_id, owner=owner,
        )
        return upload_id

    async def take(self, upload_id: str) -> StagedUpload:
        """
        Remove and return a staged upload.

        Raises:
            UploadNotFoundError: If the id is unknown, already taken, or expired
        """
        async with self._lock:
            upload = self._uploads.pop(upload_id, None)

        if upload is None:
            raise UploadNotFoundError(upload_id)

        if upload.expires_at <= self.clock():
            logger.info(f"Staged upload {upload_id} expired before finalize")
            raise UploadNotFoundError(upload_id)

        return upload

    async def evict_expired(self) -> List[str]:
        """
        Drop every staged upload whose deadline has passed.

        Returns:
            Ids of evicted uploads
        """
        now = self.clock()
        async with self._lock:
            expired = [
                upload_id for upload_id, upload in self._uploads.items()
                if upload.expires_at <= now
            ]
            for upload_id in expired:
                del self._uploads[upload_id]

        if expired:
            log_event(logger, "Evicted expired uploads", count=len(expired))
        return expired

    async def _sweep_loop(self, interval: float):
        while True:
            await asyncio.sleep(interval)
            await self.evict_expired()

    def start_sweeper(self, interval: float) -> None:
        """Start the background eviction task on the running loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.create_task(self._sweep_loop(interval))
            logger.info(f"Upload sweeper started (interval={interval}s, ttl={self.ttl_seconds}s)")

    async def stop_sweeper(self) -> None:
        """Cancel the background eviction task."""
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        try:
            await self._sweep_task
        except asyncio.CancelledError:
            pass
        self._sweep_task = None
