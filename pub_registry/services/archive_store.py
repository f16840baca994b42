# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Archive Store - Immutable package archives on disk.

Storage structure:
    {repository}/
    └── {package}/
        ├── index.json
        ├── {version_uuid}.tar.gz
        └── {version_uuid}.tar.gz

Archives are written once and never modified.
"""

import asyncio
import os
import uuid
from pathlib import Path
from typing import AsyncIterator

import aiofiles
import aiofiles.os

from pub_registry.core.errors import UnknownVersionError
from pub_registry.core.logging import get_service_logger

logger = get_service_logger("archive_store")

ARCHIVE_SUFFIX = ".tar.gz"
CHUNK_SIZE = 64 * 1024


class ArchiveStore:
    """Content store for package archives, keyed by (package, version uuid)"""

    def __init__(self, repository_dir: Path):
        self.repository_dir = Path(repository_dir)

    def _package_dir(self, package: str) -> Path:
        return (self.repository_dir / package).resolve()

    def archive_path(self, package: str, version_id: str) -> Path:
        """
        Resolve the archive file for a version.

        Raises:
            UnknownVersionError: If the resolved path escapes the package directory
        """
        package_dir = self._package_dir(package)
        path = (package_dir / f"{version_id}{ARCHIVE_SUFFIX}").resolve()

        if path.parent != package_dir or package_dir.parent != self.repository_dir.resolve():
            logger.warning(f"Rejected archive path outside package directory: {package}/{version_id!r}")
            raise UnknownVersionError(package, version_id)

        return path

    async def write(self, package: str, version_id: str, data: bytes) -> Path:
        """
        Persist archive bytes; the file is complete and fsynced on return.

        Bytes go to a temporary sibling first and are renamed into place, so
        readers never observe a partially written archive.
        """
        path = self.archive_path(package, version_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")

        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(data)
                await f.flush()
                await asyncio.to_thread(os.fsync, f.fileno())
            await aiofiles.os.replace(tmp_path, path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info(f"Stored archive {package}/{path.name} ({len(data)} bytes)")
        return path

    async def open_for_read(self, package: str, version_id: str) -> AsyncIterator[bytes]:
        """
        Return an async iterator over the archive bytes.

        Raises:
            UnknownVersionError: If the archive is missing or the path is unsafe
        """
        path = self.archive_path(package, version_id)
        if not await aiofiles.os.path.isfile(path):
            raise UnknownVersionError(package, version_id)
        return self._iter_file(path)

    @staticmethod
    async def _iter_file(path: Path) -> AsyncIterator[bytes]:
        async with aiofiles.open(path, "rb") as f:
            while True:
                chunk = await f.read(CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
