# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package Index Store - Authoritative per-package version lists.

Single responsibility: Persist and cache {repository}/{package}/index.json

The index is append-only and ordered by publication: the last entry is
"latest", regardless of semantic version ordering.

Mutation is serialized per package with an asyncio lock, so concurrent
finalizes for the same package cannot both pass the duplicate check or
overwrite each other's entries.
"""

import asyncio
import json
import uuid
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles
import aiofiles.os
from pydantic import TypeAdapter

from pub_registry.core.errors import DuplicateVersionError, UnknownPackageError
from pub_registry.core.logging import get_service_logger, log_event
from pub_registry.models.registry_models import PackageIndexEntry, is_valid_package_name

logger = get_service_logger("package_index")

INDEX_FILENAME = "index.json"

_INDEX_ADAPTER = TypeAdapter(List[PackageIndexEntry])


class PackageIndexStore:
    """
    Per-package version index, stored as pretty-printed JSON and mirrored
    in an in-memory cache.
    """

    def __init__(self, repository_dir: Path):
        """
        Initialize PackageIndexStore.

        Args:
            repository_dir: Root directory holding one directory per package
        """
        self.repository_dir = Path(repository_dir)
        self._cache: Dict[str, List[PackageIndexEntry]] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _get_lock(self, package: str) -> asyncio.Lock:
        """Get or create lock for a specific package"""
        if package not in self._locks:
            self._locks[package] = asyncio.Lock()
        return self._locks[package]

    def index_path(self, package: str) -> Path:
        return self.repository_dir / package / INDEX_FILENAME

    async def load(self, package: str, allow_empty: bool = False) -> List[PackageIndexEntry]:
        """
        Load a package index from cache or disk.

        Args:
            package: Package name
            allow_empty: Return an empty index instead of failing if none exists

        Returns:
            Copy of the ordered entry list

        Raises:
            UnknownPackageError: If the name is not a valid package name, or
                no index exists and allow_empty is False
        """
        # Names double as directory names
        if not is_valid_package_name(package):
            raise UnknownPackageError(package)

        if package in self._cache:
            return list(self._cache[package])

        index_file = self.index_path(package)
        if not await aiofiles.os.path.exists(index_file):
            if not allow_empty:
                raise UnknownPackageError(package)
            return []

        async with aiofiles.open(index_file, "r") as f:
            entries = _INDEX_ADAPTER.validate_json(await f.read())

        self._cache[package] = entries
        return list(entries)

    async def save(self, package: str, entries: List[PackageIndexEntry]) -> None:
        """
        Overwrite the full index for a package and refresh the cache.

        The file is written to a temporary sibling and renamed into place.
        """
        index_file = self.index_path(package)
        index_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = index_file.with_name(f".{INDEX_FILENAME}.{uuid.uuid4().hex}.tmp")

        payload = json.dumps([entry.model_dump() for entry in entries], indent=2)
        try:
            async with aiofiles.open(tmp_file, "w") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_file, index_file)
        except Exception:
            tmp_file.unlink(missing_ok=True)
            raise

        self._cache[package] = list(entries)

    async def append(self, package: str, entry: PackageIndexEntry) -> List[PackageIndexEntry]:
        """
        Append a version to a package index.

        Args:
            package: Package name
            entry: New version entry

        Returns:
            The updated index

        Raises:
            DuplicateVersionError: If the manifest version is already published
        """
        async with self._get_lock(package):
            entries = await self.load(package, allow_empty=True)

            if any(existing.version == entry.version for existing in entries):
                log_event(
                    logger, "Duplicate version rejected", level="WARNING",
                    package=package, version=entry.version,
                )
                raise DuplicateVersionError(package, entry.version)

            entries.append(entry)
            await self.save(package, entries)

        return entries

    async def find(self, package: str, version_id: str) -> Optional[PackageIndexEntry]:
        """Look up an entry by version uuid; UnknownPackageError if no index."""
        for entry in await self.load(package):
            if entry.uuid == version_id:
                return entry
        return None
