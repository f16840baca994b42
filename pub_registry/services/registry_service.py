# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Registry Service - The pub upload and download protocol.

Upload lifecycle:
    request upload url -> upload content (staged) -> finalize (published)

Staged uploads that are not finalized within the staging TTL are dropped
without side effects.
"""

import hashlib
import uuid
from typing import AsyncIterator

from pub_registry.core.errors import (
    PackageMismatchError,
    UnknownPackageError,
    UnknownVersionError,
)
from pub_registry.core.logging import get_service_logger, log_event
from pub_registry.models.registry_models import (
    FinalizeResponse,
    LatestVersion,
    PackageIndexEntry,
    PackageMetadataResponse,
    SuccessMessage,
    TokenProperties,
    UploadUrlResponse,
    VersionInfo,
)
from pub_registry.services.archive_analyzer import analyze_upload
from pub_registry.services.archive_store import ArchiveStore
from pub_registry.services.auth_service import TokenStore
from pub_registry.services.package_index_store import PackageIndexStore
from pub_registry.services.upload_staging import UploadStaging

logger = get_service_logger("registry")


class RegistryService:
    """
    Orchestrates uploads and reads across staging, index and archive store.

    Responsibilities:
    - Hand out the upload endpoint
    - Analyze and stage uploaded archives
    - Commit staged uploads to the index and archive store
    - Build package metadata and serve archives
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        staging: UploadStaging,
        index_store: PackageIndexStore,
        archive_store: ArchiveStore,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store = token_store
        self.staging = staging
        self.index_store = index_store
        self.archive_store = archive_store

    # URLs

    def upload_url(self) -> str:
        return f"{self.base_url}/api/upload/content"

    def finalize_url(self, package: str, upload_id: str) -> str:
        return f"{self.base_url}/api/upload/finalize/{package}/{upload_id}"

    def archive_url(self, package: str, version_id: str) -> str:
        return f"{self.base_url}/api/packages/{package}/archive/{version_id}.tar.gz"

    # Upload protocol

    def request_upload_url(self) -> UploadUrlResponse:
        """Step 1: tell the client where to POST the archive."""
        return UploadUrlResponse(url=self.upload_url(), fields={})

    async def upload_content(
        self,
        token: TokenProperties,
        archive_bytes: bytes,
    ) -> str:
        """
        Step 2: analyze the archive and stage it for finalize.

        Args:
            token: Authenticated token of the uploader
            archive_bytes: Raw .tar.gz content

        Returns:
            Finalize URL for the staged upload

        Raises:
            AnalysisError: If the archive or pubspec is unusable
            InsufficientAuthorizationError: If the token does not cover the package
        """
        manifest, pubspec = analyze_upload(archive_bytes)
        self.token_store.authorize(token, manifest.name).unwrap()

        upload_id = await self.staging.stage(manifest, pubspec, archive_bytes, owner=token.owner)
        return self.finalize_url(manifest.name, upload_id)

    async def finalize_upload(
        self,
        token: TokenProperties,
        package: str,
        upload_id: str,
    ) -> FinalizeResponse:
        """
        Step 3: publish a staged upload.

        The index entry is committed before the archive is written. A crash
        between the two leaves an index entry whose archive is missing; reads
        of that version then fail with UnknownVersionError.

        Raises:
            InsufficientAuthorizationError: If the token does not cover the package
            UploadNotFoundError: If the upload is unknown, finalized or expired
            PackageMismatchError: If the upload belongs to another package
            DuplicateVersionError: If the version is already published
        """
        self.token_store.authorize(token, package).unwrap()

        upload = await self.staging.take(upload_id)
        manifest = upload.manifest
        if manifest.name != package:
            raise PackageMismatchError(package, manifest.name)

        version_id = str(uuid.uuid4())
        entry = PackageIndexEntry(
            uuid=version_id,
            hash=hashlib.sha256(upload.archive_bytes).hexdigest(),
            pubspec=upload.pubspec,
        )

        await self.index_store.append(manifest.name, entry)
        await self.archive_store.write(manifest.name, version_id, upload.archive_bytes)

        log_event(
            logger, "Package version published",
            package=manifest.name, version=manifest.version, version_id=version_id,
            sha256=entry.hash, owner=token.owner,
        )
        return FinalizeResponse(
            success=SuccessMessage(message=f"{manifest.name} {manifest.version} published")
        )

    # Reads

    def _encode_version(self, package: str, entry: PackageIndexEntry) -> VersionInfo:
        return VersionInfo(
            version=entry.version,
            archive_url=self.archive_url(package, entry.uuid),
            archive_sha256=entry.hash,
            pubspec=entry.pubspec,
        )

    async def get_package_metadata(self, package: str) -> PackageMetadataResponse:
        """
        List every published version; "latest" is the last one published.

        Raises:
            UnknownPackageError: If the package has no index
        """
        entries = await self.index_store.load(package)
        if not entries:
            raise UnknownPackageError(package)

        versions = [self._encode_version(package, entry) for entry in entries]
        return PackageMetadataResponse(
            name=package,
            latest=LatestVersion(version=versions[-1]),
            versions=versions,
        )

    async def get_archive(self, package: str, version_id: str) -> AsyncIterator[bytes]:
        """
        Stream the archive for a published version.

        Raises:
            UnknownVersionError: If the package, version or archive file is unknown
        """
        try:
            entry = await self.index_store.find(package, version_id)
        except UnknownPackageError:
            raise UnknownVersionError(package, version_id)

        if entry is None:
            raise UnknownVersionError(package, version_id)

        return await self.archive_store.open_for_read(package, version_id)
