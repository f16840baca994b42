# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for RegistryService

Tests the upload -> finalize -> read lifecycle against real stores in a
temporary repository.
"""

import asyncio
import hashlib

import pytest

from pub_registry.core.errors import (
    DuplicateVersionError,
    InsufficientAuthorizationError,
    PackageMismatchError,
    UnknownPackageError,
    UnknownVersionError,
    UploadNotFoundError,
)
from pub_registry.services.archive_store import ArchiveStore
from pub_registry.services.package_index_store import PackageIndexStore
from pub_registry.services.registry_service import RegistryService
from pub_registry.services.upload_staging import UploadStaging

BASE_URL = "http://registry.test"


@pytest.fixture
def index_store(repo_dir):
    return PackageIndexStore(repo_dir)


@pytest.fixture
def archive_store(repo_dir):
    return ArchiveStore(repo_dir)


@pytest.fixture
def service(token_store, clock, index_store, archive_store):
    return RegistryService(
        base_url=BASE_URL + "/",
        token_store=token_store,
        staging=UploadStaging(ttl_seconds=60, clock=clock),
        index_store=index_store,
        archive_store=archive_store,
    )


@pytest.fixture
def alice(tokens):
    return tokens["alice-secret"]


@pytest.fixture
def admin(tokens):
    return tokens["admin-secret"]


def upload_id_from(finalize_url: str) -> str:
    return finalize_url.rsplit("/", 1)[-1]


async def publish(service, token, archive: bytes, package: str = "a"):
    finalize_url = await service.upload_content(token, archive)
    return await service.finalize_upload(token, package, upload_id_from(finalize_url))


class TestRequestUploadUrl:

    def test_points_at_upload_endpoint(self, service):
        response = service.request_upload_url()

        assert response.url == "http://registry.test/api/upload/content"
        assert response.fields == {}


class TestUploadContent:

    @pytest.mark.asyncio
    async def test_returns_finalize_url(self, service, alice, make_archive):
        url = await service.upload_content(alice, make_archive({"name": "a", "version": "1.0.0"}))

        assert url.startswith("http://registry.test/api/upload/finalize/a/")
        assert len(service.staging) == 1

    @pytest.mark.asyncio
    async def test_unauthorized_package_not_staged(self, service, alice, make_archive):
        with pytest.raises(InsufficientAuthorizationError):
            await service.upload_content(alice, make_archive({"name": "b", "version": "1.0.0"}))

        assert len(service.staging) == 0


class TestFinalizeUpload:

    @pytest.mark.asyncio
    async def test_publishes_version(self, service, alice, make_archive, repo_dir):
        archive = make_archive({"name": "a", "version": "1.0.0"})

        response = await publish(service, alice, archive)

        assert "1.0.0" in response.success.message
        metadata = await service.get_package_metadata("a")
        version = metadata.versions[0]
        assert version.archive_sha256 == hashlib.sha256(archive).hexdigest()
        assert (repo_dir / "a" / "index.json").exists()

    @pytest.mark.asyncio
    async def test_archive_round_trip(self, service, alice, make_archive):
        archive = make_archive({"name": "a", "version": "1.0.0"})
        await publish(service, alice, archive)

        metadata = await service.get_package_metadata("a")
        version_id = metadata.latest.version.archive_url.rsplit("/", 1)[-1].removesuffix(".tar.gz")
        chunks = [chunk async for chunk in await service.get_archive("a", version_id)]

        assert b"".join(chunks) == archive

    @pytest.mark.asyncio
    async def test_duplicate_version_rejected(self, service, alice, make_archive):
        await publish(service, alice, make_archive({"name": "a", "version": "1.0.0"}))

        with pytest.raises(DuplicateVersionError):
            await publish(service, alice, make_archive({"name": "a", "version": "1.0.0", "description": "other"}))

        metadata = await service.get_package_metadata("a")
        assert [v.version for v in metadata.versions] == ["1.0.0"]

    @pytest.mark.asyncio
    async def test_second_finalize_not_found(self, service, alice, make_archive):
        url = await service.upload_content(alice, make_archive({"name": "a", "version": "1.0.0"}))
        await service.finalize_upload(alice, "a", upload_id_from(url))

        with pytest.raises(UploadNotFoundError):
            await service.finalize_upload(alice, "a", upload_id_from(url))

    @pytest.mark.asyncio
    async def test_expired_upload_not_found(self, service, alice, make_archive, clock):
        url = await service.upload_content(alice, make_archive({"name": "a", "version": "1.0.0"}))
        clock.advance(61)

        with pytest.raises(UploadNotFoundError):
            await service.finalize_upload(alice, "a", upload_id_from(url))
        with pytest.raises(UnknownPackageError):
            await service.get_package_metadata("a")

    @pytest.mark.asyncio
    async def test_concurrent_finalize_publishes_once(self, service, alice, make_archive):
        url = await service.upload_content(alice, make_archive({"name": "a", "version": "1.0.0"}))

        results = await asyncio.gather(
            *(service.finalize_upload(alice, "a", upload_id_from(url)) for _ in range(3)),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, UploadNotFoundError)) == 2
        assert len((await service.get_package_metadata("a")).versions) == 1

    @pytest.mark.asyncio
    async def test_unauthorized_finalize_keeps_upload(self, service, alice, admin, make_archive):
        url = await service.upload_content(admin, make_archive({"name": "b", "version": "1.0.0"}))

        with pytest.raises(InsufficientAuthorizationError):
            await service.finalize_upload(alice, "b", upload_id_from(url))

        await service.finalize_upload(admin, "b", upload_id_from(url))

    @pytest.mark.asyncio
    async def test_package_mismatch(self, service, admin, make_archive):
        url = await service.upload_content(admin, make_archive({"name": "a", "version": "1.0.0"}))

        with pytest.raises(PackageMismatchError):
            await service.finalize_upload(admin, "b", upload_id_from(url))

    @pytest.mark.asyncio
    async def test_index_committed_before_archive(self, service, alice, make_archive, monkeypatch):
        """
        Known limitation: the index entry is written before the archive.
        If the archive write fails, the entry stays and points at nothing.
        """
        async def failing_write(package, version_id, data):
            raise OSError("disk full")

        monkeypatch.setattr(service.archive_store, "write", failing_write)

        with pytest.raises(OSError):
            await publish(service, alice, make_archive({"name": "a", "version": "1.0.0"}))

        metadata = await service.get_package_metadata("a")
        assert len(metadata.versions) == 1
        version_id = metadata.versions[0].archive_url.rsplit("/", 1)[-1].removesuffix(".tar.gz")
        with pytest.raises(UnknownVersionError):
            await service.get_archive("a", version_id)


class TestGetPackageMetadata:

    @pytest.mark.asyncio
    async def test_unknown_package(self, service):
        with pytest.raises(UnknownPackageError):
            await service.get_package_metadata("nothing_here")

    @pytest.mark.asyncio
    async def test_latest_is_last_published(self, service, alice, make_archive):
        for version in ("1.0.0", "3.0.0", "2.0.0"):
            await publish(service, alice, make_archive({"name": "a", "version": version}))

        metadata = await service.get_package_metadata("a")

        assert metadata.name == "a"
        assert metadata.latest.version.version == "2.0.0"
        assert [v.version for v in metadata.versions] == ["1.0.0", "3.0.0", "2.0.0"]

    @pytest.mark.asyncio
    async def test_version_record_fields(self, service, alice, make_archive):
        await publish(service, alice, make_archive({"name": "a", "version": "1.0.0", "description": "desc"}))

        version = (await service.get_package_metadata("a")).versions[0]

        assert version.pubspec == {"name": "a", "version": "1.0.0", "description": "desc"}
        assert version.archive_url.startswith("http://registry.test/api/packages/a/archive/")
        assert version.archive_url.endswith(".tar.gz")


class TestGetArchive:

    @pytest.mark.asyncio
    async def test_unknown_package(self, service):
        with pytest.raises(UnknownVersionError):
            await service.get_archive("nothing_here", "v1")

    @pytest.mark.asyncio
    async def test_unknown_version(self, service, alice, make_archive):
        await publish(service, alice, make_archive({"name": "a", "version": "1.0.0"}))

        with pytest.raises(UnknownVersionError):
            await service.get_archive("a", "not-a-version")

    @pytest.mark.asyncio
    async def test_traversal_version_id(self, service, alice, make_archive):
        await publish(service, alice, make_archive({"name": "a", "version": "1.0.0"}))

        with pytest.raises(UnknownVersionError):
            await service.get_archive("a", "../../etc/passwd")
