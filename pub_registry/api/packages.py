# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package API Routes

Handles the read side of the pub v2 protocol plus the upload URL handshake:
- Upload URL for new versions (token required)
- Package metadata with all versions
- Archive download
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from pub_registry.api.responses import PubJSONResponse
from pub_registry.core.dependencies import get_registry_service, require_token
from pub_registry.models.registry_models import (
    PackageMetadataResponse,
    TokenProperties,
    UploadUrlResponse,
)
from pub_registry.services.registry_service import RegistryService

router = APIRouter(prefix="/api/packages", tags=["packages"], default_response_class=PubJSONResponse)


@router.get("/versions/new", response_model=UploadUrlResponse)
async def request_upload_url(
    token: TokenProperties = Depends(require_token),
    service: RegistryService = Depends(get_registry_service)
) -> UploadUrlResponse:
    """Tell the client where to upload a new package version"""
    return service.request_upload_url()


@router.get("/{package_name}", response_model=PackageMetadataResponse)
async def get_package_metadata(
    package_name: str,
    service: RegistryService = Depends(get_registry_service)
) -> PackageMetadataResponse:
    """List all versions of a package"""
    return await service.get_package_metadata(package_name)


@router.get("/{package_name}/archive/{version_id:path}.tar.gz")
async def get_archive(
    package_name: str,
    version_id: str,
    service: RegistryService = Depends(get_registry_service)
) -> StreamingResponse:
    """Download the archive of a published version"""
    chunks = await service.get_archive(package_name, version_id)
    return StreamingResponse(chunks, media_type="application/octet-stream")
