# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Upload API Routes

Second and third steps of the pub v2 publishing flow:
- POST multipart archive -> 204 with Location of the finalize URL
- GET finalize URL -> version committed
"""

from fastapi import APIRouter, Depends, Request, Response
from starlette.datastructures import UploadFile

from pub_registry.api.responses import PubJSONResponse
from pub_registry.core.dependencies import get_registry_service, require_token
from pub_registry.core.errors import AnalysisError
from pub_registry.core.logging import get_api_logger
from pub_registry.models.registry_models import FinalizeResponse, TokenProperties
from pub_registry.services.registry_service import RegistryService

logger = get_api_logger()

router = APIRouter(prefix="/api/upload", tags=["upload"], default_response_class=PubJSONResponse)

FILE_FIELD = "file"
EXPECTED_FILENAME = "package.tar.gz"


@router.post("/content", status_code=204)
async def upload_content(
    request: Request,
    token: TokenProperties = Depends(require_token),
    service: RegistryService = Depends(get_registry_service)
) -> Response:
    """Receive a package archive and stage it for finalize"""
    async with request.form() as form:
        part = form.get(FILE_FIELD)
        if not isinstance(part, UploadFile):
            raise AnalysisError("missing_file", f"multipart body has no '{FILE_FIELD}' part")

        if part.filename != EXPECTED_FILENAME:
            logger.info(f"Upload part has unexpected filename: {part.filename!r}")

        archive_bytes = await part.read()

    finalize_url = await service.upload_content(token, archive_bytes)
    return Response(status_code=204, headers={"Location": finalize_url})


@router.get("/finalize/{package}/{upload_id}", response_model=FinalizeResponse)
async def finalize_upload(
    package: str,
    upload_id: str,
    token: TokenProperties = Depends(require_token),
    service: RegistryService = Depends(get_registry_service)
) -> FinalizeResponse:
    """Publish a staged upload"""
    return await service.finalize_upload(token, package, upload_id)
