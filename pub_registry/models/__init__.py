# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Data models for the package registry"""

from pub_registry.models.registry_models import (
    TokenProperties,
    Manifest,
    PackageIndexEntry,
    VersionInfo,
    LatestVersion,
    PackageMetadataResponse,
    UploadUrlResponse,
    SuccessMessage,
    FinalizeResponse,
    is_valid_package_name,
)

__all__ = [
    "TokenProperties",
    "Manifest",
    "PackageIndexEntry",
    "VersionInfo",
    "LatestVersion",
    "PackageMetadataResponse",
    "UploadUrlResponse",
    "SuccessMessage",
    "FinalizeResponse",
    "is_valid_package_name",
]
