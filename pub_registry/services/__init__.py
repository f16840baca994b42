# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Service layer for the package registry.

Each service has one responsibility:
- TokenStore: bearer token authentication and package authorization
- UploadStaging: uploads waiting for finalize
- ArchiveStore: immutable archive files
- PackageIndexStore: per-package version index
- RegistryService: the pub upload/download protocol
"""

from pub_registry.services.auth_service import TokenStore, AuthResult, AuthStatus
from pub_registry.services.upload_staging import UploadStaging, StagedUpload
from pub_registry.services.archive_store import ArchiveStore
from pub_registry.services.package_index_store import PackageIndexStore
from pub_registry.services.registry_service import RegistryService

__all__ = [
    "TokenStore",
    "AuthResult",
    "AuthStatus",
    "UploadStaging",
    "StagedUpload",
    "ArchiveStore",
    "PackageIndexStore",
    "RegistryService",
]
