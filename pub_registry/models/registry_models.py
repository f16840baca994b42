# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Registry Data Models

Pydantic models for tokens, package manifests, index entries and the
pub v2 JSON responses.
"""

import re
from typing import Any, Dict, List, Set

from pydantic import BaseModel, Field, field_validator


PACKAGE_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]*$")

# Semantic version with optional pre-release and build suffixes
VERSION_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)

WILDCARD = "*"


def is_valid_package_name(name: str) -> bool:
    return bool(PACKAGE_NAME_PATTERN.match(name))


class TokenProperties(BaseModel):
    """Provisioned token record from the token file"""
    owner: str
    authorized_packages: Set[str] = Field(default_factory=set)

    def is_authorized(self, package: str) -> bool:
        return WILDCARD in self.authorized_packages or package in self.authorized_packages


class Manifest(BaseModel):
    """Typed view of a package pubspec (only the fields the registry needs)"""
    name: str
    version: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not is_valid_package_name(v):
            raise ValueError(f"invalid package name: {v!r}")
        return v

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, v: Any) -> str:
        v = str(v)
        if not VERSION_PATTERN.match(v):
            raise ValueError(f"invalid version: {v!r}")
        return v


class PackageIndexEntry(BaseModel):
    """One published version; serialized as an element of index.json"""
    uuid: str
    hash: str
    pubspec: Dict[str, Any]

    @property
    def version(self) -> str:
        return str(self.pubspec.get("version"))


class VersionInfo(BaseModel):
    """Version record in package metadata responses"""
    version: str
    archive_url: str
    archive_sha256: str
    pubspec: Dict[str, Any]


class LatestVersion(BaseModel):
    version: VersionInfo


class PackageMetadataResponse(BaseModel):
    """GET /api/packages/{package} response body"""
    name: str
    latest: LatestVersion
    versions: List[VersionInfo]


class UploadUrlResponse(BaseModel):
    """GET /api/packages/versions/new response body"""
    url: str
    fields: Dict[str, str] = Field(default_factory=dict)


class SuccessMessage(BaseModel):
    message: str


class FinalizeResponse(BaseModel):
    success: SuccessMessage
