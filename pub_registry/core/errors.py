# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for the package registry.

All exceptions inherit from RegistryError so a single handler can render
them as the pub error envelope: {"error": {"code": ..., "message": ...}}
"""

from typing import Dict, Optional


AUTH_REALM = "pub"


def bearer_challenge(message: str) -> Dict[str, str]:
    """Build the WWW-Authenticate header for a bearer token failure."""
    return {"WWW-Authenticate": f'Bearer realm="{AUTH_REALM}", message="{message}"'}


class RegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize registry error.

        Args:
            code: Machine-readable error code returned to clients
            message: Human-readable error message
            status_code: HTTP status code
            headers: Extra response headers
        """
        self.code = code
        self.message = message
        self.status_code = status_code
        self.headers = headers or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for API response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


# Authentication / authorization

class MissingTokenError(RegistryError):
    """No bearer token on the request."""

    def __init__(self):
        super().__init__(
            "missing_token",
            "no token provided",
            status_code=401,
            headers=bearer_challenge("no token provided"),
        )


class InvalidTokenError(RegistryError):
    """Bearer token does not match any provisioned token."""

    def __init__(self):
        super().__init__(
            "invalid_token",
            "invalid token",
            status_code=401,
            headers=bearer_challenge("invalid token"),
        )


class InsufficientAuthorizationError(RegistryError):
    """Token is valid but does not cover the requested package."""

    def __init__(self, package: str):
        super().__init__(
            "insufficient_authorization",
            f"insufficient authorization for package {package}",
            status_code=403,
            headers=bearer_challenge("insufficient authorization for package"),
        )
        self.package = package


# Upload validation

class AnalysisError(RegistryError):
    """Uploaded archive could not be analyzed (bad archive or manifest)."""

    def __init__(self, code: str, message: str):
        super().__init__(code, message, status_code=400)


class DuplicateVersionError(RegistryError):
    """Version already published for this package."""

    def __init__(self, package: str, version: str):
        super().__init__(
            "duplicate_version",
            f"version {version} already exists",
            status_code=400,
        )
        self.package = package
        self.version = version


class PackageMismatchError(RegistryError):
    """Finalize URL names a different package than the staged manifest."""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            "package_mismatch",
            f"upload belongs to package {actual}, not {expected}",
            status_code=400,
        )


# Lookups

class NotFoundError(RegistryError):
    """Resource not found."""

    def __init__(self, code: str, message: str):
        super().__init__(code, message, status_code=404)


class UnknownPackageError(NotFoundError):
    def __init__(self, package: str):
        super().__init__("unknown_package", "unknown package")
        self.package = package


class UnknownVersionError(NotFoundError):
    def __init__(self, package: str, version_id: str):
        super().__init__("unknown_version", "unknown version")
        self.package = package
        self.version_id = version_id


class UploadNotFoundError(NotFoundError):
    """Staged upload is unknown, already finalized, or expired."""

    def __init__(self, upload_id: str):
        super().__init__("unknown_upload", "upload expired or invalid")
        self.upload_id = upload_id


# Startup

class ConfigurationError(Exception):
    """Configuration or provisioning file could not be loaded."""

    def __init__(self, message: str, config_file: Optional[str] = None):
        super().__init__(message)
        self.config_file = config_file
