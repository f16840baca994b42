# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Token Store - Bearer token authentication and package authorization.

Single responsibility: Decide whether a request may act on a package.
Tokens are loaded once from a trusted file and never change at runtime.
"""

import json
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from pub_registry.core.errors import (
    ConfigurationError,
    InsufficientAuthorizationError,
    InvalidTokenError,
    MissingTokenError,
    RegistryError,
)
from pub_registry.core.logging import get_service_logger, log_event
from pub_registry.models.registry_models import TokenProperties

logger = get_service_logger("auth")

_AUTH_PATTERN = re.compile(r"Bearer (.*)")
_TOKENS_ADAPTER = TypeAdapter(Dict[str, TokenProperties])


class AuthStatus(str, Enum):
    AUTHORIZED = "authorized"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an authentication or authorization check"""
    status: AuthStatus
    token: Optional[TokenProperties] = None
    error: Optional[RegistryError] = None

    @property
    def ok(self) -> bool:
        return self.status is AuthStatus.AUTHORIZED

    def unwrap(self) -> TokenProperties:
        """
        Return the token for an authorized result.

        Raises:
            MissingTokenError / InvalidTokenError: If unauthenticated
            InsufficientAuthorizationError: If forbidden
        """
        if self.status is AuthStatus.AUTHORIZED:
            return self.token
        raise self.error


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the secret out of an `Authorization: Bearer <token>` header."""
    if authorization is None:
        return None
    match = _AUTH_PATTERN.search(authorization)
    if not match:
        return None
    return match.group(1)


class TokenStore:
    """
    Lookup table of provisioned bearer tokens.

    Token file format:
        {"<secret>": {"owner": "...", "authorized_packages": ["pkg", "*"]}}
    """

    def __init__(self, tokens: Dict[str, TokenProperties]):
        self.tokens = dict(tokens)

    @classmethod
    def read(cls, path: Path) -> "TokenStore":
        """
        Load tokens from a JSON file.

        Raises:
            ConfigurationError: If the file is missing or malformed
        """
        try:
            raw = json.loads(Path(path).read_text())
            tokens = _TOKENS_ADAPTER.validate_python(raw)
        except FileNotFoundError:
            raise ConfigurationError(f"Token file not found: {path}", config_file=str(path))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise ConfigurationError(f"Invalid token file {path}: {e}", config_file=str(path))

        logger.info(f"Loaded {len(tokens)} tokens from {path}")
        return cls(tokens)

    def authenticate(self, authorization: Optional[str]) -> AuthResult:
        """
        Check the Authorization header against the provisioned tokens.

        Args:
            authorization: Raw Authorization header value (may be None)

        Returns:
            AUTHORIZED with the token record, or UNAUTHENTICATED carrying
            MissingTokenError / InvalidTokenError
        """
        secret = extract_bearer_token(authorization)
        if secret is None:
            log_event(logger, "Request without bearer token", level="WARNING")
            return AuthResult(AuthStatus.UNAUTHENTICATED, error=MissingTokenError())

        token = self.tokens.get(secret)
        if token is None:
            log_event(logger, "Request with unknown bearer token", level="WARNING")
            return AuthResult(AuthStatus.UNAUTHENTICATED, error=InvalidTokenError())

        return AuthResult(AuthStatus.AUTHORIZED, token=token)

    def authorize(self, token: TokenProperties, package: str) -> AuthResult:
        """
        Check that an authenticated token covers a package.

        Returns:
            AUTHORIZED, or FORBIDDEN carrying InsufficientAuthorizationError
        """
        if token.is_authorized(package):
            return AuthResult(AuthStatus.AUTHORIZED, token=token)

        log_event(
            logger, "Token not authorized for package", level="WARNING",
            owner=token.owner, package=package,
        )
        return AuthResult(
            AuthStatus.FORBIDDEN,
            token=token,
            error=InsufficientAuthorizationError(package),
        )
