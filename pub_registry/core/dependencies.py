# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Dependency injection for the registry API.

Services are created once by the app factory and kept on app.state;
these dependencies hand them to route handlers.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from pub_registry.models.registry_models import TokenProperties


def get_registry_service(request: Request):
    """Get RegistryService instance."""
    return request.app.state.registry_service


def get_token_store(request: Request):
    """Get TokenStore instance."""
    return request.app.state.token_store


def require_token(
    authorization: Optional[str] = Header(default=None),
    token_store=Depends(get_token_store),
) -> TokenProperties:
    """
    Authenticate the request's bearer token.

    Raises:
        MissingTokenError: No Authorization header / not a bearer token
        InvalidTokenError: Token not provisioned
    """
    return token_store.authenticate(authorization).unwrap()
