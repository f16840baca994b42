# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Pub Package Registry - Main API

Private pub v2 repository: staged uploads, per-package version index and
content-addressed archive storage behind bearer token authorization.
"""

import time
from typing import Callable, Optional

from fastapi import FastAPI, Request

from pub_registry.api import packages, upload
from pub_registry.api.responses import PubJSONResponse
from pub_registry.core.config import Config, get_config
from pub_registry.core.errors import RegistryError
from pub_registry.core.logging import configure_logging, get_app_logger
from pub_registry.services.archive_store import ArchiveStore
from pub_registry.services.auth_service import TokenStore
from pub_registry.services.package_index_store import PackageIndexStore
from pub_registry.services.registry_service import RegistryService
from pub_registry.services.upload_staging import UploadStaging


def create_app(
    config: Optional[Config] = None,
    token_store: Optional[TokenStore] = None,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    """
    Build the registry application.

    Args:
        config: Registry configuration (defaults to the global config)
        token_store: Pre-built token store (defaults to reading config.tokens_path)
        clock: Monotonic time source for upload expiry

    Returns:
        Configured FastAPI app with services on app.state
    """
    config = config or get_config()
    configure_logging(config.log_level, config.log_format)
    logger = get_app_logger()

    app = FastAPI(
        title="Pub Package Registry",
        description="Private pub v2 package repository",
        version="1.0.0",
    )

    if token_store is None:
        token_store = TokenStore.read(config.tokens_file)

    config.repository_dir.mkdir(parents=True, exist_ok=True)

    staging = UploadStaging(ttl_seconds=config.upload_ttl_seconds, clock=clock)
    index_store = PackageIndexStore(config.repository_dir)
    archive_store = ArchiveStore(config.repository_dir)

    # Store runtime objects in app.state for dependency injection
    app.state.config = config
    app.state.token_store = token_store
    app.state.upload_staging = staging
    app.state.registry_service = RegistryService(
        base_url=config.public_url,
        token_store=token_store,
        staging=staging,
        index_store=index_store,
        archive_store=archive_store,
    )

    app.include_router(packages.router)
    app.include_router(upload.router)

    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError):
        return PubJSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=exc.headers,
        )

    @app.on_event("startup")
    async def startup():
        staging.start_sweeper(config.staging_sweep_interval)
        logger.info(f"Serving pub packages from {config.repository_dir} at {config.public_url}")

    @app.on_event("shutdown")
    async def shutdown():
        await staging.stop_sweeper()

    @app.get("/health")
    async def health():
        """Health check"""
        return {"status": "healthy", "service": "pub-registry"}

    return app
