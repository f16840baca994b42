# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for the package registry.

This package contains:
- config: Configuration management
- dependencies: Dependency injection
- errors: Custom exceptions
- logging: Structured logging
"""

from pub_registry.core.config import get_config, Config
from pub_registry.core.errors import RegistryError, NotFoundError, AnalysisError
from pub_registry.core.logging import configure_logging, get_service_logger

__all__ = [
    "get_config",
    "Config",
    "RegistryError",
    "NotFoundError",
    "AnalysisError",
    "configure_logging",
    "get_service_logger",
]
