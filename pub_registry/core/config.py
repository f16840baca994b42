# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Registry Configuration - Single source of truth.
YAML for settings, env vars for deployment overrides.

The token file is referenced by path only; token secrets never live in
this configuration.
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable registry configuration.
    All values from YAML, optionally overridden by environment.
    """

    # -- Server --
    base_url: str = "http://localhost:3675"
    host: str = "localhost"
    port: int = 3675

    # -- Paths --
    repository_path: str = "package_repo"
    tokens_path: str = "tokens.json"

    # -- Upload staging --
    upload_ttl_seconds: float = 60.0
    staging_sweep_interval: float = 10.0

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def public_url(self) -> str:
        """Base URL without trailing slash, used to build client-facing links"""
        return self.base_url.rstrip("/")

    @property
    def repository_dir(self) -> Path:
        return Path(self.repository_path)

    @property
    def tokens_file(self) -> Path:
        return Path(self.tokens_path)


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: str = "pub_registry.yaml") -> Config:
    """
    Load configuration from YAML.
    Returns defaults (plus env overrides) if file doesn't exist.
    """
    y = {}
    if Path(path).exists():
        with open(path) as f:
            y = yaml.safe_load(f) or {}

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    return Config(
        # Server
        base_url=os.getenv("PUB_REGISTRY_BASE_URL") or get(y, "server", "base_url") or "http://localhost:3675",
        host=os.getenv("PUB_REGISTRY_HOST") or get(y, "server", "host") or "localhost",
        port=int(os.getenv("PUB_REGISTRY_PORT") or get(y, "server", "port") or 3675),

        # Paths
        repository_path=os.getenv("PUB_REGISTRY_REPOSITORY") or get(y, "paths", "repository") or "package_repo",
        tokens_path=os.getenv("PUB_REGISTRY_TOKENS") or get(y, "paths", "tokens") or "tokens.json",

        # Upload staging
        upload_ttl_seconds=float(get(y, "uploads", "ttl_seconds") or 60.0),
        staging_sweep_interval=float(get(y, "uploads", "sweep_interval") or 10.0),

        # Logging
        log_level=os.getenv("LOG_LEVEL") or get(y, "logging", "level") or "INFO",
        log_format=get(y, "logging", "format") or "json",
    )


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("PUB_REGISTRY_CONFIG", "pub_registry.yaml")
        _config = load_config(config_path)
    return _config


def set_config(config: Config) -> None:
    """Install an explicit configuration (CLI overrides, tests)."""
    global _config
    _config = config


def reload_config() -> Config:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
