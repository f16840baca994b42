# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test Fixtures and Utilities

Provides temp repositories, token stores, in-memory package archives and a
controllable clock for upload expiry tests.
"""

import io
import os
import sys
import tarfile
from typing import Any, Dict, Optional

import pytest
import yaml

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from pub_registry.core.config import Config
from pub_registry.models.registry_models import TokenProperties
from pub_registry.services.auth_service import TokenStore


ALICE_TOKEN = "alice-secret"
ADMIN_TOKEN = "admin-secret"
BASE_URL = "http://registry.test"


class FakeClock:
    """Monotonic clock that only moves when told to"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def build_archive(
    pubspec: Optional[Dict[str, Any]] = None,
    extra_files: Optional[Dict[str, bytes]] = None,
    pubspec_text: Optional[str] = None,
) -> bytes:
    """Build a .tar.gz package archive in memory."""
    files = dict(extra_files or {})
    if pubspec_text is not None:
        files["pubspec.yaml"] = pubspec_text.encode("utf-8")
    elif pubspec is not None:
        files["pubspec.yaml"] = yaml.safe_dump(pubspec).encode("utf-8")
    files.setdefault("lib/main.dart", b"void main() {}\n")

    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def make_archive():
    """Factory for in-memory package archives"""
    return build_archive


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repo_dir(tmp_path):
    """Empty package repository directory"""
    path = tmp_path / "package_repo"
    path.mkdir()
    return path


@pytest.fixture
def tokens():
    return {
        ALICE_TOKEN: TokenProperties(owner="alice", authorized_packages={"a"}),
        ADMIN_TOKEN: TokenProperties(owner="admin", authorized_packages={"*"}),
    }


@pytest.fixture
def token_store(tokens):
    return TokenStore(tokens)


@pytest.fixture
def config(tmp_path, repo_dir):
    return Config(
        base_url=BASE_URL + "/",
        repository_path=str(repo_dir),
        tokens_path=str(tmp_path / "tokens.json"),
        upload_ttl_seconds=60.0,
        staging_sweep_interval=3600.0,
        log_format="text",
    )
