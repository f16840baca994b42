# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Archive Analyzer - Extract and validate the pubspec of an uploaded package.
"""

import io
import json
import tarfile
from typing import Any, Dict, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from pub_registry.core.errors import AnalysisError
from pub_registry.models.registry_models import Manifest

PUBSPEC_FILENAME = "pubspec.yaml"


def _find_pubspec(archive: tarfile.TarFile) -> tarfile.TarInfo:
    for member in archive.getmembers():
        name = member.name[2:] if member.name.startswith("./") else member.name
        if name == PUBSPEC_FILENAME and member.isfile():
            return member
    raise AnalysisError("missing_pubspec", "no pubspec in uploaded package")


def read_pubspec(archive_bytes: bytes) -> Dict[str, Any]:
    """
    Decode a .tar.gz archive and return its root pubspec.yaml as a mapping.

    Non-JSON scalars (dates, timestamps) are converted to strings so the
    document can be stored in index.json as received.

    Raises:
        AnalysisError: invalid_archive, missing_pubspec or invalid_pubspec
    """
    try:
        with tarfile.open(fileobj=io.BytesIO(archive_bytes), mode="r:gz") as archive:
            member = _find_pubspec(archive)
            raw = archive.extractfile(member).read()
    except (tarfile.TarError, EOFError, OSError) as e:
        raise AnalysisError("invalid_archive", f"could not read package archive: {e}")

    try:
        document = yaml.safe_load(raw.decode("utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise AnalysisError("invalid_pubspec", f"could not parse pubspec: {e}")

    if not isinstance(document, dict):
        raise AnalysisError("invalid_pubspec", "pubspec must be a mapping")

    return json.loads(json.dumps(document, default=str))


def analyze_upload(archive_bytes: bytes) -> Tuple[Manifest, Dict[str, Any]]:
    """
    Analyze an uploaded archive.

    Returns:
        (typed manifest, pubspec document as received)

    Raises:
        AnalysisError: If the archive or its pubspec is unusable
    """
    pubspec = read_pubspec(archive_bytes)
    try:
        manifest = Manifest.model_validate(pubspec)
    except PydanticValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        raise AnalysisError("invalid_pubspec", f"invalid pubspec: {errors}")
    return manifest, pubspec
