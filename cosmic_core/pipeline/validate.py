"""Artifact integrity check."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from cosmic_core.errors import FileDoesNotExist, InvalidPackage
from cosmic_core.package import Package

logger = logging.getLogger(__name__)


def file_sha256_hex(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def validate(package: Package, path: Path) -> None:
    """Raise ``InvalidPackage`` unless ``path`` hashes to ``package.hash``."""
    logger.info("validating package %s", package.name)
    if not path.is_file():
        raise FileDoesNotExist(f"downloaded artifact does not exist at {path}")
    calculated = file_sha256_hex(path)
    logger.debug("calculated hash=%s expected hash=%s", calculated, package.hash)
    if calculated.lower() != package.hash.strip().lower():
        raise InvalidPackage(f"hash mismatch for {package.name}: expected {package.hash}, got {calculated}")
    logger.debug("validation successful for %s", package.name)
