"""Unpack stage: turn a downloaded artifact into a directory of files."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path

from cosmic_core.errors import (
    DirectoryCreationFailed,
    ExtractionFailed,
    FileDoesNotExist,
    MissingExecutablePath,
    UnsupportedDistribution,
)
from cosmic_core.package import DistributionType, Package
from cosmic_core.security import safe_output_path

logger = logging.getLogger(__name__)


class ArchiveUnpacker:
    def __init__(self, tar_command: str = "tar", *, temp_root: Path | None = None) -> None:
        self.tar_command = tar_command
        self.temp_root = temp_root

    def unpack(self, package: Package, path: Path) -> Path:
        logger.info("unpacking package %s", package.name)
        logger.debug("package type=%s", package.distribution_type.value)
        kind = package.distribution_type
        if kind is DistributionType.BINARY:
            result = path
        elif kind is DistributionType.ARCHIVE:
            result = self._untar(path, package.name, strip=package.is_bundle)
        elif kind is DistributionType.ZIP:
            raise UnsupportedDistribution(f"zip distributions are not supported ({package.name})")
        else:
            raise UnsupportedDistribution(f"unknown distribution type: {kind!r}")
        logger.debug("unpacked %s to %s", package.name, result)
        return result

    def _untar(self, source: Path, name: str, *, strip: bool) -> Path:
        if not source.is_file():
            raise FileDoesNotExist(f"file does not exist at {source}")
        try:
            destination = Path(
                tempfile.mkdtemp(
                    prefix=f"cosmic-{name}-",
                    dir=str(self.temp_root) if self.temp_root is not None else None,
                )
            )
        except OSError as exc:
            raise DirectoryCreationFailed(f"failed to create destination directory: {exc}") from exc

        command = [self.tar_command, "-xzf", str(source), "-C", str(destination)]
        if strip:
            command.append("--strip-components=1")
        logger.debug("extract cmd=%s", " ".join(command))
        try:
            result = subprocess.run(command, check=False, capture_output=True, text=True)
        except OSError as exc:
            raise ExtractionFailed(f"failed to run extraction process: {exc}") from exc
        if result.returncode != 0:
            detail = (result.stderr or "").strip()
            raise ExtractionFailed(
                f"extraction failed (exit={result.returncode}) err='{detail}'",
                returncode=result.returncode,
            )
        return destination


def executable_root(package: Package, unpack_root: Path) -> Path:
    """Directory the executable paths are relative to."""
    if package.distribution_type is DistributionType.BINARY:
        return unpack_root.parent
    return unpack_root


def resolve_executable(package: Package, unpack_root: Path, relative_path: str) -> Path:
    if not relative_path.strip().strip("/"):
        if package.distribution_type is DistributionType.BINARY:
            return unpack_root
        raise MissingExecutablePath(f"empty executable path in {package.name}")
    return safe_output_path(executable_root(package, unpack_root), relative_path)
