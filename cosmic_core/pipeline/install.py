"""Install stage: relocate verified artifacts into the packages directory."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from cosmic_core.errors import InstallConflict, InstallFailed, MissingExecutablePath
from cosmic_core.package import Package, executable_name

from .unpack import executable_root, resolve_executable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallResult:
    destination: Path
    links: tuple[Path, ...]
    verified: bool


def bundle_dir_for(packages_dir: Path, name: str) -> Path:
    return packages_dir / f"_{name}"


class Installer:
    """Move a smoke-tested package into ``packages_dir``.

    Existing destinations are refused with ``InstallConflict`` unless the
    installer was built with ``force=True``, which removes them first.
    """

    def __init__(self, packages_dir: Path, *, force: bool = False) -> None:
        self.packages_dir = packages_dir
        self.force = force

    def install(self, package: Package, unpack_root: Path) -> InstallResult:
        logger.info("installing package %s", package.name)
        try:
            self.packages_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InstallFailed(f"unable to create packages directory {self.packages_dir}: {exc}") from exc

        if package.is_bundle:
            result = self._install_bundle(package, unpack_root)
        else:
            result = self._install_single(package, unpack_root)
        logger.info("installation %s for %s", "complete" if result.verified else "failed", package.name)
        return result

    def _install_bundle(self, package: Package, unpack_root: Path) -> InstallResult:
        destination = bundle_dir_for(self.packages_dir, package.name)
        links: list[tuple[Path, Path]] = []
        for relative_path in package.executable_paths:
            executable = executable_name(relative_path)
            if not executable:
                raise MissingExecutablePath(f"cannot derive executable name from {relative_path!r}")
            link = self.packages_dir / executable
            if any(link == existing for existing, _ in links):
                raise MissingExecutablePath(f"duplicate executable name {executable!r} in {package.name}")
            target = destination / relative_path.strip().lstrip("/")
            links.append((link, target))

        self._clear([destination, *(link for link, _ in links)])
        try:
            shutil.move(str(executable_root(package, unpack_root)), str(destination))
            for link, target in links:
                logger.debug("creating symlink %s -> %s", link, target)
                os.symlink(target, link)
        except OSError as exc:
            raise InstallFailed(f"unable to install bundle {package.name}: {exc}") from exc

        verified = all(_is_executable_file(link) for link, _ in links)
        return InstallResult(
            destination=destination,
            links=tuple(link for link, _ in links),
            verified=verified,
        )

    def _install_single(self, package: Package, unpack_root: Path) -> InstallResult:
        if not package.executable_paths:
            raise MissingExecutablePath(f"{package.name} declares no executable paths")
        source = resolve_executable(package, unpack_root, package.executable_paths[0])
        destination = self.packages_dir / package.name

        self._clear([destination])
        try:
            shutil.move(str(source), str(destination))
        except OSError as exc:
            raise InstallFailed(f"unable to install {package.name}: {exc}") from exc

        return InstallResult(destination=destination, links=(), verified=_is_executable_file(destination))

    def _clear(self, paths: list[Path]) -> None:
        existing = [path for path in paths if os.path.lexists(path)]
        if not existing:
            return
        if not self.force:
            joined = ", ".join(str(path) for path in existing)
            raise InstallConflict(f"install destination already exists: {joined}")
        for path in existing:
            logger.debug("removing existing %s", path)
            try:
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            except OSError as exc:
                raise InstallFailed(f"unable to replace {path}: {exc}") from exc


def _is_executable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)
