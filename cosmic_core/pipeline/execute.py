"""Smoke-test stage for unpacked executables."""

from __future__ import annotations

import logging
import os
import stat
import subprocess
from pathlib import Path

from cosmic_core.errors import ExecuteProcessFailed
from cosmic_core.package import DistributionType, Package

from .unpack import resolve_executable

logger = logging.getLogger(__name__)

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def set_executable_permission(path: Path) -> None:
    mode = path.stat().st_mode
    os.chmod(path, stat.S_IMODE(mode) | _EXECUTE_BITS)


class ExecutableVerifier:
    """Run every declared executable once with the package's test arguments.

    The stage succeeds only if each executable exits with status 0; the first
    failure stops the loop.
    """

    def __init__(self, *, timeout_seconds: float | None = 120.0) -> None:
        self.timeout_seconds = timeout_seconds

    def execute(self, package: Package, unpack_root: Path) -> None:
        logger.info("testing executables for %s", package.name)
        logger.debug("executable paths: %s", ", ".join(package.executable_paths))
        cwd = None if package.distribution_type is DistributionType.BINARY else unpack_root
        for relative_path in package.executable_paths:
            executable = resolve_executable(package, unpack_root, relative_path)
            if not executable.is_file():
                raise ExecuteProcessFailed(f"executable does not exist at {executable}", path=str(executable))
            logger.debug("setting executable permissions for %s", executable)
            set_executable_permission(executable)
            returncode = self._run(executable, package.test_args, cwd)
            if returncode != 0:
                raise ExecuteProcessFailed(
                    f"{relative_path} exited with status {returncode}",
                    path=str(executable),
                    returncode=returncode,
                )
        logger.debug("all executables for %s exited cleanly", package.name)

    def _run(self, executable: Path, args: tuple[str, ...], cwd: Path | None) -> int:
        command = [str(executable), *args]
        logger.debug("running %s cwd=%s", " ".join(command), cwd)
        try:
            result = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout_seconds,
                cwd=str(cwd) if cwd is not None else None,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExecuteProcessFailed(
                f"{executable.name} timed out after {self.timeout_seconds}s", path=str(executable)
            ) from exc
        except OSError as exc:
            raise ExecuteProcessFailed(f"failed to spawn {executable}: {exc}", path=str(executable)) from exc
        if result.stdout:
            logger.debug("%s stdout: %s", executable.name, result.stdout.strip())
        if result.stderr:
            logger.debug("%s stderr: %s", executable.name, result.stderr.strip())
        logger.debug("process exited with status: %s", result.returncode)
        return result.returncode
