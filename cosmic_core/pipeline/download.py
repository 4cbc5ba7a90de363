"""Artifact download stage."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlsplit

import requests

from cosmic_core.errors import DownloadFailed
from cosmic_core.package import Package
from cosmic_core.security import redact_url

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class Downloader:
    """Fetch a package artifact into a per-package temporary directory.

    A failed transfer is terminal; nothing is retried and partially written
    files are left where they are.
    """

    def __init__(
        self,
        session: requests.Session,
        *,
        timeout_seconds: float = 60.0,
        temp_root: Path | None = None,
    ) -> None:
        self.session = session
        self.timeout_seconds = timeout_seconds
        self.temp_root = temp_root

    def download(self, package: Package) -> Path:
        logger.info("downloading package %s", package.name)
        parsed = urlsplit(package.url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise DownloadFailed(f"malformed package URL: {redact_url(package.url)!r}")

        logger.debug("remote url=%s", redact_url(package.url))
        try:
            response = self.session.get(package.url, stream=True, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise DownloadFailed(f"could not download {package.name}: {exc}") from exc

        try:
            if response.status_code != 200:
                raise DownloadFailed(
                    f"could not download {package.name}: status={response.status_code}"
                )
            target = self._target_path(package, parsed.path)
            with target.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)
        except requests.RequestException as exc:
            raise DownloadFailed(f"transfer of {package.name} did not complete: {exc}") from exc
        except OSError as exc:
            raise DownloadFailed(f"unable to store {package.name}: {exc}") from exc
        finally:
            response.close()

        logger.debug("downloaded %s to %s", package.name, target)
        return target

    def _target_path(self, package: Package, url_path: str) -> Path:
        directory = Path(
            tempfile.mkdtemp(
                prefix=f"cosmic-{package.name}-download-",
                dir=str(self.temp_root) if self.temp_root is not None else None,
            )
        )
        filename = PurePosixPath(unquote(url_path)).name
        if filename in {"", ".", ".."}:
            filename = package.name
        return directory / filename
