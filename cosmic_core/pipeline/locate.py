"""Manifest lookup and evaluation."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Mapping, Protocol
from urllib.parse import urlsplit

import requests
import yaml

from cosmic_core.errors import PackageNotFound
from cosmic_core.package import Package
from cosmic_core.security import redact_url

logger = logging.getLogger(__name__)

MANIFEST_EXTENSIONS = {"pkl": ".pkl", "yaml": ".yml"}


class ManifestEvaluator(Protocol):
    def evaluate(self, location: str, body: str) -> Mapping[str, Any]: ...


class PklEvaluator:
    """Evaluate Pkl manifests through the ``pkl`` CLI."""

    def __init__(self, command: str = "pkl", *, timeout_seconds: float = 60.0) -> None:
        self.command = command
        self.timeout_seconds = max(float(timeout_seconds), 1.0)

    def evaluate(self, location: str, body: str) -> Mapping[str, Any]:
        del body
        command = [self.command, "eval", "--format", "json", location]
        logger.debug("evaluating manifest cmd=%s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
        except FileNotFoundError as exc:
            raise PackageNotFound(
                f"{self.command} CLI not found. Install Pkl and ensure it is available in PATH."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise PackageNotFound(f"manifest evaluation timed out after {self.timeout_seconds:.1f}s") from exc
        if result.returncode != 0:
            detail = (result.stderr or "").strip()
            raise PackageNotFound(f"manifest evaluation failed (exit={result.returncode}) err='{detail}'")
        try:
            payload = json.loads(result.stdout or "")
        except json.JSONDecodeError as exc:
            raise PackageNotFound("invalid JSON payload from manifest evaluator") from exc
        if not isinstance(payload, dict):
            raise PackageNotFound("manifest evaluator returned a non-object payload")
        return payload


class RenderedManifestEvaluator:
    """Parse manifests that are already rendered to YAML or JSON."""

    def evaluate(self, location: str, body: str) -> Mapping[str, Any]:
        try:
            payload = yaml.safe_load(body)
        except yaml.YAMLError as exc:
            raise PackageNotFound(f"unable to parse manifest at {location}") from exc
        if not isinstance(payload, dict):
            raise PackageNotFound(f"manifest at {location} is not a mapping")
        return payload


class ManifestLocator:
    def __init__(
        self,
        session: requests.Session,
        evaluator: ManifestEvaluator,
        *,
        base: str,
        manifest_format: str = "pkl",
        timeout_seconds: float = 60.0,
    ) -> None:
        if manifest_format not in MANIFEST_EXTENSIONS:
            raise ValueError(f"unsupported manifest format: {manifest_format!r}")
        self.session = session
        self.evaluator = evaluator
        self.base = base.strip()
        self.manifest_format = manifest_format
        self.timeout_seconds = timeout_seconds

    def manifest_location(self, name: str) -> str:
        filename = f"{name}{MANIFEST_EXTENSIONS[self.manifest_format]}"
        if _is_remote(self.base):
            return f"{self.base.rstrip('/')}/{filename}"
        return str(_local_base(self.base) / filename)

    def locate(self, name: str) -> Package:
        name = name.strip()
        if not name or "/" in name or name in {".", ".."}:
            raise PackageNotFound(f"invalid package name: {name!r}")
        logger.info("locating package %s", name)
        location = self.manifest_location(name)
        body = self._read(location)
        payload = self.evaluator.evaluate(location, body)
        try:
            package = Package.from_mapping(payload)
        except ValueError as exc:
            raise PackageNotFound(f"invalid manifest for {name}: {exc}") from exc
        logger.debug("located package %s version=%s", package.name, package.version or "-")
        return package

    def _read(self, location: str) -> str:
        if not _is_remote(location):
            path = Path(location)
            if not path.is_file():
                raise PackageNotFound(f"manifest not found: {location}")
            try:
                return path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise PackageNotFound(f"unable to read manifest {location}: {exc}") from exc
        logger.debug("fetching manifest url=%s", redact_url(location))
        try:
            response = self.session.get(location, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise PackageNotFound(f"unable to fetch manifest {redact_url(location)}: {exc}") from exc
        if response.status_code != 200:
            raise PackageNotFound(f"manifest not found: {redact_url(location)} (status={response.status_code})")
        return response.text


def _is_remote(location: str) -> bool:
    return urlsplit(location).scheme in {"http", "https"}


def _local_base(base: str) -> Path:
    parsed = urlsplit(base)
    if parsed.scheme == "file":
        return Path(parsed.path).expanduser()
    return Path(base).expanduser()
