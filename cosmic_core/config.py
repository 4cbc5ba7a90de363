"""Cosmic configuration loading."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

DEFAULT_MANIFEST_BASE = "https://raw.githubusercontent.com/willswire/cosmic-pkgs/refs/tags/v0.0.2"
MANIFEST_FORMATS = ("pkl", "yaml")


@dataclass(frozen=True)
class CosmicConfig:
    manifest_base: str = DEFAULT_MANIFEST_BASE
    manifest_format: str = "pkl"
    packages_dir: Path | None = None
    pkl_command: str = "pkl"
    tar_command: str = "tar"
    http_timeout_seconds: float = 60.0
    evaluator_timeout_seconds: float = 60.0
    execute_timeout_seconds: float | None = 120.0
    log_level: str = "INFO"

    def resolved_packages_dir(self) -> Path:
        if self.packages_dir is not None:
            return self.packages_dir.expanduser()
        return Path.home() / "Packages"

    def with_overrides(self, **overrides: Any) -> "CosmicConfig":
        values = {key: value for key, value in overrides.items() if value is not None}
        if "packages_dir" in values:
            values["packages_dir"] = Path(values["packages_dir"]).expanduser()
        if "manifest_format" in values:
            values["manifest_format"] = _manifest_format(values["manifest_format"])
        return replace(self, **values)


def cosmic_home() -> Path:
    raw = os.getenv("COSMIC_HOME", "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".cosmic"


def config_path(home: Path | None = None) -> Path:
    return (home or cosmic_home()) / "config" / "config.toml"


def load_config_section(home: Path | None = None) -> dict[str, Any]:
    path = config_path(home)
    if not path.exists():
        return {}
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return {}
    section = payload.get("cosmic")
    return section if isinstance(section, dict) else {}


def load_config(home: Path | None = None, environ: Mapping[str, str] | None = None) -> CosmicConfig:
    """Merge defaults, ``config.toml`` and environment overrides."""
    section = load_config_section(home)
    env = os.environ if environ is None else environ

    packages_raw = str(env.get("COSMIC_PACKAGES_DIR") or section.get("packages_dir") or "").strip()
    manifest_base = str(env.get("COSMIC_MANIFEST_BASE") or section.get("manifest_base") or "").strip()

    execute_timeout = _to_optional_float(section.get("execute_timeout_seconds"), default=120.0)
    if execute_timeout is not None and execute_timeout <= 0:
        execute_timeout = None

    return CosmicConfig(
        manifest_base=manifest_base or DEFAULT_MANIFEST_BASE,
        manifest_format=_manifest_format(section.get("manifest_format")),
        packages_dir=Path(packages_raw).expanduser() if packages_raw else None,
        pkl_command=str(section.get("pkl_command") or "pkl").strip() or "pkl",
        tar_command=str(section.get("tar_command") or "tar").strip() or "tar",
        http_timeout_seconds=max(_to_optional_float(section.get("http_timeout_seconds"), default=60.0) or 60.0, 1.0),
        evaluator_timeout_seconds=max(
            _to_optional_float(section.get("evaluator_timeout_seconds"), default=60.0) or 60.0, 1.0
        ),
        execute_timeout_seconds=execute_timeout,
        log_level=str(section.get("log_level") or "INFO").strip().upper() or "INFO",
    )


def _manifest_format(value: Any) -> str:
    normalized = str(value or "pkl").strip().lower()
    if normalized not in MANIFEST_FORMATS:
        raise ValueError(f"manifest_format must be one of: {', '.join(MANIFEST_FORMATS)}")
    return normalized


def _to_optional_float(value: Any, *, default: float | None) -> float | None:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
