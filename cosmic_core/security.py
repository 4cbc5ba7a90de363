"""Path and logging safety helpers."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

from .errors import MissingExecutablePath


def safe_output_path(base_dir: Path, relative_path: str) -> Path:
    """Resolve ``relative_path`` under ``base_dir`` and refuse escapes."""
    cleaned = relative_path.strip().lstrip("/")
    target = (base_dir / cleaned).resolve()
    root = base_dir.resolve()
    if target == root:
        return target
    if root not in target.parents:
        raise MissingExecutablePath(f"executable path escapes package root: {relative_path!r}")
    return target


def redact_url(url: str) -> str:
    parsed = urlsplit(url)
    if not parsed.password:
        return url
    safe_netloc = parsed.netloc.replace(parsed.password, "***")
    return url.replace(parsed.netloc, safe_netloc)
