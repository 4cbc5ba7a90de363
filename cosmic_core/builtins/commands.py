"""Shared helpers for builtin commands."""

from __future__ import annotations

from argparse import ArgumentParser
from typing import Any

import requests

from cosmic_core import __version__
from cosmic_core.config import MANIFEST_FORMATS, CosmicConfig, load_config


def build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": f"cosmic/{__version__}",
            "Cache-Control": "no-cache",
        }
    )
    return session


def add_manifest_arguments(parser: ArgumentParser) -> None:
    parser.add_argument("--manifest-base", help="Manifest base URL or local directory")
    parser.add_argument("--manifest-format", choices=list(MANIFEST_FORMATS), help="Manifest format")


class _ConfiguredCommand:
    def _config(self, argv: Any) -> CosmicConfig:
        config = load_config()
        return config.with_overrides(
            manifest_base=getattr(argv, "manifest_base", None) or None,
            manifest_format=getattr(argv, "manifest_format", None) or None,
            packages_dir=getattr(argv, "packages_dir", None) or None,
        )
