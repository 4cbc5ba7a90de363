"""Builtin info command: locate a package and print its descriptor."""

from __future__ import annotations

import json
from argparse import ArgumentParser
from typing import Any

from cosmic_core.api import cosmiccommand
from cosmic_core.errors import CosmicError
from cosmic_core.pipeline import build_locator

from . import commands
from .commands import _ConfiguredCommand, add_manifest_arguments


@cosmiccommand(name="info")
class InfoCommand(_ConfiguredCommand):
    """Show the resolved descriptor of a package without installing it."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("package", help="The name of the package to look up")
        add_manifest_arguments(parser)
        parser.add_argument("--format", choices=["text", "json"], default="text")

    def run(self, argv: Any) -> int:
        try:
            config = self._config(argv)
        except ValueError as exc:
            print(f"[cosmic:info] {exc}")
            return 1
        locator = build_locator(config, session=commands.build_session())
        try:
            package = locator.locate(str(argv.package))
        except CosmicError as exc:
            print(f"[cosmic:info] {exc.kind}: {exc}")
            return 1

        if str(getattr(argv, "format", "text")) == "json":
            print(json.dumps(package.to_dict(), indent=2))
            return 0
        print(f"[cosmic:info] {package.name}@{package.version or '-'}")
        print(f"[cosmic:info] type={package.distribution_type.value} bundle={'yes' if package.is_bundle else 'no'}")
        print(f"[cosmic:info] url={package.url}")
        print(f"[cosmic:info] sha256={package.hash.lower()}")
        for path in package.executable_paths:
            print(f"[cosmic:info] executable={path}")
        return 0
