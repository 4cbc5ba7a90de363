"""Builtin add command."""

from __future__ import annotations

import logging
from argparse import ArgumentParser
from typing import Any

from cosmic_core.api import cosmiccommand
from cosmic_core.pipeline import AddPipeline

from . import commands
from .commands import _ConfiguredCommand, add_manifest_arguments

logger = logging.getLogger(__name__)


@cosmiccommand(name="add")
class AddCommand(_ConfiguredCommand):
    """Add a package."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("package", help="The name of the package to add")
        parser.add_argument("--packages-dir", help="Install into this directory instead of ~/Packages")
        parser.add_argument("--force", action="store_true", help="Replace an existing installation")
        add_manifest_arguments(parser)

    def run(self, argv: Any) -> int:
        name = str(getattr(argv, "package", "") or "").strip()
        try:
            config = self._config(argv)
        except ValueError as exc:
            print(f"[cosmic:add] {exc}")
            return 1

        pipeline = AddPipeline.from_config(
            config,
            session=commands.build_session(),
            force=bool(getattr(argv, "force", False)),
        )
        try:
            outcome = pipeline.run(name)
        except Exception as exc:  # pragma: no cover - unexpected failures outside the error taxonomy
            logger.debug("unexpected error while adding %s", name, exc_info=True)
            print(f"[cosmic:add] unexpected failure: {exc}")
            return 1

        if outcome.error is not None:
            print(f"[cosmic:add] {outcome.failed_stage} failed: {outcome.error.kind}: {outcome.error}")
            return 1

        package = outcome.package
        result = outcome.install
        if package is None or result is None or not result.verified:
            print(f"[cosmic:add] installation failed: {name} is not executable in {config.resolved_packages_dir()}")
            return 1

        print(f"[cosmic:add] installed {package.name}@{package.version or '-'}")
        print(f"[cosmic:add] dir={result.destination}")
        for link in result.links:
            print(f"[cosmic:add] link={link}")
        return 0
