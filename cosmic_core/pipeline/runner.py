"""Sequential add pipeline: locate, download, validate, unpack, execute, install."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import requests

from cosmic_core.config import CosmicConfig
from cosmic_core.errors import CosmicError
from cosmic_core.package import Package

from .download import Downloader
from .execute import ExecutableVerifier
from .install import Installer, InstallResult
from .locate import ManifestEvaluator, ManifestLocator, PklEvaluator, RenderedManifestEvaluator
from .unpack import ArchiveUnpacker
from .validate import validate

logger = logging.getLogger(__name__)

STAGES = ("locate", "download", "validate", "unpack", "execute", "install")


@dataclass(frozen=True)
class AddOutcome:
    name: str
    package: Package | None = None
    download_path: Path | None = None
    unpack_root: Path | None = None
    install: InstallResult | None = None
    failed_stage: str | None = None
    error: CosmicError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.install is not None and self.install.verified

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


class AddPipeline:
    """Run one package through every stage, stopping at the first failure.

    Stage errors are returned on the outcome, not raised. Side effects of the
    stages that already ran are left in place.
    """

    def __init__(
        self,
        locator: ManifestLocator,
        downloader: Downloader,
        unpacker: ArchiveUnpacker,
        verifier: ExecutableVerifier,
        installer: Installer,
    ) -> None:
        self.locator = locator
        self.downloader = downloader
        self.unpacker = unpacker
        self.verifier = verifier
        self.installer = installer

    @classmethod
    def from_config(
        cls,
        config: CosmicConfig,
        *,
        session: requests.Session | None = None,
        evaluator: ManifestEvaluator | None = None,
        force: bool = False,
    ) -> "AddPipeline":
        session = session or requests.Session()
        return cls(
            locator=build_locator(config, session=session, evaluator=evaluator),
            downloader=Downloader(session, timeout_seconds=config.http_timeout_seconds),
            unpacker=ArchiveUnpacker(config.tar_command),
            verifier=ExecutableVerifier(timeout_seconds=config.execute_timeout_seconds),
            installer=Installer(config.resolved_packages_dir(), force=force),
        )

    def run(self, name: str) -> AddOutcome:
        stage = "locate"
        package: Package | None = None
        download_path: Path | None = None
        unpack_root: Path | None = None
        try:
            package = self.locator.locate(name)
            stage = "download"
            download_path = self.downloader.download(package)
            stage = "validate"
            validate(package, download_path)
            stage = "unpack"
            unpack_root = self.unpacker.unpack(package, download_path)
            stage = "execute"
            self.verifier.execute(package, unpack_root)
            stage = "install"
            result = self.installer.install(package, unpack_root)
        except CosmicError as exc:
            logger.debug("stage %s failed for %s", stage, name, exc_info=True)
            return AddOutcome(
                name=name,
                package=package,
                download_path=download_path,
                unpack_root=unpack_root,
                failed_stage=stage,
                error=exc,
            )
        return AddOutcome(
            name=name,
            package=package,
            download_path=download_path,
            unpack_root=unpack_root,
            install=result,
        )


def build_locator(
    config: CosmicConfig,
    *,
    session: requests.Session,
    evaluator: ManifestEvaluator | None = None,
) -> ManifestLocator:
    if evaluator is None:
        if config.manifest_format == "pkl":
            evaluator = PklEvaluator(config.pkl_command, timeout_seconds=config.evaluator_timeout_seconds)
        else:
            evaluator = RenderedManifestEvaluator()
    return ManifestLocator(
        session,
        evaluator,
        base=config.manifest_base,
        manifest_format=config.manifest_format,
        timeout_seconds=config.http_timeout_seconds,
    )
