"""The six-stage add pipeline."""

from .download import Downloader
from .execute import ExecutableVerifier, set_executable_permission
from .install import Installer, InstallResult, bundle_dir_for
from .locate import ManifestEvaluator, ManifestLocator, PklEvaluator, RenderedManifestEvaluator
from .runner import STAGES, AddOutcome, AddPipeline, build_locator
from .unpack import ArchiveUnpacker, executable_root, resolve_executable
from .validate import file_sha256_hex, validate

__all__ = [
    "AddOutcome",
    "AddPipeline",
    "ArchiveUnpacker",
    "Downloader",
    "ExecutableVerifier",
    "InstallResult",
    "Installer",
    "ManifestEvaluator",
    "ManifestLocator",
    "PklEvaluator",
    "RenderedManifestEvaluator",
    "STAGES",
    "build_locator",
    "bundle_dir_for",
    "executable_root",
    "file_sha256_hex",
    "resolve_executable",
    "set_executable_permission",
    "validate",
]
