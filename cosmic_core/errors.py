"""Error taxonomy for the add pipeline."""

from __future__ import annotations


class CosmicError(Exception):
    """Base class for every failure surfaced by a pipeline stage."""

    kind = "CosmicError"


class PackageNotFound(CosmicError):
    kind = "PackageNotFound"


class DownloadFailed(CosmicError):
    kind = "DownloadFailed"


class InvalidPackage(CosmicError):
    kind = "InvalidPackage"


class UnsupportedDistribution(InvalidPackage):
    kind = "UnsupportedDistribution"


class ExtractionError(CosmicError):
    kind = "ExtractionError"


class ExtractionFailed(ExtractionError):
    kind = "ExtractionFailed"

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class FileDoesNotExist(ExtractionError):
    kind = "FileDoesNotExist"


class DirectoryCreationFailed(ExtractionError):
    kind = "DirectoryCreationFailed"


class ExecuteProcessFailed(CosmicError):
    kind = "ExecuteProcessFailed"

    def __init__(self, message: str, path: str | None = None, returncode: int | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.returncode = returncode


class MissingExecutablePath(CosmicError):
    kind = "MissingExecutablePath"


class InstallConflict(CosmicError):
    kind = "InstallConflict"


class InstallFailed(CosmicError):
    kind = "InstallFailed"
