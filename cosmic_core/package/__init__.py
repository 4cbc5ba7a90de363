"""Package descriptor model."""

from .types import DistributionType, Package, executable_name

__all__ = ["DistributionType", "Package", "executable_name"]
