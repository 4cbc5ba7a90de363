"""Core library for the Cosmic package manager."""

__version__ = "0.1.0"

from .errors import CosmicError
from .package import DistributionType, Package

__all__ = ["CosmicError", "DistributionType", "Package", "__version__"]
