"""Builtin Cosmic commands."""

from .add import AddCommand
from .info import InfoCommand

__all__ = ["AddCommand", "InfoCommand"]
