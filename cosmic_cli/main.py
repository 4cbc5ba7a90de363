"""Argument parsing and dispatch for the ``cosmic`` command."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

import cosmic_core.builtins  # noqa: F401  registers builtin commands
from cosmic_core import __version__
from cosmic_core.api import registered_commands
from cosmic_core.config import load_config_section

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cosmic", description="A per-user package manager.")
    parser.add_argument("--version", action="version", version=f"cosmic {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    parser.add_argument("--log-level", type=str.upper, choices=_LOG_LEVELS, help="Diagnostic log level")
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True
    for name, spec in sorted(registered_commands().items()):
        sub = subparsers.add_parser(name, help=spec.help, description=spec.help)
        spec.target.configure(sub)
        sub.set_defaults(_command_class=spec.target)
    return parser


def configure_logging(verbose: bool, log_level: str | None) -> None:
    if verbose:
        level = "DEBUG"
    else:
        level = log_level or str(load_config_section().get("log_level") or "INFO").upper()
        if level not in _LOG_LEVELS:
            level = "INFO"
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:
        return int(exc.code or 0)
    configure_logging(bool(args.verbose), args.log_level)
    command = args._command_class()
    return int(command.run(args))
