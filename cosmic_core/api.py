"""Command registration used by the CLI dispatcher."""

from __future__ import annotations

from argparse import ArgumentParser
from dataclasses import dataclass
from typing import Any, Callable, Protocol


class CosmicCommand(Protocol):
    @classmethod
    def configure(cls, parser: ArgumentParser) -> None: ...

    def run(self, argv: Any) -> int: ...


@dataclass(frozen=True)
class CommandSpec:
    name: str
    help: str
    target: type


_REGISTRY: dict[str, CommandSpec] = {}


def cosmiccommand(*, name: str, help: str = "") -> Callable[[type], type]:
    def _decorate(cls: type) -> type:
        summary = help
        if not summary and cls.__doc__:
            summary = cls.__doc__.strip().splitlines()[0]
        _REGISTRY[name] = CommandSpec(name=name, help=summary, target=cls)
        return cls

    return _decorate


def registered_commands() -> dict[str, CommandSpec]:
    return dict(_REGISTRY)
