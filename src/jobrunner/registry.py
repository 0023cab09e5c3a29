"""Command whitelist: name -> program lookup and argument filtering."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Optional

from jobrunner.core.config import CommandSpec, WorkerConfig
from jobrunner.core.exceptions import ConfigError


def filter_args(requested: Iterable[str], allowed: frozenset[str] | set[str]) -> list[str]:
    """Keep only the requested args that are whitelisted.

    Request order is preserved and a repeated arg is kept once per occurrence,
    so the result is exactly the subsequence of ``requested`` found in
    ``allowed``.
    """
    return [arg for arg in requested if arg in allowed]


class CommandRegistry:
    """Read-only mapping from command name to its CommandSpec."""

    def __init__(self, commands: Iterable[CommandSpec]) -> None:
        by_name: dict[str, CommandSpec] = {}
        for spec in commands:
            if spec.name in by_name:
                raise ConfigError(f"Duplicate command name {spec.name!r}")
            by_name[spec.name] = spec
        self._commands: Mapping[str, CommandSpec] = MappingProxyType(by_name)

    @classmethod
    def from_config(cls, config: WorkerConfig) -> CommandRegistry:
        return cls(config.commands)

    def lookup(self, name: str) -> Optional[CommandSpec]:
        """Exact-match lookup; ``None`` for names this worker does not run."""
        return self._commands.get(name)

    def names(self) -> list[str]:
        return list(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands
