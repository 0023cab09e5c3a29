"""Shared test doubles — the memory queue plus a recording executor."""

from __future__ import annotations

from typing import Sequence

from jobrunner.core.exceptions import SpawnError
from jobrunner.models.job import ExecutionResult
from jobrunner.transport.memory_backend import MemoryQueueClient


class RecordingExecutor:
    """IExecutor that records calls instead of spawning processes."""

    def __init__(self, returncode: int = 0, missing: Sequence[str] = ()) -> None:
        self.calls: list[tuple[str, list[str]]] = []
        self.returncode = returncode
        self.missing = set(missing)

    def run(self, program: str, args: Sequence[str]) -> ExecutionResult:
        if program in self.missing:
            raise SpawnError(program, "No such file or directory")
        self.calls.append((program, list(args)))
        return ExecutionResult(program=program, args=list(args), returncode=self.returncode)


__all__ = ["MemoryQueueClient", "RecordingExecutor"]
