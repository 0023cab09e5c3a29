"""Subprocess executor implementing IExecutor."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import BinaryIO, Optional, Sequence

from jobrunner.core.exceptions import SpawnError
from jobrunner.models.job import ExecutionResult

logger = logging.getLogger(__name__)


class SubprocessExecutor:
    """Runs a program directly (no shell) and forwards its stdout.

    The child's stdout is written verbatim to ``stdout`` (the worker's own
    binary stdout by default). Exit status is returned, not judged.
    """

    def __init__(self, stdout: Optional[BinaryIO] = None,
                 timeout_seconds: Optional[float] = None) -> None:
        self._stdout = stdout
        self._timeout = timeout_seconds

    def run(self, program: str, args: Sequence[str]) -> ExecutionResult:
        argv = [program, *args]
        logger.info("Executing %s", argv)
        try:
            proc = subprocess.run(
                argv, capture_output=True, shell=False, timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise SpawnError(program, f"timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise SpawnError(program, str(exc)) from exc

        self._forward(proc.stdout)
        if proc.stderr:
            logger.debug("%s stderr: %s", program, proc.stderr.decode(errors="replace"))
        logger.info("%s exited with status %d", program, proc.returncode)

        return ExecutionResult(
            program=program,
            args=list(args),
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )

    def _forward(self, data: bytes) -> None:
        if not data:
            return
        out = self._stdout if self._stdout is not None else sys.stdout.buffer
        out.write(data)
        out.flush()
