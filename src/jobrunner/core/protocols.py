"""Protocol interfaces for the worker's external collaborators.

The dispatcher and poller only talk to these Protocols, so the SQS backend
and the subprocess executor can be swapped for in-memory fakes in tests.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from jobrunner.core.types import MessageBody, QueueUrl, ReceiptHandle
from jobrunner.models.job import ExecutionResult, QueueMessage


# ---------------------------------------------------------------------------
# Queue transport
# ---------------------------------------------------------------------------

@runtime_checkable
class IQueueClient(Protocol):
    """Abstraction over the message-queue service (SQS or in-memory)."""

    def receive(
        self, max_messages: int, wait_time_seconds: int, attributes: Sequence[str] = ("All",)
    ) -> list[QueueMessage]: ...

    def delete(self, receipt_handle: ReceiptHandle) -> None: ...

    def send(self, queue_url: QueueUrl, body: MessageBody) -> Optional[str]: ...


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

@runtime_checkable
class IExecutor(Protocol):
    """Runs a registered program with an already-filtered argument vector."""

    def run(self, program: str, args: Sequence[str]) -> ExecutionResult: ...
