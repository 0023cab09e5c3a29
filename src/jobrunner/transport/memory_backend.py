"""In-memory queue backend for unit tests — list-backed fake."""

from __future__ import annotations

import itertools
from typing import Optional, Sequence

from jobrunner.core.exceptions import QueueDeleteError, QueueReceiveError, QueueSendError
from jobrunner.models.job import QueueMessage


class MemoryQueueClient:
    """List-backed IQueueClient for unit tests.

    ``queue_url`` is the source queue; every other URL passed to ``send`` gets
    its own list in ``sent``. Failures can be injected per operation.
    """

    def __init__(self, queue_url: str = "memory://jobs") -> None:
        self.queue_url = queue_url
        self._pending: list[QueueMessage] = []
        self._ids = itertools.count(1)
        self.sent: dict[str, list[str]] = {}
        self.deleted: list[str] = []
        self.receive_calls = 0
        self.fail_receive = 0
        self.fail_delete = False
        self.fail_send = False

    def push(self, body: Optional[str], receipt_handle: Optional[str] = "auto") -> QueueMessage:
        """Enqueue a message on the source queue and return it."""
        n = next(self._ids)
        msg = QueueMessage(
            receipt_handle=f"rh-{n}" if receipt_handle == "auto" else receipt_handle,
            body=body,
            message_id=f"msg-{n}",
        )
        self._pending.append(msg)
        return msg

    def receive(self, max_messages: int, wait_time_seconds: int,
                attributes: Sequence[str] = ("All",)) -> list[QueueMessage]:
        self.receive_calls += 1
        if self.fail_receive:
            self.fail_receive -= 1
            raise QueueReceiveError("injected receive failure")
        batch = self._pending[:max_messages]
        del self._pending[:max_messages]
        return batch

    def delete(self, receipt_handle: str) -> None:
        if self.fail_delete:
            raise QueueDeleteError(receipt_handle, "injected delete failure")
        self.deleted.append(receipt_handle)

    def send(self, queue_url: str, body: str) -> Optional[str]:
        if self.fail_send:
            raise QueueSendError(queue_url, "injected send failure")
        self.sent.setdefault(queue_url, []).append(body)
        return f"sent-{next(self._ids)}"
