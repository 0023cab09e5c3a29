"""Long-poll loop feeding received messages to the Dispatcher."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from jobrunner.core.exceptions import QueueReceiveError
from jobrunner.core.protocols import IQueueClient
from jobrunner.dispatcher import Dispatcher
from jobrunner.models.job import DispatchOutcome, QueueMessage

logger = logging.getLogger(__name__)

ALL_ATTRIBUTES = ("All",)


class Backoff:
    """Exponential delay for consecutive receive failures."""

    def __init__(self, initial: float = 1.0, maximum: float = 60.0, factor: float = 2.0) -> None:
        self.initial = initial
        self.maximum = maximum
        self.factor = factor
        self._next = initial

    def next_delay(self) -> float:
        delay = self._next
        self._next = min(self._next * self.factor, self.maximum)
        return delay

    def reset(self) -> None:
        self._next = self.initial


class Poller:
    """Polls the source queue until stopped.

    With ``max_workers == 1`` every message of a batch is dispatched in
    receipt order on the calling thread. With more workers the whole batch
    is still deleted in receipt order first; only execution runs in a pool.
    """

    def __init__(
        self,
        *,
        queue: IQueueClient,
        dispatcher: Dispatcher,
        max_messages: int = 10,
        wait_time_seconds: int = 20,
        backoff: Optional[Backoff] = None,
        max_workers: int = 1,
    ) -> None:
        self._queue = queue
        self._dispatcher = dispatcher
        self._max_messages = max_messages
        self._wait_time = wait_time_seconds
        self._backoff = backoff or Backoff()
        self._max_workers = max_workers
        self._stop = threading.Event()
        self._pool: Optional[ThreadPoolExecutor] = None

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        logger.info("Poller stop requested")
        self._stop.set()

    def run(self) -> None:
        """Poll until ``stop()`` is called."""
        logger.info("Polling for jobs (batch=%d, wait=%ds, workers=%d)",
                    self._max_messages, self._wait_time, self._max_workers)
        if self._max_workers > 1:
            self._pool = ThreadPoolExecutor(max_workers=self._max_workers,
                                            thread_name_prefix="jobrunner")
        try:
            while not self._stop.is_set():
                try:
                    self.poll_once()
                except Exception:
                    # Keep polling; pause so a persistent fault doesn't spin.
                    logger.exception("Error in poll loop")
                    self._stop.wait(self._backoff.next_delay())
        finally:
            if self._pool is not None:
                self._pool.shutdown(wait=True)
                self._pool = None
            logger.info("Poller stopped")

    def poll_once(self) -> list[DispatchOutcome]:
        """One receive + dispatch cycle. Receive failures back off and return []."""
        try:
            messages = self._queue.receive(self._max_messages, self._wait_time, ALL_ATTRIBUTES)
        except QueueReceiveError as exc:
            delay = self._backoff.next_delay()
            logger.warning("Receive failed, retrying in %.1fs: %s", delay, exc)
            self._stop.wait(delay)
            return []

        self._backoff.reset()
        if not messages:
            return []

        logger.info("Received %d message(s)", len(messages))
        if self._pool is None:
            return [self._dispatch_safely(msg) for msg in messages]
        return self._dispatch_pooled(messages)

    def _dispatch_safely(self, message: QueueMessage) -> DispatchOutcome:
        try:
            return self._dispatcher.dispatch(message)
        except Exception:
            logger.exception("Unexpected error handling message %s", message.message_id)
            return DispatchOutcome.FAILED

    def _process_safely(self, message: QueueMessage) -> DispatchOutcome:
        try:
            return self._dispatcher.process(message)
        except Exception:
            logger.exception("Unexpected error processing message %s", message.message_id)
            return DispatchOutcome.FAILED

    def _dispatch_pooled(self, messages: list[QueueMessage]) -> list[DispatchOutcome]:
        outcomes: list[Optional[DispatchOutcome]] = [None] * len(messages)
        futures = {}
        for i, msg in enumerate(messages):
            try:
                acknowledged = self._dispatcher.acknowledge(msg)
            except Exception:
                logger.exception("Unexpected error deleting message %s", msg.message_id)
                outcomes[i] = DispatchOutcome.FAILED
                continue
            if not acknowledged:
                outcomes[i] = DispatchOutcome.INVALID_MESSAGE
                continue
            futures[i] = self._pool.submit(self._process_safely, msg)
        for i, fut in futures.items():
            outcomes[i] = fut.result()
        return outcomes  # type: ignore[return-value]
