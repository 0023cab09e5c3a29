"""Per-message pipeline: delete, parse, look up, filter, execute, report."""

from __future__ import annotations

import logging

from jobrunner.core.exceptions import JobParseError, QueueDeleteError, SpawnError
from jobrunner.core.protocols import IExecutor, IQueueClient
from jobrunner.failure import FailureReporter
from jobrunner.models.job import DispatchOutcome, QueueMessage, parse_job_request
from jobrunner.registry import CommandRegistry, filter_args

logger = logging.getLogger(__name__)


class Dispatcher:
    """Handles one received message at a time.

    Messages are deleted from the source queue before anything else happens,
    so a job is never picked up twice. Anything that goes wrong after that is
    only recoverable through the dead-letter queue.
    """

    def __init__(
        self,
        *,
        queue: IQueueClient,
        registry: CommandRegistry,
        executor: IExecutor,
        reporter: FailureReporter,
        fail_on_nonzero_exit: bool = False,
    ) -> None:
        self._queue = queue
        self._registry = registry
        self._executor = executor
        self._reporter = reporter
        self._fail_on_nonzero_exit = fail_on_nonzero_exit

    def dispatch(self, message: QueueMessage) -> DispatchOutcome:
        """Acknowledge then process a single message."""
        if not self.acknowledge(message):
            return DispatchOutcome.INVALID_MESSAGE
        return self.process(message)

    def acknowledge(self, message: QueueMessage) -> bool:
        """Delete the message from the source queue.

        Returns False only when the message carries no receipt handle, in
        which case it must not be processed. A failed delete is logged and
        still counts as acknowledged.
        """
        if not message.receipt_handle:
            logger.error("Message %s has no receipt handle, skipping", message.message_id)
            return False
        try:
            self._queue.delete(message.receipt_handle)
        except QueueDeleteError as exc:
            logger.error("Could not delete message %s: %s", message.message_id, exc)
        else:
            logger.info("Deleted message via receipt handle %s", message.receipt_handle)
        return True

    def process(self, message: QueueMessage) -> DispatchOutcome:
        """Run the job carried by an already-acknowledged message."""
        try:
            request = parse_job_request(message.body)
        except JobParseError as exc:
            logger.warning("Dropping message %s: %s", message.message_id, exc)
            return DispatchOutcome.MALFORMED

        spec = self._registry.lookup(request.name)
        if spec is None:
            logger.debug("No command named %r, ignoring", request.name)
            return DispatchOutcome.UNKNOWN_COMMAND

        args = filter_args(request.args, spec.allowed_args)
        try:
            result = self._executor.run(spec.program, args)
        except SpawnError as exc:
            logger.error("Job %r failed to start: %s", request.name, exc)
            self._reporter.report(request)
            return DispatchOutcome.FAILED

        if self._fail_on_nonzero_exit and not result.succeeded:
            logger.error("Job %r exited with status %d", request.name, result.returncode)
            self._reporter.report(request)
            return DispatchOutcome.FAILED

        return DispatchOutcome.EXECUTED
