"""Dead-letter reporting for jobs that could not be run."""

from __future__ import annotations

import logging

from jobrunner.core.exceptions import QueueSendError
from jobrunner.core.protocols import IQueueClient
from jobrunner.models.job import JobRequest, serialize_job_request

logger = logging.getLogger(__name__)


class FailureReporter:
    """Sends failed job requests to the dead-letter queue.

    Fire-and-forget: a failed send is logged and the job is dropped.
    """

    def __init__(self, queue: IQueueClient, failed_queue_url: str) -> None:
        self._queue = queue
        self._failed_queue_url = failed_queue_url

    def report(self, request: JobRequest) -> bool:
        """Forward ``request`` unchanged. Returns whether the send went through."""
        body = serialize_job_request(request)
        try:
            message_id = self._queue.send(self._failed_queue_url, body)
        except QueueSendError as exc:
            logger.error("Job %r lost, dead-letter send failed: %s", request.name, exc)
            return False
        logger.info("Reported failed job %r to dead-letter queue (message %s)",
                    request.name, message_id)
        return True
