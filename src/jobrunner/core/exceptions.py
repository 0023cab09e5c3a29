"""jobrunner exception hierarchy."""

from __future__ import annotations


class JobRunnerError(Exception):
    """Base exception for all jobrunner errors."""


class ConfigError(JobRunnerError):
    """Worker configuration is missing or malformed."""


class QueueError(JobRunnerError):
    """Error talking to the message queue service."""


class QueueReceiveError(QueueError):
    """Receiving a batch of messages failed."""


class QueueDeleteError(QueueError):
    """Deleting a received message failed."""

    def __init__(self, receipt_handle: str, message: str) -> None:
        self.receipt_handle = receipt_handle
        super().__init__(f"Delete failed for receipt handle {receipt_handle!r}: {message}")


class QueueSendError(QueueError):
    """Sending a message to a queue failed."""

    def __init__(self, queue_url: str, message: str) -> None:
        self.queue_url = queue_url
        super().__init__(f"Send to {queue_url} failed: {message}")


class JobParseError(JobRunnerError):
    """Message body is not a valid job request."""


class SpawnError(JobRunnerError):
    """The command's program could not be run."""

    def __init__(self, program: str, message: str) -> None:
        self.program = program
        super().__init__(f"Could not run {program!r}: {message}")
