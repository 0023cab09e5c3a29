"""Pluggable queue transports behind the IQueueClient Protocol."""

from __future__ import annotations

from botocore.exceptions import BotoCoreError

from jobrunner.core.config import RunnerSettings, WorkerConfig
from jobrunner.core.exceptions import ConfigError
from jobrunner.transport.sqs_backend import SQSQueueClient


def create_queue_client(config: WorkerConfig, settings: RunnerSettings | None = None) -> SQSQueueClient:
    """Create the SQS client for the configured source queue.

    Credentials come from the worker config and are handed to boto3
    directly; the process environment is left untouched.

    Raises:
        ConfigError: if boto3 rejects the client settings (e.g. a bad region).
    """
    if settings is None:
        settings = RunnerSettings()

    try:
        return SQSQueueClient(
            queue_url=config.queue_url,
            region=config.region,
            aws_access_key_id=config.aws_access_key_id.get_secret_value() or None,
            aws_secret_access_key=config.aws_secret_access_key.get_secret_value() or None,
            endpoint_url=settings.endpoint_url,
        )
    except (BotoCoreError, ValueError) as exc:
        raise ConfigError(f"Cannot create SQS client for region {config.region!r}: {exc}") from exc
