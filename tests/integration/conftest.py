"""Integration test fixtures — LocalStack SQS."""

from __future__ import annotations

import os
import uuid

import boto3
import pytest

# Default LocalStack endpoint
LOCALSTACK_URL = os.environ.get("LOCALSTACK_URL", "http://localhost:4566")
REGION = "us-east-1"


def _localstack_available() -> bool:
    """Check if LocalStack is reachable."""
    try:
        client = boto3.client("sqs", region_name=REGION, endpoint_url=LOCALSTACK_URL)
        client.list_queues()
        return True
    except Exception:
        return False


skip_no_localstack = pytest.mark.skipif(
    not _localstack_available(),
    reason="LocalStack not available",
)


@pytest.fixture(scope="session")
def localstack_sqs():
    """SQS client pointing at LocalStack."""
    return boto3.client("sqs", region_name=REGION, endpoint_url=LOCALSTACK_URL)


@pytest.fixture
def queue_pair(localstack_sqs):
    """A fresh job queue and dead-letter queue, removed afterwards."""
    suffix = uuid.uuid4().hex[:8]
    jobs = localstack_sqs.create_queue(QueueName=f"jobrunner-jobs-{suffix}")["QueueUrl"]
    failed = localstack_sqs.create_queue(QueueName=f"jobrunner-failed-{suffix}")["QueueUrl"]
    yield jobs, failed
    localstack_sqs.delete_queue(QueueUrl=jobs)
    localstack_sqs.delete_queue(QueueUrl=failed)
