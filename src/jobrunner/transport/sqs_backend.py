"""SQS queue backend implementing IQueueClient."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from jobrunner.core.exceptions import QueueDeleteError, QueueReceiveError, QueueSendError
from jobrunner.models.job import QueueMessage

logger = logging.getLogger(__name__)

# Error codes SQS returns for a receipt handle that was already consumed or expired.
_STALE_RECEIPT_CODES = frozenset({"ReceiptHandleIsInvalid", "InvalidParameterValue"})


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


class SQSQueueClient:
    """Production IQueueClient bound to one source queue.

    Credentials, when given, go straight to the boto3 client. Empty
    credentials fall back to boto3's default provider chain.
    """

    def __init__(self, queue_url: str, region: str = "us-east-1",
                 aws_access_key_id: str | None = None,
                 aws_secret_access_key: str | None = None,
                 endpoint_url: str | None = None) -> None:
        self._queue_url = queue_url
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        if aws_access_key_id and aws_secret_access_key:
            kwargs["aws_access_key_id"] = aws_access_key_id
            kwargs["aws_secret_access_key"] = aws_secret_access_key
        self._client = boto3.client("sqs", **kwargs)

    @property
    def queue_url(self) -> str:
        return self._queue_url

    def receive(self, max_messages: int, wait_time_seconds: int,
                attributes: Sequence[str] = ("All",)) -> list[QueueMessage]:
        try:
            resp = self._client.receive_message(
                QueueUrl=self._queue_url,
                MaxNumberOfMessages=max_messages,
                WaitTimeSeconds=wait_time_seconds,
                AttributeNames=list(attributes),
                MessageAttributeNames=list(attributes),
            )
        except (ClientError, BotoCoreError) as exc:
            raise QueueReceiveError(f"SQS receive from {self._queue_url} failed: {exc}") from exc

        return [
            QueueMessage(
                receipt_handle=msg.get("ReceiptHandle"),
                body=msg.get("Body"),
                message_id=msg.get("MessageId"),
                attributes={
                    **msg.get("Attributes", {}),
                    **msg.get("MessageAttributes", {}),
                },
            )
            for msg in resp.get("Messages", [])
        ]

    def delete(self, receipt_handle: str) -> None:
        try:
            self._client.delete_message(QueueUrl=self._queue_url, ReceiptHandle=receipt_handle)
        except ClientError as exc:
            if _error_code(exc) in _STALE_RECEIPT_CODES:
                logger.warning("Receipt handle already consumed or expired: %s", receipt_handle)
                return
            raise QueueDeleteError(receipt_handle, str(exc)) from exc
        except BotoCoreError as exc:
            raise QueueDeleteError(receipt_handle, str(exc)) from exc

    def send(self, queue_url: str, body: str) -> Optional[str]:
        try:
            resp = self._client.send_message(QueueUrl=queue_url, MessageBody=body)
        except (ClientError, BotoCoreError) as exc:
            raise QueueSendError(queue_url, str(exc)) from exc
        return resp.get("MessageId")
