"""Type aliases used across jobrunner."""

from __future__ import annotations

QueueUrl = str
ReceiptHandle = str
MessageBody = str
CommandName = str
