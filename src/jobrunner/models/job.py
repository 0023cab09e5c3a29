"""Job, message, and execution models plus the queue wire codec.

Inbound job messages and dead-letter reports share one wire schema::

    {"name": "<command name>", "args": ["<arg>", ...]}
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from jobrunner.core.exceptions import JobParseError


class DispatchOutcome(StrEnum):
    EXECUTED = "EXECUTED"
    FAILED = "FAILED"
    UNKNOWN_COMMAND = "UNKNOWN_COMMAND"
    MALFORMED = "MALFORMED"
    INVALID_MESSAGE = "INVALID_MESSAGE"


class JobRequest(BaseModel):
    """A job as requested on the queue. Untrusted until looked up and filtered."""

    model_config = {"frozen": True}

    name: str
    args: list[str]


class QueueMessage(BaseModel):
    """A message as handed back by the queue service."""

    receipt_handle: Optional[str] = None
    body: Optional[str] = None
    message_id: Optional[str] = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class ExecutionResult(BaseModel):
    """Outcome of a program that was spawned successfully."""

    program: str
    args: list[str] = Field(default_factory=list)
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def parse_job_request(body: Optional[str]) -> JobRequest:
    """Decode a message body into a JobRequest.

    Raises:
        JobParseError: if the body is missing, not JSON, or not shaped like
            ``{"name": str, "args": [str, ...]}``.
    """
    if body is None:
        raise JobParseError("Message has no body")
    try:
        return JobRequest.model_validate_json(body)
    except ValidationError as exc:
        raise JobParseError(f"Malformed job request: {exc}") from exc


def serialize_job_request(request: JobRequest) -> str:
    """Encode a JobRequest in the queue wire format."""
    return request.model_dump_json()
