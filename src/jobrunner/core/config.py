"""Worker configuration: the JSON command file plus env-driven runtime settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings

from jobrunner.core.exceptions import ConfigError


class CommandSpec(BaseModel):
    """A runnable command and the arguments a job may pass to it."""

    model_config = {"frozen": True, "populate_by_name": True}

    name: str
    program: str
    allowed_args: frozenset[str] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("args", "allowed_args", "allowedArgs"),
    )


class WorkerConfig(BaseModel):
    """Static worker configuration, loaded once from ``config.json``."""

    model_config = {"frozen": True, "populate_by_name": True}

    aws_access_key_id: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("aws_access_key_id", "awsAccessKeyId"),
    )
    aws_secret_access_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("aws_secret_access_key", "awsSecretAccessKey"),
    )
    queue_url: str = Field(validation_alias=AliasChoices("queue_url", "queueUrl"))
    region: str
    failed_queue_url: str = Field(
        validation_alias=AliasChoices("failed_queue_url", "failedQueueUrl"),
    )
    commands: tuple[CommandSpec, ...] = ()

    @field_validator("commands")
    @classmethod
    def _unique_names(cls, commands: tuple[CommandSpec, ...]) -> tuple[CommandSpec, ...]:
        seen: set[str] = set()
        for cmd in commands:
            if cmd.name in seen:
                raise ValueError(f"duplicate command name {cmd.name!r}")
            seen.add(cmd.name)
        return commands


class RunnerSettings(BaseSettings):
    """Runtime tunables for the poll loop and executor."""

    model_config = {"env_prefix": "JOBRUNNER_"}

    config_path: Path = Path("config.json")
    log_level: str = "INFO"
    endpoint_url: Optional[str] = None  # LocalStack override
    wait_time_seconds: int = Field(default=20, ge=0, le=20)
    max_messages: int = Field(default=10, ge=1, le=10)
    backoff_initial_seconds: float = Field(default=1.0, gt=0)
    backoff_max_seconds: float = Field(default=60.0, gt=0)
    fail_on_nonzero_exit: bool = False
    exec_timeout_seconds: Optional[float] = None
    max_workers: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _backoff_bounds(self) -> RunnerSettings:
        if self.backoff_max_seconds < self.backoff_initial_seconds:
            raise ValueError("backoff_max_seconds must be >= backoff_initial_seconds")
        return self


def load_worker_config(path: str | Path) -> WorkerConfig:
    """Read and validate the worker config file.

    Raises:
        ConfigError: if the file is missing, unreadable, not JSON, or does
            not match the expected schema.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {str(path)!r}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {str(path)!r} is not valid JSON: {exc}") from exc

    try:
        return WorkerConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Config file {str(path)!r} is invalid: {exc}") from exc
