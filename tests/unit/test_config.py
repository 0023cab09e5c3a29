"""Tests for configuration defaults, env overrides and config file loading."""

from __future__ import annotations

import json

import pytest

from jobrunner.core.config import RunnerSettings, WorkerConfig, load_worker_config
from jobrunner.core.exceptions import ConfigError

SAMPLE = {
    "aws_access_key_id": "AKIDEXAMPLE",
    "aws_secret_access_key": "s3cr3t",
    "queue_url": "https://sqs.us-east-1.amazonaws.com/123456789012/jobs",
    "region": "us-east-1",
    "failed_queue_url": "https://sqs.us-east-1.amazonaws.com/123456789012/failed",
    "commands": [
        {"name": "ping", "program": "/bin/echo", "args": ["-n", "hello"]},
    ],
}


def _write(tmp_path, data) -> str:
    path = tmp_path / "config.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return str(path)


def test_default_settings(monkeypatch):
    for var in ("JOBRUNNER_MAX_WORKERS", "JOBRUNNER_WAIT_TIME_SECONDS", "JOBRUNNER_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    settings = RunnerSettings()
    assert settings.log_level == "INFO"
    assert settings.wait_time_seconds == 20
    assert settings.max_messages == 10
    assert settings.max_workers == 1
    assert settings.fail_on_nonzero_exit is False


def test_settings_env_override(monkeypatch):
    monkeypatch.setenv("JOBRUNNER_MAX_WORKERS", "4")
    monkeypatch.setenv("JOBRUNNER_FAIL_ON_NONZERO_EXIT", "true")
    settings = RunnerSettings()
    assert settings.max_workers == 4
    assert settings.fail_on_nonzero_exit is True


def test_settings_reject_out_of_range_wait_time():
    with pytest.raises(ValueError):
        RunnerSettings(wait_time_seconds=21)


class TestLoadWorkerConfig:
    def test_loads_snake_case_file(self, tmp_path):
        config = load_worker_config(_write(tmp_path, SAMPLE))
        assert config.queue_url.endswith("/jobs")
        assert config.failed_queue_url.endswith("/failed")
        assert config.commands[0].name == "ping"
        assert config.commands[0].allowed_args == frozenset({"-n", "hello"})

    def test_accepts_camel_case_keys(self, tmp_path):
        data = {
            "awsAccessKeyId": "AKIDEXAMPLE",
            "awsSecretAccessKey": "s3cr3t",
            "queueUrl": "q",
            "region": "eu-west-1",
            "failedQueueUrl": "dlq",
            "commands": [{"name": "ls", "program": "/bin/ls", "allowedArgs": ["-l"]}],
        }
        config = load_worker_config(_write(tmp_path, data))
        assert config.queue_url == "q"
        assert config.failed_queue_url == "dlq"
        assert config.aws_access_key_id.get_secret_value() == "AKIDEXAMPLE"
        assert config.commands[0].allowed_args == frozenset({"-l"})

    def test_credentials_are_not_shown_in_repr(self, tmp_path):
        config = load_worker_config(_write(tmp_path, SAMPLE))
        assert "s3cr3t" not in repr(config)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            load_worker_config(tmp_path / "nope.json")

    def test_invalid_json_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            load_worker_config(_write(tmp_path, "{not json"))

    def test_missing_queue_url_raises(self, tmp_path):
        data = {k: v for k, v in SAMPLE.items() if k != "queue_url"}
        with pytest.raises(ConfigError):
            load_worker_config(_write(tmp_path, data))

    def test_duplicate_command_names_raise(self, tmp_path):
        data = dict(SAMPLE, commands=[
            {"name": "ping", "program": "/bin/echo", "args": []},
            {"name": "ping", "program": "/bin/true", "args": []},
        ])
        with pytest.raises(ConfigError, match="duplicate"):
            load_worker_config(_write(tmp_path, data))

    def test_config_is_frozen(self, tmp_path):
        config = load_worker_config(_write(tmp_path, SAMPLE))
        with pytest.raises(Exception):
            config.queue_url = "other"  # type: ignore[misc]


def test_worker_config_by_field_name():
    config = WorkerConfig(queue_url="q", region="us-east-1", failed_queue_url="dlq")
    assert config.commands == ()
    assert config.aws_access_key_id.get_secret_value() == ""


def test_settings_reject_backoff_max_below_initial():
    with pytest.raises(ValueError, match="backoff_max_seconds"):
        RunnerSettings(backoff_initial_seconds=10.0, backoff_max_seconds=2.0)


def test_settings_accept_equal_backoff_bounds():
    settings = RunnerSettings(backoff_initial_seconds=5.0, backoff_max_seconds=5.0)
    assert settings.backoff_max_seconds == 5.0
