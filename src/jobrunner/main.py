"""Worker entry point: load config, wire components, poll until signalled.

Usage:
    jobrunner --config /etc/jobrunner/config.json
    python -m jobrunner --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import Any, BinaryIO, Optional, Sequence

from jobrunner.core.config import RunnerSettings, WorkerConfig, load_worker_config
from jobrunner.core.exceptions import ConfigError
from jobrunner.core.protocols import IQueueClient
from jobrunner.dispatcher import Dispatcher
from jobrunner.executor import SubprocessExecutor
from jobrunner.failure import FailureReporter
from jobrunner.poller import Backoff, Poller
from jobrunner.registry import CommandRegistry
from jobrunner.transport import create_queue_client

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_poller(
    config: WorkerConfig,
    settings: RunnerSettings,
    queue: Optional[IQueueClient] = None,
    stdout: Optional[BinaryIO] = None,
) -> Poller:
    """Wire every component for one worker process.

    ``queue`` defaults to an SQS client for ``config.queue_url``.
    """
    if queue is None:
        queue = create_queue_client(config, settings)

    dispatcher = Dispatcher(
        queue=queue,
        registry=CommandRegistry.from_config(config),
        executor=SubprocessExecutor(stdout=stdout, timeout_seconds=settings.exec_timeout_seconds),
        reporter=FailureReporter(queue, config.failed_queue_url),
        fail_on_nonzero_exit=settings.fail_on_nonzero_exit,
    )
    return Poller(
        queue=queue,
        dispatcher=dispatcher,
        max_messages=settings.max_messages,
        wait_time_seconds=settings.wait_time_seconds,
        backoff=Backoff(settings.backoff_initial_seconds, settings.backoff_max_seconds),
        max_workers=settings.max_workers,
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jobrunner", description="Run whitelisted commands requested over SQS",
    )
    parser.add_argument("--config", default=None, help="Path to config.json")
    parser.add_argument("--log-level", default=None, help="Logging level (e.g. DEBUG)")
    parser.add_argument("--endpoint-url", default=None,
                        help="SQS endpoint (e.g. http://localhost:4566)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    overrides: dict[str, Any] = {}
    if args.config:
        overrides["config_path"] = args.config
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.endpoint_url:
        overrides["endpoint_url"] = args.endpoint_url
    settings = RunnerSettings(**overrides)

    configure_logging(settings.log_level)

    try:
        config = load_worker_config(settings.config_path)
        poller = build_poller(config, settings)
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2

    def _handle_shutdown(signum: int, frame: Any) -> None:
        # No drain: a running job is abandoned and the process exits now.
        logger.info("Received signal %s, exiting", signal.Signals(signum).name)
        poller.stop()
        signal.signal(signum, signal.SIG_DFL)
        signal.raise_signal(signum)

    signal.signal(signal.SIGTERM, _handle_shutdown)
    signal.signal(signal.SIGINT, _handle_shutdown)

    logger.info("jobrunner starting: queue=%s, commands=%s",
                config.queue_url, [c.name for c in config.commands])
    poller.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
