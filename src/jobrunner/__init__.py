"""Queue-driven job executor: runs whitelisted commands requested over SQS."""

__version__ = "0.1.0"
