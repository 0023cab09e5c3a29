"""Send a job request to a jobrunner queue.

Usage:
    python scripts/send_job.py --queue-url http://localhost:4566/000000000000/jobs \
        --endpoint-url http://localhost:4566 ping -n hello
    python scripts/send_job.py --queue-url ... --create-queue ping
"""

from __future__ import annotations

import argparse
import json
from typing import Any

import boto3


def build_body(name: str, args: list[str]) -> str:
    """Encode a job in the queue wire format."""
    return json.dumps({"name": name, "args": args})


def ensure_queue(client: Any, queue_url: str) -> str:
    """Create the queue named by the last path segment of ``queue_url`` if missing."""
    name = queue_url.rstrip("/").rsplit("/", 1)[-1]
    resp = client.create_queue(QueueName=name)
    print(f"  Queue {name} ready at {resp['QueueUrl']}")
    return resp["QueueUrl"]


def send_job(client: Any, queue_url: str, name: str, args: list[str]) -> str:
    resp = client.send_message(QueueUrl=queue_url, MessageBody=build_body(name, args))
    return resp["MessageId"]


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a job request to a jobrunner queue")
    parser.add_argument("--queue-url", required=True, help="Target queue URL")
    parser.add_argument("--endpoint-url", default=None, help="SQS endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--create-queue", action="store_true", help="Create the queue first")
    parser.add_argument("name", help="Command name")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="Command arguments")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    client = boto3.client("sqs", **kwargs)

    queue_url = args.queue_url
    if args.create_queue:
        queue_url = ensure_queue(client, queue_url)

    message_id = send_job(client, queue_url, args.name, args.args)
    print(f"Sent {args.name} {args.args} as message {message_id}")


if __name__ == "__main__":
    main()
