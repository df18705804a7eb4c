"""Initialise AWS service clients used by the infrastructure layer."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Tuple

import boto3
from botocore.config import Config as BotoConfig

from config.aws import AWS_REGION, DELIVERY_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

_dynamodb_config = BotoConfig(
    region_name=AWS_REGION,
    retries={"max_attempts": 3, "mode": "standard"},
    connect_timeout=5,
    read_timeout=10,
)

aws_clients: Dict[str, Any] = {}
_management_clients: Dict[Tuple[str, float], Any] = {}
_lock = threading.Lock()


def get_dynamodb_client() -> Any:
    """Return the cached DynamoDB client, creating it on first use."""

    with _lock:
        client = aws_clients.get("dynamodb")
        if client is None:
            client = boto3.client("dynamodb", config=_dynamodb_config)
            aws_clients["dynamodb"] = client
            logger.info("Initialised DynamoDB client (region=%s)", AWS_REGION)
        return client


def _management_config(timeout: float) -> BotoConfig:
    # Delivery is bounded by the dispatcher; the SDK must not retry past that.
    return BotoConfig(
        region_name=AWS_REGION,
        retries={"max_attempts": 1, "mode": "standard"},
        connect_timeout=timeout,
        read_timeout=timeout,
    )


def get_management_api_client(endpoint_url: str, *, timeout: float | None = None) -> Any:
    """Return an API Gateway management client bound to ``endpoint_url``.

    ``timeout`` caps connect and read time; it defaults to
    ``RELAY_DELIVERY_TIMEOUT_SECONDS``. Clients are cached per endpoint and
    timeout so warm invocations reuse connections.
    """

    resolved_timeout = DELIVERY_TIMEOUT_SECONDS if timeout is None else timeout
    key = (endpoint_url, resolved_timeout)
    with _lock:
        client = _management_clients.get(key)
        if client is None:
            client = boto3.client(
                "apigatewaymanagementapi",
                endpoint_url=endpoint_url,
                config=_management_config(resolved_timeout),
            )
            _management_clients[key] = client
            logger.debug("Initialised API Gateway management client for %s", endpoint_url)
        return client


def reset_clients() -> None:
    """Drop every cached client (used by tests)."""

    with _lock:
        aws_clients.clear()
        _management_clients.clear()


__all__ = [
    "aws_clients",
    "get_dynamodb_client",
    "get_management_api_client",
    "reset_clients",
]
