"""AWS-specific configuration values."""

from __future__ import annotations

import os
from typing import Dict

from config.environment import ENVIRONMENT
from core.utils.env import get_float_env, get_int_env

_ENVIRONMENT_DEFAULTS: Dict[str, Dict[str, str]] = {
    "production": {
        "aws_region": "us-east-1",
        "delivery_timeout": "5.0",
        "max_concurrent_deliveries": "32",
    },
    "staging": {
        "aws_region": "us-east-1",
        "delivery_timeout": "5.0",
        "max_concurrent_deliveries": "16",
    },
    "development": {
        "aws_region": "us-east-1",
        "delivery_timeout": "5.0",
        "max_concurrent_deliveries": "16",
    },
}

_defaults = _ENVIRONMENT_DEFAULTS.get(ENVIRONMENT, _ENVIRONMENT_DEFAULTS["development"])

# Partition key of the membership table and the only projected attribute.
CONNECTION_ID_FIELD = "connectionId"

AWS_REGION = os.getenv("AWS_REGION", _defaults["aws_region"])
CONNECTION_TABLE_NAME = os.getenv("TABLE_NAME", "")
DELIVERY_TIMEOUT_SECONDS = get_float_env(
    "RELAY_DELIVERY_TIMEOUT_SECONDS", float(_defaults["delivery_timeout"])
)
MAX_CONCURRENT_DELIVERIES = get_int_env(
    "RELAY_MAX_CONCURRENT_DELIVERIES", int(_defaults["max_concurrent_deliveries"])
)

__all__ = [
    "AWS_REGION",
    "CONNECTION_ID_FIELD",
    "CONNECTION_TABLE_NAME",
    "DELIVERY_TIMEOUT_SECONDS",
    "MAX_CONCURRENT_DELIVERIES",
]
