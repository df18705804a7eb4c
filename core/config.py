"""Settings dataclass for dependency injection.

Domain-specific configuration lives in the ``config/`` package:
- Environment detection: config.environment
- AWS clients, membership table and delivery tuning: config.aws

This module only collects those values into a single frozen object that
is handed to the relay wiring in ``features.relay.dependencies``.
"""

from __future__ import annotations

from dataclasses import dataclass

from config import aws as aws_config
from config.environment import ENVIRONMENT, get_node_env
from core.utils.env import get_env, get_float_env, get_int_env


@dataclass(frozen=True)
class Settings:
    """Dependency injection wrapper for relay settings."""

    environment: str = ENVIRONMENT
    aws_region: str = aws_config.AWS_REGION
    table_name: str = aws_config.CONNECTION_TABLE_NAME
    delivery_timeout: float = aws_config.DELIVERY_TIMEOUT_SECONDS
    max_concurrent_deliveries: int = aws_config.MAX_CONCURRENT_DELIVERIES

    @classmethod
    def from_env(cls) -> "Settings":
        """Re-read the environment; module constants are captured at import time."""

        return cls(
            environment=get_node_env(),
            aws_region=get_env("AWS_REGION", default=aws_config.AWS_REGION) or aws_config.AWS_REGION,
            table_name=get_env("TABLE_NAME", default="") or "",
            delivery_timeout=get_float_env(
                "RELAY_DELIVERY_TIMEOUT_SECONDS", aws_config.DELIVERY_TIMEOUT_SECONDS
            ),
            max_concurrent_deliveries=get_int_env(
                "RELAY_MAX_CONCURRENT_DELIVERIES", aws_config.MAX_CONCURRENT_DELIVERIES
            ),
        )


settings = Settings()

__all__ = ["Settings", "settings"]
