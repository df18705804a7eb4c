"""Environment detection and helpers."""

from __future__ import annotations

import os
from typing import Literal

Environment = Literal["development", "production", "test", "staging"]


def get_node_env() -> Environment:
    """Return the current runtime environment label."""

    raw = os.getenv("NODE_ENV", "development").lower()
    if raw in ("development", "production", "test", "staging"):
        return raw  # type: ignore[return-value]
    return "development"


ENVIRONMENT: Environment = get_node_env()

__all__ = [
    "Environment",
    "ENVIRONMENT",
    "get_node_env",
]
