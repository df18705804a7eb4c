"""Common environment helpers used across the relay."""

from __future__ import annotations

import os

from core.exceptions import ConfigurationError

__all__ = ["get_env", "get_float_env", "get_int_env"]


def get_env(key: str, default: str | None = None, *, required: bool = False) -> str | None:
    """Return an environment variable and optionally enforce its presence."""

    value = os.getenv(key, default)
    if required and not value:
        raise ConfigurationError(f"Required environment variable {key} not set", key=key)
    return value


def get_float_env(key: str, default: float) -> float:
    """Return ``key`` parsed as a float, falling back to ``default`` when unset."""

    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable {key} must be a number", key=key) from exc


def get_int_env(key: str, default: int) -> int:
    """Return ``key`` parsed as an int, falling back to ``default`` when unset."""

    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable {key} must be an integer", key=key) from exc

