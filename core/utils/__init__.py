"""Utility helpers shared across core packages."""

from .env import get_env, get_float_env, get_int_env

__all__ = [
    "get_env",
    "get_float_env",
    "get_int_env",
]
