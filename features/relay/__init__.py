"""Connection relay: membership registry, broadcast dispatcher and route handlers."""

from .dispatcher import BroadcastDispatcher
from .handlers import RelayHandlers, describe_recipients
from .registry import ConnectionRegistry

__all__ = ["BroadcastDispatcher", "ConnectionRegistry", "RelayHandlers", "describe_recipients"]
