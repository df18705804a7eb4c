"""Dependency helpers for the relay feature."""

from __future__ import annotations

from functools import lru_cache, partial

from core.config import Settings
from infrastructure.aws.delivery import DeliveryChannelFactory, build_delivery_channel
from infrastructure.aws.membership_store import DynamoDbMembershipStore, MembershipStore

from .dispatcher import BroadcastDispatcher
from .handlers import RelayHandlers
from .registry import ConnectionRegistry


def build_relay_handlers(
    *,
    settings: Settings | None = None,
    store: MembershipStore | None = None,
    channel_factory: DeliveryChannelFactory | None = None,
) -> RelayHandlers:
    """Wire registry, dispatcher and handlers from explicit collaborators."""

    resolved = settings or Settings.from_env()
    membership = store or DynamoDbMembershipStore(table_name=resolved.table_name or None)
    registry = ConnectionRegistry(membership)
    dispatcher = BroadcastDispatcher(
        registry,
        channel_factory or partial(build_delivery_channel, timeout=resolved.delivery_timeout),
        delivery_timeout=resolved.delivery_timeout,
        max_concurrency=resolved.max_concurrent_deliveries,
    )
    return RelayHandlers(registry, dispatcher)


@lru_cache(maxsize=1)
def _relay_handlers_singleton() -> RelayHandlers:
    return build_relay_handlers()


def get_relay_handlers() -> RelayHandlers:
    """Return handlers reused across warm invocations of the same process."""

    return _relay_handlers_singleton()


def reset_relay_handlers() -> None:
    """Forget the cached handlers so the next call re-reads settings."""

    _relay_handlers_singleton.cache_clear()


__all__ = ["build_relay_handlers", "get_relay_handlers", "reset_relay_handlers"]
