"""Connection registry: the relay's view of which connections are open."""

from __future__ import annotations

import logging
from typing import List

from core.connections import ConnectionRecord
from infrastructure.aws.membership_store import MembershipStore

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Add, remove and list connection ids against the membership store.

    Every call goes to the store; nothing is cached in-process because each
    invocation may run on a different instance. ``StoreError`` from the store
    propagates unchanged.
    """

    def __init__(self, store: MembershipStore) -> None:
        self._store = store

    async def add(self, connection_id: str) -> ConnectionRecord:
        """Register ``connection_id``; adding an existing id leaves one record."""

        await self._store.put(connection_id)
        logger.debug("Registered connection %s", connection_id)
        return ConnectionRecord(connection_id)

    async def remove(self, connection_id: str) -> None:
        """Unregister ``connection_id``; removing an absent id is not an error."""

        await self._store.delete(connection_id)
        logger.debug("Unregistered connection %s", connection_id)

    async def list_all(self) -> List[str]:
        """Return a point-in-time snapshot of registered ids, in no particular order."""

        return list(await self._store.scan_all())


__all__ = ["ConnectionRegistry"]
