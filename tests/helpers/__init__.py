"""Fakes for the membership store and delivery channels used across relay tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Dict, List, Mapping

from core.connections import DeliveryResult, DeliveryStatus, DestinationEndpoint
from core.exceptions import StoreError


class InMemoryMembershipStore:
    """Dict-backed membership store that records every call."""

    def __init__(self, connection_ids: List[str] | None = None) -> None:
        self.items: Dict[str, Dict[str, Any]] = {cid: {} for cid in connection_ids or []}
        self.calls: List[tuple[str, str | None]] = []
        self.fail_on: set[str] = set()
        self.fail_delete_for: set[str] = set()

    def _maybe_fail(self, operation: str, connection_id: str | None = None) -> None:
        if operation in self.fail_on:
            raise StoreError(f"{operation} unavailable", operation=operation)
        if operation == "delete" and connection_id in self.fail_delete_for:
            raise StoreError(f"delete of {connection_id} rejected", operation="delete")

    async def put(self, connection_id: str) -> None:
        self.calls.append(("put", connection_id))
        self._maybe_fail("put")
        self.items[connection_id] = {}

    async def delete(self, connection_id: str) -> None:
        self.calls.append(("delete", connection_id))
        self._maybe_fail("delete", connection_id)
        self.items.pop(connection_id, None)

    async def scan_all(self) -> List[str]:
        self.calls.append(("scan", None))
        self._maybe_fail("scan")
        return list(self.items)


class ScriptedChannel:
    """Delivery channel whose outcome per connection id is set up front."""

    def __init__(self, factory: "ScriptedChannelFactory", endpoint: DestinationEndpoint) -> None:
        self._factory = factory
        self.endpoint = endpoint

    async def send(self, connection_id: str, payload: bytes) -> DeliveryResult:
        self._factory.sent.append((connection_id, payload))
        behaviour = self._factory.outcomes.get(connection_id, DeliveryStatus.OK)
        if isinstance(behaviour, BaseException):
            raise behaviour
        if behaviour == "hang":
            await asyncio.sleep(3600)
        if behaviour is DeliveryStatus.GONE:
            return DeliveryResult.gone(connection_id, "410 Gone")
        if behaviour is DeliveryStatus.ERROR:
            return DeliveryResult.error(connection_id, "500 Internal Failure")
        self._factory.delivered.append((connection_id, payload))
        return DeliveryResult.ok(connection_id)


class ScriptedChannelFactory:
    """Callable ``DestinationEndpoint -> channel`` that records what it built and sent."""

    def __init__(self, outcomes: Mapping[str, Any] | None = None) -> None:
        self.outcomes: Dict[str, Any] = dict(outcomes or {})
        self.endpoints: List[DestinationEndpoint] = []
        self.sent: List[tuple[str, bytes]] = []
        self.delivered: List[tuple[str, bytes]] = []

    def __call__(self, endpoint: DestinationEndpoint) -> ScriptedChannel:
        self.endpoints.append(endpoint)
        return ScriptedChannel(self, endpoint)


def make_event(
    connection_id: str = "abc",
    *,
    body: Any = None,
    domain: str | None = "example.execute-api.us-east-1.amazonaws.com",
    stage: str | None = "prod",
    route_key: str | None = None,
) -> Dict[str, Any]:
    """Build a gateway proxy event; dict bodies are JSON-encoded."""

    context: Dict[str, Any] = {"connectionId": connection_id}
    if domain is not None:
        context["domainName"] = domain
    if stage is not None:
        context["stage"] = stage
    if route_key is not None:
        context["routeKey"] = route_key

    event: Dict[str, Any] = {"requestContext": context}
    if body is not None:
        event["body"] = body if isinstance(body, str) else json.dumps(body)
    return event


__all__ = [
    "InMemoryMembershipStore",
    "ScriptedChannel",
    "ScriptedChannelFactory",
    "make_event",
]
