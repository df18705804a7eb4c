"""Stateless entry points for the relay routes.

Each handler validates the inbound gateway event, performs exactly one
registry or dispatcher call and maps the outcome to a :class:`ProxyResponse`.
Nothing escapes a handler: validation failures become 400, store and
unexpected failures become 500.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Awaitable, Callable, Mapping

from pydantic import ValidationError as PydanticValidationError

from core.connections import DeliveryReport, DestinationEndpoint
from core.exceptions import ValidationError

from .dispatcher import BroadcastDispatcher
from .registry import ConnectionRegistry
from .schemas import GatewayEvent, ProxyResponse

logger = logging.getLogger(__name__)

DATA_FIELD = "data"
PONG_PAYLOAD = b'{"message": "pong"}'

EventInput = GatewayEvent | Mapping[str, Any]


def describe_recipients(count: int) -> str:
    """Return ``"1 connection"`` or ``"<n> connections"``."""

    return f"{count} connection" + ("" if count == 1 else "s")


def parse_event(event: EventInput) -> GatewayEvent:
    """Coerce a raw proxy event into :class:`GatewayEvent`."""

    if isinstance(event, GatewayEvent):
        return event
    try:
        return GatewayEvent.model_validate(event)
    except PydanticValidationError as exc:
        raise ValidationError("Malformed gateway event", field="requestContext") from exc


def require_endpoint(event: GatewayEvent) -> DestinationEndpoint:
    endpoint = event.endpoint()
    if endpoint is None:
        raise ValidationError(
            "Request context is missing domainName or stage", field="requestContext"
        )
    return endpoint


def extract_data_payload(event: GatewayEvent) -> bytes:
    """Return the JSON text of the message's ``data`` field as UTF-8 bytes.

    The body looks like ``{"action": "sendmessage", "data": ...}``; ``data``
    may be any JSON value and is forwarded as JSON text.
    """

    raw = event.body
    if raw is None or not raw.strip():
        raise ValidationError("Message body is empty", field="body")
    if event.is_base64_encoded:
        try:
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValidationError("Message body is not valid base64 UTF-8", field="body") from exc

    try:
        message = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError("Message body is not valid JSON", field="body") from exc

    if not isinstance(message, dict) or DATA_FIELD not in message:
        raise ValidationError("Failed to find data element in JSON document", field=DATA_FIELD)

    return json.dumps(message[DATA_FIELD], ensure_ascii=False, separators=(",", ":")).encode(
        "utf-8"
    )


class RelayHandlers:
    """Connect, disconnect, message and heartbeat operations."""

    def __init__(self, registry: ConnectionRegistry, dispatcher: BroadcastDispatcher) -> None:
        self._registry = registry
        self._dispatcher = dispatcher

    async def on_connect(self, event: EventInput) -> ProxyResponse:
        async def operation() -> ProxyResponse:
            request = parse_event(event)
            logger.info("ConnectionId: %s", request.connection_id)
            await self._registry.add(request.connection_id)
            return ProxyResponse(status_code=200, body="Connected.")

        return await self._guard("connect", operation)

    async def on_disconnect(self, event: EventInput) -> ProxyResponse:
        async def operation() -> ProxyResponse:
            request = parse_event(event)
            logger.info("ConnectionId: %s", request.connection_id)
            await self._registry.remove(request.connection_id)
            return ProxyResponse(status_code=200, body="Disconnected.")

        return await self._guard("disconnect", operation)

    async def on_message(self, event: EventInput) -> ProxyResponse:
        async def operation() -> ProxyResponse:
            request = parse_event(event)
            endpoint = require_endpoint(request)
            logger.info("API Gateway management endpoint: %s", endpoint)
            payload = extract_data_payload(request)
            logger.debug("Received data: %s", payload.decode("utf-8"))

            report = await self._dispatcher.broadcast(payload, endpoint)
            if report.errors or report.degraded:
                logger.warning("Broadcast completed with failures: %s", report.as_dict())
            return ProxyResponse(
                status_code=200,
                body=f"Data sent to {describe_recipients(report.delivered)}",
            )

        return await self._guard("send message", operation)

    async def on_ping(self, event: EventInput) -> ProxyResponse:
        async def operation() -> ProxyResponse:
            request = parse_event(event)
            endpoint = require_endpoint(request)
            connection_id = request.connection_id
            logger.info("Ping from ConnectionId: %s via %s", connection_id, endpoint)

            report = await self._dispatcher.send_to(connection_id, PONG_PAYLOAD, endpoint)
            return ProxyResponse(status_code=200, body=_describe_pong(connection_id, report))

        return await self._guard("ping", operation, failure_verb="send message")

    async def _guard(
        self,
        verb: str,
        operation: Callable[[], Awaitable[ProxyResponse]],
        *,
        failure_verb: str | None = None,
    ) -> ProxyResponse:
        """Run ``operation``; ``verb`` names it in logs, ``failure_verb`` in 500 bodies."""

        try:
            return await operation()
        except ValidationError as exc:
            logger.info("Rejected %s request: %s", verb, exc.message)
            return ProxyResponse(status_code=400, body=exc.message)
        except Exception as exc:
            logger.exception("Error handling %s: %s", verb, exc)
            return ProxyResponse(status_code=500, body=f"Failed to {failure_verb or verb}: {exc}")


def _describe_pong(connection_id: str, report: DeliveryReport) -> str:
    if report.delivered:
        return f"Pong sent to connection id {connection_id}"
    if report.pruned:
        return f"Connection id {connection_id} is gone and was removed"
    if report.prune_failures:
        return f"Connection id {connection_id} is gone but could not be removed"
    return f"Pong not delivered to connection id {connection_id}"


__all__ = [
    "DATA_FIELD",
    "PONG_PAYLOAD",
    "RelayHandlers",
    "describe_recipients",
    "extract_data_payload",
    "parse_event",
]
