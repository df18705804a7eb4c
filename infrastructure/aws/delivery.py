"""Push payloads back to gateway connections via the management API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Protocol, runtime_checkable

from botocore.exceptions import BotoCoreError, ClientError

from core.connections import DeliveryResult, DestinationEndpoint

from .clients import get_management_api_client

logger = logging.getLogger(__name__)

_GONE_ERROR_CODES = frozenset({"GoneException"})
_GONE_HTTP_STATUS = 410


@runtime_checkable
class DeliveryChannel(Protocol):
    """Sends bytes to a single connection id and reports a tagged outcome."""

    async def send(self, connection_id: str, payload: bytes) -> DeliveryResult: ...


DeliveryChannelFactory = Callable[[DestinationEndpoint], DeliveryChannel]


def _is_gone(exc: ClientError) -> bool:
    response = getattr(exc, "response", None) or {}
    code = (response.get("Error") or {}).get("Code")
    status = (response.get("ResponseMetadata") or {}).get("HTTPStatusCode")
    return code in _GONE_ERROR_CODES or status == _GONE_HTTP_STATUS


class ApiGatewayDeliveryChannel:
    """Delivery channel bound to one gateway management endpoint."""

    def __init__(
        self,
        endpoint: DestinationEndpoint,
        *,
        client: Any | None = None,
        timeout: float | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._client = client or get_management_api_client(endpoint.url, timeout=timeout)

    @property
    def endpoint(self) -> DestinationEndpoint:
        return self._endpoint

    async def send(self, connection_id: str, payload: bytes) -> DeliveryResult:
        """Post ``payload`` to ``connection_id``; never raises for delivery failures."""

        try:
            await asyncio.to_thread(
                self._client.post_to_connection,
                ConnectionId=connection_id,
                Data=payload,
            )
        except ClientError as exc:
            if _is_gone(exc):
                return DeliveryResult.gone(connection_id, str(exc))
            return DeliveryResult.error(connection_id, str(exc))
        except BotoCoreError as exc:
            return DeliveryResult.error(connection_id, str(exc))
        return DeliveryResult.ok(connection_id)


def build_delivery_channel(
    endpoint: DestinationEndpoint, *, timeout: float | None = None
) -> DeliveryChannel:
    """Default :data:`DeliveryChannelFactory` backed by boto3.

    Bind ``timeout`` with :func:`functools.partial` to match the dispatcher's
    per-delivery bound.
    """

    return ApiGatewayDeliveryChannel(endpoint, timeout=timeout)


__all__ = [
    "ApiGatewayDeliveryChannel",
    "DeliveryChannel",
    "DeliveryChannelFactory",
    "build_delivery_channel",
]
