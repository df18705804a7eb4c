"""Lambda entry points for the gateway routes.

Each function receives the raw proxy event and returns
``{"statusCode": int, "body": str}``. Handlers are built once per process
and reused by warm invocations; all membership state lives in DynamoDB.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping

from core.exceptions import ConfigurationError
from core.logging import setup_logging
from features.relay.dependencies import get_relay_handlers
from features.relay.handlers import RelayHandlers
from features.relay.schemas import ProxyResponse

setup_logging()

logger = logging.getLogger(__name__)

_Operation = Callable[[RelayHandlers, Mapping[str, Any]], Awaitable[ProxyResponse]]


def _invoke(operation: _Operation, event: Mapping[str, Any], context: Any) -> Dict[str, Any]:
    request_id = getattr(context, "aws_request_id", None)
    if request_id:
        logger.debug("Lambda request id: %s", request_id)

    try:
        handlers = get_relay_handlers()
    except ConfigurationError as exc:
        logger.error("Relay is misconfigured: %s", exc)
        return ProxyResponse(status_code=500, body=f"Relay misconfigured: {exc}").to_lambda()
    except Exception as exc:
        logger.exception("Failed to initialise relay handlers")
        return ProxyResponse(status_code=500, body=f"Relay unavailable: {exc}").to_lambda()

    response = asyncio.run(operation(handlers, event))
    return response.to_lambda()


def connect_handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    return _invoke(lambda handlers, evt: handlers.on_connect(evt), event, context)


def disconnect_handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    return _invoke(lambda handlers, evt: handlers.on_disconnect(evt), event, context)


def send_message_handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    return _invoke(lambda handlers, evt: handlers.on_message(evt), event, context)


def ping_handler(event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
    return _invoke(lambda handlers, evt: handlers.on_ping(evt), event, context)


__all__ = ["connect_handler", "disconnect_handler", "ping_handler", "send_message_handler"]
