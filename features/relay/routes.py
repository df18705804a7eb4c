"""HTTP integration endpoints that forward gateway proxy events to the relay."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse, PlainTextResponse

from core.pydantic_schemas import error as api_error

from .dependencies import get_relay_handlers
from .handlers import RelayHandlers
from .schemas import ProxyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/relay", tags=["Relay"])

_ROUTES: Dict[str, Callable[[RelayHandlers], Callable[[Any], Awaitable[ProxyResponse]]]] = {
    "connect": lambda handlers: handlers.on_connect,
    "$connect": lambda handlers: handlers.on_connect,
    "disconnect": lambda handlers: handlers.on_disconnect,
    "$disconnect": lambda handlers: handlers.on_disconnect,
    "sendmessage": lambda handlers: handlers.on_message,
    "ping": lambda handlers: handlers.on_ping,
}


@router.post(
    "/{route}",
    summary="Handle one gateway proxy event for the given route",
    response_class=PlainTextResponse,
)
async def handle_gateway_event(
    route: str,
    event: Dict[str, Any] = Body(..., description="Gateway proxy event"),
    handlers: RelayHandlers = Depends(get_relay_handlers),
):
    """Run the relay handler for ``route`` and mirror its status and body."""

    resolver = _ROUTES.get(route.lower())
    if resolver is None:
        logger.info("Rejected event for unknown route %s", route)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=api_error(404, f"Unknown route: {route}", data={"route": route}),
        )

    response = await resolver(handlers)(event)
    return PlainTextResponse(content=response.body, status_code=response.status_code)


__all__ = ["router"]
