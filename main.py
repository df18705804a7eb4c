"""Connection relay - HTTP application entry point.

Exposes the relay handlers behind an HTTP integration so a WebSocket gateway
can forward its proxy events to a long-running service instead of Lambda.

Entry Points:
    - /health - Health check endpoint
    - /relay/{route} - Gateway proxy events (connect, disconnect, sendmessage, ping)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from core.exceptions import ConfigurationError
from core.logging import setup_logging
from core.pydantic_schemas import error as api_error, ok as api_ok
from features.relay.routes import router as relay_router
from infrastructure.aws.clients import reset_clients

setup_logging()

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - startup and shutdown events."""
    yield
    logger.info("Application shutting down...")
    reset_clients()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Application factory returning a configured FastAPI instance."""

    app = FastAPI(
        title="Connection Relay",
        description="Broadcast relay for persistent gateway connections",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        """Return a structured API envelope for configuration errors."""

        payload = api_error(
            code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=str(exc),
            data={"key": exc.key} if getattr(exc, "key", None) else None,
        )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)

    @app.get("/health")
    async def health_check() -> dict:
        return api_ok("healthy", data={"version": APP_VERSION})

    app.include_router(relay_router)

    logger.info("Application created with relay router")
    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
