"""JSON envelope for relay HTTP responses that are not proxy passthroughs."""

from __future__ import annotations

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope used by health checks and HTTP-level errors."""

    code: int = Field(..., description="HTTP status code mirrored in the body")
    success: bool = Field(..., description="True when code is below 400")
    message: str = Field(..., description="Human readable summary")
    data: Optional[T] = Field(None, description="Optional payload")


def api_response(*, code: int = 200, message: str, data: T | None = None) -> Dict[str, Any]:
    """Return a serialisable envelope with a consistent schema."""

    return ApiResponse[Any](code=code, success=code < 400, message=message, data=data).model_dump()


def ok(message: str, data: T | None = None) -> Dict[str, Any]:
    return api_response(code=200, message=message, data=data)


def error(code: int, message: str, data: Any | None = None) -> Dict[str, Any]:
    """Error envelope; ``code`` must be an error status."""

    if code < 400:
        raise ValueError("Error responses must use an error HTTP status code (>= 400)")
    return api_response(code=code, message=message, data=data)


__all__ = ["ApiResponse", "api_response", "error", "ok"]
