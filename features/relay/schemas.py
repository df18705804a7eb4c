"""Pydantic models for gateway proxy events and responses."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.connections import DestinationEndpoint


class RequestContext(BaseModel):
    """Routing context attached to every gateway event."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    connection_id: str = Field(..., alias="connectionId", min_length=1)
    domain_name: Optional[str] = Field(None, alias="domainName")
    stage: Optional[str] = Field(None, alias="stage")
    route_key: Optional[str] = Field(None, alias="routeKey")


class GatewayEvent(BaseModel):
    """Proxy event delivered by the gateway for connect, disconnect and message routes."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_context: RequestContext = Field(..., alias="requestContext")
    body: Optional[str] = Field(None, description="Raw message frame for message routes")
    is_base64_encoded: bool = Field(False, alias="isBase64Encoded")

    @property
    def connection_id(self) -> str:
        return self.request_context.connection_id

    def endpoint(self) -> DestinationEndpoint | None:
        """Management endpoint for replies, or ``None`` when routing info is missing."""

        context = self.request_context
        if not context.domain_name or not context.stage:
            return None
        return DestinationEndpoint(domain=context.domain_name, stage=context.stage)


class ProxyResponse(BaseModel):
    """Status code and textual body returned to the gateway."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(..., alias="statusCode")
    body: str = ""

    def to_lambda(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = ["GatewayEvent", "ProxyResponse", "RequestContext"]
