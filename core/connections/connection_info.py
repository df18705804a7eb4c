"""Connection records and delivery endpoints for relayed connections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class ConnectionRecord:
    """One connection the relay believes to be open.

    ``connection_id`` is assigned by the gateway at connect time and is the
    primary key of the membership table. ``attributes`` is reserved for
    future routing data (e.g. user identity) and is never read by the relay.
    """

    connection_id: str
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True, slots=True)
class DestinationEndpoint:
    """Routing domain and stage that address the gateway management API."""

    domain: str
    stage: str

    @property
    def url(self) -> str:
        return f"https://{self.domain}/{self.stage}"

    def __str__(self) -> str:
        return self.url


__all__ = ["ConnectionRecord", "DestinationEndpoint"]
