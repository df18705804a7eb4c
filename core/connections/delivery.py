"""Tagged delivery outcomes and the per-broadcast report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List


class DeliveryStatus(StrEnum):
    """Outcome of pushing one payload to one connection."""

    OK = "ok"
    GONE = "gone"  # Remote end permanently closed; prune the record
    ERROR = "error"  # Any other failure; keep the record


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    """Result returned by a delivery channel instead of raising."""

    connection_id: str
    status: DeliveryStatus
    detail: str | None = None

    @classmethod
    def ok(cls, connection_id: str) -> "DeliveryResult":
        return cls(connection_id, DeliveryStatus.OK)

    @classmethod
    def gone(cls, connection_id: str, detail: str | None = None) -> "DeliveryResult":
        return cls(connection_id, DeliveryStatus.GONE, detail)

    @classmethod
    def error(cls, connection_id: str, detail: str) -> "DeliveryResult":
        return cls(connection_id, DeliveryStatus.ERROR, detail)


@dataclass(frozen=True, slots=True)
class DeliveryFailure:
    """A non-fatal failure recorded against a single connection id."""

    connection_id: str
    detail: str


@dataclass(slots=True)
class DeliveryReport:
    """Aggregate outcome of one broadcast.

    ``errors`` holds transient delivery failures (records kept).
    ``prune_failures`` holds connections reported gone whose removal from the
    membership store failed; they will be retried on the next broadcast.
    """

    candidates: int = 0
    delivered: int = 0
    pruned: int = 0
    errors: List[DeliveryFailure] = field(default_factory=list)
    prune_failures: List[DeliveryFailure] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.prune_failures)

    def as_dict(self) -> dict[str, object]:
        return {
            "candidates": self.candidates,
            "delivered": self.delivered,
            "pruned": self.pruned,
            "errors": [{"connection_id": f.connection_id, "detail": f.detail} for f in self.errors],
            "prune_failures": [
                {"connection_id": f.connection_id, "detail": f.detail} for f in self.prune_failures
            ],
        }


__all__ = ["DeliveryFailure", "DeliveryReport", "DeliveryResult", "DeliveryStatus"]
