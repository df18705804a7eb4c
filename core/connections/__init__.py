"""Value types shared by the membership store, delivery channels and relay."""

from core.connections.connection_info import ConnectionRecord, DestinationEndpoint
from core.connections.delivery import (
    DeliveryFailure,
    DeliveryReport,
    DeliveryResult,
    DeliveryStatus,
)

__all__ = [
    "ConnectionRecord",
    "DeliveryFailure",
    "DeliveryReport",
    "DeliveryResult",
    "DeliveryStatus",
    "DestinationEndpoint",
]
