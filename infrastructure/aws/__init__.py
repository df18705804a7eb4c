"""AWS infrastructure helpers (clients, membership store, delivery channels)."""

from .clients import aws_clients, get_dynamodb_client, get_management_api_client, reset_clients
from .delivery import (
    ApiGatewayDeliveryChannel,
    DeliveryChannel,
    DeliveryChannelFactory,
    build_delivery_channel,
)
from .membership_store import DynamoDbMembershipStore, MembershipStore

__all__ = [
    "aws_clients",
    "get_dynamodb_client",
    "get_management_api_client",
    "reset_clients",
    "ApiGatewayDeliveryChannel",
    "DeliveryChannel",
    "DeliveryChannelFactory",
    "build_delivery_channel",
    "DynamoDbMembershipStore",
    "MembershipStore",
]
