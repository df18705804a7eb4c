"""DynamoDB-backed membership store for open connection ids."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, List, Protocol, runtime_checkable

from botocore.exceptions import BotoCoreError, ClientError

from config.aws import CONNECTION_ID_FIELD, CONNECTION_TABLE_NAME
from core.exceptions import ConfigurationError, StoreError

from .clients import get_dynamodb_client

logger = logging.getLogger(__name__)


@runtime_checkable
class MembershipStore(Protocol):
    """Keyed store holding one item per connection id."""

    async def put(self, connection_id: str) -> None: ...

    async def delete(self, connection_id: str) -> None: ...

    async def scan_all(self) -> List[str]: ...


class DynamoDbMembershipStore:
    """Persist connection ids in a DynamoDB table keyed on ``connectionId``.

    The table is a plain set: no sort key, no secondary indexes and no
    conditional writes. ``put`` overwrites and ``delete`` of a missing key is
    a no-op on the DynamoDB side.
    """

    def __init__(
        self,
        *,
        table_name: str | None = None,
        dynamodb_client: Any | None = None,
    ) -> None:
        resolved_table = table_name or os.getenv("TABLE_NAME") or CONNECTION_TABLE_NAME
        if not resolved_table:
            raise ConfigurationError("TABLE_NAME must be configured", key="TABLE_NAME")

        self._table_name = resolved_table
        self._client = dynamodb_client or get_dynamodb_client()

    @property
    def table_name(self) -> str:
        return self._table_name

    def _key(self, connection_id: str) -> dict[str, dict[str, str]]:
        return {CONNECTION_ID_FIELD: {"S": connection_id}}

    async def put(self, connection_id: str) -> None:
        """Upsert the item for ``connection_id``."""

        try:
            await asyncio.to_thread(
                self._client.put_item,
                TableName=self._table_name,
                Item=self._key(connection_id),
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception(
                "Failed to store connection %s in %s", connection_id, self._table_name
            )
            raise StoreError(f"Failed to store connection {connection_id}", operation="put") from exc

    async def delete(self, connection_id: str) -> None:
        """Delete the item for ``connection_id`` if present."""

        try:
            await asyncio.to_thread(
                self._client.delete_item,
                TableName=self._table_name,
                Key=self._key(connection_id),
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception(
                "Failed to delete connection %s from %s", connection_id, self._table_name
            )
            raise StoreError(
                f"Failed to delete connection {connection_id}", operation="delete"
            ) from exc

    async def scan_all(self) -> List[str]:
        """Return every stored connection id, following scan pagination."""

        params: dict[str, Any] = {
            "TableName": self._table_name,
            "ProjectionExpression": CONNECTION_ID_FIELD,
        }
        connection_ids: List[str] = []
        pages = 0
        while True:
            try:
                response = await asyncio.to_thread(self._client.scan, **params)
            except (BotoCoreError, ClientError) as exc:
                logger.exception("Failed to scan connections from %s", self._table_name)
                raise StoreError("Failed to list connections", operation="scan") from exc

            pages += 1
            for item in response.get("Items", []):
                attribute = item.get(CONNECTION_ID_FIELD) or {}
                value = attribute.get("S")
                if value:
                    connection_ids.append(value)
                else:
                    logger.warning("Skipping membership item without %s: %s", CONNECTION_ID_FIELD, item)

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            params["ExclusiveStartKey"] = last_key

        logger.debug(
            "Scanned %d connection(s) from %s in %d page(s)",
            len(connection_ids),
            self._table_name,
            pages,
        )
        return connection_ids


__all__ = ["DynamoDbMembershipStore", "MembershipStore"]
