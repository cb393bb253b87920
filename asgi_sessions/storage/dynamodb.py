"""DynamoDB session storage for multi-process deployments."""

from __future__ import annotations

import json
import logging
from typing import Any

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from .base import generate_session_id

logger = logging.getLogger(__name__)


class DynamoDBStorage:
    """Session storage using AWS DynamoDB.

    Table schema:
        Partition key: session_id (S)
        Attributes: data (S, JSON-encoded)

    Session data must be JSON serialisable. Read failures and malformed items
    are treated as a missing session; write and delete failures propagate to the caller.
    """

    def __init__(
        self,
        table_name: str = "sessions",
        endpoint_url: str = "",
        region_name: str = "us-west-2",
    ) -> None:
        self._table_name = table_name
        self._session = aioboto3.Session()
        self._endpoint_url = endpoint_url or None
        self._region_name = region_name

    def _resource(self):
        return self._session.resource(
            "dynamodb",
            endpoint_url=self._endpoint_url,
            region_name=self._region_name,
        )

    async def resolve(self, key: str | None) -> tuple[str, dict[str, Any]]:
        if key is None:
            return generate_session_id(), {}

        try:
            async with self._resource() as dynamodb:
                table = await dynamodb.Table(self._table_name)
                response = await table.get_item(Key={"session_id": key})
        except (BotoCoreError, ClientError) as e:
            logger.warning("DynamoDB: session read failed, starting fresh: %s", e)
            return generate_session_id(), {}

        item = response.get("Item")
        if item is None:
            return generate_session_id(), {}

        try:
            data = json.loads(item["data"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("DynamoDB: malformed session item, starting fresh: %s", e)
            return generate_session_id(), {}
        if not isinstance(data, dict):
            logger.warning("DynamoDB: session item is not a mapping, starting fresh")
            return generate_session_id(), {}
        return key, data

    async def write(self, key: str, data: dict[str, Any]) -> str:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self._table_name)
            await table.put_item(
                Item={
                    "session_id": key,
                    "data": json.dumps(data),
                }
            )
        return key

    async def delete(self, key: str) -> str:
        async with self._resource() as dynamodb:
            table = await dynamodb.Table(self._table_name)
            await table.delete_item(Key={"session_id": key})
        return key
