"""DynamoDB repository for hotels."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import aioboto3  # type: ignore[import-untyped]
from botocore.exceptions import BotoCoreError, ClientError

from . import schema
from .config import StoreConfig
from .document import BotoDocumentCodec, DocumentCodec, Item, hotel_to_item, item_to_hotel
from .exceptions import ConflictError, ConnectivityError
from .models import Hotel

logger = logging.getLogger(__name__)


class HotelRepository:
    """
    Async DynamoDB repository for hotels.

    Every operation is a single request to DynamoDB; the store is the only
    arbiter of consistency. Concurrent writers are resolved by the version
    condition on :meth:`update`.

    Example:
        async with HotelRepository(StoreConfig.from_env()) as repo:
            hotel = await repo.save(Hotel(name="Lakeside", state="OR"))
            hotel = await repo.update(hotel)
    """

    def __init__(
        self,
        config: StoreConfig,
        codec: DocumentCodec | None = None,
        client: Any | None = None,
    ) -> None:
        self.config = config
        self.table_name = config.table_name
        self.codec: DocumentCodec = codec or BotoDocumentCodec()
        self._session: aioboto3.Session | None = None
        self._client: Any = client
        self._owns_client = client is None

    async def _get_client(self) -> Any:
        """Get or create the DynamoDB client."""
        if self._client is None:
            self._session = aioboto3.Session()
            self._client = await self._session.client(
                "dynamodb",
                region_name=self.config.region,
                endpoint_url=self.config.endpoint_url,
            ).__aenter__()
        return self._client

    async def close(self) -> None:
        """Close the DynamoDB client if this repository created it."""
        if self._client is not None and self._owns_client:
            await self._client.__aexit__(None, None, None)
            self._client = None
            self._session = None

    async def __aenter__(self) -> HotelRepository:
        await self._get_client()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _call(self, operation: str, **kwargs: Any) -> Any:
        """Issue one client operation, surfacing transport failures as ConnectivityError."""
        client = await self._get_client()
        try:
            return await getattr(client, operation)(**kwargs)
        except BotoCoreError as e:
            raise ConnectivityError(
                f"DynamoDB request failed: {e}",
                e,
                table_name=self.table_name,
                operation=operation,
            ) from e

    # -------------------------------------------------------------------------
    # Hotel operations
    # -------------------------------------------------------------------------

    async def save(self, hotel: Hotel) -> Hotel:
        """
        Write a hotel at version 1.

        Overwrites any item already stored under the same id; there is no
        existence check.

        Returns:
            The hotel as given
        """
        item = hotel_to_item(hotel.with_version(1), self.codec)
        await self._call("put_item", TableName=self.table_name, Item=item)
        logger.debug("Saved hotel %s", hotel.id)
        return hotel

    async def get(self, hotel_id: str) -> Hotel | None:
        """Get a hotel by ID, or None if it does not exist."""
        response = await self._call(
            "get_item",
            TableName=self.table_name,
            Key=schema.hotel_key(hotel_id),
            ConsistentRead=True,
        )
        item = response.get("Item")
        if not item:
            return None
        return item_to_hotel(item, self.codec)

    async def update(self, hotel: Hotel) -> Hotel:
        """
        Write a hotel with its version incremented by one.

        The write only succeeds while the stored version still equals
        ``hotel.version``.

        Returns:
            The hotel carrying the new version

        Raises:
            ConflictError: If the stored version differs or the hotel does not exist
        """
        updated = hotel.with_version(hotel.version + 1)
        await self.update_if(
            schema.hotel_key(hotel.id),
            hotel.version,
            hotel_to_item(updated, self.codec),
        )
        logger.debug("Updated hotel %s to version %d", hotel.id, updated.version)
        return updated

    async def update_if(self, key: Item, expected_version: int, item: Item) -> None:
        """
        Replace the item at ``key`` if its stored version is ``expected_version``.

        Raises:
            ConflictError: If the condition does not hold
        """
        try:
            await self._call(
                "put_item",
                TableName=self.table_name,
                Item=item,
                **schema.version_condition(expected_version),
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                hotel_id = key[schema.ID]["S"]
                logger.debug(
                    "Version check failed for hotel %s (expected %d)", hotel_id, expected_version
                )
                raise ConflictError(hotel_id, expected_version) from e
            raise

    async def delete(self, hotel_id: str) -> bool:
        """
        Delete a hotel by ID.

        Deleting a hotel that does not exist is not an error.

        Returns:
            Always True
        """
        await self._call(
            "delete_item",
            TableName=self.table_name,
            Key=schema.hotel_key(hotel_id),
        )
        logger.debug("Deleted hotel %s", hotel_id)
        return True

    async def find_by_state(self, state: str) -> AsyncIterator[Hotel]:
        """
        Yield the hotels in ``state`` ordered by name.

        Follows ``LastEvaluatedKey`` so every page of the by-state index is
        read in order.

        Raises:
            DecodeError: If a stored item is not a valid hotel
        """
        query_args: dict[str, Any] = {
            "TableName": self.table_name,
            "IndexName": self.config.by_state_index_name,
            "ScanIndexForward": True,
            **schema.by_state_condition(state),
        }

        while True:
            response = await self._call("query", **query_args)
            for item in response.get("Items", []):
                yield item_to_hotel(item, self.codec)

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            query_args["ExclusiveStartKey"] = last_key
