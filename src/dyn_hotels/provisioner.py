"""Idempotent table provisioning.

Uses boto3 (sync) directly: provisioning runs once at startup or test
setup, outside the async request path.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from .config import StoreConfig
from .exceptions import ConnectivityError, ProvisionError
from .models import TableSpec

logger = logging.getLogger(__name__)


class TableProvisioner:
    """
    Creates missing DynamoDB tables and leaves existing ones untouched.

    Safe to run repeatedly. Store errors are not retried.
    """

    def __init__(self, config: StoreConfig, client: Any | None = None) -> None:
        self.config = config
        self._client = client

    @property
    def client(self) -> Any:
        """Get or create the boto3 DynamoDB client."""
        if self._client is None:
            self._client = boto3.client(
                "dynamodb",
                region_name=self.config.region,
                endpoint_url=self.config.endpoint_url,
            )
        return self._client

    def list_table_names(self) -> set[str]:
        """
        Get the names of all tables visible to the client.

        Raises:
            ConnectivityError: If DynamoDB cannot be reached
        """
        names: set[str] = set()
        try:
            paginator = self.client.get_paginator("list_tables")
            for page in paginator.paginate():
                names.update(page.get("TableNames", []))
        except BotoCoreError as e:
            raise ConnectivityError(
                f"Cannot list tables: {e}", e, operation="ListTables"
            ) from e
        return names

    def ensure_tables(self, specs: Iterable[TableSpec]) -> Iterator[TableSpec]:
        """
        Ensure every table in ``specs`` exists, in order.

        Lazy: nothing happens until the returned iterator is consumed, and
        each spec is yielded once its table exists (or its create request
        was accepted).

        Args:
            specs: Table specifications to provision

        Yields:
            Each processed spec, in input order

        Raises:
            ConnectivityError: If DynamoDB cannot be reached
            ProvisionError: If creating a table fails
        """
        for spec in specs:
            if spec.table_name in self.list_table_names():
                logger.info("Table %s already exists, skipping", spec.table_name)
            else:
                self._create_table(spec)
            yield spec

    def migrate(self, specs: Iterable[TableSpec]) -> list[TableSpec]:
        """Provision all ``specs`` and return them once every table is processed."""
        return list(self.ensure_tables(specs))

    def _create_table(self, spec: TableSpec) -> None:
        try:
            self.client.create_table(**spec.to_create_table_kwargs())
        except ClientError as e:
            code = e.response["Error"]["Code"]
            if code == "ResourceInUseException":
                # Created concurrently since we listed tables
                logger.info("Table %s created concurrently, skipping", spec.table_name)
                return
            logger.warning("Failed to create table %s", spec.table_name, exc_info=True)
            raise ProvisionError(spec.table_name, f"{code}: {e}") from e
        except BotoCoreError as e:
            logger.warning("Failed to create table %s", spec.table_name, exc_info=True)
            raise ProvisionError(spec.table_name, str(e)) from e

        logger.info("Created table %s", spec.table_name)

        if self.config.wait_for_active:
            waiter = self.client.get_waiter("table_exists")
            try:
                waiter.wait(TableName=spec.table_name)
            except WaiterError as e:
                logger.warning("Table %s did not become active", spec.table_name, exc_info=True)
                raise ProvisionError(spec.table_name, f"table did not become active: {e}") from e
