"""Integration test fixtures for LocalStack."""

import os
import time
import uuid

import pytest

from dyn_hotels import HotelRepository, StoreConfig, TableProvisioner
from dyn_hotels.schema import hotel_table_spec


@pytest.fixture(scope="session")
def localstack_endpoint():
    """LocalStack endpoint URL from environment."""
    endpoint = os.getenv("AWS_ENDPOINT_URL")
    if not endpoint:
        pytest.skip("AWS_ENDPOINT_URL not set - LocalStack not available")
    return endpoint


@pytest.fixture
def unique_table_name():
    """Generate unique table name for test isolation."""
    timestamp = int(time.time())
    unique_id = uuid.uuid4().hex[:8]
    return f"integration-hotels-{timestamp}-{unique_id}"


@pytest.fixture
def localstack_config(localstack_endpoint, unique_table_name):
    """StoreConfig for a fresh table on LocalStack, provisioned and removed per test."""
    config = StoreConfig(
        table_name=unique_table_name,
        region=os.getenv("AWS_DEFAULT_REGION", "us-east-1"),
        endpoint_url=localstack_endpoint,
        wait_for_active=True,
    )
    provisioner = TableProvisioner(config)
    provisioner.migrate([hotel_table_spec(config)])
    yield config
    provisioner.client.delete_table(TableName=config.table_name)


@pytest.fixture
async def localstack_repo(localstack_config):
    """HotelRepository connected to LocalStack."""
    async with HotelRepository(localstack_config) as repo:
        yield repo
