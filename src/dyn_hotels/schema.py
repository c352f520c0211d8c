"""DynamoDB schema definitions and key builders."""

from typing import Any

from .config import StoreConfig
from .models import AttributeDefinition, KeyElement, SecondaryIndex, TableSpec, Throughput

# Top-level attribute names of a hotel item
ID = "id"
NAME = "name"
ADDRESS = "address"
STATE = "state"
ZIP = "zip"
VERSION = "version"
PROPERTIES = "properties"

OPTIONAL_FIELDS = (ADDRESS, STATE, ZIP)


def hotel_key(hotel_id: str) -> dict[str, Any]:
    """Build the primary key of a hotel item."""
    return {ID: {"S": hotel_id}}


def by_state_condition(state: str) -> dict[str, Any]:
    """Build the query arguments selecting one state on the by-state index."""
    return {
        "KeyConditionExpression": "#state = :state",
        "ExpressionAttributeNames": {"#state": STATE},
        "ExpressionAttributeValues": {":state": {"S": state}},
    }


def version_condition(expected_version: int) -> dict[str, Any]:
    """Build the put_item arguments for a compare-and-swap on the version attribute."""
    return {
        "ConditionExpression": "#version = :expected",
        "ExpressionAttributeNames": {"#version": VERSION},
        "ExpressionAttributeValues": {":expected": {"N": str(expected_version)}},
    }


def hotel_table_spec(config: StoreConfig) -> TableSpec:
    """
    Get the hotels table specification for the provisioner.

    The table is keyed by ``id``; the by-state GSI is keyed by
    ``state`` (hash) and ``name`` (range) and projects all attributes.
    """
    throughput = Throughput(
        read_capacity_units=config.read_capacity_units,
        write_capacity_units=config.write_capacity_units,
    )
    by_state = SecondaryIndex(
        name=config.by_state_index_name,
        key_schema=(KeyElement(STATE, "HASH"), KeyElement(NAME, "RANGE")),
        projection="ALL",
        throughput=throughput,
    )
    return TableSpec(
        table_name=config.table_name,
        attribute_definitions=(
            AttributeDefinition(ID, "S"),
            AttributeDefinition(NAME, "S"),
            AttributeDefinition(STATE, "S"),
        ),
        key_schema=(KeyElement(ID, "HASH"),),
        global_secondary_indexes=(by_state,),
        throughput=throughput,
    )
