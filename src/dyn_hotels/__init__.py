"""
dyn-hotels: Async hotel repository backed by DynamoDB.

This library provides:
- Mapping of a typed Hotel to a schemaless JSON document
- Optimistic-concurrency versioned updates
- Idempotent table provisioning

Example:
    from dyn_hotels import Hotel, HotelRepository, StoreConfig, TableProvisioner
    from dyn_hotels.schema import hotel_table_spec

    config = StoreConfig.from_env(region="us-east-1")
    TableProvisioner(config).migrate([hotel_table_spec(config)])

    async with HotelRepository(config) as repo:
        hotel = await repo.save(Hotel(name="Lakeside", state="OR"))
        hotel = await repo.update(hotel)
        async for found in repo.find_by_state("OR"):
            print(found.name, found.version)
"""

from .config import StoreConfig
from .document import BotoDocumentCodec, DocumentCodec, hotel_to_item, item_to_hotel
from .exceptions import (
    ConflictError,
    ConnectivityError,
    DecodeError,
    DynHotelsError,
    ProvisionError,
    StoreError,
    ValidationError,
)
from .manifest import TablesManifest
from .models import (
    AttributeDefinition,
    Hotel,
    KeyElement,
    SecondaryIndex,
    TableSpec,
    Throughput,
)
from .provisioner import TableProvisioner
from .repository import HotelRepository

__all__ = [
    # Config
    "StoreConfig",
    # Models
    "Hotel",
    "TableSpec",
    "AttributeDefinition",
    "KeyElement",
    "SecondaryIndex",
    "Throughput",
    "TablesManifest",
    # Codec
    "DocumentCodec",
    "BotoDocumentCodec",
    "hotel_to_item",
    "item_to_hotel",
    # Repository / provisioning
    "HotelRepository",
    "TableProvisioner",
    # Exceptions
    "DynHotelsError",
    "StoreError",
    "ConnectivityError",
    "ConflictError",
    "DecodeError",
    "ProvisionError",
    "ValidationError",
]
