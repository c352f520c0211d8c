"""Core models for dyn-hotels."""

from dataclasses import dataclass, field, replace
from typing import Any

from ulid import ULID

from .exceptions import ValidationError

SCALAR_ATTRIBUTE_TYPES = ("S", "N", "B")
KEY_TYPES = ("HASH", "RANGE")
PROJECTION_TYPES = ("ALL", "KEYS_ONLY", "INCLUDE")


def new_hotel_id() -> str:
    """Generate a unique hotel ID using ULID (monotonic, collision-free)."""
    return str(ULID())


@dataclass(frozen=True, kw_only=True)
class Hotel:
    """
    A hotel stored as one document in the hotels table.

    Attributes:
        id: Primary hash key, generated when not supplied; never changes
        name: Display name, also the range key of the by-state index
        address: Optional street address
        state: Optional region code, the hash key of the by-state index
        zip: Optional postal code
        version: Optimistic concurrency counter, starts at 1
        properties: Schemaless JSON value (object, array or scalar)

    Hotels compare by value but are unhashable, since ``properties`` is a
    mutable JSON tree.
    """

    id: str = field(default_factory=new_hotel_id)
    name: str
    address: str | None = None
    state: str | None = None
    zip: str | None = None
    version: int = 1
    properties: Any = field(default_factory=dict)

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValidationError("id", self.id, "must be a non-empty string")
        if not isinstance(self.name, str) or not self.name:
            raise ValidationError("name", self.name, "must be a non-empty string")
        if isinstance(self.version, bool) or not isinstance(self.version, int):
            raise ValidationError("version", self.version, "must be an integer")
        if self.version < 1:
            raise ValidationError("version", self.version, "must be positive")

    def with_version(self, version: int) -> "Hotel":
        """Return a copy of this hotel carrying ``version``."""
        return replace(self, version=version)

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible view, omitting absent optional fields."""
        result: dict[str, Any] = {"id": self.id, "name": self.name}
        for key in ("address", "state", "zip"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        result["version"] = self.version
        result["properties"] = self.properties
        return result


# ---------------------------------------------------------------------------
# Table specifications
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Throughput:
    """Provisioned read/write capacity for a table or global secondary index."""

    read_capacity_units: int = 10
    write_capacity_units: int = 10

    def __post_init__(self) -> None:
        if self.read_capacity_units <= 0:
            raise ValidationError(
                "read_capacity_units", self.read_capacity_units, "must be positive"
            )
        if self.write_capacity_units <= 0:
            raise ValidationError(
                "write_capacity_units", self.write_capacity_units, "must be positive"
            )

    def to_dict(self) -> dict[str, int]:
        return {
            "ReadCapacityUnits": self.read_capacity_units,
            "WriteCapacityUnits": self.write_capacity_units,
        }


@dataclass(frozen=True)
class AttributeDefinition:
    """An attribute used in a table or index key schema."""

    name: str
    type: str = "S"

    def __post_init__(self) -> None:
        if self.type not in SCALAR_ATTRIBUTE_TYPES:
            raise ValidationError(
                "attribute type", self.type, f"must be one of {', '.join(SCALAR_ATTRIBUTE_TYPES)}"
            )

    def to_dict(self) -> dict[str, str]:
        return {"AttributeName": self.name, "AttributeType": self.type}


@dataclass(frozen=True)
class KeyElement:
    """One element of a key schema."""

    name: str
    key_type: str = "HASH"

    def __post_init__(self) -> None:
        if self.key_type not in KEY_TYPES:
            raise ValidationError("key type", self.key_type, "must be HASH or RANGE")

    def to_dict(self) -> dict[str, str]:
        return {"AttributeName": self.name, "KeyType": self.key_type}


def _validate_key_schema(owner: str, key_schema: tuple[KeyElement, ...]) -> None:
    """Exactly one HASH element first, optionally followed by one RANGE element."""
    if not key_schema or len(key_schema) > 2:
        raise ValidationError(
            "key schema", owner, "must have one HASH element and at most one RANGE element"
        )
    if key_schema[0].key_type != "HASH":
        raise ValidationError("key schema", owner, "first element must be the HASH key")
    if len(key_schema) == 2 and key_schema[1].key_type != "RANGE":
        raise ValidationError("key schema", owner, "second element must be the RANGE key")


@dataclass(frozen=True)
class SecondaryIndex:
    """
    A global or local secondary index definition.

    Local secondary indexes share the table's throughput and must leave
    ``throughput`` unset.
    """

    name: str
    key_schema: tuple[KeyElement, ...]
    projection: str = "ALL"
    non_key_attributes: tuple[str, ...] = ()
    throughput: Throughput | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "key_schema", tuple(self.key_schema))
        object.__setattr__(self, "non_key_attributes", tuple(self.non_key_attributes))
        _validate_key_schema(self.name, self.key_schema)
        if self.projection not in PROJECTION_TYPES:
            raise ValidationError(
                "projection", self.projection, f"must be one of {', '.join(PROJECTION_TYPES)}"
            )
        if self.projection == "INCLUDE" and not self.non_key_attributes:
            raise ValidationError(
                "projection", self.projection, "INCLUDE requires non_key_attributes"
            )

    def to_dict(self) -> dict[str, Any]:
        projection: dict[str, Any] = {"ProjectionType": self.projection}
        if self.projection == "INCLUDE":
            projection["NonKeyAttributes"] = list(self.non_key_attributes)
        result: dict[str, Any] = {
            "IndexName": self.name,
            "KeySchema": [k.to_dict() for k in self.key_schema],
            "Projection": projection,
        }
        if self.throughput is not None:
            result["ProvisionedThroughput"] = self.throughput.to_dict()
        return result


@dataclass(frozen=True)
class TableSpec:
    """
    Everything needed to create one DynamoDB table.

    Constructed by the caller at startup, consumed once by the provisioner.
    """

    table_name: str
    attribute_definitions: tuple[AttributeDefinition, ...]
    key_schema: tuple[KeyElement, ...]
    global_secondary_indexes: tuple[SecondaryIndex, ...] = ()
    local_secondary_indexes: tuple[SecondaryIndex, ...] = ()
    throughput: Throughput = field(default_factory=Throughput)

    def __post_init__(self) -> None:
        for name in (
            "attribute_definitions",
            "key_schema",
            "global_secondary_indexes",
            "local_secondary_indexes",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        _validate_key_schema(self.table_name, self.key_schema)

        declared = {a.name for a in self.attribute_definitions}
        indexes = self.global_secondary_indexes + self.local_secondary_indexes
        for element in self.key_schema + tuple(k for i in indexes for k in i.key_schema):
            if element.name not in declared:
                raise ValidationError(
                    "key attribute",
                    element.name,
                    f"not declared in attribute definitions of {self.table_name}",
                )

        index_names = [i.name for i in indexes]
        if len(index_names) != len(set(index_names)):
            raise ValidationError("index names", index_names, "must be unique within a table")

        for index in self.local_secondary_indexes:
            if index.throughput is not None:
                raise ValidationError(
                    "throughput", index.name, "local secondary indexes use the table throughput"
                )
            if index.key_schema[0].name != self.key_schema[0].name:
                raise ValidationError(
                    "key schema", index.name, "local secondary index must share the table HASH key"
                )

    @property
    def hash_key(self) -> str:
        """Name of the primary hash key attribute."""
        return self.key_schema[0].name

    def to_create_table_kwargs(self) -> dict[str, Any]:
        """
        Render the request for boto3 create_table().

        Global secondary indexes without their own throughput inherit the
        table's provisioned capacity.
        """
        kwargs: dict[str, Any] = {
            "TableName": self.table_name,
            "AttributeDefinitions": [a.to_dict() for a in self.attribute_definitions],
            "KeySchema": [k.to_dict() for k in self.key_schema],
            "ProvisionedThroughput": self.throughput.to_dict(),
        }
        if self.global_secondary_indexes:
            gsis = []
            for index in self.global_secondary_indexes:
                gsi = index.to_dict()
                gsi.setdefault("ProvisionedThroughput", self.throughput.to_dict())
                gsis.append(gsi)
            kwargs["GlobalSecondaryIndexes"] = gsis
        if self.local_secondary_indexes:
            kwargs["LocalSecondaryIndexes"] = [i.to_dict() for i in self.local_secondary_indexes]
        return kwargs
