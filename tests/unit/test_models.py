"""Tests for core models."""

import dataclasses

import pytest

from dyn_hotels.exceptions import ValidationError
from dyn_hotels.models import (
    AttributeDefinition,
    Hotel,
    KeyElement,
    SecondaryIndex,
    TableSpec,
    Throughput,
)


class TestHotel:
    """Tests for the Hotel value type."""

    def test_defaults(self):
        """A hotel needs only a name; id is generated and version starts at 1."""
        hotel = Hotel(name="Lakeside")
        assert hotel.id
        assert hotel.version == 1
        assert hotel.properties == {}
        assert hotel.address is None
        assert hotel.state is None
        assert hotel.zip is None

    def test_generated_ids_are_unique(self):
        ids = {Hotel(name="x").id for _ in range(100)}
        assert len(ids) == 100

    def test_is_immutable(self):
        hotel = Hotel(id="1", name="Lakeside")
        with pytest.raises(dataclasses.FrozenInstanceError):
            hotel.version = 2  # type: ignore[misc]

    def test_is_unhashable(self):
        hotel = Hotel(id="1", name="Lakeside", properties={"rooms": 10})
        with pytest.raises(TypeError, match="unhashable type: 'Hotel'"):
            hash(hotel)

    def test_with_version_returns_new_value(self):
        hotel = Hotel(id="1", name="Lakeside", state="OR")
        bumped = hotel.with_version(2)
        assert bumped.version == 2
        assert hotel.version == 1
        assert bumped == dataclasses.replace(hotel, version=2)

    @pytest.mark.parametrize("version", [0, -1, True, "1"])
    def test_rejects_invalid_version(self, version):
        with pytest.raises(ValidationError, match="version"):
            Hotel(id="1", name="Lakeside", version=version)

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError, match="name"):
            Hotel(id="1", name="")

    def test_rejects_empty_id(self):
        with pytest.raises(ValidationError, match="id"):
            Hotel(id="", name="Lakeside")

    def test_to_dict_omits_absent_optionals(self):
        hotel = Hotel(id="1", name="Lakeside", state="OR", properties={"rooms": 10})
        assert hotel.to_dict() == {
            "id": "1",
            "name": "Lakeside",
            "state": "OR",
            "version": 1,
            "properties": {"rooms": 10},
        }


class TestTableSpec:
    """Tests for TableSpec validation and rendering."""

    def _spec(self, **overrides):
        kwargs = dict(
            table_name="hotels",
            attribute_definitions=[
                AttributeDefinition("id", "S"),
                AttributeDefinition("name", "S"),
                AttributeDefinition("state", "S"),
            ],
            key_schema=[KeyElement("id", "HASH")],
            global_secondary_indexes=[
                SecondaryIndex(
                    name="by_state",
                    key_schema=[KeyElement("state", "HASH"), KeyElement("name", "RANGE")],
                )
            ],
            throughput=Throughput(5, 7),
        )
        kwargs.update(overrides)
        return TableSpec(**kwargs)

    def test_lists_are_frozen_to_tuples(self):
        spec = self._spec()
        assert isinstance(spec.attribute_definitions, tuple)
        assert isinstance(spec.key_schema, tuple)
        assert isinstance(spec.global_secondary_indexes[0].key_schema, tuple)
        assert spec.hash_key == "id"

    def test_create_table_kwargs(self):
        kwargs = self._spec().to_create_table_kwargs()
        assert kwargs["TableName"] == "hotels"
        assert kwargs["KeySchema"] == [{"AttributeName": "id", "KeyType": "HASH"}]
        assert {"AttributeName": "state", "AttributeType": "S"} in kwargs["AttributeDefinitions"]
        assert kwargs["ProvisionedThroughput"] == {
            "ReadCapacityUnits": 5,
            "WriteCapacityUnits": 7,
        }
        gsi = kwargs["GlobalSecondaryIndexes"][0]
        assert gsi["IndexName"] == "by_state"
        assert gsi["Projection"] == {"ProjectionType": "ALL"}
        # GSI without its own throughput inherits the table's
        assert gsi["ProvisionedThroughput"] == kwargs["ProvisionedThroughput"]
        assert "LocalSecondaryIndexes" not in kwargs

    def test_undeclared_key_attribute_rejected(self):
        with pytest.raises(ValidationError, match="zip"):
            self._spec(key_schema=[KeyElement("zip", "HASH")])

    def test_undeclared_index_attribute_rejected(self):
        index = SecondaryIndex(name="by_zip", key_schema=[KeyElement("zip", "HASH")])
        with pytest.raises(ValidationError, match="zip"):
            self._spec(global_secondary_indexes=[index])

    def test_key_schema_must_start_with_hash(self):
        with pytest.raises(ValidationError, match="HASH"):
            self._spec(key_schema=[KeyElement("id", "RANGE")])

    def test_key_schema_at_most_two_elements(self):
        with pytest.raises(ValidationError, match="key schema"):
            self._spec(
                key_schema=[
                    KeyElement("id", "HASH"),
                    KeyElement("name", "RANGE"),
                    KeyElement("state", "RANGE"),
                ]
            )

    def test_duplicate_index_names_rejected(self):
        index = SecondaryIndex(name="dup", key_schema=[KeyElement("state", "HASH")])
        with pytest.raises(ValidationError, match="unique"):
            self._spec(global_secondary_indexes=[index, index])

    def test_local_index_without_throughput(self):
        spec = self._spec(
            key_schema=[KeyElement("id", "HASH"), KeyElement("name", "RANGE")],
            local_secondary_indexes=[
                SecondaryIndex(
                    name="by_id_state",
                    key_schema=[KeyElement("id", "HASH"), KeyElement("state", "RANGE")],
                    projection="KEYS_ONLY",
                )
            ],
        )
        lsi = spec.to_create_table_kwargs()["LocalSecondaryIndexes"][0]
        assert lsi["Projection"] == {"ProjectionType": "KEYS_ONLY"}
        assert "ProvisionedThroughput" not in lsi

    def test_local_index_with_throughput_rejected(self):
        with pytest.raises(ValidationError, match="local secondary"):
            self._spec(
                key_schema=[KeyElement("id", "HASH"), KeyElement("name", "RANGE")],
                local_secondary_indexes=[
                    SecondaryIndex(
                        name="by_id_state",
                        key_schema=[KeyElement("id", "HASH"), KeyElement("state", "RANGE")],
                        throughput=Throughput(),
                    )
                ],
            )

    def test_include_projection_requires_attributes(self):
        with pytest.raises(ValidationError, match="INCLUDE"):
            SecondaryIndex(
                name="x", key_schema=[KeyElement("state", "HASH")], projection="INCLUDE"
            )

    def test_include_projection_renders_non_key_attributes(self):
        index = SecondaryIndex(
            name="x",
            key_schema=[KeyElement("state", "HASH")],
            projection="INCLUDE",
            non_key_attributes=["zip"],
        )
        assert index.to_dict()["Projection"] == {
            "ProjectionType": "INCLUDE",
            "NonKeyAttributes": ["zip"],
        }

    @pytest.mark.parametrize("read,write", [(0, 1), (1, 0), (-5, 5)])
    def test_throughput_must_be_positive(self, read, write):
        with pytest.raises(ValidationError):
            Throughput(read, write)

    def test_unknown_attribute_type_rejected(self):
        with pytest.raises(ValidationError, match="attribute type"):
            AttributeDefinition("id", "BOOL")

    def test_unknown_key_type_rejected(self):
        with pytest.raises(ValidationError, match="key type"):
            KeyElement("id", "SORT")
