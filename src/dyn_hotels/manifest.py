"""YAML manifest parsing for declarative table provisioning.

Example::

    tables:
      - table_name: hotels
        attributes: {id: S, name: S, state: S}
        key_schema: {hash: id}
        throughput: {read: 10, write: 10}
        global_secondary_indexes:
          - index_name: hotels_by_state
            key_schema: {hash: state, range: name}
            projection: ALL
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import ValidationError
from .models import AttributeDefinition, KeyElement, SecondaryIndex, TableSpec, Throughput


def _mapping(value: Any, field: str, owner: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(field, value, f"must be a mapping in '{owner}'")
    return value


def _list(value: Any, field: str, owner: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValidationError(field, value, f"must be a list in '{owner}'")
    return value


def _key_schema(d: Any, owner: str) -> tuple[KeyElement, ...]:
    d = _mapping(d, "key_schema", owner)
    if "hash" not in d:
        raise ValidationError("key_schema", owner, "'hash' is required")
    elements = [KeyElement(d["hash"], "HASH")]
    if d.get("range"):
        elements.append(KeyElement(d["range"], "RANGE"))
    return tuple(elements)


def _throughput(d: Any, owner: str) -> Throughput | None:
    if d is None:
        return None
    d = _mapping(d, "throughput", owner)
    return Throughput(
        read_capacity_units=d.get("read", 10),
        write_capacity_units=d.get("write", 10),
    )


def _index(d: Any, owner: str) -> SecondaryIndex:
    d = _mapping(d, "index", owner)
    name = d.get("index_name")
    if not name:
        raise ValidationError("index_name", name, "'index_name' is required")
    return SecondaryIndex(
        name=name,
        key_schema=_key_schema(d.get("key_schema", {}), name),
        projection=d.get("projection", "ALL"),
        non_key_attributes=tuple(d.get("non_key_attributes", ())),
        throughput=_throughput(d.get("throughput"), name),
    )


def table_spec_from_dict(d: Any) -> TableSpec:
    """Build a TableSpec from one ``tables`` entry of a manifest."""
    d = _mapping(d, "table", "tables")
    table_name = d.get("table_name")
    if not table_name:
        raise ValidationError("table_name", table_name, "'table_name' is required")
    attributes = _mapping(d.get("attributes", {}), "attributes", table_name)
    gsis = _list(d.get("global_secondary_indexes", []), "global_secondary_indexes", table_name)
    lsis = _list(d.get("local_secondary_indexes", []), "local_secondary_indexes", table_name)
    return TableSpec(
        table_name=table_name,
        attribute_definitions=tuple(
            AttributeDefinition(name, attr_type) for name, attr_type in attributes.items()
        ),
        key_schema=_key_schema(d.get("key_schema", {}), table_name),
        global_secondary_indexes=tuple(_index(i, table_name) for i in gsis),
        local_secondary_indexes=tuple(_index(i, table_name) for i in lsis),
        throughput=_throughput(d.get("throughput"), table_name) or Throughput(),
    )


@dataclass(frozen=True)
class TablesManifest:
    """Parsed YAML manifest listing the tables to provision."""

    tables: tuple[TableSpec, ...]

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TablesManifest:
        tables = d.get("tables")
        if not tables:
            raise ValueError("'tables' is required in tables manifest")
        if not isinstance(tables, list):
            raise ValueError("'tables' must be a list in tables manifest")
        return cls(tables=tuple(table_spec_from_dict(t) for t in tables))

    @classmethod
    def from_yaml(cls, yaml_str: str) -> TablesManifest:
        import yaml

        try:
            data = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ValueError(f"tables manifest is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("tables manifest must be a YAML mapping")
        return cls.from_dict(data)
