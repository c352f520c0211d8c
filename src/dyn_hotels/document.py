"""Conversion between JSON documents and DynamoDB attribute values.

The attribute-value encoding itself is done by boto3's
``TypeSerializer``/``TypeDeserializer``. This module adapts them to plain
JSON values (floats in, ints/floats out) behind the :class:`DocumentCodec`
protocol so another encoding can be substituted, and maps whole
:class:`~dyn_hotels.models.Hotel` values to and from table items.
"""

from __future__ import annotations

from decimal import Decimal, DecimalException
from typing import Any, Protocol

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from . import schema
from .exceptions import DecodeError, ValidationError
from .models import Hotel

AttributeValue = dict[str, Any]
"""A single DynamoDB attribute value, e.g. ``{"S": "OR"}`` or ``{"M": {...}}``."""

Item = dict[str, AttributeValue]
"""A table item: top-level attribute name to attribute value."""


class DocumentCodec(Protocol):
    """Protocol for JSON value <-> attribute value conversion."""

    def to_attribute_tree(self, value: Any) -> AttributeValue:
        """Encode a JSON value tree as one attribute value."""
        ...

    def from_attribute_tree(self, attribute: AttributeValue) -> Any:
        """Decode one attribute value back into a JSON value tree."""
        ...


class BotoDocumentCodec:
    """
    DocumentCodec backed by boto3's type (de)serializers.

    JSON objects become ``M``, arrays ``L``, strings ``S``, numbers ``N``,
    booleans ``BOOL`` and null ``NULL``. Numbers come back as ``int`` when
    integral and ``float`` otherwise.
    """

    def __init__(self) -> None:
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def to_attribute_tree(self, value: Any) -> AttributeValue:
        try:
            return self._serializer.serialize(_to_store_value(value))
        except TypeError as e:
            raise ValidationError("document", value, str(e)) from e
        except DecimalException as e:
            raise ValidationError(
                "document", value, f"number outside DynamoDB range ({type(e).__name__})"
            ) from e

    def from_attribute_tree(self, attribute: AttributeValue) -> Any:
        try:
            value = self._deserializer.deserialize(attribute)
        except TypeError as e:
            raise DecodeError(str(e)) from e
        except DecimalException as e:
            raise DecodeError(f"number outside DynamoDB range ({type(e).__name__})") from e
        return _to_json_value(value)


def _to_store_value(value: Any) -> Any:
    """Replace floats with Decimals and tuples with lists, recursively."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {str(k): _to_store_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_store_value(v) for v in value]
    return value


def _to_json_value(value: Any) -> Any:
    """Replace Decimals with int/float and sets with lists, recursively."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_json_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted(_to_json_value(v) for v in value)
    if isinstance(value, Binary):
        raise DecodeError("binary attributes have no JSON representation")
    return value


# ---------------------------------------------------------------------------
# Entity mapping
# ---------------------------------------------------------------------------


def hotel_to_item(hotel: Hotel, codec: DocumentCodec) -> Item:
    """
    Serialize a hotel to a flat item with ``properties`` as a nested tree.

    Absent optional fields are omitted rather than written as NULL.
    """
    attribute = codec.to_attribute_tree(hotel.to_dict())
    item: Item = attribute["M"]
    return item


def item_to_hotel(item: Item, codec: DocumentCodec) -> Hotel:
    """
    Deserialize a table item to a Hotel.

    A missing ``version`` decodes as 1 and unknown top-level attributes
    are ignored.

    Raises:
        DecodeError: If ``id`` or ``name`` is missing or any field has the wrong type
    """
    data = codec.from_attribute_tree({"M": item})
    item_id = data.get(schema.ID)
    if not isinstance(item_id, str):
        raise DecodeError(f"'{schema.ID}' must be a string, got {item_id!r}")

    name = data.get(schema.NAME)
    if not isinstance(name, str):
        raise DecodeError(f"'{schema.NAME}' must be a string, got {name!r}", item_id)

    optional: dict[str, str | None] = {}
    for key in schema.OPTIONAL_FIELDS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise DecodeError(f"'{key}' must be a string, got {value!r}", item_id)
        optional[key] = value

    version = data.get(schema.VERSION, 1)
    if isinstance(version, bool) or not isinstance(version, int):
        raise DecodeError(f"'{schema.VERSION}' must be an integer, got {version!r}", item_id)

    try:
        return Hotel(
            id=item_id,
            name=name,
            version=version,
            properties=data.get(schema.PROPERTIES, {}),
            **optional,
        )
    except ValidationError as e:
        raise DecodeError(str(e), item_id) from e
