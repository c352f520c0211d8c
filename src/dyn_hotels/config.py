"""Store configuration.

Table and index names are passed explicitly to the provisioner and the
repository through :class:`StoreConfig`. Names must satisfy the DynamoDB
naming rules:
- Between 3 and 255 characters
- Alphanumeric characters, underscore, hyphen and period only
"""

import os
import re
from dataclasses import dataclass

from .exceptions import ValidationError

DEFAULT_TABLE_NAME = "hotels"
"""Default table name used by ``StoreConfig.from_env()``."""

DEFAULT_BY_STATE_INDEX_NAME = "hotels_by_state"
"""Default name of the global secondary index keyed by state and name."""

TABLE_ENV_VAR = "DYN_HOTELS_TABLE"
"""Environment variable for overriding the default table name."""

INDEX_ENV_VAR = "DYN_HOTELS_INDEX"
"""Environment variable for overriding the default by-state index name."""

ENDPOINT_ENV_VAR = "DYN_HOTELS_ENDPOINT_URL"
"""Environment variable for pointing at DynamoDB Local or LocalStack."""

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,255}$")


def validate_name(kind: str, name: str) -> None:
    """
    Validate a DynamoDB table or index name.

    Args:
        kind: What the name identifies (used in the error message)
        name: The user-provided identifier

    Raises:
        ValidationError: If the name is invalid
    """
    if not name:
        raise ValidationError(kind, name, "Name cannot be empty")
    if " " in name:
        raise ValidationError(
            kind, name, "Contains spaces. Use hyphens or underscores instead."
        )
    if not NAME_PATTERN.match(name):
        raise ValidationError(
            kind,
            name,
            "Must be 3-255 characters of letters, digits, '_', '-' or '.'.",
        )


@dataclass(frozen=True)
class StoreConfig:
    """
    Connection and naming settings shared by the provisioner and repository.

    Attributes:
        table_name: Name of the hotels table
        by_state_index_name: Name of the GSI keyed by (state, name)
        region: AWS region (default: use boto3 defaults)
        endpoint_url: Custom endpoint (DynamoDB Local, LocalStack)
        read_capacity_units: Provisioned reads for the table and its index
        write_capacity_units: Provisioned writes for the table and its index
        wait_for_active: Block until newly created tables are ACTIVE
    """

    table_name: str = DEFAULT_TABLE_NAME
    by_state_index_name: str = DEFAULT_BY_STATE_INDEX_NAME
    region: str | None = None
    endpoint_url: str | None = None
    read_capacity_units: int = 10
    write_capacity_units: int = 10
    wait_for_active: bool = False

    def __post_init__(self) -> None:
        validate_name("table_name", self.table_name)
        validate_name("by_state_index_name", self.by_state_index_name)
        if self.read_capacity_units <= 0:
            raise ValidationError(
                "read_capacity_units", self.read_capacity_units, "must be positive"
            )
        if self.write_capacity_units <= 0:
            raise ValidationError(
                "write_capacity_units", self.write_capacity_units, "must be positive"
            )

    @classmethod
    def from_env(
        cls,
        table_name: str | None = None,
        by_state_index_name: str | None = None,
        region: str | None = None,
        endpoint_url: str | None = None,
        **kwargs: object,
    ) -> "StoreConfig":
        """Resolve settings from explicit args, environment variables, then defaults.

        Resolution order per field: argument → environment variable → default.
        The region falls back to ``AWS_REGION`` then ``AWS_DEFAULT_REGION``.
        """
        return cls(
            table_name=table_name or os.environ.get(TABLE_ENV_VAR) or DEFAULT_TABLE_NAME,
            by_state_index_name=(
                by_state_index_name
                or os.environ.get(INDEX_ENV_VAR)
                or DEFAULT_BY_STATE_INDEX_NAME
            ),
            region=region or os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION"),
            endpoint_url=endpoint_url or os.environ.get(ENDPOINT_ENV_VAR),
            **kwargs,  # type: ignore[arg-type]
        )
