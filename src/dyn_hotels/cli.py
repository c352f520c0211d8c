"""Command-line interface for dyn-hotels table provisioning and lookups."""

import asyncio
import json
import sys
from pathlib import Path

import click
from botocore.exceptions import ClientError

from . import schema
from .config import StoreConfig
from .exceptions import DynHotelsError
from .manifest import TablesManifest
from .models import Hotel
from .provisioner import TableProvisioner
from .repository import HotelRepository


def _store_options(func):  # type: ignore[no-untyped-def]
    """Shared connection options."""
    func = click.option(
        "--endpoint-url",
        help=(
            "AWS endpoint URL "
            "(e.g., http://localhost:8000 for DynamoDB Local, or http://localhost:4566 "
            "for LocalStack)"
        ),
    )(func)
    func = click.option(
        "--region",
        help="AWS region (default: use boto3 defaults)",
    )(func)
    func = click.option(
        "--index-name",
        help="By-state index name (default: $DYN_HOTELS_INDEX or hotels_by_state)",
    )(func)
    func = click.option(
        "--table-name",
        help="DynamoDB table name (default: $DYN_HOTELS_TABLE or hotels)",
    )(func)
    return func


def _config(
    table_name: str | None,
    index_name: str | None,
    region: str | None,
    endpoint_url: str | None,
    **kwargs: object,
) -> StoreConfig:
    try:
        return StoreConfig.from_env(
            table_name=table_name,
            by_state_index_name=index_name,
            region=region,
            endpoint_url=endpoint_url,
            **kwargs,
        )
    except DynHotelsError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.version_option(package_name="dyn-hotels")
def cli() -> None:
    """dyn-hotels table provisioning and lookup CLI."""
    pass


@cli.command()
@_store_options
@click.option(
    "--manifest",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML manifest of tables to provision (default: the hotels table)",
)
@click.option(
    "--wait/--no-wait",
    default=False,
    help="Wait for newly created tables to become active",
)
def provision(
    table_name: str | None,
    index_name: str | None,
    region: str | None,
    endpoint_url: str | None,
    manifest: Path | None,
    wait: bool,
) -> None:
    """Create missing tables, leaving existing ones untouched."""
    config = _config(table_name, index_name, region, endpoint_url, wait_for_active=wait)

    try:
        if manifest is not None:
            specs = list(TablesManifest.from_yaml(manifest.read_text()).tables)
        else:
            specs = [schema.hotel_table_spec(config)]
    except (ValueError, OSError) as e:
        click.echo(f"✗ Invalid manifest: {e}", err=True)
        sys.exit(1)

    provisioner = TableProvisioner(config)
    try:
        existing = provisioner.list_table_names()
        for spec in provisioner.ensure_tables(specs):
            status = "exists" if spec.table_name in existing else "created"
            click.echo(f"✓ {spec.table_name} {status}")
    except (DynHotelsError, ClientError) as e:
        click.echo(f"✗ Provisioning failed: {e}", err=True)
        sys.exit(1)


@cli.command()
@_store_options
@click.argument("hotel_id")
def get(
    table_name: str | None,
    index_name: str | None,
    region: str | None,
    endpoint_url: str | None,
    hotel_id: str,
) -> None:
    """Print one hotel as JSON."""
    config = _config(table_name, index_name, region, endpoint_url)

    async def _get() -> Hotel | None:
        async with HotelRepository(config) as repo:
            return await repo.get(hotel_id)

    try:
        hotel = asyncio.run(_get())
    except (DynHotelsError, ClientError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    if hotel is None:
        click.echo(f"Hotel not found: {hotel_id}", err=True)
        sys.exit(1)
    click.echo(json.dumps(hotel.to_dict(), indent=2))


@cli.command()
@_store_options
@click.argument("hotel_id")
def delete(
    table_name: str | None,
    index_name: str | None,
    region: str | None,
    endpoint_url: str | None,
    hotel_id: str,
) -> None:
    """Delete one hotel (succeeds even if it does not exist)."""
    config = _config(table_name, index_name, region, endpoint_url)

    async def _delete() -> None:
        async with HotelRepository(config) as repo:
            await repo.delete(hotel_id)
        click.echo(f"✓ Deleted {hotel_id}")

    try:
        asyncio.run(_delete())
    except (DynHotelsError, ClientError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)


@cli.command("find-by-state")
@_store_options
@click.argument("state")
def find_by_state(
    table_name: str | None,
    index_name: str | None,
    region: str | None,
    endpoint_url: str | None,
    state: str,
) -> None:
    """Print the hotels in STATE, ordered by name, one JSON object per line."""
    config = _config(table_name, index_name, region, endpoint_url)

    async def _find() -> None:
        async with HotelRepository(config) as repo:
            async for hotel in repo.find_by_state(state):
                click.echo(json.dumps(hotel.to_dict()))

    try:
        asyncio.run(_find())
    except (DynHotelsError, ClientError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
