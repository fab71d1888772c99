"""Click CLI entry point for driving the database resource from a shell."""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import click

from redshift_provider.config import Settings
from redshift_provider.errors import DatabaseResourceError
from redshift_provider.logging import configure_logging
from redshift_provider.models.database import DATABASE_SCHEMA, DatabaseResource
from redshift_provider.resource import DatabaseResourceAdapter

if TYPE_CHECKING:
    from collections.abc import Iterator


def _get_adapter(settings: Settings) -> DatabaseResourceAdapter:
    return DatabaseResourceAdapter.from_settings(settings)


@contextmanager
def _adapter(ctx: click.Context) -> Iterator[DatabaseResourceAdapter]:
    """Yield an adapter, turning provider errors into a non-zero exit."""
    adapter = _get_adapter(ctx.obj["settings"])
    try:
        yield adapter
    except DatabaseResourceError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    finally:
        adapter.close()


def _echo_state(resource: DatabaseResource) -> None:
    click.echo(json.dumps(resource.to_state(), indent=2))


def _validated(values: dict[str, Any]) -> DatabaseResource:
    try:
        return DatabaseResource.model_validate(values)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy URL of the cluster (overrides REDSHIFT_DATABASE_URL)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, database_url: str | None) -> None:
    """Manage a database inside a Redshift cluster."""
    ctx.ensure_object(dict)
    settings = Settings() if database_url is None else Settings(database_url=database_url)
    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=log_level, log_format=settings.log_format)
    ctx.obj["settings"] = settings


@cli.command()
def schema() -> None:
    """Print the resource attribute schema."""
    click.echo(json.dumps(DATABASE_SCHEMA, indent=2))


@cli.command()
@click.argument("database_id")
@click.pass_context
def exists(ctx: click.Context, database_id: str) -> None:
    """Print whether a database with DATABASE_ID exists."""
    with _adapter(ctx) as adapter:
        click.echo("true" if adapter.exists(database_id) else "false")


@cli.command()
@click.argument("database_name")
@click.option("--owner", type=int, required=True, help="usesysid of the owning user")
@click.option("--connection-limit", default="UNLIMITED", show_default=True)
@click.pass_context
def create(ctx: click.Context, database_name: str, owner: int, connection_limit: str) -> None:
    """Create a database and print its observed state."""
    desired = _validated(
        {"database_name": database_name, "owner": owner, "connection_limit": connection_limit}
    )
    with _adapter(ctx) as adapter:
        _echo_state(adapter.create(desired))


@cli.command()
@click.argument("database_id")
@click.pass_context
def read(ctx: click.Context, database_id: str) -> None:
    """Print the observed state of DATABASE_ID."""
    with _adapter(ctx) as adapter:
        _echo_state(adapter.read(database_id))


@cli.command("import")
@click.argument("database_id")
@click.pass_context
def import_(ctx: click.Context, database_id: str) -> None:
    """Adopt an existing database by id and print its state."""
    with _adapter(ctx) as adapter:
        _echo_state(adapter.import_resource(database_id))


@cli.command()
@click.argument("database_id")
@click.option("--name", "database_name", default=None, help="Rename the database")
@click.option("--owner", type=int, default=None, help="Reassign ownership")
@click.option("--connection-limit", default=None, help="New connection limit")
@click.option(
    "--clear-connection-limit",
    is_flag=True,
    help="Remove the connection limit (resets to UNLIMITED)",
)
@click.pass_context
def update(
    ctx: click.Context,
    database_id: str,
    database_name: str | None,
    owner: int | None,
    connection_limit: str | None,
    clear_connection_limit: bool,
) -> None:
    """Change the name, owner or connection limit of DATABASE_ID."""
    if connection_limit is not None and clear_connection_limit:
        raise click.UsageError("--connection-limit and --clear-connection-limit are exclusive")

    with _adapter(ctx) as adapter:
        current = adapter.read(database_id)
        changes: dict[str, Any] = {}
        if database_name is not None:
            changes["database_name"] = database_name
        if owner is not None:
            changes["owner"] = owner
        if connection_limit is not None:
            changes["connection_limit"] = connection_limit
        if clear_connection_limit:
            changes["connection_limit"] = None
        desired = _validated({**current.to_state(), **changes})
        _echo_state(adapter.update(current, desired))


@cli.command()
@click.argument("database_id")
@click.pass_context
def delete(ctx: click.Context, database_id: str) -> None:
    """Drop the database with DATABASE_ID."""
    with _adapter(ctx) as adapter:
        current = adapter.read(database_id)
        adapter.delete(current)
        click.echo(f"Dropped database {current.database_name} (id {database_id})")
