"""DDL statement builders for CREATE/ALTER/DROP DATABASE.

Database DDL cannot take bind parameters, so identifiers are quoted with the
engine dialect's preparer and connection limits are checked to be ``UNLIMITED``
or ASCII digits before they are spliced in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from redshift_provider.errors import InvalidConnectionLimitError
from redshift_provider.models.database import UNLIMITED, is_digits

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect


@dataclass(frozen=True)
class DDLStatement:
    verb: str
    sql: str

    def __str__(self) -> str:
        return self.sql


def _quote(dialect: Dialect, identifier: str) -> str:
    return dialect.identifier_preparer.quote(identifier)


def _limit(connection_limit: str, database_name: str) -> str:
    if connection_limit != UNLIMITED and not is_digits(connection_limit):
        raise InvalidConnectionLimitError(
            f"Invalid connection limit {connection_limit!r}: expected {UNLIMITED!r} or digits",
            database_name=database_name,
        )
    return connection_limit


def create_database(
    dialect: Dialect,
    database_name: str,
    owner: str | None = None,
    connection_limit: str | None = None,
) -> DDLStatement:
    sql = f"CREATE DATABASE {_quote(dialect, database_name)}"
    if owner is not None:
        sql += f" OWNER {_quote(dialect, owner)}"
    if connection_limit is not None:
        sql += f" CONNECTION LIMIT {_limit(connection_limit, database_name)}"
    return DDLStatement("create", sql)


def rename_database(dialect: Dialect, old_name: str, new_name: str) -> DDLStatement:
    return DDLStatement(
        "rename",
        f"ALTER DATABASE {_quote(dialect, old_name)} RENAME TO {_quote(dialect, new_name)}",
    )


def alter_owner(dialect: Dialect, database_name: str, owner: str) -> DDLStatement:
    return DDLStatement(
        "owner",
        f"ALTER DATABASE {_quote(dialect, database_name)} OWNER TO {_quote(dialect, owner)}",
    )


def alter_connection_limit(
    dialect: Dialect, database_name: str, connection_limit: str
) -> DDLStatement:
    limit = _limit(connection_limit, database_name)
    return DDLStatement(
        "connection_limit",
        f"ALTER DATABASE {_quote(dialect, database_name)} CONNECTION LIMIT {limit}",
    )


def drop_database(dialect: Dialect, database_name: str) -> DDLStatement:
    return DDLStatement("drop", f"DROP DATABASE {_quote(dialect, database_name)}")
