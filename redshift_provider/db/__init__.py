"""Database package: engine, catalog queries and DDL builders."""

from redshift_provider.db.catalog import (
    CatalogBase,
    DatabaseInfo,
    DatabaseInfoRow,
    UserRow,
    get_database_by_id,
    get_database_id_by_name,
    get_usernames,
)
from redshift_provider.db.ddl import DDLStatement
from redshift_provider.db.engine import check_connection, create_db_engine

__all__ = [
    "CatalogBase",
    "DDLStatement",
    "DatabaseInfo",
    "DatabaseInfoRow",
    "UserRow",
    "check_connection",
    "create_db_engine",
    "get_database_by_id",
    "get_database_id_by_name",
    "get_usernames",
]
