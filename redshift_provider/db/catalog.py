"""Read-only queries against the cluster's system catalog.

The mapped classes describe only the catalog columns this provider reads.
They are never written to by the provider itself.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, NamedTuple

from sqlalchemy import Integer, Text, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

if TYPE_CHECKING:
    from sqlalchemy import Connection


class CatalogBase(DeclarativeBase):
    pass


class DatabaseInfoRow(CatalogBase):
    __tablename__ = "pg_database_info"

    datid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    datname: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    datdba: Mapped[int] = mapped_column(Integer, nullable=False)
    datconnlimit: Mapped[str | None] = mapped_column(Text, nullable=True)


class UserRow(CatalogBase):
    __tablename__ = "pg_user"

    usesysid: Mapped[int] = mapped_column(Integer, primary_key=True)
    usename: Mapped[str] = mapped_column(Text, nullable=False, unique=True)


class DatabaseInfo(NamedTuple):
    datid: int
    datname: str
    datdba: int
    datconnlimit: str | None


def get_database_by_id(conn: Connection, database_id: int) -> DatabaseInfo | None:
    stmt = select(
        DatabaseInfoRow.datid,
        DatabaseInfoRow.datname,
        DatabaseInfoRow.datdba,
        DatabaseInfoRow.datconnlimit,
    ).where(DatabaseInfoRow.datid == database_id)
    row = conn.execute(stmt).first()
    if row is None:
        return None
    return DatabaseInfo(*row)


def get_database_id_by_name(conn: Connection, database_name: str) -> int | None:
    stmt = select(DatabaseInfoRow.datid).where(DatabaseInfoRow.datname == database_name)
    return conn.execute(stmt).scalar_one_or_none()


def get_usernames(conn: Connection, user_ids: Sequence[int]) -> dict[int, str]:
    """Map each known usesysid in *user_ids* to its usename."""
    if not user_ids:
        return {}
    stmt = select(UserRow.usesysid, UserRow.usename).where(
        UserRow.usesysid.in_(sorted(set(user_ids)))
    )
    return {usesysid: usename for usesysid, usename in conn.execute(stmt)}
