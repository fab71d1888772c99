"""Shared test fixtures.

Tests run against a file-backed SQLite database holding emulated
``pg_database_info`` and ``pg_user`` catalog tables. A cursor hook rewrites
the database DDL verbs into the equivalent catalog DML, so commits and
rollbacks behave as they do on the cluster.
"""

from __future__ import annotations

import logging
import re

import pytest
import structlog
from sqlalchemy import event, insert

from redshift_provider.config import Settings
from redshift_provider.db import CatalogBase, UserRow, create_db_engine
from redshift_provider.models.database import DatabaseResource
from redshift_provider.resource import DatabaseResourceAdapter

ADMIN_ID = 100
USERS = {
    ADMIN_ID: "admin",
    104: "analyst",
    210: "etl_service",
    305: "reporting",
}
CLUSTER_CONNECTION_CEILING = 500

_IDENT = r'"?([^"\s]+)"?'

# Emulates the cluster refusing connection limits above its ceiling.
_CEILING_TRIGGERS = [
    f"""
    CREATE TRIGGER connlimit_ceiling_{event_name} BEFORE {event_name} ON pg_database_info
    WHEN NEW.datconnlimit <> 'UNLIMITED'
        AND CAST(NEW.datconnlimit AS INTEGER) > {CLUSTER_CONNECTION_CEILING}
    BEGIN
        SELECT RAISE(ABORT, 'connection limit exceeds cluster maximum');
    END
    """
    for event_name in ("INSERT", "UPDATE")
]


def _create(name, owner, limit):
    return (
        "INSERT INTO pg_database_info (datname, datdba, datconnlimit) "
        "VALUES (?, COALESCE((SELECT usesysid FROM pg_user WHERE usename = ?), ?), ?)",
        (name, owner, ADMIN_ID, limit or "UNLIMITED"),
    )


def _rename(old, new):
    return "UPDATE pg_database_info SET datname = ? WHERE datname = ?", (new, old)


def _owner(name, owner):
    return (
        "UPDATE pg_database_info "
        "SET datdba = (SELECT usesysid FROM pg_user WHERE usename = ?) WHERE datname = ?",
        (owner, name),
    )


def _connection_limit(name, limit):
    return "UPDATE pg_database_info SET datconnlimit = ? WHERE datname = ?", (limit, name)


def _drop(name):
    return "DELETE FROM pg_database_info WHERE datname = ?", (name,)


_DDL_REWRITES = [
    (
        re.compile(rf"^CREATE DATABASE {_IDENT}(?: OWNER {_IDENT})?(?: CONNECTION LIMIT (\w+))?$"),
        _create,
    ),
    (re.compile(rf"^ALTER DATABASE {_IDENT} RENAME TO {_IDENT}$"), _rename),
    (re.compile(rf"^ALTER DATABASE {_IDENT} OWNER TO {_IDENT}$"), _owner),
    (re.compile(rf"^ALTER DATABASE {_IDENT} CONNECTION LIMIT (\w+)$"), _connection_limit),
    (re.compile(rf"^DROP DATABASE {_IDENT}$"), _drop),
]


class CatalogEmulator:
    """before_cursor_execute hook that records and rewrites database DDL."""

    def __init__(self) -> None:
        self.statements: list[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        for pattern, rewrite in _DDL_REWRITES:
            match = pattern.match(statement)
            if match:
                self.statements.append(statement)
                return rewrite(*match.groups())
        return statement, parameters


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        cache_logger_on_first_use=False,
    )
    monkeypatch.setattr("redshift_provider.cli.configure_logging", lambda **_: None)
    yield
    structlog.reset_defaults()


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'cluster.db'}",
        settle_timeout=0.2,
        settle_base_delay=0.01,
        settle_max_delay=0.05,
        log_level="DEBUG",
        log_format="console",
        _env_file=None,
    )


@pytest.fixture()
def emulator() -> CatalogEmulator:
    return CatalogEmulator()


@pytest.fixture()
def engine(settings: Settings, emulator: CatalogEmulator):
    engine = create_db_engine(settings.database_url)
    CatalogBase.metadata.create_all(engine)
    with engine.begin() as conn:
        for trigger in _CEILING_TRIGGERS:
            conn.exec_driver_sql(trigger)
        conn.execute(
            insert(UserRow.__table__),
            [{"usesysid": usesysid, "usename": usename} for usesysid, usename in USERS.items()],
        )
    event.listen(engine, "before_cursor_execute", emulator, retval=True)
    yield engine
    engine.dispose()


@pytest.fixture()
def adapter(engine, settings: Settings) -> DatabaseResourceAdapter:
    return DatabaseResourceAdapter(
        engine,
        settle_timeout=settings.settle_timeout,
        settle_base_delay=settings.settle_base_delay,
        settle_max_delay=settings.settle_max_delay,
    )


@pytest.fixture()
def analytics(adapter: DatabaseResourceAdapter, emulator: CatalogEmulator) -> DatabaseResource:
    created = adapter.create(
        DatabaseResource(database_name="analytics", owner=104, connection_limit="50")
    )
    emulator.statements.clear()
    return created
