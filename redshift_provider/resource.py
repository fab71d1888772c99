"""Lifecycle operations for a database managed inside a Redshift cluster.

Each operation except delete runs inside one transaction that commits only
when every statement and the closing catalog read succeed. Delete is a single
autocommitted DROP DATABASE, which the engine refuses inside a transaction
block.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from redshift_provider.db import ddl
from redshift_provider.db.catalog import get_database_by_id, get_database_id_by_name
from redshift_provider.db.engine import create_db_engine
from redshift_provider.errors import (
    CatalogLookupError,
    ConnectionFailedError,
    DatabaseResourceError,
    InvalidResourceIdError,
    PropagationTimeoutError,
    ResourceNotFoundError,
    StatementError,
)
from redshift_provider.metrics import (
    operation_duration_seconds,
    operations_total,
    statements_total,
)
from redshift_provider.models.database import UNLIMITED, DatabaseResource, is_digits
from redshift_provider.owners import OwnerResolver
from redshift_provider.retry import wait_for

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy import Connection, Engine
    from structlog.typing import FilteringBoundLogger

    from redshift_provider.config import Settings

logger = structlog.get_logger()


class DatabaseResourceAdapter:
    """Create, read, update, delete and import databases by catalog id."""

    def __init__(
        self,
        engine: Engine,
        settle_timeout: float = 30.0,
        settle_base_delay: float = 0.5,
        settle_max_delay: float = 5.0,
    ):
        self._engine = engine
        self.settle_timeout = settle_timeout
        self.settle_base_delay = settle_base_delay
        self.settle_max_delay = settle_max_delay

    @classmethod
    def from_settings(cls, settings: Settings) -> DatabaseResourceAdapter:
        engine = create_db_engine(
            settings.database_url,
            pool_size=settings.pool_size,
            pool_pre_ping=settings.pool_pre_ping,
            connect_timeout=settings.connect_timeout,
        )
        return cls(
            engine,
            settle_timeout=settings.settle_timeout,
            settle_base_delay=settings.settle_base_delay,
            settle_max_delay=settings.settle_max_delay,
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        self._engine.dispose()

    # --- Lifecycle operations ---

    def exists(self, database_id: str) -> bool:
        """Return False only when the catalog definitely has no row for *database_id*.

        Connection and query failures raise instead of reporting absence.
        """
        with self._operation("exists", database_id=database_id):
            datid = _parse_id(database_id)
            with self._connect() as conn:
                info = self._catalog(get_database_by_id, conn, datid, database_id=database_id)
                return info is not None

    def create(self, desired: DatabaseResource) -> DatabaseResource:
        name = desired.database_name
        with self._operation("create", database_name=name) as log, self._transaction() as conn:
            owner = None
            if desired.owner is not None:
                owner = self._resolve_owner(conn, desired.owner, database_name=name)
            statement = ddl.create_database(conn.dialect, name, owner, desired.connection_limit)
            self._execute(conn, statement, database_name=name)

            # The new row is not guaranteed to be in the catalog yet.
            try:
                datid = wait_for(
                    lambda: self._catalog(
                        get_database_id_by_name, conn, name, database_name=name
                    ),
                    timeout=self.settle_timeout,
                    base_delay=self.settle_base_delay,
                    max_delay=self.settle_max_delay,
                    description=f"Database {name!r}",
                )
            except PropagationTimeoutError as exc:
                exc.database_name = name
                raise

            database_id = str(datid)
            log.info("Database visible in catalog", database_id=database_id)
            return self._read(conn, database_id)

    def read(self, database_id: str) -> DatabaseResource:
        with self._operation("read", database_id=database_id):
            _parse_id(database_id)
            with self._transaction() as conn:
                return self._read(conn, database_id)

    def update(self, current: DatabaseResource, desired: DatabaseResource) -> DatabaseResource:
        """Apply each changed attribute as its own statement in one transaction.

        DDL addresses databases by name, so a rename runs first against the old
        name and later statements target the new one.
        """
        if current.id is None:
            raise InvalidResourceIdError(
                "Cannot update a database without an id", database_name=current.database_name
            )
        database_id = current.id
        name = current.database_name
        with (
            self._operation("update", database_id=database_id, database_name=name),
            self._transaction() as conn,
        ):
            if desired.database_name != name:
                statement = ddl.rename_database(conn.dialect, name, desired.database_name)
                self._execute(conn, statement, database_id=database_id, database_name=name)
                name = desired.database_name

            if desired.owner is not None and desired.owner != current.owner:
                owner = self._resolve_owner(conn, desired.owner, database_name=name)
                statement = ddl.alter_owner(conn.dialect, name, owner)
                self._execute(conn, statement, database_id=database_id, database_name=name)

            if desired.connection_limit != current.connection_limit:
                # A cleared limit resets to UNLIMITED rather than leaving the old value.
                limit = desired.connection_limit or UNLIMITED
                statement = ddl.alter_connection_limit(conn.dialect, name, limit)
                self._execute(conn, statement, database_id=database_id, database_name=name)

            return self._read(conn, database_id)

    def delete(self, current: DatabaseResource) -> None:
        name = current.database_name
        with (
            self._operation("delete", database_id=current.id, database_name=name),
            self._connect(isolation_level="AUTOCOMMIT") as conn,
        ):
            statement = ddl.drop_database(conn.dialect, name)
            self._execute(conn, statement, database_id=current.id, database_name=name)

    def import_resource(self, database_id: str) -> DatabaseResource:
        """Adopt an existing database by its catalog id."""
        with self._operation("import", database_id=database_id):
            _parse_id(database_id)
            with self._transaction() as conn:
                return self._read(conn, database_id)

    # --- Helpers ---

    @contextmanager
    def _operation(self, operation: str, **context: Any) -> Iterator[FilteringBoundLogger]:
        log = logger.bind(operation=operation, **context)
        log.debug("Operation started")
        start = time.perf_counter()
        try:
            yield log
        except DatabaseResourceError as exc:
            operations_total.labels(operation=operation, outcome="error").inc()
            log.error("Operation failed", error=str(exc), error_type=type(exc).__name__)
            raise
        except Exception:
            operations_total.labels(operation=operation, outcome="error").inc()
            log.exception("Operation failed unexpectedly")
            raise
        else:
            operations_total.labels(operation=operation, outcome="success").inc()
            log.info("Operation complete")
        finally:
            operation_duration_seconds.labels(operation=operation).observe(
                time.perf_counter() - start
            )

    def _connect(self, **execution_options: Any) -> Connection:
        try:
            conn = self._engine.connect()
        except SQLAlchemyError as exc:
            raise ConnectionFailedError(f"Could not connect to cluster: {exc}") from exc
        if execution_options:
            conn.execution_options(**execution_options)
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[Connection]:
        with self._connect() as conn:
            try:
                trans = conn.begin()
            except SQLAlchemyError as exc:
                raise ConnectionFailedError(f"Could not open transaction: {exc}") from exc
            try:
                yield conn
            except BaseException:
                trans.rollback()
                raise
            try:
                trans.commit()
            except SQLAlchemyError as exc:
                raise DatabaseResourceError(f"Transaction commit failed: {exc}") from exc

    def _execute(
        self,
        conn: Connection,
        statement: ddl.DDLStatement,
        database_id: str | None = None,
        database_name: str | None = None,
    ) -> None:
        logger.info("Executing DDL", verb=statement.verb, statement=statement.sql)
        try:
            conn.exec_driver_sql(statement.sql)
        except SQLAlchemyError as exc:
            raise StatementError(
                f"{statement.sql!r} failed: {getattr(exc, 'orig', None) or exc}",
                statement=statement.sql,
                database_id=database_id,
                database_name=database_name,
            ) from exc
        statements_total.labels(verb=statement.verb).inc()

    @staticmethod
    def _catalog(
        fn: Callable[..., Any],
        *args: Any,
        database_id: str | None = None,
        database_name: str | None = None,
    ) -> Any:
        try:
            return fn(*args)
        except SQLAlchemyError as exc:
            raise CatalogLookupError(
                f"Catalog lookup failed: {exc}",
                database_id=database_id,
                database_name=database_name,
            ) from exc

    def _resolve_owner(self, conn: Connection, owner_id: int, database_name: str) -> str:
        resolver = OwnerResolver(conn)
        try:
            return self._catalog(resolver.resolve_one, owner_id, database_name=database_name)
        except DatabaseResourceError as exc:
            exc.database_name = database_name
            raise

    def _read(self, conn: Connection, database_id: str) -> DatabaseResource:
        info = self._catalog(
            get_database_by_id, conn, _parse_id(database_id), database_id=database_id
        )
        if info is None:
            raise ResourceNotFoundError(
                f"Database with id {database_id} not found", database_id=database_id
            )
        try:
            return DatabaseResource(
                id=str(info.datid),
                database_name=info.datname,
                owner=info.datdba,
                connection_limit=info.datconnlimit,
            )
        except ValidationError as exc:
            raise CatalogLookupError(
                f"Unexpected catalog row for database id {database_id}: {exc}",
                database_id=database_id,
                database_name=info.datname,
            ) from exc


def _parse_id(database_id: str) -> int:
    text = str(database_id).strip()
    if not is_digits(text):
        raise InvalidResourceIdError(
            f"Invalid database id {database_id!r}: expected a catalog datid",
            database_id=str(database_id),
        )
    return int(text)
