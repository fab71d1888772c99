"""Typed errors raised by the database resource adapter."""

from __future__ import annotations


class DatabaseResourceError(Exception):
    """Base error for every failed lifecycle operation."""

    def __init__(
        self,
        message: str,
        *,
        database_id: str | None = None,
        database_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.database_id = database_id
        self.database_name = database_name


class ConnectionFailedError(DatabaseResourceError):
    """Could not open a connection or transaction against the cluster."""


class StatementError(DatabaseResourceError):
    """A DDL statement was rejected by the engine."""

    def __init__(
        self,
        message: str,
        *,
        statement: str,
        database_id: str | None = None,
        database_name: str | None = None,
    ) -> None:
        super().__init__(message, database_id=database_id, database_name=database_name)
        self.statement = statement


class CatalogLookupError(DatabaseResourceError):
    """A catalog query failed for a reason other than a missing row."""


class ResourceNotFoundError(DatabaseResourceError):
    """The catalog has no database row for the requested id."""


class OwnerResolutionError(DatabaseResourceError):
    """One or more owner ids have no matching username."""

    def __init__(self, missing: list[int]) -> None:
        super().__init__(f"No user found for owner id(s): {', '.join(map(str, missing))}")
        self.missing = missing


class PropagationTimeoutError(DatabaseResourceError):
    """A newly created database never became visible in the catalog."""


class InvalidResourceIdError(DatabaseResourceError):
    """The resource id is missing or not a catalog datid."""


class InvalidConnectionLimitError(DatabaseResourceError):
    """A connection limit is neither UNLIMITED nor a non-negative integer."""
