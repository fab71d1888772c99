"""Port interface the orchestration host drives."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from redshift_provider.models.database import DatabaseResource


@runtime_checkable
class DatabaseResourcePort(Protocol):
    """Lifecycle operations for one managed database, keyed on catalog id."""

    def exists(self, database_id: str) -> bool: ...
    def create(self, desired: DatabaseResource) -> DatabaseResource: ...
    def read(self, database_id: str) -> DatabaseResource: ...
    def update(self, current: DatabaseResource, desired: DatabaseResource) -> DatabaseResource: ...
    def delete(self, current: DatabaseResource) -> None: ...
    def import_resource(self, database_id: str) -> DatabaseResource: ...
