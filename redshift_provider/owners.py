"""Owner id to username resolution."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from redshift_provider.db.catalog import get_usernames
from redshift_provider.errors import OwnerResolutionError

if TYPE_CHECKING:
    from sqlalchemy import Connection


class OwnerResolver:
    """Resolves ``usesysid`` values to ``usename`` on the caller's connection.

    Sharing the caller's connection keeps the lookup inside its transaction,
    so it sees the same catalog snapshot as the DDL that follows.
    """

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def resolve(self, owner_ids: Sequence[int]) -> list[str]:
        """Return one username per id, in input order. All or nothing."""
        names = get_usernames(self._conn, owner_ids)
        missing = sorted({owner_id for owner_id in owner_ids if owner_id not in names})
        if missing:
            raise OwnerResolutionError(missing)
        return [names[owner_id] for owner_id in owner_ids]

    def resolve_one(self, owner_id: int) -> str:
        return self.resolve([owner_id])[0]
