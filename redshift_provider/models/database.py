"""Database resource model, the record exchanged with the orchestration host."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNLIMITED = "UNLIMITED"

# ASCII only: str.isdigit also accepts superscripts and non-Latin numerals.
_DIGITS = re.compile(r"[0-9]+")

# Attribute schema advertised to the host.
DATABASE_SCHEMA: dict[str, dict[str, Any]] = {
    "database_name": {"type": "string", "required": True},
    "owner": {"type": "int", "required": True},
    "connection_limit": {"type": "string", "required": False, "default": UNLIMITED},
}


def is_digits(value: str) -> bool:
    return _DIGITS.fullmatch(value) is not None


class DatabaseResource(BaseModel):
    """A logical database inside the cluster.

    ``id`` is the catalog ``datid`` and is the identity key. ``database_name``
    can change through a rename and is only used to address DDL.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    database_name: str = Field(min_length=1)
    owner: int | None = None
    connection_limit: str | None = UNLIMITED

    @field_validator("connection_limit")
    @classmethod
    def _check_connection_limit(cls, value: str | None) -> str | None:
        # The value is spliced into DDL, so only the format is checked here.
        # The engine enforces its own ceiling.
        if value is None:
            return None
        value = value.strip()
        if value.upper() == UNLIMITED:
            return UNLIMITED
        if not is_digits(value):
            raise ValueError(f"connection_limit must be {UNLIMITED!r} or a non-negative integer")
        return value

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str | None) -> str | None:
        if value is not None and not is_digits(value):
            raise ValueError("id must be a non-negative integer string")
        return value

    @classmethod
    def from_state(cls, state: dict[str, Any]) -> DatabaseResource:
        """Build a resource from a host state record, applying schema defaults."""
        missing = [
            key for key, spec in DATABASE_SCHEMA.items() if spec["required"] and key not in state
        ]
        if missing:
            raise ValueError(f"Missing required attribute(s): {', '.join(missing)}")
        values = {
            key: state.get(key, spec.get("default"))
            for key, spec in DATABASE_SCHEMA.items()
        }
        if state.get("id") is not None:
            values["id"] = str(state["id"])
        return cls.model_validate(values)

    def to_state(self) -> dict[str, Any]:
        return self.model_dump()
