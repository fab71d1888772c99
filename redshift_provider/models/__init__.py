"""Re-exports the resource models."""

from redshift_provider.models.database import DATABASE_SCHEMA, UNLIMITED, DatabaseResource

__all__ = [
    "DATABASE_SCHEMA",
    "UNLIMITED",
    "DatabaseResource",
]
