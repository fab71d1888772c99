"""SQLAlchemy engine construction for the target cluster."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, create_engine, make_url, text


def create_db_engine(
    url: str,
    pool_size: int = 5,
    pool_pre_ping: bool = True,
    connect_timeout: int = 10,
) -> Engine:
    """Create a pooled engine. SQLite URLs skip pool sizing and connect args."""
    kwargs: dict[str, Any] = {"pool_pre_ping": pool_pre_ping}
    if make_url(url).get_backend_name() != "sqlite":
        kwargs["pool_size"] = pool_size
        kwargs["connect_args"] = {"connect_timeout": connect_timeout}
    return create_engine(url, **kwargs)


def check_connection(engine: Engine) -> bool:
    """Verify the cluster is reachable. Returns True or raises."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return True
