"""Prometheus metric definitions for the database resource adapter."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# --- Lifecycle operations ---

operation_duration_seconds = Histogram(
    "redshift_provider_operation_duration_seconds",
    "Time spent executing a lifecycle operation",
    labelnames=["operation"],
    buckets=(0.05, 0.1, 0.5, 1, 2, 5, 10, 30, 60),
)

operations_total = Counter(
    "redshift_provider_operations_total",
    "Total lifecycle operations by outcome",
    labelnames=["operation", "outcome"],
)

# --- DDL ---

statements_total = Counter(
    "redshift_provider_statements_total",
    "Total DDL statements executed",
    labelnames=["verb"],
)

# --- Catalog propagation ---

settle_attempts_total = Counter(
    "redshift_provider_settle_attempts_total",
    "Total catalog polls that did not yet see a new database",
)

settle_timeouts_total = Counter(
    "redshift_provider_settle_timeouts_total",
    "Total times a new database never appeared in the catalog",
)
