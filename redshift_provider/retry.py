"""Bounded exponential-backoff polling for eventually consistent catalog reads."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, TypeVar

import structlog

from redshift_provider.errors import PropagationTimeoutError
from redshift_provider.metrics import settle_attempts_total, settle_timeouts_total

if TYPE_CHECKING:
    from collections.abc import Callable

logger = structlog.get_logger()

T = TypeVar("T")


def wait_for(
    fn: Callable[[], T | None],
    timeout: float = 30.0,
    base_delay: float = 0.5,
    max_delay: float = 5.0,
    description: str = "",
) -> T:
    """Call *fn* until it returns something other than None.

    Sleeps ``base_delay * 2**attempt`` between polls, capped at *max_delay*
    and never past the deadline. Exceptions raised by *fn* propagate
    immediately; only a None result is retried.

    Raises PropagationTimeoutError once *timeout* seconds have elapsed.
    """
    deadline = time.monotonic() + timeout
    attempt = 0
    while True:
        result = fn()
        if result is not None:
            return result
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        settle_attempts_total.inc()
        delay = min(base_delay * (2**attempt), max_delay, remaining)
        logger.warning(
            "Waiting for catalog propagation",
            attempt=attempt + 1,
            delay_s=round(delay, 2),
            target=description,
        )
        time.sleep(delay)
        attempt += 1
    settle_timeouts_total.inc()
    raise PropagationTimeoutError(
        f"{description or 'Result'} not visible after {timeout:g}s ({attempt + 1} polls)"
    )
