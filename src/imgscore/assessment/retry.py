"""Transient error retry with exponential backoff and full jitter.

Used by the Assessor for external model calls. Only errors that are
likely transient (timeouts, dropped connections, rate limits, 5xx)
are retried; everything else propagates immediately.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

logger = structlog.get_logger()

TRANSIENT_EXCEPTIONS: tuple[type[Exception], ...] = (TimeoutError, ConnectionError)

TRANSIENT_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503})


def is_transient(exc: Exception) -> bool:
    """True for known transient exception types or transient HTTP statuses.

    SDK exceptions expose the status as ``status_code`` or ``status``.
    """
    if isinstance(exc, TRANSIENT_EXCEPTIONS):
        return True

    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    return status is not None and status in TRANSIENT_STATUS_CODES


async def retry_transient(
    coro_factory: Callable[[], Awaitable[Any]],
    max_retries: int = 1,
    base_delay: float = 0.5,
    max_delay: float = 8.0,
) -> Any:
    """Await ``coro_factory()``, retrying transient failures.

    Args:
        coro_factory: Callable creating a fresh awaitable per attempt.
        max_retries: Retry attempts after the first call.
        base_delay: Initial backoff delay in seconds.
        max_delay: Backoff cap in seconds.

    Returns:
        The awaited result of the first successful attempt.

    Raises:
        Exception: The last error when it is non-transient or retries ran out.
    """
    attempt = 0
    while True:
        try:
            return await coro_factory()
        except Exception as exc:
            if attempt >= max_retries or not is_transient(exc):
                raise
            delay = random.uniform(0, min(base_delay * (2 ** attempt), max_delay))  # noqa: S311
            logger.info(
                "assessor_retry",
                attempt=attempt + 1,
                error_type=type(exc).__name__,
                delay_seconds=round(delay, 3),
            )
            attempt += 1
            await asyncio.sleep(delay)
