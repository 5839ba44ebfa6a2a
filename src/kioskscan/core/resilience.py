# kioskscan/core/resilience.py
"""
Bounded retry with linear backoff for remote calls.

Retries are silent: individual attempts are logged at debug level only and
the last error is re-raised unchanged so callers can branch on its type.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    attempts: int = DEFAULT_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    *,
    label: str = "remote call",
) -> T:
    """
    Await ``operation()`` up to ``attempts`` times.

    After failed attempt ``n`` (1-based) the wrapper sleeps
    ``base_delay * n`` seconds before trying again; there is no sleep after
    the final attempt.

    Raises:
        ValueError: If ``attempts`` is lower than 1.
        Exception: The last error raised by ``operation``, unwrapped.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    last_error: BaseException | None = None
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            last_error = exc
            logger.debug(
                "%s failed (attempt %d/%d): %s", label, attempt, attempts, exc
            )
            if attempt < attempts:
                await asyncio.sleep(base_delay * attempt)

    assert last_error is not None
    raise last_error


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget carried by resolvers and the pagination driver."""

    attempts: int = DEFAULT_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY

    async def run(
        self, operation: Callable[[], Awaitable[T]], *, label: str = "remote call"
    ) -> T:
        return await with_retry(
            operation, self.attempts, self.base_delay, label=label
        )
