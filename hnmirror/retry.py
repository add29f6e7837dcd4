from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def backoff_delay(base_delay: float, attempt: int, max_delay: float | None = None) -> float:
    """Delay before retry number ``attempt + 1``: base, 2*base, 4*base, ..."""
    delay = base_delay * (2**attempt)
    return delay if max_delay is None else min(delay, max_delay)


async def async_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float | None = 30.0,
    retry_exceptions: Iterable[type[BaseException]] = (Exception,),
    description: str = "operation",
) -> T:
    """Await ``operation`` up to ``retries`` times, re-raising the last failure."""
    if retries <= 0:
        raise ValueError("retries must be positive.")
    retryable = tuple(retry_exceptions)

    attempt = 0
    while True:
        try:
            return await operation()
        except retryable as exc:
            attempt += 1
            if attempt >= retries:
                raise
            delay = backoff_delay(base_delay, attempt - 1, max_delay)
            LOGGER.warning(
                "%s failed (attempt %d/%d), retrying in %.2fs: %s",
                description,
                attempt,
                retries,
                delay,
                exc,
            )
            await asyncio.sleep(delay)


__all__ = ["async_retry", "backoff_delay"]
