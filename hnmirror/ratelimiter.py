from __future__ import annotations

import asyncio
import time
from typing import Dict


class AsyncRateLimiter:
    """Per-key rate limiter enforcing a minimum interval between calls."""

    def __init__(self, min_interval_seconds: float) -> None:
        self._min_interval = max(0.0, float(min_interval_seconds))
        self._locks: Dict[str, asyncio.Lock] = {}
        self._last_call: Dict[str, float] = {}

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def acquire(self, key: str) -> None:
        if self._min_interval <= 0:
            return
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        async with lock:
            last_call = self._last_call.get(key)
            if last_call is not None:
                wait_time = self._min_interval - (time.monotonic() - last_call)
                if wait_time > 0:
                    await asyncio.sleep(wait_time)
            self._last_call[key] = time.monotonic()
