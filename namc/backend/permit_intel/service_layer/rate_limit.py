# permit_intel/service_layer/rate_limit.py
from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def monotonic(self) -> float: ...

    def now(self) -> datetime: ...

    async def sleep(self, seconds: float) -> None: ...


class SystemClock:
    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class IntervalLimiter:
    """
    Leaky-bucket limiter with a bucket size of one: consecutive acquire()
    calls are spaced at least `interval_s` apart. The first never waits.

    Not shared across requests; build one per batch.
    """

    def __init__(self, interval_s: float, *, clock: Clock) -> None:
        self.interval_s = float(interval_s)
        self.clock = clock
        self._last: float | None = None

    async def acquire(self) -> None:
        if self._last is not None and self.interval_s > 0:
            wait = (self._last + self.interval_s) - self.clock.monotonic()
            if wait > 0:
                await self.clock.sleep(wait)
        self._last = self.clock.monotonic()
