"""Tick sources driving the indexer."""

from __future__ import annotations

import asyncio
import math
import time
from collections.abc import AsyncGenerator
from typing import Protocol


class Clock(Protocol):
    """Anything that can produce a tick timestamp every `interval` seconds."""

    def ticks(self, interval: float) -> AsyncGenerator[float, None]: ...


class IntervalClock:
    """Wall-clock ticker on top of asyncio.sleep.

    The first tick fires one interval after iteration starts. Deadlines are
    scheduled against the event loop's monotonic clock so slow consumers do
    not accumulate drift; missed ticks are skipped, not replayed.
    """

    async def ticks(self, interval: float) -> AsyncGenerator[float, None]:
        if not math.isfinite(interval) or interval <= 0:
            raise ValueError(f"tick interval must be a positive number, got {interval}")
        loop = asyncio.get_running_loop()
        deadline = loop.time() + interval
        while True:
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            yield time.time()
            now = loop.time()
            deadline += interval
            if deadline <= now:
                missed = int((now - deadline) // interval) + 1
                deadline += missed * interval
