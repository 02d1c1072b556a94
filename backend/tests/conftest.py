"""Pytest configuration and shared fixtures."""

import asyncio

import pytest


class ManualClock:
    """Clock that ticks only when the test calls tick()."""

    def __init__(self) -> None:
        self._pending: asyncio.Queue[float] = asyncio.Queue()
        self.intervals: list[float] = []

    async def ticks(self, interval: float):
        self.intervals.append(interval)
        while True:
            yield await self._pending.get()

    def tick(self, ts: float = 1_700_000_000.0) -> None:
        self._pending.put_nowait(ts)


class Recorder:
    """Handler that records samples and lets tests await a number of calls."""

    def __init__(self) -> None:
        self.samples = []
        self._changed = asyncio.Event()

    def __call__(self, sample) -> None:
        self.samples.append(sample)
        self._changed.set()

    async def wait_for(self, count: int, timeout: float = 1.0) -> None:
        async with asyncio.timeout(timeout):
            while len(self.samples) < count:
                self._changed.clear()
                await self._changed.wait()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def recorder():
    return Recorder()
