"""Pull-based accessors over asynchronous price sources."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections import deque

from .errors import InvalidSourceError
from .models import PriceSample


class Stream(ABC):
    """Contract for a single price feed consumed by a Collector."""

    @abstractmethod
    async def get(self) -> PriceSample:
        """Wait for the next sample.

        Raises whatever error the source publishes. Cancellation and
        deadlines are the caller's (asyncio.timeout, task.cancel()).
        """


class QueueStream(Stream):
    """Stream over a pair of asyncio queues: one for samples, one for errors.

    get() races both queues. If both are ready at once either outcome may win;
    the other is held back and returned by the next get(), never dropped.
    """

    def __init__(
        self,
        samples: asyncio.Queue[PriceSample],
        errors: asyncio.Queue[BaseException],
    ) -> None:
        if samples is None or errors is None:
            raise InvalidSourceError()
        self._samples = samples
        self._errors = errors
        self._backlog: deque[PriceSample | BaseException] = deque()

    async def get(self) -> PriceSample:
        if not self._backlog:
            if not self._samples.empty():
                return self._samples.get_nowait()
            if not self._errors.empty():
                raise self._errors.get_nowait()
            await self._wait_either()
        return self._take()

    async def _wait_either(self) -> None:
        waiters = (
            asyncio.create_task(self._samples.get()),
            asyncio.create_task(self._errors.get()),
        )
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()
            await asyncio.wait(waiters)
            # A waiter that finished before cancel() took an item off its
            # queue; keep it for this or the next call.
            for waiter in waiters:
                if not waiter.cancelled():
                    self._backlog.append(waiter.result())

    def _take(self) -> PriceSample:
        outcome = self._backlog.popleft()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome
