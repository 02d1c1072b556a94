"""Concurrent fan-out collection across price streams."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from .errors import CollectError
from .models import PriceSample
from .stream import Stream

logger = logging.getLogger(__name__)


class Collector(ABC):
    """Contract for gathering one sample per feed."""

    @abstractmethod
    async def collect(self) -> list[PriceSample]:
        """Return one sample from every feed, in registration order."""


class StreamCollector(Collector):
    """Collects one sample from each Stream concurrently.

    Failure policy is first error wins: the first failing get() cancels its
    siblings, partial results are discarded and a CollectError is raised.
    Each collect() call owns its tasks, so calls may overlap safely.
    """

    def __init__(self, streams: Sequence[Stream]) -> None:
        self._streams: tuple[Stream, ...] = tuple(streams)

    @property
    def streams(self) -> tuple[Stream, ...]:
        return self._streams

    async def collect(self) -> list[PriceSample]:
        if not self._streams:
            return []

        tasks = [
            asyncio.create_task(stream.get(), name=f"collect-stream-{i}")
            for i, stream in enumerate(self._streams)
        ]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            # Pick the trigger before siblings are cancelled: a cancelled get()
            # may raise an error of its own.
            failed = [
                (i, task)
                for i, task in enumerate(tasks)
                if task in done and not task.cancelled() and task.exception() is not None
            ]
        finally:
            pending = [t for t in tasks if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.wait(pending)
            for task in tasks:
                if not task.cancelled():
                    task.exception()  # mark retrieved

        if failed:
            i, task = failed[0]
            error = task.exception()
            logger.debug("Stream %d failed, discarding partial collection: %r", i, error)
            raise CollectError(i, error) from error

        return [task.result() for task in tasks]
