"""Streaming price indexer: periodic collection folded into running averages."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator, Callable

from .clock import Clock, IntervalClock
from .collector import Collector
from .errors import InvalidCollectorError, InvalidHandlerError
from .models import InstrumentId, PriceSample, RunningAverage, format_price, parse_price

logger = logging.getLogger(__name__)

Handler = Callable[[PriceSample], None]


class Indexer:
    """Periodically collects prices and reports a running average per instrument.

    Every `interval` seconds the tick loop spawns one index run. A run holds
    the indexer lock for its whole duration (collect, fold, handler calls), so
    overlapping runs are serialized but not ordered. After folding, the handler
    is called once for every instrument ever seen, not only the ones that
    produced a sample this tick.

    Lifecycle:
        indexer = Indexer(collector, handler, interval=1.0)
        indexer.start()            # returns immediately, indexer.running is True
        ...
        await indexer.stop()       # delivers a stop signal
        await indexer.wait()       # optional: wait for the loop to exit
        if indexer.err(): ...

    Any failure inside the loop (collect error, parse error, cancellation,
    lifecycle timeout) ends the run and is kept in err(). There is no retry;
    call start() again to resume. The averages table and err() survive a
    restart.
    """

    def __init__(
        self,
        collector: Collector,
        handler: Handler,
        interval: float,
        *,
        clock: Clock | None = None,
    ) -> None:
        if handler is None:
            raise InvalidHandlerError()
        if collector is None:
            raise InvalidCollectorError()

        self._collector = collector
        self._handle = handler
        self._interval = interval
        self._clock: Clock = clock or IntervalClock()

        self._lock = asyncio.Lock()
        self._averages: dict[InstrumentId, RunningAverage] = {}
        self._err: BaseException | None = None

        self._running = False
        self._done: asyncio.Queue[None] = asyncio.Queue(maxsize=1)  # single stop slot
        self._task: asyncio.Task | None = None

    # --- Public API ---

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval(self) -> float:
        return self._interval

    def err(self) -> BaseException | None:
        """Error that ended the last run, or None after a clean stop."""
        return self._err

    def start(self, *, timeout: float | None = None) -> None:
        """Spawn the tick loop. No-op if already running.

        Must be called from inside a running event loop. `timeout` bounds the
        lifetime of this run; when it elapses the run ends with TimeoutError.
        """
        if self._running:
            return

        self._done = asyncio.Queue(maxsize=1)
        self._task = asyncio.create_task(self._run(timeout), name="indexer-loop")
        self._running = True
        logger.info("Indexer started: %.3fs interval", self._interval)

    async def stop(self) -> None:
        """Ask the running loop to stop. No-op if not running.

        Waits only until the signal is accepted. The slot holds one pending
        request; a second concurrent stop() waits for the first to be consumed.
        Cancel or time out the call to give up; the loop then keeps running.
        """
        if not self._running:
            return
        await self._done.put(None)

    async def wait(self) -> None:
        """Wait until the current loop task has exited."""
        if self._task is not None:
            await asyncio.wait({self._task})

    def averages(self) -> dict[InstrumentId, float]:
        """Snapshot of the current average per instrument."""
        return {instrument: avg.average for instrument, avg in self._averages.items()}

    # --- Internals ---

    async def _run(self, timeout: float | None) -> None:
        ticks = self._clock.ticks(self._interval)
        next_tick = asyncio.create_task(_next_tick(ticks), name="indexer-tick")
        stop_signal = asyncio.create_task(self._done.get(), name="indexer-stop")
        inflight: set[asyncio.Task] = set()

        try:
            async with asyncio.timeout(timeout):
                while True:
                    done, _ = await asyncio.wait(
                        {next_tick, stop_signal, *inflight},
                        return_when=asyncio.FIRST_COMPLETED,
                    )

                    finished = done & inflight
                    inflight -= finished
                    failed = [t for t in finished if not t.cancelled() and t.exception()]
                    if failed:
                        self._err = failed[0].exception()
                        logger.error("Indexing failed, stopping indexer: %r", self._err)
                        return

                    if stop_signal in done:
                        logger.info("Indexer stopped")
                        return

                    if next_tick in done:
                        if next_tick.exception() is not None:
                            self._err = next_tick.exception()
                            logger.error("Clock failed, stopping indexer: %r", self._err)
                            return
                        ts = next_tick.result()
                        inflight.add(asyncio.create_task(self._index(ts), name="indexer-index"))
                        next_tick = asyncio.create_task(_next_tick(ticks), name="indexer-tick")
        except (asyncio.CancelledError, TimeoutError) as e:
            if self._err is None:
                self._err = e
            logger.warning("Indexer loop ended by %s", type(e).__name__)
            if isinstance(e, asyncio.CancelledError):
                raise
        finally:
            try:
                leftovers = {next_tick, stop_signal, *inflight}
                for task in leftovers:
                    task.cancel()
                await asyncio.wait(leftovers)
                for task in leftovers:
                    if not task.cancelled():
                        task.exception()  # mark retrieved
                await ticks.aclose()
            finally:
                # Cleanup can itself be cancelled; the flag must still clear.
                if not self._done.empty():
                    self._done.get_nowait()  # release a stop() nobody will read
                self._running = False

    async def _index(self, ts: float) -> None:
        async with self._lock:
            samples = await self._collector.collect()

            values = [(s.instrument, parse_price(s.value)) for s in samples]
            for instrument, value in values:
                avg = self._averages.get(instrument)
                if avg is None:
                    self._averages[instrument] = RunningAverage(sum=abs(value), count=1.0)
                else:
                    avg.add(value)

            logger.debug("Indexed %d samples at %.3f", len(values), ts)
            for instrument, avg in self._averages.items():
                self._handle(
                    PriceSample(
                        instrument=instrument,
                        value=format_price(avg.average),
                        observed_at=ts,
                    )
                )


async def _next_tick(ticks: AsyncGenerator[float, None]) -> float:
    return await anext(ticks)
