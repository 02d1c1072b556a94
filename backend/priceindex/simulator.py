"""Simulated price feed for demos and tests."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Protocol

import numpy as np

from .errors import StreamError
from .interface import PriceFeed
from .models import InstrumentId, PriceSample, format_price
from .seed_prices import DEFAULT_VOLATILITY, SEED_PRICES, UNKNOWN_SEED_RANGE, VOLATILITY

logger = logging.getLogger(__name__)

PRICE_DECIMALS = 8
SECONDS_PER_YEAR = 365 * 24 * 3600

FEED_MODELS = ("walk", "uniform")


class PriceModel(Protocol):
    """Source of one new price per instrument per step."""

    @property
    def instruments(self) -> list[InstrumentId]: ...

    def add(self, instrument: InstrumentId) -> None: ...

    def step(self) -> dict[InstrumentId, float]: ...


class PriceWalk:
    """Driftless log-normal random walk, vectorized over all instruments.

    Each step multiplies every price by exp(s * Z - s^2 / 2) where Z is an
    independent standard normal draw and s = sigma * sqrt(step / year). Prices
    stay positive and their expected value does not move.
    """

    def __init__(
        self,
        instruments: list[InstrumentId] | tuple[InstrumentId, ...] = (),
        *,
        step_seconds: float = 0.1,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()
        self._step_years = step_seconds / SECONDS_PER_YEAR
        self._instruments: list[InstrumentId] = []
        self._prices = np.empty(0)
        self._scales = np.empty(0)
        for instrument in instruments:
            self.add(instrument)

    @property
    def instruments(self) -> list[InstrumentId]:
        return list(self._instruments)

    def add(self, instrument: InstrumentId) -> None:
        if instrument in self._instruments:
            return
        seed = SEED_PRICES.get(instrument)
        if seed is None:
            seed = float(self._rng.uniform(*UNKNOWN_SEED_RANGE))
        sigma = VOLATILITY.get(instrument, DEFAULT_VOLATILITY)
        self._instruments.append(instrument)
        self._prices = np.append(self._prices, seed)
        self._scales = np.append(self._scales, sigma * math.sqrt(self._step_years))

    def price(self, instrument: InstrumentId) -> float | None:
        if instrument not in self._instruments:
            return None
        return float(self._prices[self._instruments.index(instrument)])

    def step(self) -> dict[InstrumentId, float]:
        if not self._instruments:
            return {}
        z = self._rng.standard_normal(len(self._instruments))
        self._prices = self._prices * np.exp(self._scales * z - 0.5 * self._scales**2)
        return dict(zip(self._instruments, np.round(self._prices, PRICE_DECIMALS).tolist()))


class UniformPrices:
    """Independent uniform draw in UNKNOWN_SEED_RANGE for every instrument, every step."""

    def __init__(
        self,
        instruments: list[InstrumentId] | tuple[InstrumentId, ...] = (),
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()
        self._instruments = list(dict.fromkeys(instruments))

    @property
    def instruments(self) -> list[InstrumentId]:
        return list(self._instruments)

    def add(self, instrument: InstrumentId) -> None:
        if instrument not in self._instruments:
            self._instruments.append(instrument)

    def step(self) -> dict[InstrumentId, float]:
        draws = self._rng.uniform(*UNKNOWN_SEED_RANGE, size=len(self._instruments))
        return dict(zip(self._instruments, np.round(draws, PRICE_DECIMALS).tolist()))


def price_model(name: str, step_seconds: float = 0.1) -> PriceModel:
    """Build a price model by name: "walk" or "uniform"."""
    if name == "walk":
        return PriceWalk(step_seconds=step_seconds)
    if name == "uniform":
        return UniformPrices()
    raise ValueError(f"unknown price model {name!r}, expected one of {FEED_MODELS}")


class SimulatorFeed(PriceFeed):
    """PriceFeed that publishes simulated prices.

    A background task steps the model every `update_interval` seconds and
    publishes one PriceSample per instrument to its subscribers. Sample queues
    hold a single entry: an unread sample is replaced by the newer one.
    """

    def __init__(self, update_interval: float = 0.1, *, model: PriceModel | None = None) -> None:
        self._interval = update_interval
        self._model: PriceModel = model if model is not None else PriceWalk(step_seconds=update_interval)
        self._task: asyncio.Task | None = None
        self._subscribers: dict[
            InstrumentId, list[tuple[asyncio.Queue[PriceSample], asyncio.Queue[BaseException]]]
        ] = {}

    async def start(self, instruments: list[InstrumentId]) -> None:
        if self._task is not None and not self._task.done():
            logger.warning("Simulator feed already running")
            return
        for instrument in instruments:
            self._model.add(instrument)
        self._task = asyncio.create_task(self._run_loop(), name="simulator-feed")
        logger.info("Simulator feed started with %d instruments", len(self._model.instruments))

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Simulator feed stopped")

    def subscribe(
        self, instrument: InstrumentId
    ) -> tuple[asyncio.Queue[PriceSample], asyncio.Queue[BaseException]]:
        samples: asyncio.Queue[PriceSample] = asyncio.Queue(maxsize=1)
        errors: asyncio.Queue[BaseException] = asyncio.Queue()
        self._subscribers.setdefault(instrument, []).append((samples, errors))
        self._model.add(instrument)
        logger.debug("Simulator feed: subscribed to %s", instrument)
        return samples, errors

    def get_instruments(self) -> list[InstrumentId]:
        return self._model.instruments

    async def _run_loop(self) -> None:
        while True:
            try:
                now = time.time()
                for instrument, price in self._model.step().items():
                    self._publish(PriceSample(instrument=instrument, value=format_price(price), observed_at=now))
            except Exception as e:
                logger.exception("Simulator step failed")
                self._publish_error(e)
            await asyncio.sleep(self._interval)

    def _publish(self, sample: PriceSample) -> None:
        for samples, _ in self._subscribers.get(sample.instrument, ()):
            if samples.full():
                samples.get_nowait()
            samples.put_nowait(sample)

    def _publish_error(self, error: Exception) -> None:
        for instrument, queues in self._subscribers.items():
            for _, errors in queues:
                errors.put_nowait(StreamError(instrument, f"simulator step failed: {error}"))
