"""Abstract interface for price feeds."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from .models import InstrumentId, PriceSample


class PriceFeed(ABC):
    """Contract for live price providers.

    A feed publishes samples per instrument onto subscriber queues. Downstream
    code never polls the feed directly; it wraps each subscription in a
    QueueStream and pulls from that.

    Lifecycle:
        feed = SimulatorFeed()
        samples, errors = feed.subscribe("BTC_USD")
        await feed.start(["BTC_USD", "ETH_USD"])
        # ... indexer runs ...
        await feed.stop()
    """

    @abstractmethod
    async def start(self, instruments: list[InstrumentId]) -> None:
        """Begin producing samples for the given instruments.

        Instruments subscribed before start() are produced as well.
        """

    @abstractmethod
    async def stop(self) -> None:
        """Stop producing samples. Safe to call multiple times."""

    @abstractmethod
    def subscribe(
        self, instrument: InstrumentId
    ) -> tuple[asyncio.Queue[PriceSample], asyncio.Queue[BaseException]]:
        """Return a (samples, errors) queue pair for one instrument."""

    @abstractmethod
    def get_instruments(self) -> list[InstrumentId]:
        """Return the instruments currently being produced."""
