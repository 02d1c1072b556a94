"""Wiring of feeds, streams, collector and indexer."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .clock import Clock
from .collector import StreamCollector
from .indexer import Handler, Indexer
from .interface import PriceFeed
from .models import InstrumentId
from .stream import QueueStream

logger = logging.getLogger(__name__)


def create_indexer(
    feed: PriceFeed,
    instruments: Iterable[InstrumentId],
    handler: Handler,
    interval: float,
    *,
    clock: Clock | None = None,
) -> Indexer:
    """Subscribe one stream per instrument and build an Indexer over them.

    Returns an unstarted indexer. The feed may be started before or after
    this call; streams simply wait until samples arrive.
    """
    streams = [QueueStream(*feed.subscribe(instrument)) for instrument in instruments]
    logger.info("Indexer wired to %d streams", len(streams))
    return Indexer(StreamCollector(streams), handler, interval, clock=clock)
