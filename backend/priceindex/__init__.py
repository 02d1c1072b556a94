"""Streaming price indexer.

Public API:
    PriceSample         - Immutable price observation (decimal text value)
    QueueStream         - Pull-based stream over a (samples, errors) queue pair
    StreamCollector     - Concurrent one-sample-per-stream collection
    Indexer             - Tick-driven running-average indexer
    IndexCache          - Thread-safe latest-index store, usable as a handler
    SimulatorFeed       - Simulated price feed (random walk or uniform draws)
    create_indexer      - Wires a feed into an Indexer
"""

from .cache import IndexCache
from .clock import Clock, IntervalClock
from .collector import Collector, StreamCollector
from .config import Settings
from .errors import (
    CollectError,
    ConstructionError,
    InvalidCollectorError,
    InvalidHandlerError,
    InvalidSourceError,
    ParseError,
    PriceIndexError,
    StreamError,
)
from .factory import create_indexer
from .indexer import Handler, Indexer
from .interface import PriceFeed
from .models import BTC_USD, IndexUpdate, InstrumentId, PriceSample, RunningAverage
from .simulator import PriceWalk, SimulatorFeed, UniformPrices, price_model
from .stream import QueueStream, Stream

__all__ = [
    "BTC_USD",
    "Clock",
    "CollectError",
    "Collector",
    "ConstructionError",
    "Handler",
    "IndexCache",
    "IndexUpdate",
    "Indexer",
    "InstrumentId",
    "IntervalClock",
    "InvalidCollectorError",
    "InvalidHandlerError",
    "InvalidSourceError",
    "ParseError",
    "PriceFeed",
    "PriceIndexError",
    "PriceSample",
    "PriceWalk",
    "QueueStream",
    "RunningAverage",
    "Settings",
    "SimulatorFeed",
    "Stream",
    "StreamError",
    "UniformPrices",
    "create_indexer",
    "price_model",
]
