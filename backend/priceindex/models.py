"""Data models for price indexing."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

import numpy as np

from .errors import ParseError

InstrumentId = str

BTC_USD: InstrumentId = "BTC_USD"


@dataclass(frozen=True, slots=True)
class PriceSample:
    """Immutable price observation for one instrument.

    The value is kept as decimal text ("0", "12.2", "13.2345122") so sources
    never lose precision before the indexer parses it.
    """

    instrument: InstrumentId
    value: str
    observed_at: float = field(default_factory=time.time)  # Unix seconds


def parse_price(text: str) -> float:
    """Parse decimal text into a float. Raises ParseError on malformed input."""
    try:
        return float(text)
    except (TypeError, ValueError) as e:
        raise ParseError(text) from e


def format_price(value: float) -> str:
    """Shortest positional decimal text that round-trips value.

    2.0 -> "2", 2.5 -> "2.5", 1e-7 -> "0.0000001" (never exponent notation).
    """
    return np.format_float_positional(value, trim="-")


@dataclass(slots=True)
class RunningAverage:
    """Sum/count accumulator for an incremental mean.

    Samples are folded in by magnitude, so -2 and 2 contribute the same.
    """

    sum: float = 0.0
    count: float = 0.0

    def add(self, value: float) -> RunningAverage:
        self.sum += abs(value)
        self.count += 1
        return self

    @property
    def average(self) -> float:
        return self.sum / self.count


@dataclass(frozen=True, slots=True)
class IndexUpdate:
    """Latest published index for one instrument, with the move since the last one."""

    instrument: InstrumentId
    index: float
    previous_index: float
    timestamp: float

    @property
    def change(self) -> float:
        return self.index - self.previous_index

    @property
    def direction(self) -> str:
        """'up', 'down', or 'flat'."""
        if self.index > self.previous_index:
            return "up"
        elif self.index < self.previous_index:
            return "down"
        return "flat"
