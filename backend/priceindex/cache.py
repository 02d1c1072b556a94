"""Thread-safe in-memory store of the latest index per instrument."""

from __future__ import annotations

from threading import Lock

from .models import IndexUpdate, InstrumentId, PriceSample, parse_price


class IndexCache:
    """Latest index value for each instrument.

    update() has the indexer handler signature, so a cache can be passed
    straight to Indexer(collector, cache.update, interval).
    The entry point reads it for its final summary.
    """

    def __init__(self) -> None:
        self._indexes: dict[InstrumentId, IndexUpdate] = {}
        self._lock = Lock()

    def update(self, sample: PriceSample) -> IndexUpdate:
        """Record an index sample. The first one for an instrument is 'flat'."""
        index = parse_price(sample.value)
        with self._lock:
            prev = self._indexes.get(sample.instrument)
            update = IndexUpdate(
                instrument=sample.instrument,
                index=index,
                previous_index=prev.index if prev else index,
                timestamp=sample.observed_at,
            )
            self._indexes[sample.instrument] = update
            return update

    def get(self, instrument: InstrumentId) -> IndexUpdate | None:
        with self._lock:
            return self._indexes.get(instrument)

    def get_all(self) -> dict[InstrumentId, IndexUpdate]:
        """Shallow copy of all current index values."""
        with self._lock:
            return dict(self._indexes)

    def __len__(self) -> int:
        with self._lock:
            return len(self._indexes)

    def __contains__(self, instrument: InstrumentId) -> bool:
        with self._lock:
            return instrument in self._indexes
