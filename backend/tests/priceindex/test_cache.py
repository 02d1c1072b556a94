"""Tests for IndexCache."""

import pytest

from priceindex.cache import IndexCache
from priceindex.errors import ParseError
from priceindex.models import PriceSample


def _sample(value, instrument="BTC_USD", ts=100.0):
    return PriceSample(instrument=instrument, value=value, observed_at=ts)


class TestIndexCache:
    """Unit tests for the IndexCache."""

    def test_update_and_get(self):
        cache = IndexCache()
        update = cache.update(_sample("2.5"))
        assert update.instrument == "BTC_USD"
        assert update.index == 2.5
        assert update.timestamp == 100.0
        assert cache.get("BTC_USD") == update

    def test_first_update_is_flat(self):
        cache = IndexCache()
        update = cache.update(_sample("2"))
        assert update.direction == "flat"
        assert update.previous_index == 2.0

    def test_direction(self):
        cache = IndexCache()
        cache.update(_sample("2"))
        assert cache.update(_sample("3")).direction == "up"
        assert cache.update(_sample("1")).direction == "down"

    def test_get_all(self):
        cache = IndexCache()
        cache.update(_sample("1", "BTC_USD"))
        cache.update(_sample("2", "ETH_USD"))
        assert set(cache.get_all()) == {"BTC_USD", "ETH_USD"}

    def test_len_and_contains(self):
        cache = IndexCache()
        assert len(cache) == 0
        cache.update(_sample("1"))
        assert len(cache) == 1
        assert "BTC_USD" in cache
        assert "ETH_USD" not in cache

    def test_unknown_instrument(self):
        assert IndexCache().get("NOPE") is None

    def test_invalid_value_not_stored(self):
        cache = IndexCache()
        with pytest.raises(ParseError):
            cache.update(_sample("nan-ish"))
        assert len(cache) == 0
