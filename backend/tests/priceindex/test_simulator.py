"""Tests for the simulated price models."""

import numpy as np
import pytest

from priceindex.seed_prices import SEED_PRICES, UNKNOWN_SEED_RANGE
from priceindex.simulator import PRICE_DECIMALS, PriceWalk, UniformPrices, price_model


def _rng():
    return np.random.default_rng(7)


class TestPriceWalk:
    """Unit tests for the log-normal random walk."""

    def test_step_covers_all_instruments(self):
        walk = PriceWalk(["BTC_USD", "ETH_USD"], rng=_rng())
        assert set(walk.step()) == {"BTC_USD", "ETH_USD"}

    def test_starts_at_seed(self):
        walk = PriceWalk(["BTC_USD"], rng=_rng())
        assert walk.price("BTC_USD") == SEED_PRICES["BTC_USD"]

    def test_unknown_instrument_seeded_in_range(self):
        walk = PriceWalk(["ZZZ_USD"], rng=_rng())
        low, high = UNKNOWN_SEED_RANGE
        assert low <= walk.price("ZZZ_USD") <= high

    def test_price_of_missing_instrument(self):
        assert PriceWalk(rng=_rng()).price("BTC_USD") is None

    def test_add_keeps_order_and_ignores_duplicates(self):
        walk = PriceWalk(["BTC_USD"], rng=_rng())
        walk.add("SOL_USD")
        walk.add("BTC_USD")
        assert walk.instruments == ["BTC_USD", "SOL_USD"]
        assert list(walk.step()) == ["BTC_USD", "SOL_USD"]

    def test_empty_step(self):
        assert PriceWalk(rng=_rng()).step() == {}

    def test_prices_stay_positive(self):
        """A very volatile walk over a long step never crosses zero."""
        walk = PriceWalk(["DOGE_USD"], step_seconds=86400.0, rng=_rng())
        for _ in range(200):
            assert walk.step()["DOGE_USD"] > 0

    def test_prices_move(self):
        walk = PriceWalk(["BTC_USD"], step_seconds=60.0, rng=_rng())
        for _ in range(100):
            walk.step()
        assert walk.price("BTC_USD") != SEED_PRICES["BTC_USD"]

    def test_same_seed_same_path(self):
        a = PriceWalk(["BTC_USD", "NEW_USD"], rng=_rng())
        b = PriceWalk(["BTC_USD", "NEW_USD"], rng=_rng())
        assert [a.step() for _ in range(5)] == [b.step() for _ in range(5)]

    def test_prices_rounded(self):
        price = PriceWalk(["XRP_USD"], rng=_rng()).step()["XRP_USD"]
        assert round(price, PRICE_DECIMALS) == price


class TestUniformPrices:
    """Unit tests for the uniform draw model."""

    def test_draws_in_range(self):
        model = UniformPrices(["BTC_USD", "ETH_USD"], rng=_rng())
        low, high = UNKNOWN_SEED_RANGE
        for _ in range(100):
            prices = model.step()
            assert set(prices) == {"BTC_USD", "ETH_USD"}
            assert all(low <= p <= high for p in prices.values())

    def test_add(self):
        model = UniformPrices(rng=_rng())
        model.add("BTC_USD")
        model.add("BTC_USD")
        assert model.instruments == ["BTC_USD"]

    def test_empty_step(self):
        assert UniformPrices(rng=_rng()).step() == {}


class TestPriceModelFactory:
    def test_by_name(self):
        assert isinstance(price_model("walk"), PriceWalk)
        assert isinstance(price_model("uniform"), UniformPrices)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="unknown price model"):
            price_model("gbm")
