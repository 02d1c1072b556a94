"""Starting prices and volatilities for the simulated feed."""

SEED_PRICES: dict[str, float] = {
    "BTC_USD": 65000.00,
    "ETH_USD": 3200.00,
    "SOL_USD": 150.00,
    "LTC_USD": 80.00,
    "XRP_USD": 0.55,
    "ADA_USD": 0.45,
    "DOGE_USD": 0.15,
}

# Instruments without a seed start anywhere in this range, and the uniform
# model draws every price from it.
UNKNOWN_SEED_RANGE: tuple[float, float] = (1.0, 1000.0)

# Annualized volatility of the random walk
VOLATILITY: dict[str, float] = {
    "BTC_USD": 0.60,
    "ETH_USD": 0.75,
    "SOL_USD": 1.00,
    "DOGE_USD": 1.20,
}

DEFAULT_VOLATILITY = 0.80
