"""Environment-driven settings for the indexer process."""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .models import BTC_USD, InstrumentId
from .simulator import FEED_MODELS


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings. Build with Settings.from_env()."""

    instruments: tuple[InstrumentId, ...] = (BTC_USD,)
    interval: float = 1.0  # seconds between index runs
    feed_interval: float = 0.1  # seconds between simulator steps
    run_seconds: float = 10.0  # 0 = run until interrupted
    feed_model: str = "walk"  # "walk" or "uniform"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read PRICE_INDEX_* variables, falling back to defaults for unset or empty ones.

        - PRICE_INDEX_INSTRUMENTS    comma-separated, e.g. "BTC_USD,ETH_USD"
        - PRICE_INDEX_INTERVAL       indexing interval in seconds
        - PRICE_INDEX_FEED_INTERVAL  simulator step in seconds
        - PRICE_INDEX_RUN_SECONDS    demo duration, 0 for no limit
        - PRICE_INDEX_FEED_MODEL     simulated price model, "walk" or "uniform"
        - PRICE_INDEX_LOG_LEVEL      logging level name
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        raw = env.get("PRICE_INDEX_INSTRUMENTS", "").strip()
        instruments = tuple(
            dict.fromkeys(name.strip().upper() for name in raw.split(",") if name.strip())
        ) or defaults.instruments

        feed_model = env.get("PRICE_INDEX_FEED_MODEL", "").strip().lower() or defaults.feed_model
        if feed_model not in FEED_MODELS:
            raise ValueError(f"PRICE_INDEX_FEED_MODEL must be one of {FEED_MODELS}, got {feed_model!r}")

        return cls(
            instruments=instruments,
            interval=_positive(env, "PRICE_INDEX_INTERVAL", defaults.interval),
            feed_interval=_positive(env, "PRICE_INDEX_FEED_INTERVAL", defaults.feed_interval),
            run_seconds=_number(env, "PRICE_INDEX_RUN_SECONDS", defaults.run_seconds, minimum=0.0),
            feed_model=feed_model,
            log_level=env.get("PRICE_INDEX_LOG_LEVEL", "").strip().upper() or defaults.log_level,
        )


def _number(env: Mapping[str, str], name: str, default: float, minimum: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {raw!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _positive(env: Mapping[str, str], name: str, default: float) -> float:
    value = _number(env, name, default, minimum=0.0)
    if value == 0:
        raise ValueError(f"{name} must be positive")
    return value
