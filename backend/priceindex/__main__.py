"""Run the simulator-backed indexer and log every index update.

    PRICE_INDEX_INSTRUMENTS=BTC_USD,ETH_USD python -m priceindex
    PRICE_INDEX_FEED_MODEL=uniform python -m priceindex
"""

from __future__ import annotations

import asyncio
import logging
import sys

from .cache import IndexCache
from .config import Settings
from .factory import create_indexer
from .models import PriceSample, format_price
from .simulator import SimulatorFeed, price_model

logger = logging.getLogger("priceindex")


async def run(settings: Settings) -> BaseException | None:
    cache = IndexCache()

    def handle(sample: PriceSample) -> None:
        update = cache.update(sample)
        logger.info(
            "instrument=%s timestamp=%d index=%s (%s)",
            update.instrument,
            int(update.timestamp),
            sample.value,
            update.direction,
        )

    feed = SimulatorFeed(
        update_interval=settings.feed_interval,
        model=price_model(settings.feed_model, settings.feed_interval),
    )
    indexer = create_indexer(feed, settings.instruments, handle, settings.interval)

    await feed.start(list(settings.instruments))
    indexer.start()
    try:
        if settings.run_seconds:
            await asyncio.sleep(settings.run_seconds)
        else:
            await indexer.wait()
    finally:
        await indexer.stop()
        await indexer.wait()
        await feed.stop()

    for instrument, update in sorted(cache.get_all().items()):
        logger.info("final instrument=%s index=%s", instrument, format_price(update.index))
    return indexer.err()


def main() -> int:
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        err = asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    if err is not None:
        logger.error("Indexer terminated with error: %r", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
