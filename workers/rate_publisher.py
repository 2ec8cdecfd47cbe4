import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from application.services.rate_merger import RateMerger
from config.logging_config import configure_logging
from config.settings import get_settings
from domain.models.rates import RateTable
from infrastructure.providers import EcbProvider, ExchangeRateProvider, HttpFetcher
from infrastructure.publishing.file_writer import RatesFileWriter

logger = logging.getLogger(__name__)


class RatePublisher:
    """
    Fetches every provider, merges their tables in order and publishes the
    result as the document downstream OpenRates consumers read.
    """
    def __init__(
            self,
            providers: Sequence[ExchangeRateProvider],
            writer: RatesFileWriter,
            merger: RateMerger | None = None,
    ):
        self.providers = list(providers)
        self.writer = writer
        self.merger = merger or RateMerger()

    async def collect(self) -> RateTable:
        logger.info(f"Fetching rates from {len(self.providers)} provider(s)...")
        tables = await asyncio.gather(*(provider.fetch() for provider in self.providers))

        for provider, table in zip(self.providers, tables, strict=True):
            logger.info(f"{provider.name}: {len(table.rates)} base currencies for {table.date}")

        return self.merger.merge(*tables)

    async def publish(self) -> list[Path]:
        merged = await self.collect()
        if merged.is_empty:
            logger.warning("Publishing an empty rate table")

        paths = self.writer.write(merged)
        logger.info(f"Rates updated: {merged.date} ({len(merged.currencies)} currencies)")
        for path in paths:
            logger.info(f"  - {path}")
        return paths


async def main() -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    logger.info("Starting OpenRates publisher...")
    fetcher = HttpFetcher(timeout=settings.HTTP_TIMEOUT, retry_attempts=settings.HTTP_RETRY_ATTEMPTS)
    publisher = RatePublisher(
        providers=[
            EcbProvider(
                fetcher=fetcher,
                anchor=settings.ANCHOR_CURRENCY,
                daily_url=settings.ECB_DAILY_URL,
                history_url=settings.ECB_HISTORY_URL,
            )
        ],
        writer=RatesFileWriter(settings.PUBLISH_DIRECTORY),
    )

    try:
        await publisher.publish()
        return 0
    except Exception as e:
        logger.error(f"Fatal error occurred while publishing rates: {e}", exc_info=True)
        return 1
    finally:
        await fetcher.close()


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("Operation cancelled by user.")
        sys.exit(1)
