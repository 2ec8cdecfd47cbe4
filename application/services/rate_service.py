import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime
from decimal import Decimal

from application.services.rate_merger import RateMerger
from application.services.rate_resolver import RateResolver
from domain.exceptions.rates import RatesError
from domain.models.rates import RateTable, normalize_currency
from infrastructure.cache.base import RateCache
from infrastructure.cache.single_flight import SingleFlight
from infrastructure.providers.base import ExchangeRateProvider

logger = logging.getLogger(__name__)


class RateService:
    """Cached entry point for ``get_rate(from, to, at)`` queries.

    One computation per ``(from, to, effective date)`` key runs at a time;
    concurrent callers for the same key share its result.
    """

    def __init__(
        self,
        providers: Sequence[ExchangeRateProvider],
        resolver: RateResolver,
        cache: RateCache,
        single_flight: SingleFlight | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.providers = list(providers)
        self.resolver = resolver
        self.cache = cache
        self.single_flight = single_flight or SingleFlight()
        self._clock = clock or (lambda: datetime.now(UTC))

    def effective_date(self, at: date | datetime | None = None) -> date:
        if at is None:
            return self._clock().date()
        if isinstance(at, datetime):
            return at.date()
        return at

    @staticmethod
    def cache_key(from_currency: str, to_currency: str, effective_date: date) -> str:
        return f"rate:{from_currency}:{to_currency}:{effective_date.isoformat()}"

    async def get_rate(
        self, from_currency: str, to_currency: str, at: date | datetime | None = None
    ) -> Decimal:
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency)
        effective_date = self.effective_date(at)
        date_segment = "latest" if at is None else effective_date.strftime("%Y-%m-%d")
        key = self.cache_key(source, target, effective_date)

        cached = await self.cache.get_rate(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        logger.debug(f"Cache miss for {key}")
        return await self.single_flight.do(
            key,
            lambda: self._compute(key, source, target, None if at is None else effective_date, date_segment),
        )

    async def _compute(
        self, key: str, source: str, target: str, at: date | None, date_segment: str
    ) -> Decimal:
        cached = await self.cache.get_rate(key)
        if cached is not None:
            logger.debug(f"Cache filled for {key} while waiting")
            return cached

        try:
            table = await self.fetch_table(at)
            rate = self.resolver.resolve(table, source, target)
        except RatesError as e:
            logger.warning(f"Rate lookup failed for {source}/{target} at {date_segment}: {e}")
            raise e.annotate(source, target, date_segment) from e

        await self.cache.set_rate(key, rate)
        return rate

    async def fetch_table(self, at: date | None = None) -> RateTable:
        """Fetch every provider concurrently and merge them in configured order."""
        tables = await asyncio.gather(*(provider.fetch(at) for provider in self.providers))
        if len(tables) == 1:
            return tables[0]
        return RateMerger.merge(*tables)
