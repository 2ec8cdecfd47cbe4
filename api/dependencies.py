import logging
from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis

from application.services import ConversionService, RateResolver, RateService
from config.settings import Settings, get_settings
from infrastructure.cache.base import RateCache
from infrastructure.cache.memory_cache import InMemoryRateCache
from infrastructure.cache.redis_cache import RedisRateCache
from infrastructure.providers import (
	EcbProvider,
	ExchangeRateProvider,
	HttpFetcher,
	OpenRatesProvider,
)

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	fetcher: HttpFetcher | None = None
	redis_client: Redis | None = None
	rate_cache: RateCache | None = None
	providers: dict[str, ExchangeRateProvider] | None = None
	rate_service: RateService | None = None


deps = AppDependencies()


def build_providers(settings: Settings, fetcher: HttpFetcher) -> dict[str, ExchangeRateProvider]:
	available = {
		'openrates': lambda: OpenRatesProvider(
			fetcher=fetcher,
			anchor=settings.ANCHOR_CURRENCY,
			url_template=settings.RATES_URL_TEMPLATE,
		),
		'ecb': lambda: EcbProvider(
			fetcher=fetcher,
			anchor=settings.ANCHOR_CURRENCY,
			daily_url=settings.ECB_DAILY_URL,
			history_url=settings.ECB_HISTORY_URL,
		),
	}
	return {name: available[name]() for name in settings.RATE_PROVIDERS}


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()
	ttl = timedelta(seconds=settings.CACHE_TTL_SECONDS)

	deps.fetcher = HttpFetcher(
		timeout=settings.HTTP_TIMEOUT, retry_attempts=settings.HTTP_RETRY_ATTEMPTS
	)

	if settings.CACHE_BACKEND == 'redis':
		deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		deps.rate_cache = RedisRateCache(deps.redis_client, ttl=ttl)
	else:
		deps.rate_cache = InMemoryRateCache(ttl=ttl)

	deps.providers = build_providers(settings, deps.fetcher)
	deps.rate_service = RateService(
		providers=list(deps.providers.values()),
		resolver=RateResolver(anchor=settings.ANCHOR_CURRENCY),
		cache=deps.rate_cache,
	)
	logger.info(
		f'Dependencies initialized: providers={list(deps.providers)}, cache={settings.CACHE_BACKEND}'
	)


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.redis_client:
		await deps.redis_client.aclose()
	if deps.fetcher:
		await deps.fetcher.close()

	deps.fetcher = None
	deps.redis_client = None
	deps.rate_cache = None
	deps.providers = None
	deps.rate_service = None
	logger.info('Cleanup complete')


def get_rate_service() -> RateService:
	if deps.rate_service is None:
		raise RuntimeError('Rate service not initialized')
	return deps.rate_service


async def get_conversion_service(
	rate_service: Annotated[RateService, Depends(get_rate_service)],
) -> ConversionService:
	return ConversionService(rate_service=rate_service)
